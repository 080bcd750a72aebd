# restaurant_pos/schemas/event.py
import enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class EventKind(str, enum.Enum):
    TABLE_OCCUPIED = "table_occupied"
    TABLE_RELEASED = "table_released"
    ORDERS_DISCARDED = "orders_discarded"
    ORDER_PLACED = "order_placed"
    ORDER_COMPLETED = "order_completed"
    ORDERS_BILLED = "orders_billed"
    BILL_CLEARED = "bill_cleared"


class OrderEvent(BaseModel):
    """
    Notification sent after a committed mutation.
    Listeners treat it as "refresh", never as a delta to apply.
    """

    kind: EventKind
    table_number: Optional[int] = None
    order_id: Optional[int] = None
    bill_id: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_message(self) -> Dict[str, Any]:
        return {"type": "refresh", **self.model_dump(mode="json")}
