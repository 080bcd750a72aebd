# restaurant_pos/schemas/bill.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from restaurant_pos.db.models.bill import BillStatus
from restaurant_pos.db.models.order import OrderStatus

logger = logging.getLogger(__name__)


class BillLineItem(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    unit_price: Decimal


class BillOrderSnapshot(BaseModel):
    """One order as it was when it was folded into a bill."""

    order_id: int
    status: OrderStatus
    created_at: Optional[datetime] = None
    total: Decimal
    items: List[BillLineItem]


class Bill(BaseModel):
    id: int
    table_number: int
    contact: Optional[str] = None
    orders: List[BillOrderSnapshot] = []
    total: Decimal
    status: BillStatus
    created_at: Optional[datetime] = None
    cleared_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("orders", mode="before")
    @classmethod
    def skip_malformed_snapshots(cls, value: Any) -> List[Any]:
        # A bad entry must not hide the rest of the bill
        if not isinstance(value, list):
            logger.warning(f"Bill snapshot is not a list ({type(value).__name__}); showing no orders")
            return []
        valid = []
        for entry in value:
            try:
                valid.append(BillOrderSnapshot.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed order in bill snapshot: {e.error_count()} error(s)")
        return valid
