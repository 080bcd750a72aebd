# restaurant_pos/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from restaurant_pos.db.models.order import OrderStatus


# --- Line item schemas ---
class LineItemCreate(BaseModel):
    menu_item_id: int
    quantity: int = Field(..., gt=0, description="Quantity must be greater than zero")


class LineItem(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    class Config:
        from_attributes = True


# --- Order schemas ---
class OrderCreate(BaseModel):
    # Emptiness is checked by the service so the waiter gets a readable message
    items: List[LineItemCreate] = []


class Order(BaseModel):
    id: int
    table_number: int
    status: OrderStatus
    total: Decimal
    created_at: Optional[datetime] = None
    items: List[LineItem] = []

    class Config:
        from_attributes = True


class TableOrders(BaseModel):
    """Everything the waiter's orders page shows for one table."""

    table_number: int
    contact: Optional[str] = None
    orders: List[Order] = []
    grand_total: Decimal = Decimal("0.00")
