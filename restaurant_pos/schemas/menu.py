# restaurant_pos/schemas/menu.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class MenuItem(BaseModel):
    id: int
    name: str
    price: Decimal = Field(..., ge=0, decimal_places=2)
    category: str
    description: Optional[str] = None
