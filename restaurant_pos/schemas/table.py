# restaurant_pos/schemas/table.py
from typing import Optional

from pydantic import BaseModel, Field

from restaurant_pos.db.models.table import TableStatus


class TableBase(BaseModel):
    number: int = Field(..., gt=0)
    capacity: Optional[int] = Field(None, gt=0)


class TableCreate(TableBase):
    pass


class TableOccupy(BaseModel):
    # Blank values are rejected by the service with a user-facing message
    contact: str = ""


class Table(TableBase):
    id: int
    status: TableStatus
    contact: Optional[str] = None

    class Config:
        from_attributes = True
