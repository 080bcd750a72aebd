# restaurant_pos/db/models/table.py
import enum

from sqlalchemy import Column, Enum as SAEnum, Integer, String
from sqlalchemy.orm import relationship

from restaurant_pos.db.base_class import Base


class TableStatus(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class DiningTable(Base):
    __tablename__ = "tables"

    number = Column(Integer, nullable=False, unique=True, index=True)
    capacity = Column(Integer, nullable=True)
    status = Column(
        SAEnum(TableStatus, name="table_status", values_callable=lambda e: [m.value for m in e]),
        default=TableStatus.AVAILABLE,
        nullable=False,
    )
    # Customer phone number; set while occupied, cleared on release
    contact = Column(String(32), nullable=True)
    version = Column(Integer, nullable=False)

    orders = relationship("Order", back_populates="table", order_by="desc(Order.id)")

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_occupied(self) -> bool:
        return self.status == TableStatus.OCCUPIED

    def __repr__(self):
        return f"<DiningTable #{self.number} - {self.status.value}>"
