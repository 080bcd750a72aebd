# restaurant_pos/db/models/order.py
import enum

from sqlalchemy import Column, Enum as SAEnum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from restaurant_pos.db.base_class import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Order(Base):
    table_id = Column(ForeignKey("tables.id"), nullable=False, index=True)
    status = Column(
        SAEnum(OrderStatus, name="order_status", values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )
    total = Column(Numeric(10, 2), nullable=False)

    table = relationship("DiningTable", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def table_number(self) -> int:
        return self.table.number

    def __repr__(self):
        return f"<Order #{self.id} - table {self.table_id} - {self.status.value}>"


class OrderItem(Base):
    __tablename__ = "order_items"

    order_id = Column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(Integer, nullable=False)
    # Name and price as they were when the order was placed
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")

    @property
    def line_total(self):
        return self.unit_price * self.quantity
