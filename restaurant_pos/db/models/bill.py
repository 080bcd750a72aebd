# restaurant_pos/db/models/bill.py
import enum

from sqlalchemy import JSON, Column, DateTime, Enum as SAEnum, Integer, Numeric, String

from restaurant_pos.db.base_class import Base


class BillStatus(str, enum.Enum):
    PENDING = "pending"
    CLEARED = "cleared"


class Bill(Base):
    # No foreign key: a bill outlives the occupancy session it was created from
    table_number = Column(Integer, nullable=False, index=True)
    contact = Column(String(32), nullable=True)
    orders = Column(JSON, nullable=False, default=list)  # snapshot of the folded orders
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SAEnum(BillStatus, name="bill_status", values_callable=lambda e: [m.value for m in e]),
        default=BillStatus.PENDING,
        nullable=False,
        index=True,
    )
    cleared_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Bill #{self.id} - table {self.table_number} - {self.status.value}>"
