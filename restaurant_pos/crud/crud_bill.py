# restaurant_pos/crud/crud_bill.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from restaurant_pos.db.models.bill import Bill, BillStatus


class CRUDBill:
    def get(self, db: Session, id: int) -> Optional[Bill]:
        return db.get(Bill, id)

    def get_multi(
        self, db: Session, *, status: Optional[BillStatus] = None, skip: int = 0, limit: int = 100
    ) -> List[Bill]:
        query = db.query(Bill)
        if status:
            query = query.filter(Bill.status == status)
        return query.order_by(Bill.created_at.desc(), Bill.id.desc()).offset(skip).limit(limit).all()

    def create(
        self,
        db: Session,
        *,
        table_number: int,
        contact: Optional[str],
        orders: List[Dict[str, Any]],
        total: Decimal,
    ) -> Bill:
        # Staged and flushed for the id; committed by the billing workflow
        db_obj = Bill(
            table_number=table_number,
            contact=contact,
            orders=orders,
            total=total,
            status=BillStatus.PENDING,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def mark_cleared(self, db: Session, *, db_obj: Bill) -> bool:
        """
        Conditional pending -> cleared update. Returns False when the bill was
        already cleared, possibly by a concurrent request.
        """
        updated = (
            db.query(Bill)
            .filter(Bill.id == db_obj.id, Bill.status == BillStatus.PENDING)
            .update(
                {Bill.status: BillStatus.CLEARED, Bill.cleared_at: datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        db.commit()
        db.refresh(db_obj)
        return updated == 1


bill = CRUDBill()
