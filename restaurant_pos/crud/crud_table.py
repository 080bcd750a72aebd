# restaurant_pos/crud/crud_table.py
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from restaurant_pos.db.models.table import DiningTable, TableStatus
from restaurant_pos.schemas.table import TableCreate


class CRUDTable:
    def get_by_number(self, db: Session, *, number: int) -> Optional[DiningTable]:
        return db.query(DiningTable).filter(DiningTable.number == number).first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100, status: Optional[TableStatus] = None
    ) -> List[DiningTable]:
        query = db.query(DiningTable)
        if status:
            query = query.filter(DiningTable.status == status)
        return query.order_by(DiningTable.number).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: TableCreate) -> DiningTable:
        existing = self.get_by_number(db, number=obj_in.number)
        if existing:
            raise ValueError(f"Table {obj_in.number} already exists.")

        db_obj = DiningTable(
            number=obj_in.number,
            capacity=obj_in.capacity,
            status=TableStatus.AVAILABLE,
            contact=None,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    # The two state changes below only stage the row; the caller owns the commit
    def mark_occupied(self, db: Session, *, db_obj: DiningTable, contact: str) -> DiningTable:
        db_obj.status = TableStatus.OCCUPIED
        db_obj.contact = contact
        db.add(db_obj)
        return db_obj

    def mark_available(self, db: Session, *, db_obj: DiningTable) -> DiningTable:
        db_obj.status = TableStatus.AVAILABLE
        db_obj.contact = None
        db.add(db_obj)
        return db_obj

    def touch(self, db: Session, *, db_obj: DiningTable) -> DiningTable:
        # Forces an UPDATE on flush so the version check runs and the version moves on
        flag_modified(db_obj, "status")
        db.add(db_obj)
        return db_obj


table = CRUDTable()
