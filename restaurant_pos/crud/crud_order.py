# restaurant_pos/crud/crud_order.py
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from restaurant_pos.db.models.order import Order, OrderItem, OrderStatus
from restaurant_pos.db.models.table import DiningTable
from restaurant_pos.schemas.menu import MenuItem

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class CRUDOrder:
    def get(self, db: Session, id: int) -> Optional[Order]:
        return db.get(Order, id)

    def get_multi_by_status(
        self, db: Session, *, status: OrderStatus, skip: int = 0, limit: int = 100
    ) -> List[Order]:
        return (
            db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.table))
            .filter(Order.status == status)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_multi_by_table(self, db: Session, *, table_id: int) -> List[Order]:
        return (
            db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.table))
            .filter(Order.table_id == table_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def create(
        self, db: Session, *, table: DiningTable, lines: Iterable[Tuple[MenuItem, int]]
    ) -> Order:
        """
        Creates a pending order from (menu item, quantity) pairs.
        Name and unit price are copied from the menu item, so later menu
        changes never touch this order.
        """
        db_order = Order(table_id=table.id, status=OrderStatus.PENDING)
        total = Decimal("0.00")
        for menu_item, quantity in lines:
            unit_price = to_money(menu_item.price)
            db_order.items.append(
                OrderItem(
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    quantity=quantity,
                    unit_price=unit_price,
                )
            )
            total += unit_price * quantity
        db_order.total = to_money(total)

        db.add(db_order)
        db.commit()
        db.refresh(db_order)
        return db_order

    def update_status(self, db: Session, *, db_obj: Order, status: OrderStatus) -> Order:
        db_obj.status = status
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove_multi(self, db: Session, *, orders: Iterable[Order]) -> int:
        # Staged only; line items go with the order through the cascade
        count = 0
        for db_obj in orders:
            db.delete(db_obj)
            count += 1
        db.flush()
        return count


order = CRUDOrder()
