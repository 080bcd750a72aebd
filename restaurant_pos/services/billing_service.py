# restaurant_pos/services/billing_service.py
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from restaurant_pos import crud
from restaurant_pos.crud.crud_order import to_money
from restaurant_pos.db.models.bill import Bill, BillStatus
from restaurant_pos.db.models.order import Order
from restaurant_pos.schemas.bill import BillOrderSnapshot
from restaurant_pos.schemas.event import EventKind
from restaurant_pos.services.notifications import OrderEventBus
from restaurant_pos.services.table_service import CONCURRENT_UPDATE_MESSAGE

logger = logging.getLogger(__name__)


def snapshot_order(db_order: Order) -> Dict[str, Any]:
    """Canonical, JSON-ready copy of an order as stored inside a bill."""
    snapshot = BillOrderSnapshot(
        order_id=db_order.id,
        status=db_order.status,
        created_at=db_order.created_at,
        total=to_money(db_order.total),
        items=[
            {
                "menu_item_id": item.menu_item_id,
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": to_money(item.unit_price),
            }
            for item in db_order.items
        ],
    )
    return snapshot.model_dump(mode="json")


def send_to_billing(db: Session, *, table_number: int, events: OrderEventBus) -> Optional[Bill]:
    """
    Folds every order of a table into a new pending bill and frees the table.

    Creating the bill, releasing the table and deleting the folded orders
    happen in a single transaction: on any failure nothing is changed and the
    error propagates. Returns None when the table does not exist; raises
    ValueError when there is nothing to bill or the table changed under us.
    """
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        return None

    contact = table.contact
    orders: List[Order] = crud.order.get_multi_by_table(db, table_id=table.id)
    if not orders:
        raise ValueError(f"Table {table_number} has no orders to bill.")

    snapshots = [snapshot_order(o) for o in orders]
    total = to_money(sum((o.total for o in orders), Decimal("0.00")))

    try:
        db_bill = crud.bill.create(
            db, table_number=table_number, contact=contact, orders=snapshots, total=total
        )
        crud.table.mark_available(db, db_obj=table)
        # Only the orders in the snapshot: anything placed meanwhile stays on the table
        crud.order.remove_multi(db, orders=orders)
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent update while billing table {table_number}; rolled back")
        raise ValueError(CONCURRENT_UPDATE_MESSAGE.format(number=table_number))
    except Exception:
        db.rollback()
        logger.error(f"Billing failed for table {table_number}; all changes rolled back", exc_info=True)
        raise
    db.refresh(db_bill)

    logger.info(
        f"Bill {db_bill.id} created for table {table_number}: {len(snapshots)} order(s), total {db_bill.total}"
    )
    events.emit(EventKind.ORDERS_BILLED, table_number=table_number, bill_id=db_bill.id)
    events.emit(EventKind.TABLE_RELEASED, table_number=table_number)
    return db_bill


def mark_bill_cleared(db: Session, *, bill_id: int, events: OrderEventBus) -> Optional[Bill]:
    """pending -> cleared. Clearing a cleared bill is a no-op. None if unknown."""
    db_bill = crud.bill.get(db, id=bill_id)
    if not db_bill:
        return None
    if db_bill.status == BillStatus.CLEARED:
        return db_bill

    if not crud.bill.mark_cleared(db, db_obj=db_bill):
        logger.info(f"Bill {bill_id} was already cleared")
        return db_bill
    logger.info(f"Bill {bill_id} cleared")
    events.emit(EventKind.BILL_CLEARED, table_number=db_bill.table_number, bill_id=bill_id)
    return db_bill
