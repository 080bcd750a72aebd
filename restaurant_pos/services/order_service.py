# restaurant_pos/services/order_service.py
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from restaurant_pos import crud
from restaurant_pos.db.models.order import Order, OrderStatus
from restaurant_pos.db.models.table import TableStatus
from restaurant_pos.schemas.event import EventKind
from restaurant_pos.schemas.order import LineItemCreate, TableOrders
from restaurant_pos.services.menu_catalog import MenuCatalog
from restaurant_pos.services.notifications import OrderEventBus
from restaurant_pos.services.table_service import CONCURRENT_UPDATE_MESSAGE

logger = logging.getLogger(__name__)

EMPTY_ORDER_MESSAGE = "Please add items to your order."


def place_order(
    db: Session,
    *,
    table_number: int,
    items: Sequence[LineItemCreate],
    catalog: MenuCatalog,
    events: OrderEventBus,
) -> Optional[Order]:
    """
    Records a waiter's batch of line items against an occupied table.

    Returns None when the table does not exist; raises ValueError with a
    message for the waiter when the order cannot be accepted.
    """
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        return None

    if not items:
        raise ValueError(EMPTY_ORDER_MESSAGE)
    if table.status != TableStatus.OCCUPIED:
        raise ValueError(f"Table {table_number} is not occupied. Seat the customer first.")

    lines = []
    for item_in in items:
        if item_in.quantity <= 0:
            raise ValueError("Quantity must be greater than zero.")
        menu_item = catalog.get(item_in.menu_item_id)
        if menu_item is None:
            raise ValueError(f"Menu item {item_in.menu_item_id} does not exist.")
        lines.append((menu_item, item_in.quantity))

    # Bumps the table version: a concurrent billing or release of this table fails
    crud.table.touch(db, db_obj=table)
    try:
        db_order = crud.order.create(db, table=table, lines=lines)
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent update while placing an order for table {table_number}")
        raise ValueError(CONCURRENT_UPDATE_MESSAGE.format(number=table_number))
    logger.info(f"Order {db_order.id} placed for table {table_number}: total {db_order.total}")

    events.emit(EventKind.ORDER_PLACED, table_number=table_number, order_id=db_order.id)
    return db_order


def mark_order_completed(db: Session, *, order_id: int, events: OrderEventBus) -> Optional[Order]:
    """
    Kitchen transition pending -> completed. Completing an already completed
    order changes nothing. Returns None when the order does not exist.
    """
    db_order = crud.order.get(db, id=order_id)
    if not db_order:
        return None
    if db_order.status == OrderStatus.COMPLETED:
        return db_order

    db_order = crud.order.update_status(db, db_obj=db_order, status=OrderStatus.COMPLETED)
    logger.info(f"Order {order_id} completed")
    events.emit(EventKind.ORDER_COMPLETED, table_number=db_order.table_number, order_id=order_id)
    return db_order


def list_orders_for_table(db: Session, *, table_number: int) -> Optional[TableOrders]:
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        return None

    orders: List[Order] = crud.order.get_multi_by_table(db, table_id=table.id)
    grand_total = sum((o.total for o in orders), Decimal("0.00"))
    return TableOrders.model_validate(
        {
            "table_number": table.number,
            "contact": table.contact,
            "orders": orders,
            "grand_total": grand_total,
        },
        from_attributes=True,
    )
