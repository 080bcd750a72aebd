# restaurant_pos/services/table_service.py
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from restaurant_pos import crud
from restaurant_pos.db.models.table import DiningTable, TableStatus
from restaurant_pos.schemas.event import EventKind
from restaurant_pos.services.notifications import OrderEventBus

logger = logging.getLogger(__name__)

CONCURRENT_UPDATE_MESSAGE = "Table {number} was just changed by someone else. Please refresh and try again."


def occupy_table(
    db: Session,
    *,
    table_number: int,
    contact: str,
    events: OrderEventBus,
) -> Tuple[Optional[DiningTable], Optional[str]]:
    """
    Seats a customer at a table.
    Returns (table, error_message); the table is None when it does not exist.
    """
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        return None, "Table not found."

    contact = (contact or "").strip()
    if not contact:
        return table, "Please enter a phone number."

    if table.status == TableStatus.OCCUPIED:
        if table.contact == contact:
            return table, None
        logger.warning(f"Rejected occupy of table {table_number}: already occupied")
        return table, f"Table {table_number} is already occupied."

    crud.table.mark_occupied(db, db_obj=table, contact=contact)
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent update while occupying table {table_number}")
        return crud.table.get_by_number(db, number=table_number), CONCURRENT_UPDATE_MESSAGE.format(number=table_number)
    db.refresh(table)

    logger.info(f"Table {table_number} occupied")
    events.emit(EventKind.TABLE_OCCUPIED, table_number=table_number)
    return table, None


def release_table(
    db: Session,
    *,
    table_number: int,
    events: OrderEventBus,
) -> Tuple[Optional[DiningTable], Optional[str]]:
    """
    Frees a table without billing it: status, contact and the table's
    outstanding orders go together in one transaction.
    """
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        return None, "Table not found."

    orders = crud.order.get_multi_by_table(db, table_id=table.id)
    if table.status == TableStatus.AVAILABLE and table.contact is None and not orders:
        return table, None

    try:
        discarded = crud.order.remove_multi(db, orders=orders)
        crud.table.mark_available(db, db_obj=table)
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent update while releasing table {table_number}")
        return crud.table.get_by_number(db, number=table_number), CONCURRENT_UPDATE_MESSAGE.format(number=table_number)
    except Exception:
        db.rollback()
        raise
    db.refresh(table)

    logger.info(f"Table {table_number} released ({discarded} unbilled order(s) discarded)")
    events.emit(EventKind.TABLE_RELEASED, table_number=table_number)
    if discarded:
        events.emit(EventKind.ORDERS_DISCARDED, table_number=table_number)
    return table, None
