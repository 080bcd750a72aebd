# restaurant_pos/api/v1/endpoints/tables.py
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from restaurant_pos import crud, schemas
from restaurant_pos.api import deps
from restaurant_pos.db.models.table import TableStatus
from restaurant_pos.db.models.user import User
from restaurant_pos.services import billing_service, order_service, table_service
from restaurant_pos.services.menu_catalog import MenuCatalog
from restaurant_pos.services.notifications import OrderEventBus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[schemas.Table])
def read_tables(
    db: Session = Depends(deps.get_db),
    status_filter: Optional[TableStatus] = Query(None, alias="status"),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    The waiter's table grid, ordered by table number.
    """
    tables = crud.table.get_multi(db, status=status_filter, limit=1000)
    return [schemas.Table.model_validate(t) for t in tables]


@router.post("/", response_model=schemas.Table, status_code=status.HTTP_201_CREATED)
def create_table(
    *,
    db: Session = Depends(deps.get_db),
    table_in: schemas.TableCreate,
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    """
    Adds a table to the dining room. Owner only.
    """
    try:
        table = crud.table.create(db, obj_in=table_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return schemas.Table.model_validate(table)


@router.get("/{table_number}", response_model=schemas.Table)
def read_table(
    table_number: int,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    table = crud.table.get_by_number(db, number=table_number)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return schemas.Table.model_validate(table)


@router.post("/{table_number}/occupy", response_model=schemas.Table)
def occupy_table(
    table_number: int,
    occupy_in: schemas.TableOccupy,
    db: Session = Depends(deps.get_db),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    Seats a customer: status becomes occupied and the phone number is kept
    until the table is billed or released.
    """
    table, error_message = table_service.occupy_table(
        db, table_number=table_number, contact=occupy_in.contact, events=events
    )
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    if error_message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
    return schemas.Table.model_validate(table)


@router.post("/{table_number}/release", response_model=schemas.Table)
def release_table(
    table_number: int,
    db: Session = Depends(deps.get_db),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    Frees a table without billing it. Unbilled orders of the table are dropped.
    """
    try:
        table, error_message = table_service.release_table(db, table_number=table_number, events=events)
    except Exception as e:
        logger.error(f"Error releasing table {table_number}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to release the table. Please try again.",
        )
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    if error_message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
    return schemas.Table.model_validate(table)


@router.get("/{table_number}/orders", response_model=schemas.TableOrders)
def read_table_orders(
    table_number: int,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    Orders of one table, newest first, with the running grand total.
    """
    table_orders = order_service.list_orders_for_table(db, table_number=table_number)
    if table_orders is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return table_orders


@router.post("/{table_number}/orders", response_model=schemas.Order, status_code=status.HTTP_201_CREATED)
def place_order(
    table_number: int,
    order_in: schemas.OrderCreate,
    db: Session = Depends(deps.get_db),
    catalog: MenuCatalog = Depends(deps.get_menu_catalog),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    Places an order for an occupied table. Names and prices come from the
    menu as it is now and are frozen on the order.
    """
    try:
        order = order_service.place_order(
            db, table_number=table_number, items=order_in.items, catalog=catalog, events=events
        )
    except ValueError as e:
        logger.warning(f"Order rejected for table {table_number}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error placing order for table {table_number}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to place order. Please try again.",
        )
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    logger.info(f"Order {order.id} placed by {current_user.username}")
    return schemas.Order.model_validate(order)


@router.post("/{table_number}/send-to-billing", response_model=schemas.Bill, status_code=status.HTTP_201_CREATED)
def send_to_billing(
    table_number: int,
    db: Session = Depends(deps.get_db),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_waiter),
) -> Any:
    """
    Folds the table's orders into a pending bill and frees the table,
    all or nothing.
    """
    try:
        bill = billing_service.send_to_billing(db, table_number=table_number, events=events)
    except ValueError as e:
        logger.warning(f"Billing rejected for table {table_number}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing billing for table {table_number}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process billing. Please try again.",
        )
    if bill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return schemas.Bill.model_validate(bill)
