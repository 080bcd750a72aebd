# restaurant_pos/api/v1/endpoints/kitchen.py
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from restaurant_pos import crud, schemas
from restaurant_pos.api import deps
from restaurant_pos.db.models.order import OrderStatus
from restaurant_pos.db.models.user import User
from restaurant_pos.services import order_service
from restaurant_pos.services.notifications import OrderEventBus

router = APIRouter()


@router.get("/orders", response_model=List[schemas.Order])
def read_kitchen_orders(
    db: Session = Depends(deps.get_db),
    status_filter: OrderStatus = Query(OrderStatus.PENDING, alias="status"),
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(deps.get_current_kitchen_user),
) -> Any:
    """
    The kitchen board: pending or completed orders, newest first.
    """
    orders = crud.order.get_multi_by_status(db, status=status_filter, skip=skip, limit=limit)
    return [schemas.Order.model_validate(o) for o in orders]


@router.post("/orders/{order_id}/complete", response_model=schemas.Order)
def complete_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_kitchen_user),
) -> Any:
    order = order_service.mark_order_completed(db, order_id=order_id, events=events)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return schemas.Order.model_validate(order)
