# restaurant_pos/api/v1/endpoints/billing.py
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from restaurant_pos import crud, schemas
from restaurant_pos.api import deps
from restaurant_pos.db.models.bill import BillStatus
from restaurant_pos.db.models.user import User
from restaurant_pos.services import billing_service
from restaurant_pos.services.notifications import OrderEventBus

router = APIRouter()


@router.get("/bills", response_model=List[schemas.Bill])
def read_bills(
    db: Session = Depends(deps.get_db),
    status_filter: BillStatus = Query(BillStatus.PENDING, alias="status"),
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    """
    Current (pending) or completed (cleared) bills, newest first.
    """
    bills = crud.bill.get_multi(db, status=status_filter, skip=skip, limit=limit)
    return [schemas.Bill.model_validate(b) for b in bills]


@router.get("/bills/{bill_id}", response_model=schemas.Bill)
def read_bill(
    bill_id: int,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    bill = crud.bill.get(db, id=bill_id)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return schemas.Bill.model_validate(bill)


@router.post("/bills/{bill_id}/clear", response_model=schemas.Bill)
def clear_bill(
    bill_id: int,
    db: Session = Depends(deps.get_db),
    events: OrderEventBus = Depends(deps.get_event_bus),
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    """
    Marks a bill as paid. Clearing it again is harmless.
    """
    bill = billing_service.mark_bill_cleared(db, bill_id=bill_id, events=events)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return schemas.Bill.model_validate(bill)
