# restaurant_pos/api/v1/endpoints/users.py
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from restaurant_pos import crud, schemas
from restaurant_pos.api import deps
from restaurant_pos.db.models.user import User

router = APIRouter()


@router.get("/", response_model=List[schemas.User])
def read_users(
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    return [schemas.User.model_validate(u) for u in crud.user.get_multi(db, skip=skip, limit=limit)]


@router.post("/", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(deps.get_db),
    user_in: schemas.UserCreate,
    current_user: User = Depends(deps.get_current_owner),
) -> Any:
    """
    Create a staff account. Owner only.
    """
    try:
        user = crud.user.create(db, obj_in=user_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return schemas.User.model_validate(user)
