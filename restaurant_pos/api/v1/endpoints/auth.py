# restaurant_pos/api/v1/endpoints/auth.py
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from restaurant_pos import crud, schemas
from restaurant_pos.api import deps
from restaurant_pos.core import security
from restaurant_pos.db.models.user import ROLE_LANDING_PAGES, User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=schemas.Token)
def login_access_token(
    db: Session = Depends(deps.get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    OAuth2 compatible token login.
    Also tells the client which screen the user's role lands on.
    """
    user = crud.user.authenticate(db, username=form_data.username, password=form_data.password)
    if not user:
        logger.warning(f"Failed login for {form_data.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not crud.user.is_active(user):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    redirect_to = ROLE_LANDING_PAGES.get(user.role)
    if redirect_to is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role not recognized.")

    logger.info(f"User {user.username} logged in as {user.role.value}")
    return schemas.Token(
        access_token=security.create_access_token(user.username, user.role.value),
        role=user.role,
        redirect_to=redirect_to,
    )


@router.get("/me", response_model=schemas.User)
def read_user_me(current_user: User = Depends(deps.get_current_active_user)) -> Any:
    """
    Get current user.
    """
    return schemas.User.model_validate(current_user)
