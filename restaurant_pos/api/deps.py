# restaurant_pos/api/deps.py
from typing import Callable, Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from restaurant_pos import crud
from restaurant_pos.core import security
from restaurant_pos.core.config import settings
from restaurant_pos.database import SessionLocal
from restaurant_pos.db.models.user import User, UserRole
from restaurant_pos.services.menu_catalog import MenuCatalog
from restaurant_pos.services.notifications import OrderEventBus

reusable_oauth2 = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_event_bus(conn: HTTPConnection) -> OrderEventBus:
    return conn.app.state.event_bus


def get_menu_catalog(conn: HTTPConnection) -> MenuCatalog:
    return conn.app.state.menu_catalog


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    payload = security.decode_token(token)
    if not payload or not payload.get("sub"):
        return None
    return crud.user.get_by_username(db, username=payload["sub"])


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(reusable_oauth2),
) -> User:
    user = get_user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not crud.user.is_active(current_user):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Dependency factory: the owner passes every check, other roles must be listed."""

    def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role != UserRole.OWNER and current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="The user doesn't have enough privileges",
            )
        return current_user

    return checker


get_current_owner = require_roles(UserRole.OWNER)
get_current_waiter = require_roles(UserRole.WAITER)
get_current_kitchen_user = require_roles(UserRole.KITCHEN)
