# restaurant_pos/crud/crud_user.py
from typing import List, Optional

from sqlalchemy.orm import Session

from restaurant_pos.core.security import get_password_hash, verify_password
from restaurant_pos.db.models.user import User
from restaurant_pos.schemas.user import UserCreate


class CRUDUser:
    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
        return db.query(User).order_by(User.username).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        if self.get_by_username(db, username=obj_in.username):
            raise ValueError(f"User {obj_in.username!r} already exists.")
        db_obj = User(
            username=obj_in.username,
            full_name=obj_in.full_name,
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role,
            is_active=obj_in.is_active,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def authenticate(self, db: Session, *, username: str, password: str) -> Optional[User]:
        user = self.get_by_username(db, username=username)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def is_active(self, user: User) -> bool:
        return user.is_active


user = CRUDUser()
