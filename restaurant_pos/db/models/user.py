# restaurant_pos/db/models/user.py
import enum

from sqlalchemy import Boolean, Column, Enum as SAEnum, String

from restaurant_pos.db.base_class import Base


class UserRole(str, enum.Enum):
    OWNER = "owner"
    WAITER = "waiter"
    KITCHEN = "kitchen"


# Screen each role lands on after login
ROLE_LANDING_PAGES = {
    UserRole.OWNER: "/billing",
    UserRole.WAITER: "/waiter",
    UserRole.KITCHEN: "/kitchen",
}


class User(Base):
    username = Column(String(64), nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(
        SAEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
