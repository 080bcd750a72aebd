# restaurant_pos/schemas/user.py
from typing import Optional

from pydantic import BaseModel, Field

from restaurant_pos.db.models.user import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    full_name: Optional[str] = None
    role: UserRole
    is_active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class User(UserBase):
    id: int

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    redirect_to: str
