from datetime import datetime
from typing import Optional

from pydantic import Field

from devrx.models.base import CamelModel


class UserUpsert(CamelModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserRead(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    reputation: int = 0
    created_at: datetime
    updated_at: datetime


class AuthStatusRead(CamelModel):
    is_authenticated: bool = Field(default=False)
