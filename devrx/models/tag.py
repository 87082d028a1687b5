from datetime import datetime
from typing import List, Optional

from pydantic import Field

from devrx.models.base import CamelModel


class TagCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None


class TagRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    count: int = 0
    created_at: datetime


class TagListRead(CamelModel):
    tags: List[TagRead] = Field(default_factory=list)
    total: int = 0
