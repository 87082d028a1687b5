from datetime import datetime
from typing import List, Optional

from pydantic import Field, StrictInt

from devrx.models.base import CamelModel
from devrx.models.user import UserRead


class AnswerCreate(CamelModel):
    content: str = Field(min_length=1)


class AnswerUpdate(CamelModel):
    content: str = Field(min_length=1)


class AnswerRead(CamelModel):
    id: int
    question_id: int
    user_id: str
    content: str
    votes: int = 0
    is_accepted: bool = False
    created_at: datetime
    updated_at: datetime


class CommentCreate(CamelModel):
    content: str = Field(min_length=1)
    question_id: Optional[int] = None
    answer_id: Optional[int] = None


class CommentRead(CamelModel):
    id: int
    content: str
    user_id: str
    question_id: Optional[int] = None
    answer_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CommentView(CommentRead):
    user: Optional[UserRead] = None


class AnswerView(AnswerRead):
    user: Optional[UserRead] = None
    comments: List[CommentView] = Field(default_factory=list)


class VoteCreate(CamelModel):
    value: StrictInt
    question_id: Optional[int] = None
    answer_id: Optional[int] = None


class VoteRead(CamelModel):
    user_id: str
    question_id: Optional[int] = None
    answer_id: Optional[int] = None
    value: int
    created_at: datetime
