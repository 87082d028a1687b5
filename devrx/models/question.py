from datetime import datetime
from typing import List, Optional

from pydantic import Field

from devrx.models.answer import AnswerView, CommentView
from devrx.models.base import CamelModel
from devrx.models.tag import TagRead
from devrx.models.user import UserRead


class QuestionCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)


class QuestionUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)


class QuestionRead(CamelModel):
    id: int
    user_id: str
    title: str
    content: str
    votes: int = 0
    view_count: int = 0
    is_solved: bool = False
    created_at: datetime
    updated_at: datetime


class AiSuggestionRead(CamelModel):
    id: int
    question_id: int
    content: str
    created_at: datetime


class QuestionView(QuestionRead):
    user: Optional[UserRead] = None
    tags: List[TagRead] = Field(default_factory=list)
    answer_count: int = 0
    ai_suggestion: Optional[AiSuggestionRead] = None


class QuestionDetail(QuestionView):
    comments: List[CommentView] = Field(default_factory=list)
    answers: List[AnswerView] = Field(default_factory=list)


class QuestionListRead(CamelModel):
    questions: List[QuestionView] = Field(default_factory=list)
    total: int = 0


class TagSuggestRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None


class TagSuggestRead(CamelModel):
    tags: List[str] = Field(default_factory=list)
