from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel


class Answer(SQLModel, table=True):
    __tablename__ = "answers"

    id: Optional[int] = Field(default=None, primary_key=True)
    question_id: int = Field(foreign_key="questions.id", ondelete="CASCADE", index=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    content: str
    votes: int = Field(default=0)
    is_accepted: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Comment(SQLModel, table=True):
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "(question_id IS NULL) <> (answer_id IS NULL)", name="ck_comment_single_target"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    content: str
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    question_id: Optional[int] = Field(
        default=None, foreign_key="questions.id", ondelete="CASCADE", index=True
    )
    answer_id: Optional[int] = Field(
        default=None, foreign_key="answers.id", ondelete="CASCADE", index=True
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Vote(SQLModel, table=True):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_vote_user_question"),
        UniqueConstraint("user_id", "answer_id", name="uq_vote_user_answer"),
        CheckConstraint(
            "(question_id IS NULL) <> (answer_id IS NULL)", name="ck_vote_single_target"
        ),
        CheckConstraint("value IN (1, -1)", name="ck_vote_value"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    question_id: Optional[int] = Field(default=None, foreign_key="questions.id", ondelete="CASCADE")
    answer_id: Optional[int] = Field(default=None, foreign_key="answers.id", ondelete="CASCADE")
    value: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
