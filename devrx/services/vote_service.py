import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from devrx.db.schemas import Answer, Question, Vote
from devrx.models.answer import VoteCreate, VoteRead
from devrx.services.user_service import UserService

logger = logging.getLogger(__name__)

QUESTION_VOTE_WEIGHT = 5
ANSWER_VOTE_WEIGHT = 10


class VoteService:
    """One vote per (user, target); counters and reputation move by the delta."""

    def __init__(self, session: Session):
        self.session = session
        self.users = UserService(session)

    def cast_vote(self, user_id: str, data: VoteCreate) -> None:
        question_id, answer_id = self._validate_target(data.question_id, data.answer_id)
        if data.value not in (1, -1):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Vote value must be either 1 or -1",
            )
        if question_id is not None:
            model, target_id, weight = Question, question_id, QUESTION_VOTE_WEIGHT
        else:
            model, target_id, weight = Answer, answer_id, ANSWER_VOTE_WEIGHT
        owner_id = self.session.exec(
            select(model.user_id).where(model.id == target_id)
        ).first()
        if owner_id is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{model.__name__} not found",
            )

        try:
            existing = self._find_vote(user_id, question_id, answer_id)
            delta = data.value - existing.value if existing else data.value
            if delta != 0:
                self.session.exec(
                    update(model)
                    .where(col(model.id) == target_id)
                    .values(votes=col(model.votes) + delta, updated_at=datetime.now(timezone.utc))
                )
                # Self-votes move the counter but never the voter's own reputation.
                if owner_id != user_id:
                    self.users.adjust_reputation(owner_id, delta * weight)
            if existing:
                existing.value = data.value
                self.session.add(existing)
            else:
                self.session.add(
                    Vote(
                        user_id=user_id,
                        question_id=question_id,
                        answer_id=answer_id,
                        value=data.value,
                    )
                )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to record vote for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to record vote",
            ) from exc

    def get_vote(
        self, user_id: str, question_id: Optional[int] = None, answer_id: Optional[int] = None
    ) -> Optional[VoteRead]:
        question_id, answer_id = self._validate_target(question_id, answer_id)
        vote = self._find_vote(user_id, question_id, answer_id)
        return VoteRead.model_validate(vote) if vote else None

    def _find_vote(
        self, user_id: str, question_id: Optional[int], answer_id: Optional[int]
    ) -> Optional[Vote]:
        statement = select(Vote).where(Vote.user_id == user_id)
        if question_id is not None:
            statement = statement.where(Vote.question_id == question_id)
        else:
            statement = statement.where(Vote.answer_id == answer_id)
        return self.session.exec(statement).first()

    def _validate_target(
        self, question_id: Optional[int], answer_id: Optional[int]
    ) -> Tuple[Optional[int], Optional[int]]:
        if (question_id is None) == (answer_id is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Provide either questionId or answerId, but not both",
            )
        return question_id, answer_id
