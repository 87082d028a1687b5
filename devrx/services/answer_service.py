import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from devrx.db.schemas import Answer, Question
from devrx.models.answer import AnswerCreate, AnswerRead, AnswerUpdate
from devrx.services.user_service import (
    ANSWER_ACCEPTED_REPUTATION,
    ANSWER_POSTED_REPUTATION,
    UserService,
)

logger = logging.getLogger(__name__)


class AnswerService:
    def __init__(self, session: Session):
        self.session = session
        self.users = UserService(session)

    def create_answer(self, question_id: int, author_id: str, data: AnswerCreate) -> AnswerRead:
        if self.session.get(Question, question_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
        answer = Answer(question_id=question_id, user_id=author_id, content=data.content)
        self.session.add(answer)
        self.users.adjust_reputation(author_id, ANSWER_POSTED_REPUTATION)
        self._commit("Failed to create answer")
        self.session.refresh(answer)
        return AnswerRead.model_validate(answer)

    def update_answer(self, answer_id: int, requester_id: str, data: AnswerUpdate) -> AnswerRead:
        answer = self._get_answer_entity(answer_id)
        if answer.user_id != requester_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the answer author can edit this answer",
            )
        answer.content = data.content
        answer.updated_at = datetime.now(timezone.utc)
        self.session.add(answer)
        self._commit("Failed to update answer")
        self.session.refresh(answer)
        return AnswerRead.model_validate(answer)

    def accept_answer(self, answer_id: int, requester_id: str) -> None:
        """Mark an answer accepted and its question solved.

        A previously accepted answer on the same question is unaccepted in the
        same transaction and its author gives back the acceptance reputation.
        """
        answer = self._get_answer_entity(answer_id)
        question = self.session.get(Question, answer.question_id)
        if not question:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
        if question.user_id != requester_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the question author can accept answers",
            )
        if answer.is_accepted:
            return

        now = datetime.now(timezone.utc)
        previous = self.session.exec(
            select(Answer)
            .where(Answer.question_id == question.id)
            .where(col(Answer.is_accepted).is_(True))
            .where(Answer.id != answer.id)
        ).all()
        for other in previous:
            other.is_accepted = False
            other.updated_at = now
            self.session.add(other)
            self.users.adjust_reputation(other.user_id, -ANSWER_ACCEPTED_REPUTATION)

        answer.is_accepted = True
        answer.updated_at = now
        self.session.add(answer)
        self.session.exec(
            update(Question)
            .where(col(Question.id) == question.id)
            .values(is_solved=True, updated_at=now)
        )
        self.users.adjust_reputation(answer.user_id, ANSWER_ACCEPTED_REPUTATION)
        self._commit("Failed to accept answer")

    def _get_answer_entity(self, answer_id: int) -> Answer:
        answer = self.session.get(Answer, answer_id)
        if not answer:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found")
        return answer

    def _commit(self, failure_detail: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception(failure_detail)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail
            ) from exc
