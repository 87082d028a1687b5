import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col

from devrx.db.schemas import Question, QuestionTag, Tag
from devrx.models.question import QuestionCreate, QuestionRead, QuestionUpdate
from devrx.services.tag_service import TagService

logger = logging.getLogger(__name__)

# A concurrent request may create the same new tag name between our lookup and commit.
CREATE_ATTEMPTS = 2


class QuestionService:
    def __init__(self, session: Session):
        self.session = session
        self.tags = TagService(session)

    def create_question(self, author_id: str, data: QuestionCreate) -> QuestionRead:
        """Insert the question, its tag links and tag count bumps in one transaction."""
        attempt = 1
        while True:
            try:
                question = self._insert_question(author_id, data)
                self.session.commit()
                break
            except IntegrityError as exc:
                self.session.rollback()
                if attempt >= CREATE_ATTEMPTS:
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail="Failed to create question",
                    ) from exc
                logger.info("Tag conflict while creating question, retrying")
                attempt += 1
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.exception("Failed to create question for user %s", author_id)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Failed to create question",
                ) from exc
        self.session.refresh(question)
        return QuestionRead.model_validate(question)

    def update_question(self, question_id: int, requester_id: str, data: QuestionUpdate) -> QuestionRead:
        question = self._get_owned_question(question_id, requester_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(question, key, value)
        question.updated_at = datetime.now(timezone.utc)
        self.session.add(question)
        self.session.commit()
        self.session.refresh(question)
        return QuestionRead.model_validate(question)

    def delete_question(self, question_id: int, requester_id: str) -> None:
        """Delete the question; answers, comments, votes, links and suggestion cascade."""
        question = self._get_owned_question(question_id, requester_id)
        self.session.delete(question)
        self.session.commit()

    def _insert_question(self, author_id: str, data: QuestionCreate) -> Question:
        tags = self.tags.get_or_create_tags(data.tags)
        question = Question(user_id=author_id, title=data.title, content=data.content)
        self.session.add(question)
        self.session.flush()
        tag_ids = [tag.id for tag in tags]
        if tag_ids:
            self.session.add_all(
                [QuestionTag(question_id=question.id, tag_id=tag_id) for tag_id in tag_ids]
            )
            self.session.exec(
                update(Tag).where(col(Tag.id).in_(tag_ids)).values(count=col(Tag.count) + 1)
            )
        return question

    def _get_owned_question(self, question_id: int, requester_id: str) -> Question:
        question = self.session.get(Question, question_id)
        if not question:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
        if question.user_id != requester_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the question author can modify this question",
            )
        return question
