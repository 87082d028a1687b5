import logging
from typing import Callable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from devrx.db.schemas import AiSuggestion, Question
from devrx.services.llm_service import AiAdvisor

logger = logging.getLogger(__name__)


def generate_question_suggestion(
    session_factory: Callable[[], Session],
    advisor: AiAdvisor,
    question_id: int,
    title: str,
    content: str,
    tags: List[str],
) -> None:
    """Background task run after the question transaction has committed.

    Never raises: a missing suggestion is a valid state.
    """
    if not advisor.available:
        logger.info("Skipping AI suggestion for question %s: advisor unavailable", question_id)
        return
    try:
        text = advisor.try_generate_suggestion(title, content, tags)
        if text is None:
            return
        with session_factory() as session:
            if session.get(Question, question_id) is None:
                logger.info("Question %s deleted before its suggestion was stored", question_id)
                return
            existing = session.exec(
                select(AiSuggestion).where(AiSuggestion.question_id == question_id)
            ).first()
            if existing:
                return
            session.add(AiSuggestion(question_id=question_id, content=text))
            session.commit()
    except SQLAlchemyError:
        logger.exception("Error storing AI suggestion for question %s", question_id)
    except Exception:
        logger.exception("Error generating AI suggestion for question %s", question_id)
