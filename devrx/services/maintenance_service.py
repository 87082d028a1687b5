import logging
from typing import Dict

from sqlalchemy import func
from sqlmodel import Session, col, select

from devrx.db.schemas import Answer, Question, QuestionTag, Tag, Vote

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Rebuilds denormalized counters from the rows they summarize."""

    def __init__(self, session: Session):
        self.session = session

    def recount_aggregates(self, *, dry_run: bool = False) -> Dict[str, int]:
        question_votes = self._sums(Vote.question_id)
        answer_votes = self._sums(Vote.answer_id)
        tag_counts = dict(
            self.session.exec(
                select(QuestionTag.tag_id, func.count()).group_by(QuestionTag.tag_id)
            ).all()
        )
        corrected = {
            "questions": self._apply(Question, "votes", question_votes),
            "answers": self._apply(Answer, "votes", answer_votes),
            "tags": self._apply(Tag, "count", tag_counts),
        }
        if dry_run:
            self.session.rollback()
        else:
            self.session.commit()
        logger.info("Recount finished (dry_run=%s): %s", dry_run, corrected)
        return corrected

    def _sums(self, target_column) -> Dict[int, int]:
        statement = (
            select(target_column, func.sum(Vote.value))
            .where(col(target_column).is_not(None))
            .group_by(target_column)
        )
        return {target_id: int(total) for target_id, total in self.session.exec(statement).all()}

    def _apply(self, model, field: str, expected: Dict[int, int]) -> int:
        changed = 0
        for row in self.session.exec(select(model)).all():
            actual = expected.get(row.id, 0)
            if getattr(row, field) != actual:
                logger.info(
                    "%s %s has %s=%s, expected %s",
                    model.__name__, row.id, field, getattr(row, field), actual,
                )
                setattr(row, field, actual)
                self.session.add(row)
                changed += 1
        return changed
