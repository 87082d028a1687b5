from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy import func, update
from sqlmodel import Session, col, select

from devrx.db.schemas import AiSuggestion, Answer, Comment, Question, QuestionTag, Tag, User
from devrx.models.answer import AnswerView, CommentView
from devrx.models.question import (
    AiSuggestionRead,
    QuestionDetail,
    QuestionListRead,
    QuestionView,
)
from devrx.models.tag import TagRead
from devrx.models.user import UserRead

SORT_ORDERS = {
    "newest": (col(Question.created_at).desc(),),
    "votes": (col(Question.votes).desc(), col(Question.created_at).desc()),
    "views": (col(Question.view_count).desc(), col(Question.created_at).desc()),
    "active": (col(Question.updated_at).desc(),),
}
DEFAULT_SORT = "newest"


class QueryService:
    """Read side: composes table rows into nested views.

    Child rows for a page are fetched in one query per relation and joined in
    memory through id-keyed dicts, so the number of queries does not grow with
    the page size.
    """

    def __init__(self, session: Session):
        self.session = session

    def list_questions(
        self,
        *,
        limit: int = 10,
        offset: int = 0,
        sort_by: str = DEFAULT_SORT,
        tag_ids: Optional[Sequence[int]] = None,
        search_query: str = "",
    ) -> QuestionListRead:
        conditions = []
        wanted_tags = sorted(set(tag_ids or []))
        if wanted_tags:
            matching = self.session.exec(
                select(QuestionTag.question_id)
                .where(col(QuestionTag.tag_id).in_(wanted_tags))
                .group_by(QuestionTag.question_id)
                .having(func.count(QuestionTag.tag_id) == len(wanted_tags))
            ).all()
            if not matching:
                return QuestionListRead(questions=[], total=0)
            conditions.append(col(Question.id).in_(matching))
        if search_query and search_query.strip():
            conditions.append(
                col(Question.title).icontains(search_query, autoescape=True)
                | col(Question.content).icontains(search_query, autoescape=True)
            )

        total = self.session.exec(
            select(func.count()).select_from(Question).where(*conditions)
        ).one()
        order_by = SORT_ORDERS.get(sort_by, SORT_ORDERS[DEFAULT_SORT])
        statement = (
            select(Question)
            .where(*conditions)
            .order_by(*order_by)
            .offset(offset)
            .limit(limit)
        )
        questions = self.session.exec(statement).all()
        return QuestionListRead(questions=self._build_question_views(questions), total=total)

    def get_question_view(self, question_id: int) -> QuestionView:
        """Summary view without counting a page view."""
        return self._build_question_views([self._get_question_entity(question_id)])[0]

    def get_question_detail(self, question_id: int) -> QuestionDetail:
        question = self._get_question_entity(question_id)
        # Every detail fetch counts as a view, repeats and the author's own included.
        self.session.exec(
            update(Question)
            .where(col(Question.id) == question_id)
            .values(view_count=col(Question.view_count) + 1)
        )
        self.session.commit()
        self.session.refresh(question)

        view = self._build_question_views([question])[0]
        data = view.model_dump()
        data["comments"] = self.list_question_comments(question_id)
        data["answers"] = self.list_answers(question_id)
        return QuestionDetail(**data)

    def list_answers(self, question_id: int) -> List[AnswerView]:
        statement = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(
                col(Answer.is_accepted).desc(),
                col(Answer.votes).desc(),
                col(Answer.created_at).asc(),
            )
        )
        answers = self.session.exec(statement).all()
        return self._build_answer_views(answers)

    def get_answer(self, answer_id: int) -> AnswerView:
        answer = self.session.get(Answer, answer_id)
        if not answer:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found")
        return self._build_answer_views([answer])[0]

    def list_question_comments(self, question_id: int) -> List[CommentView]:
        return self._comments_by_target(question_ids=[question_id]).get(question_id, [])

    def list_answer_comments(self, answer_id: int) -> List[CommentView]:
        return self._comments_by_target(answer_ids=[answer_id]).get(answer_id, [])

    def _get_question_entity(self, question_id: int) -> Question:
        question = self.session.get(Question, question_id)
        if not question:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
        return question

    def _build_question_views(self, questions: Sequence[Question]) -> List[QuestionView]:
        if not questions:
            return []
        question_ids = [question.id for question in questions]
        users = self._users_by_id(question.user_id for question in questions)
        tags = self._tags_by_question(question_ids)
        answer_counts = self._answer_counts(question_ids)
        suggestions = self._suggestions_by_question(question_ids)

        views: List[QuestionView] = []
        for question in questions:
            data = question.model_dump()
            data["user"] = users.get(question.user_id)
            data["tags"] = tags.get(question.id, [])
            data["answer_count"] = answer_counts.get(question.id, 0)
            data["ai_suggestion"] = suggestions.get(question.id)
            views.append(QuestionView(**data))
        return views

    def _build_answer_views(self, answers: Sequence[Answer]) -> List[AnswerView]:
        if not answers:
            return []
        users = self._users_by_id(answer.user_id for answer in answers)
        comments = self._comments_by_target(answer_ids=[answer.id for answer in answers])
        views: List[AnswerView] = []
        for answer in answers:
            data = answer.model_dump()
            data["user"] = users.get(answer.user_id)
            data["comments"] = comments.get(answer.id, [])
            views.append(AnswerView(**data))
        return views

    def _users_by_id(self, user_ids: Iterable[str]) -> Dict[str, UserRead]:
        ids = set(user_ids)
        if not ids:
            return {}
        users = self.session.exec(select(User).where(col(User.id).in_(ids))).all()
        return {user.id: UserRead.model_validate(user) for user in users}

    def _tags_by_question(self, question_ids: List[int]) -> Dict[int, List[TagRead]]:
        statement = (
            select(QuestionTag.question_id, Tag)
            .join(Tag, col(Tag.id) == col(QuestionTag.tag_id))
            .where(col(QuestionTag.question_id).in_(question_ids))
            .order_by(col(Tag.name))
        )
        grouped: Dict[int, List[TagRead]] = defaultdict(list)
        for question_id, tag in self.session.exec(statement).all():
            grouped[question_id].append(TagRead.model_validate(tag))
        return grouped

    def _answer_counts(self, question_ids: List[int]) -> Dict[int, int]:
        statement = (
            select(Answer.question_id, func.count(Answer.id))
            .where(col(Answer.question_id).in_(question_ids))
            .group_by(Answer.question_id)
        )
        return {question_id: count for question_id, count in self.session.exec(statement).all()}

    def _suggestions_by_question(self, question_ids: List[int]) -> Dict[int, AiSuggestionRead]:
        statement = select(AiSuggestion).where(col(AiSuggestion.question_id).in_(question_ids))
        return {
            suggestion.question_id: AiSuggestionRead.model_validate(suggestion)
            for suggestion in self.session.exec(statement).all()
        }

    def _comments_by_target(
        self,
        *,
        question_ids: Optional[List[int]] = None,
        answer_ids: Optional[List[int]] = None,
    ) -> Dict[int, List[CommentView]]:
        if question_ids:
            key = "question_id"
            statement = select(Comment).where(col(Comment.question_id).in_(question_ids))
        elif answer_ids:
            key = "answer_id"
            statement = select(Comment).where(col(Comment.answer_id).in_(answer_ids))
        else:
            return {}
        comments = self.session.exec(
            statement.order_by(col(Comment.created_at).asc(), col(Comment.id).asc())
        ).all()
        users = self._users_by_id(comment.user_id for comment in comments)
        grouped: Dict[int, List[CommentView]] = defaultdict(list)
        for comment in comments:
            data = comment.model_dump()
            data["user"] = users.get(comment.user_id)
            grouped[getattr(comment, key)].append(CommentView(**data))
        return grouped
