from fastapi import HTTPException, status
from sqlmodel import Session

from devrx.db.schemas import Answer, Comment, Question, User
from devrx.models.answer import CommentCreate, CommentView
from devrx.models.user import UserRead


class CommentService:
    def __init__(self, session: Session):
        self.session = session

    def create_comment(self, author_id: str, data: CommentCreate) -> CommentView:
        if (data.question_id is None) == (data.answer_id is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Provide either questionId or answerId, but not both",
            )
        if data.question_id is not None and self.session.get(Question, data.question_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
        if data.answer_id is not None and self.session.get(Answer, data.answer_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found")

        comment = Comment(
            content=data.content,
            user_id=author_id,
            question_id=data.question_id,
            answer_id=data.answer_id,
        )
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        payload = comment.model_dump()
        author = self.session.get(User, author_id)
        payload["user"] = UserRead.model_validate(author) if author else None
        return CommentView(**payload)
