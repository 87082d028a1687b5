from fastapi import APIRouter, Depends, status

from devrx.api.dependencies import get_current_user_id, get_session
from devrx.models.answer import CommentCreate, CommentView
from devrx.services.comment_service import CommentService


router = APIRouter(prefix="/api/comments", tags=["comments"])


def get_comment_service(session=Depends(get_session)) -> CommentService:
    return CommentService(session)


@router.post("", response_model=CommentView, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    user_id: str = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service),
) -> CommentView:
    return service.create_comment(user_id, payload)
