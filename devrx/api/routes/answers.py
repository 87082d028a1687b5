from typing import List

from fastapi import APIRouter, Depends

from devrx.api.dependencies import get_current_user_id, get_session
from devrx.models.answer import AnswerRead, AnswerUpdate, AnswerView, CommentView
from devrx.models.base import MessageRead
from devrx.services.answer_service import AnswerService
from devrx.services.query_service import QueryService


router = APIRouter(prefix="/api/answers", tags=["answers"])


def get_answer_service(session=Depends(get_session)) -> AnswerService:
    return AnswerService(session)


def get_query_service(session=Depends(get_session)) -> QueryService:
    return QueryService(session)


@router.get("/{answer_id}", response_model=AnswerView)
def get_answer(answer_id: int, service: QueryService = Depends(get_query_service)) -> AnswerView:
    return service.get_answer(answer_id)


@router.put("/{answer_id}", response_model=AnswerRead)
def update_answer(
    answer_id: int,
    payload: AnswerUpdate,
    user_id: str = Depends(get_current_user_id),
    service: AnswerService = Depends(get_answer_service),
) -> AnswerRead:
    return service.update_answer(answer_id, user_id, payload)


@router.put("/{answer_id}/accept", response_model=MessageRead)
def accept_answer(
    answer_id: int,
    user_id: str = Depends(get_current_user_id),
    service: AnswerService = Depends(get_answer_service),
) -> MessageRead:
    service.accept_answer(answer_id, user_id)
    return MessageRead(message="Answer accepted")


@router.get("/{answer_id}/comments", response_model=List[CommentView])
def list_answer_comments(
    answer_id: int, service: QueryService = Depends(get_query_service)
) -> List[CommentView]:
    return service.list_answer_comments(answer_id)
