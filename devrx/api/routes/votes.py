from typing import Optional

from fastapi import APIRouter, Depends, Query

from devrx.api.dependencies import get_current_user_id, get_session
from devrx.models.answer import VoteCreate, VoteRead
from devrx.models.base import MessageRead
from devrx.services.vote_service import VoteService


router = APIRouter(prefix="/api/votes", tags=["votes"])


def get_vote_service(session=Depends(get_session)) -> VoteService:
    return VoteService(session)


@router.post("", response_model=MessageRead)
def cast_vote(
    payload: VoteCreate,
    user_id: str = Depends(get_current_user_id),
    service: VoteService = Depends(get_vote_service),
) -> MessageRead:
    service.cast_vote(user_id, payload)
    return MessageRead(message="Vote recorded")


@router.get("", response_model=Optional[VoteRead])
def get_my_vote(
    question_id: Optional[int] = Query(default=None, alias="questionId"),
    answer_id: Optional[int] = Query(default=None, alias="answerId"),
    user_id: str = Depends(get_current_user_id),
    service: VoteService = Depends(get_vote_service),
) -> Optional[VoteRead]:
    return service.get_vote(user_id, question_id, answer_id)
