from typing import List

from fastapi import APIRouter, Depends, Query

from devrx.api.dependencies import get_session
from devrx.models.user import UserRead
from devrx.services.user_service import UserService


router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_service(session=Depends(get_session)) -> UserService:
    return UserService(session)


@router.get("/top-contributors", response_model=List[UserRead])
def top_contributors(
    limit: int = Query(default=10, ge=1, le=100),
    service: UserService = Depends(get_user_service),
) -> List[UserRead]:
    return service.top_contributors(limit)
