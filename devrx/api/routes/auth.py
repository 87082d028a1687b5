from typing import Optional

from fastapi import APIRouter, Depends

from devrx.api.dependencies import get_current_user_id, get_optional_user_id, get_session
from devrx.models.user import AuthStatusRead, UserRead, UserUpsert
from devrx.services.user_service import UserService


router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_user_service(session=Depends(get_session)) -> UserService:
    return UserService(session)


@router.get("/status", response_model=AuthStatusRead)
def auth_status(user_id: Optional[str] = Depends(get_optional_user_id)) -> AuthStatusRead:
    return AuthStatusRead(is_authenticated=user_id is not None)


@router.get("/user", response_model=UserRead)
def current_user(
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    return service.get_user(user_id)


@router.put("/user", response_model=UserRead)
def update_current_user(
    payload: UserUpsert,
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    return service.upsert_user(user_id, payload)
