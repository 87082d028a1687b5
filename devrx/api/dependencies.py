from collections.abc import Callable, Generator
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from devrx.config.settings import get_settings
from devrx.db.base import get_engine
from devrx.models.user import UserUpsert
from devrx.services.llm_service import AiAdvisor
from devrx.services.user_service import UserService


def get_session() -> Generator[Session, None, None]:
    """Provide a database session for request scope."""
    engine = get_engine()
    with Session(engine) as session:
        yield session


def get_session_factory() -> Callable[[], Session]:
    """Sessions for work that outlives the request, such as background tasks."""
    engine = get_engine()
    return lambda: Session(engine)


@lru_cache
def get_advisor() -> AiAdvisor:
    return AiAdvisor.from_settings(get_settings())


def get_optional_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Verified user id forwarded by the upstream auth middleware, if any."""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


def get_current_user_id(
    user_id: Optional[str] = Depends(get_optional_user_id),
    x_user_email: Optional[str] = Header(default=None),
    x_user_first_name: Optional[str] = Header(default=None),
    x_user_last_name: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
) -> str:
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    claims = UserUpsert(email=x_user_email, first_name=x_user_first_name, last_name=x_user_last_name)
    UserService(session).ensure_user(user_id, claims)
    return user_id
