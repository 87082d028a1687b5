from typing import List

from fastapi import APIRouter, Depends, Query, status

from devrx.api.dependencies import get_current_user_id, get_session
from devrx.models.tag import TagCreate, TagListRead, TagRead
from devrx.services.tag_service import TagService


router = APIRouter(prefix="/api/tags", tags=["tags"])


def get_tag_service(session=Depends(get_session)) -> TagService:
    return TagService(session)


@router.get("", response_model=TagListRead)
def list_tags(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: TagService = Depends(get_tag_service),
) -> TagListRead:
    return service.list_tags(limit=limit, offset=offset)


@router.get("/popular", response_model=List[TagRead])
def popular_tags(
    limit: int = Query(default=10, ge=1, le=100),
    service: TagService = Depends(get_tag_service),
) -> List[TagRead]:
    return service.popular_tags(limit)


@router.get("/{tag_id}", response_model=TagRead)
def get_tag(tag_id: int, service: TagService = Depends(get_tag_service)) -> TagRead:
    return service.get_tag(tag_id)


@router.post("", response_model=TagRead, status_code=status.HTTP_201_CREATED)
def create_tag(
    payload: TagCreate,
    _user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
) -> TagRead:
    return service.create_tag(payload)
