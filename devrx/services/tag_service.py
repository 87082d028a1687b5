import re
from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, col, select

from devrx.db.schemas import Tag
from devrx.models.tag import TagCreate, TagListRead, TagRead

MAX_TAG_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")


def normalize_tag_name(name: str) -> str:
    """Lowercase, trim, and hyphenate internal whitespace: ``" Node JS "`` -> ``"node-js"``."""
    return _WHITESPACE.sub("-", name.strip().lower())


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    normalized: List[str] = []
    for name in names or []:
        if not isinstance(name, str):
            continue
        cleaned = normalize_tag_name(name)
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    return normalized


class TagService:
    def __init__(self, session: Session):
        self.session = session

    def list_tags(self, *, limit: int = 20, offset: int = 0) -> TagListRead:
        total = self.session.exec(select(func.count()).select_from(Tag)).one()
        statement = (
            select(Tag)
            .order_by(col(Tag.count).desc(), col(Tag.name))
            .offset(offset)
            .limit(limit)
        )
        tags = self.session.exec(statement).all()
        return TagListRead(tags=[TagRead.model_validate(tag) for tag in tags], total=total)

    def popular_tags(self, limit: int = 10) -> List[TagRead]:
        statement = select(Tag).order_by(col(Tag.count).desc(), col(Tag.name)).limit(limit)
        return [TagRead.model_validate(tag) for tag in self.session.exec(statement).all()]

    def get_tag(self, tag_id: int) -> TagRead:
        tag = self.session.get(Tag, tag_id)
        if not tag:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
        return TagRead.model_validate(tag)

    def get_by_name(self, name: str) -> Tag | None:
        return self.session.exec(select(Tag).where(Tag.name == name)).first()

    def create_tag(self, data: TagCreate) -> TagRead:
        name = normalize_tag_name(data.name)
        if not name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tag name is required")
        if self.get_by_name(name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Tag already exists")
        tag = Tag(name=name, description=data.description)
        self.session.add(tag)
        self.session.commit()
        self.session.refresh(tag)
        return TagRead.model_validate(tag)

    def get_or_create_tags(self, names: List[str]) -> List[Tag]:
        """Resolve tag names to rows inside the caller's transaction.

        New rows are flushed, not committed.
        """
        normalized = normalize_tag_names(names)
        too_long = [name for name in normalized if len(name) > MAX_TAG_LENGTH]
        if too_long:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Tag names must be at most {MAX_TAG_LENGTH} characters",
            )
        if not normalized:
            return []
        existing = {
            tag.name: tag
            for tag in self.session.exec(select(Tag).where(col(Tag.name).in_(normalized))).all()
        }
        tags: List[Tag] = []
        for name in normalized:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                self.session.add(tag)
            tags.append(tag)
        self.session.flush()
        return tags
