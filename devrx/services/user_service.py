from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from devrx.db.schemas import User
from devrx.models.user import UserRead, UserUpsert

ANSWER_POSTED_REPUTATION = 5
ANSWER_ACCEPTED_REPUTATION = 15


class UserService:
    def __init__(self, session: Session):
        self.session = session

    def get_user(self, user_id: str) -> UserRead:
        user = self.session.get(User, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return UserRead.model_validate(user)

    def ensure_user(self, user_id: str, claims: UserUpsert | None = None) -> User:
        """Create the user row on first sight of a verified id; existing rows are left alone."""
        user = self.session.get(User, user_id)
        if user is not None:
            return user
        user = User(id=user_id, **(claims.model_dump() if claims else {}))
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            # Another request created the same user first.
            user = self.session.get(User, user_id)
            if user is not None:
                return user
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Email already in use"
            ) from exc
        self.session.refresh(user)
        return user

    def upsert_user(self, user_id: str, data: UserUpsert) -> UserRead:
        user = self.session.get(User, user_id)
        if user is None:
            user = User(id=user_id, **data.model_dump())
        else:
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Email already in use"
            ) from exc
        self.session.refresh(user)
        return UserRead.model_validate(user)

    def top_contributors(self, limit: int = 10) -> List[UserRead]:
        statement = (
            select(User)
            .order_by(col(User.reputation).desc(), col(User.created_at))
            .limit(limit)
        )
        return [UserRead.model_validate(user) for user in self.session.exec(statement).all()]

    def adjust_reputation(self, user_id: str, change: int) -> None:
        """Queue ``reputation = reputation + change``; the caller commits."""
        if change == 0:
            return
        self.session.exec(
            update(User)
            .where(col(User.id) == user_id)
            .values(
                reputation=col(User.reputation) + change,
                updated_at=datetime.now(timezone.utc),
            )
        )
