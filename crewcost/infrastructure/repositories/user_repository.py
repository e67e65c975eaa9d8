"""
User Repository - Data access layer for accounts.
"""
from typing import Optional
from sqlalchemy.orm import Session

from crewcost.models import User
from .base_repository import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def exists(self, **criteria) -> bool:
        """Check if a User matching the criteria exists."""
        return self._exists(**criteria)

    def get_by_email(self, email: str) -> Optional[User]:
        """Look up an account by email (case-insensitive)."""
        return self.session.query(User).filter(
            User.email == normalize_email(email)
        ).first()

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=name,
        )
        self.add(user)
        return user
