"""
User Service - Account registration and credential checks.

The rest of the core only ever sees the resulting user id.
"""
import logging
import re
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from crewcost.config import get_config
from crewcost.models import User
from crewcost.domain.exceptions import EmailInUseError, UnauthorizedError, ValidationError
from crewcost.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserService:
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = UserRepository(session)

    def register_user(self, name: str, email: str, password: str) -> User:
        """
        Create an account.

        Raises:
            ValidationError: Name shorter than 2 chars, malformed email or short password
            EmailInUseError: Email already registered
        """
        if not name or len(name.strip()) < 2:
            raise ValidationError("name", "must be at least 2 characters")
        if not email or not _EMAIL.match(email.strip()):
            raise ValidationError("email", "must be a valid email address")
        min_length = get_config().min_password_length
        if not password or len(password) < min_length:
            raise ValidationError("password", f"must be at least {min_length} characters")

        if self.user_repo.get_by_email(email):
            raise EmailInUseError(email)

        try:
            user = self.user_repo.create(
                email=email,
                password_hash=generate_password_hash(password),
                name=name.strip(),
            )
            self.user_repo.commit()
        except SQLAlchemyError:
            self.user_repo.rollback()
            raise

        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            UnauthorizedError: Unknown email or wrong password
        """
        user = self.user_repo.get_by_email(email or "")
        if not user or not user.password_hash or not check_password_hash(user.password_hash, password or ""):
            raise UnauthorizedError("Invalid credentials.", code="INVALID_CREDENTIALS")
        return user

    def get_user(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return self.user_repo.get_by_id(user_id)
