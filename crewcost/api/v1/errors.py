"""
Translate domain errors into HTTP responses.
"""
import logging

from fastapi import HTTPException, status

from crewcost.domain.exceptions import (
    DomainError,
    DuplicateMemberError,
    EmailInUseError,
    InvalidTransitionError,
    NotFoundError,
    NotProjectMemberError,
    OwnerRequiredError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their parents
_STATUS_BY_ERROR = [
    (NotProjectMemberError, status.HTTP_403_FORBIDDEN),
    (OwnerRequiredError, status.HTTP_403_FORBIDDEN),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (DuplicateMemberError, status.HTTP_409_CONFLICT),
    (EmailInUseError, status.HTTP_409_CONFLICT),
]


def status_for(error: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def to_http_exception(error: DomainError) -> HTTPException:
    """Build the HTTPException for a domain error; detail carries code and message."""
    status_code = status_for(error)
    logger.warning(f"Rejected request ({status_code}): {error.code} {error.message}")
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message}
    )
