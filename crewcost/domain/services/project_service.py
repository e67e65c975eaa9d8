"""
Project Service - Projects, budgets and membership.

Implements:
- Project creation with the creator as owner
- Budget cap updates (owner only)
- Member invitations by email (owner only)
"""
import logging
import re
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewcost.models import Project, ProjectMember
from crewcost.domain.entities import MemberRole
from crewcost.domain.exceptions import (
    CurrencyMismatchError,
    DuplicateMemberError,
    InvalidAmountError,
    UserNotFoundError,
    ValidationError,
)
from crewcost.domain.money import Money
from crewcost.domain.services.access import require_actor, require_member, require_owner
from crewcost.infrastructure.repositories import ProjectRepository, UserRepository

logger = logging.getLogger(__name__)

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


class ProjectService:
    """
    Service for project lifecycle and membership.

    Owner-only operations: budget updates and invitations.
    """

    def __init__(self, session: Session):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)

    def create_project(
        self,
        actor_id: Optional[int],
        name: str,
        currency: str,
        description: Optional[str] = None,
        budget: Optional[Money] = None
    ) -> Project:
        """
        Create a project owned by the actor.

        The owner membership is written in the same transaction.

        Raises:
            UnauthorizedError: No actor
            ValidationError: Empty name or malformed currency code
            InvalidAmountError: Negative budget
            CurrencyMismatchError: Budget not in the project currency
        """
        actor_id = require_actor(actor_id)
        if not name or not name.strip():
            raise ValidationError("name", "must not be empty")
        currency = (currency or "").strip().upper()
        if not _CURRENCY_CODE.match(currency):
            raise ValidationError("currency", "must be a three-letter currency code")
        budget_cents = self._budget_cents(budget, currency)

        try:
            project = self.project_repo.create(
                owner_id=actor_id,
                name=name.strip(),
                currency=currency,
                description=description,
                budget_cents=budget_cents,
            )
            self.project_repo.commit()
        except SQLAlchemyError:
            self.project_repo.rollback()
            raise

        logger.info(f"User {actor_id} created project {project.id} ({currency})")
        return project

    def list_projects(self, actor_id: Optional[int]) -> List[Project]:
        """Projects the actor belongs to, newest first."""
        return self.project_repo.get_for_user(require_actor(actor_id))

    def get_project(self, actor_id: Optional[int], project_id: int) -> Project:
        project, _ = require_member(self.project_repo, actor_id, project_id)
        return project

    def list_members(self, actor_id: Optional[int], project_id: int) -> List[ProjectMember]:
        require_member(self.project_repo, actor_id, project_id)
        return self.project_repo.get_members(project_id)

    def update_budget(
        self,
        actor_id: Optional[int],
        project_id: int,
        budget: Optional[Money]
    ) -> Project:
        """
        Set or clear the project budget cap.

        Args:
            budget: New budget (>= 0), or None to remove the cap

        Raises:
            OwnerRequiredError: Actor is a member but not the owner
            InvalidAmountError: Negative budget
            CurrencyMismatchError: Budget not in the project currency
        """
        project = require_owner(self.project_repo, actor_id, project_id, "change the budget")
        budget_cents = self._budget_cents(budget, project.currency)

        try:
            self.project_repo.set_budget(project, budget_cents)
            self.project_repo.commit()
        except SQLAlchemyError:
            self.project_repo.rollback()
            raise

        logger.info(f"Project {project_id} budget set to {budget_cents} cents")
        return project

    def invite_member(self, actor_id: Optional[int], project_id: int, email: str) -> ProjectMember:
        """
        Add an existing user to the project as a member.

        Raises:
            OwnerRequiredError: Actor is not the owner
            UserNotFoundError: No account for that email
            DuplicateMemberError: User already belongs to the project
        """
        require_owner(self.project_repo, actor_id, project_id, "invite members")
        if not email or not email.strip():
            raise ValidationError("email", "must not be empty")

        user = self.user_repo.get_by_email(email)
        if not user:
            raise UserNotFoundError(email)
        if self.project_repo.get_membership(project_id, user.id):
            raise DuplicateMemberError(project_id, user.id)

        try:
            member = self.project_repo.add_member(project_id, user.id, MemberRole.MEMBER)
            self.project_repo.commit()
        except SQLAlchemyError:
            self.project_repo.rollback()
            raise

        logger.info(f"User {user.id} joined project {project_id}")
        return member

    @staticmethod
    def _budget_cents(budget: Optional[Money], currency: str) -> Optional[int]:
        if budget is None:
            return None
        if budget.currency != currency:
            raise CurrencyMismatchError(currency, budget.currency)
        if budget.is_negative():
            raise InvalidAmountError("Budget cannot be negative")
        return budget.cents
