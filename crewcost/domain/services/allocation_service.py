"""
Allocation Service - Planned spend line items against the project budget.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewcost.models import BudgetAllocation
from crewcost.domain.exceptions import CurrencyMismatchError, InvalidAmountError, ValidationError
from crewcost.domain.money import Money
from crewcost.domain.services.access import require_member
from crewcost.infrastructure.repositories import AllocationRepository, ProjectRepository

logger = logging.getLogger(__name__)


class AllocationService:
    """Any project member may add or list allocations."""

    def __init__(self, session: Session):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.allocation_repo = AllocationRepository(session)

    def create_allocation(
        self,
        actor_id: Optional[int],
        project_id: int,
        name: str,
        amount: Money,
        ticket_ref: Optional[str] = None
    ) -> BudgetAllocation:
        """
        Record a planned line item.

        Allocations may push the project over budget; that is reported by
        the budget variance, not rejected here.

        Raises:
            ValidationError: Empty name
            InvalidAmountError: Amount is not positive
            CurrencyMismatchError: Amount not in the project currency
        """
        project, _ = require_member(self.project_repo, actor_id, project_id)
        if not name or not name.strip():
            raise ValidationError("name", "must not be empty")
        if amount.currency != project.currency:
            raise CurrencyMismatchError(project.currency, amount.currency)
        if not amount.is_positive():
            raise InvalidAmountError("Allocation amount must be greater than zero")

        try:
            allocation = self.allocation_repo.create(
                project_id=project_id,
                name=name.strip(),
                amount_cents=amount.cents,
                ticket_ref=(ticket_ref or None),
            )
            self.allocation_repo.commit()
        except SQLAlchemyError:
            self.allocation_repo.rollback()
            raise

        logger.info(f"Added allocation {allocation.id} ({amount.cents} cents) to project {project_id}")
        return allocation

    def list_allocations(self, actor_id: Optional[int], project_id: int) -> List[BudgetAllocation]:
        require_member(self.project_repo, actor_id, project_id)
        return self.allocation_repo.get_by_project(project_id)
