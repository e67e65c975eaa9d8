"""
Allocation Repository - Data access layer for budget allocations.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from crewcost.models import BudgetAllocation
from .base_repository import BaseRepository


class AllocationRepository(BaseRepository[BudgetAllocation]):
    """Repository for BudgetAllocation entities."""

    def __init__(self, session: Session):
        super().__init__(session, BudgetAllocation)

    def exists(self, **criteria) -> bool:
        """Check if an allocation matching the criteria exists."""
        return self._exists(**criteria)

    def get_by_project(self, project_id: int) -> List[BudgetAllocation]:
        """All allocations of a project, oldest first."""
        return self.session.query(BudgetAllocation).filter(
            BudgetAllocation.project_id == project_id
        ).order_by(BudgetAllocation.created_at, BudgetAllocation.id).all()

    def create(
        self,
        project_id: int,
        name: str,
        amount_cents: int,
        ticket_ref: Optional[str] = None
    ) -> BudgetAllocation:
        allocation = BudgetAllocation(
            project_id=project_id,
            name=name,
            amount_cents=amount_cents,
            ticket_ref=ticket_ref,
        )
        self.add(allocation)
        return allocation
