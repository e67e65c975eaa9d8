"""
Cost Repository - Data access layer for the cost ledger.

Implements repository pattern for Cost operations with:
- Cost + split creation in one unit of work
- Conditional status transition
- Newest-first listing
"""
from datetime import date
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session, selectinload

from crewcost.models import Cost, CostSplit
from crewcost.domain.entities import CostStatus
from .base_repository import BaseRepository


class CostRepository(BaseRepository[Cost]):
    """
    Repository for Cost entities.

    Costs are append-only: the only mutation is the one-way
    tentative -> final status transition.
    """

    def __init__(self, session: Session):
        super().__init__(session, Cost)

    def exists(self, **criteria) -> bool:
        """Check if a Cost matching the criteria exists."""
        return self._exists(**criteria)

    def create(
        self,
        project_id: int,
        payer_id: int,
        amount_cents: int,
        category: str,
        description: str,
        cost_date: date,
        status: CostStatus,
        splits: Sequence[CostSplit],
        receipt_url: Optional[str] = None
    ) -> Cost:
        """
        Stage a cost and its splits in the session.

        The caller commits; cost and splits become visible together.
        """
        cost = Cost(
            project_id=project_id,
            payer_id=payer_id,
            amount_cents=amount_cents,
            category=category,
            description=description,
            cost_date=cost_date,
            status=status.value,
            receipt_url=receipt_url,
        )
        cost.splits.extend(splits)
        self.add(cost)
        return cost

    def get_by_project(
        self,
        project_id: int,
        status: Optional[CostStatus] = None
    ) -> List[Cost]:
        """
        Get costs for a project, newest first by cost date.

        Args:
            project_id: Project identifier
            status: Optional status filter
        """
        query = self.session.query(Cost).options(
            selectinload(Cost.splits)
        ).filter(Cost.project_id == project_id)

        if status is not None:
            query = query.filter(Cost.status == status.value)

        return query.order_by(
            Cost.cost_date.desc(), Cost.created_at.desc(), Cost.id.desc()
        ).all()

    def transition_status(self, cost_id: int, from_status: CostStatus, to_status: CostStatus) -> bool:
        """
        Move a cost between statuses only if it is currently in from_status.

        Runs as a single conditional UPDATE so concurrent callers cannot
        both succeed.

        Returns:
            True if the row was updated
        """
        count = self.session.query(Cost).filter(
            Cost.id == cost_id,
            Cost.status == from_status.value
        ).update({'status': to_status.value}, synchronize_session=False)
        return count == 1
