"""
Report Service - Assembles a project's spending and budget report.

Loads a ledger snapshot and the allocation list, then hands them to
the pure budget aggregator functions.
"""
from typing import Dict, Optional

from sqlalchemy.orm import Session

from crewcost.config import get_config
from crewcost.domain.entities import CostStatus
from crewcost.domain.money import Money
from crewcost.domain.services import budget_aggregator
from crewcost.domain.services.access import require_member
from crewcost.domain.services.cost_ledger_service import CostLedgerService
from crewcost.infrastructure.repositories import AllocationRepository, ProjectRepository


class ReportService:
    """
    Service for project reporting.

    Ensures figures are always derived from the current ledger:
    - total_final = Σ(Cost.amount | status = final)
    - allocated = Σ(BudgetAllocation.amount)
    - remaining = budget - allocated
    """

    def __init__(self, session: Session):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.allocation_repo = AllocationRepository(session)
        self.ledger = CostLedgerService(session)

    def project_report(
        self,
        actor_id: Optional[int],
        project_id: int,
        window_size: Optional[int] = None,
        top_n: Optional[int] = None
    ) -> Dict:
        """
        Build the report for a project.

        Args:
            actor_id: Requesting member
            project_id: Project identifier
            window_size: Days in the daily series (defaults to config)
            top_n: Categories to keep (defaults to config)

        Returns:
            Dict of Money-valued figures keyed for the API layer
        """
        project, _ = require_member(self.project_repo, actor_id, project_id)
        config = get_config()
        window_size = config.daily_window if window_size is None else window_size
        top_n = config.top_categories if top_n is None else top_n
        currency = project.currency

        costs = self.ledger.snapshot(project_id, currency)
        allocations = [
            Money(a.amount_cents, currency)
            for a in self.allocation_repo.get_by_project(project_id)
        ]
        budget = Money(project.budget_cents, currency) if project.budget_cents is not None else None

        return {
            'project_id': project.id,
            'currency': currency,
            'total_final': budget_aggregator.total_spent(costs, currency, CostStatus.FINAL),
            'total_tentative': budget_aggregator.total_spent(costs, currency, CostStatus.TENTATIVE),
            'total_all': budget_aggregator.total_spent(costs, currency, None),
            'categories': budget_aggregator.category_breakdown(costs, currency, top_n),
            'daily': budget_aggregator.daily_series(costs, currency, window_size),
            'summary': budget_aggregator.spending_summary(costs, currency, window_size),
            'variance': budget_aggregator.budget_variance(budget, allocations, currency),
            'cost_count': len(costs),
        }
