"""
Cost Ledger Service - Appends costs and moves them through their lifecycle.

Enforces ledger rules:
- Amount is positive and splits add up to it exactly
- Payer and every split participant are project members
- Cost and splits are written in one transaction
- Status moves tentative -> final once, via a conditional update
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewcost.models import Cost, CostSplit
from crewcost.domain.entities import CostEntry, CostStatus, SplitMode
from crewcost.domain.exceptions import (
    CostNotFoundError,
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidTransitionError,
    ValidationError,
)
from crewcost.domain.money import Money
from crewcost.domain.services.access import require_actor, require_member
from crewcost.domain.services.split_calculator import (
    Participant,
    SplitShare,
    compute_splits,
    validate_split_total,
)
from crewcost.infrastructure.repositories import CostRepository, ProjectRepository

logger = logging.getLogger(__name__)


class CostLedgerService:
    """
    Service for the append-only cost ledger of a project.

    Every operation takes the acting user's id; only project members may
    read or write a project's ledger.
    """

    def __init__(self, session: Session):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.cost_repo = CostRepository(session)

    # =========================================================================
    # Writes
    # =========================================================================

    def create_cost(
        self,
        actor_id: Optional[int],
        project_id: int,
        amount: Money,
        category: str,
        cost_date: date,
        description: str,
        mode: SplitMode,
        participants: Sequence[Participant],
        receipt_url: Optional[str] = None,
        status: CostStatus = CostStatus.FINAL,
        payer_id: Optional[int] = None
    ) -> Cost:
        """
        Split a cost between participants and append it to the ledger.

        Raises:
            Any error from compute_splits or append_cost
        """
        require_member(self.project_repo, actor_id, project_id)
        self._require_positive(amount)
        shares = compute_splits(amount, mode, participants)
        return self.append_cost(
            actor_id=actor_id,
            project_id=project_id,
            amount=amount,
            category=category,
            cost_date=cost_date,
            description=description,
            splits=shares,
            receipt_url=receipt_url,
            status=status,
            payer_id=payer_id,
        )

    def append_cost(
        self,
        actor_id: Optional[int],
        project_id: int,
        amount: Money,
        category: str,
        cost_date: date,
        description: str,
        splits: Sequence[SplitShare],
        receipt_url: Optional[str] = None,
        status: CostStatus = CostStatus.FINAL,
        payer_id: Optional[int] = None
    ) -> Cost:
        """
        Persist a cost with pre-computed splits.

        All validation runs before anything is staged, so a failure leaves
        neither the cost nor any split behind.

        Args:
            actor_id: Authenticated user recording the cost
            project_id: Project the cost belongs to
            amount: Cost total in the project currency
            category: Free-text category
            cost_date: Day the cost was incurred
            description: Free-text description
            splits: Shares owed per member; must sum to amount
            receipt_url: Opaque URL from receipt storage
            status: Initial status
            payer_id: Member who paid; defaults to the actor

        Returns:
            The committed cost

        Raises:
            UnauthorizedError, ProjectNotFoundError, NotProjectMemberError
            InvalidAmountError: amount is not positive
            CurrencyMismatchError: amount is not in the project currency
            SplitMismatchError: splits do not add up to amount
            ValidationError: bad category, a member split twice, or a payer or
                participant outside the project
        """
        project, _ = require_member(self.project_repo, actor_id, project_id)
        self._require_positive(amount)
        if amount.currency != project.currency:
            raise CurrencyMismatchError(project.currency, amount.currency)
        if not category or not category.strip():
            raise ValidationError("category", "must not be empty")

        validate_split_total(amount, splits)
        member_ids = self.project_repo.member_ids(project_id)
        payer_id = payer_id if payer_id is not None else actor_id
        if payer_id not in member_ids:
            raise ValidationError("payer_id", f"user {payer_id} is not a member of project {project_id}")
        seen = set()
        for share in splits:
            if share.member_id not in member_ids:
                raise ValidationError("splits", f"user {share.member_id} is not a member of project {project_id}")
            if share.member_id in seen:
                raise ValidationError("splits", "each member may appear only once")
            seen.add(share.member_id)

        split_rows = [
            CostSplit(
                user_id=share.member_id,
                amount_cents=share.amount.cents,
                split_mode=share.mode.value,
            )
            for share in splits
        ]
        try:
            cost = self.cost_repo.create(
                project_id=project_id,
                payer_id=payer_id,
                amount_cents=amount.cents,
                category=category.strip(),
                description=description or "",
                cost_date=cost_date,
                status=status,
                splits=split_rows,
                receipt_url=receipt_url,
            )
            self.cost_repo.commit()
        except SQLAlchemyError:
            self.cost_repo.rollback()
            logger.exception(f"Failed to append cost to project {project_id}")
            raise

        logger.info(
            f"Appended {status.value} cost {cost.id} of {amount.cents} cents "
            f"to project {project_id} with {len(split_rows)} splits"
        )
        return cost

    def finalize_cost(self, actor_id: Optional[int], cost_id: int) -> Cost:
        """
        Move a tentative cost to final.

        Re-finalizing a final cost is an error, not a no-op.

        Raises:
            CostNotFoundError: Cost does not exist
            NotProjectMemberError: Actor is not in the cost's project
            InvalidTransitionError: Cost is already final
        """
        cost = self.get_cost(actor_id, cost_id)

        try:
            updated = self.cost_repo.transition_status(cost_id, CostStatus.TENTATIVE, CostStatus.FINAL)
            self.cost_repo.commit()
        except SQLAlchemyError:
            self.cost_repo.rollback()
            raise

        if not updated:
            raise InvalidTransitionError(cost_id, CostStatus.FINAL.value, CostStatus.FINAL.value)

        logger.info(f"Finalized cost {cost_id} in project {cost.project_id}")
        return cost

    # =========================================================================
    # Reads
    # =========================================================================

    def get_cost(self, actor_id: Optional[int], cost_id: int) -> Cost:
        """Load a cost the actor is allowed to see."""
        require_actor(actor_id)
        cost = self.cost_repo.get_by_id(cost_id)
        if not cost:
            raise CostNotFoundError(cost_id)
        require_member(self.project_repo, actor_id, cost.project_id)
        return cost

    def list_costs(
        self,
        actor_id: Optional[int],
        project_id: int,
        status_filter: Optional[CostStatus] = None
    ) -> List[Cost]:
        """Costs of a project, newest first by date."""
        require_member(self.project_repo, actor_id, project_id)
        return self.cost_repo.get_by_project(project_id, status_filter)

    def snapshot(self, project_id: int, currency: str) -> List[CostEntry]:
        """Immutable view of a project's ledger for aggregation."""
        return [
            to_cost_entry(cost, currency)
            for cost in self.cost_repo.get_by_project(project_id)
        ]

    @staticmethod
    def _require_positive(amount: Money) -> None:
        if not amount.is_positive():
            raise InvalidAmountError(
                f"Cost amount must be greater than zero, got {amount.to_decimal()}"
            )


def to_cost_entry(cost: Cost, currency: str) -> CostEntry:
    return CostEntry(
        id=cost.id,
        amount=Money(cost.amount_cents, currency),
        category=cost.category,
        cost_date=cost.cost_date,
        status=CostStatus(cost.status),
        description=cost.description,
        payer_id=cost.payer_id,
    )
