"""
Cost Entry Entity - Read-only view of a ledger cost.

Implements:
- Immutable value semantics for aggregation input
- Cost status lifecycle (tentative -> final)
- Split mode taxonomy (equal, exact, percentage)
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from crewcost.domain.money import Money


class CostStatus(Enum):
    """Lifecycle state of a cost. Tentative may become final, never the reverse."""
    TENTATIVE = "tentative"
    FINAL = "final"


class SplitMode(Enum):
    """How a cost total is divided between participants."""
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"


class MemberRole(Enum):
    OWNER = "owner"
    MEMBER = "member"


@dataclass(frozen=True)
class CostEntry:
    """
    Immutable snapshot of a cost as seen by reporting.

    Attributes:
        id: Ledger identifier
        amount: Cost total in the project's currency
        category: Free-text category
        cost_date: Calendar day the cost was incurred
        status: Tentative or final
        description: Free-text description
        payer_id: User who paid
    """

    id: int
    amount: Money
    category: str
    cost_date: date
    status: CostStatus
    description: str = ""
    payer_id: Optional[int] = None

    @property
    def is_final(self) -> bool:
        return self.status is CostStatus.FINAL
