"""
Budget Aggregator - Rolls ledger costs up into reporting figures.

Pure functions over snapshots of a project's costs and allocations:
- Totals by status
- Category breakdown of final spend
- Daily final/tentative series
- Budget vs. allocated variance

Totals are always computed on read; nothing here touches the database
or the clock.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from crewcost.domain.entities import CostEntry, CostStatus
from crewcost.domain.exceptions import CurrencyMismatchError, ValidationError
from crewcost.domain.money import Money, add, subtract, sum_of


@dataclass(frozen=True)
class DailyTotals:
    """Final and tentative spend recorded on one calendar day."""

    day: date
    final: Money
    tentative: Money


@dataclass(frozen=True)
class BudgetVariance:
    """
    Planned budget against allocated line items.

    remaining and percent_used are None when the project has no budget cap.
    """

    budget: Optional[Money]
    allocated: Money
    remaining: Optional[Money]
    over_budget: bool
    percent_used: Optional[Decimal]


@dataclass(frozen=True)
class SpendingSummary:
    total: Money
    top_category: Optional[str]
    average_daily: Money


def _day_of(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def _checked(cost: CostEntry, currency: str) -> Money:
    if cost.amount.currency != currency:
        raise CurrencyMismatchError(currency, cost.amount.currency)
    return cost.amount


def total_spent(
    costs: Iterable[CostEntry],
    currency: str,
    status_filter: Optional[CostStatus] = CostStatus.FINAL
) -> Money:
    """
    Sum cost amounts with the given status.

    Args:
        costs: Ledger snapshot
        currency: Project currency
        status_filter: Status to include; None includes every status
    """
    return sum_of(
        (_checked(c, currency) for c in costs
         if status_filter is None or c.status is status_filter),
        currency
    )


def category_breakdown(
    costs: Iterable[CostEntry],
    currency: str,
    top_n: Optional[int] = None
) -> List[Tuple[str, Money]]:
    """
    Final spend per category, largest first.

    Ties are ordered by category name so the output is deterministic.
    """
    by_category: Dict[str, Money] = {}
    for cost in costs:
        if not cost.is_final:
            continue
        current = by_category.get(cost.category, Money.zero(currency))
        by_category[cost.category] = add(current, _checked(cost, currency))

    ranked = sorted(by_category.items(), key=lambda item: (-item[1].cents, item[0]))
    if top_n is not None:
        ranked = ranked[:top_n]
    return ranked


def daily_series(
    costs: Iterable[CostEntry],
    currency: str,
    window_size: int
) -> List[DailyTotals]:
    """
    Final and tentative totals per day, oldest first.

    Only days with at least one cost appear; the most recent window_size
    of those days are returned.
    """
    if window_size < 0:
        raise ValidationError("window_size", "must not be negative")

    final_cents = defaultdict(int)
    tentative_cents = defaultdict(int)
    days = set()
    for cost in costs:
        day = _day_of(cost.cost_date)
        days.add(day)
        amount = _checked(cost, currency)
        if cost.is_final:
            final_cents[day] += amount.cents
        else:
            tentative_cents[day] += amount.cents

    recent = sorted(days)[-window_size:] if window_size else []
    return [
        DailyTotals(
            day=day,
            final=Money(final_cents[day], currency),
            tentative=Money(tentative_cents[day], currency)
        )
        for day in recent
    ]


def budget_variance(
    budget: Optional[Money],
    allocations: Sequence[Money],
    currency: str
) -> BudgetVariance:
    """
    Compare the project budget with its allocations.

    Args:
        budget: Project budget, or None for "no cap"
        allocations: Planned line item amounts
        currency: Project currency

    Returns:
        BudgetVariance with allocated, remaining and over_budget
    """
    allocated = sum_of(allocations, currency)
    if budget is None:
        return BudgetVariance(
            budget=None,
            allocated=allocated,
            remaining=None,
            over_budget=False,
            percent_used=None
        )

    remaining = subtract(budget, allocated)
    percent_used = None
    if budget.cents > 0:
        percent_used = (Decimal(allocated.cents) * 100 / Decimal(budget.cents)).quantize(Decimal("0.01"))
    return BudgetVariance(
        budget=budget,
        allocated=allocated,
        remaining=remaining,
        over_budget=remaining.is_negative(),
        percent_used=percent_used
    )


def spending_summary(
    costs: Sequence[CostEntry],
    currency: str,
    window_size: int
) -> SpendingSummary:
    """Headline figures: final total, top category, average per active day."""
    total = total_spent(costs, currency)
    categories = category_breakdown(costs, currency, top_n=1)
    series = daily_series(costs, currency, window_size)

    average = Money.zero(currency)
    if series:
        average = Money(
            int((Decimal(total.cents) / len(series)).to_integral_value(rounding=ROUND_HALF_UP)),
            currency
        )
    return SpendingSummary(
        total=total,
        top_category=categories[0][0] if categories else None,
        average_daily=average
    )
