"""
Split Calculator - Turns one cost total into per-member shares.

Uses integer minor units throughout to avoid floating-point drift.

Rounding policy: rounding leftovers always land at the END of the
participant list.
- Equal: the remainder (total mod n) is handed out one minor unit each
  to the last r participants, so 100.00 / 3 -> [33.33, 33.33, 33.34].
- Percentage: each share is rounded half-up on its own and the drift is
  absorbed by the last participant.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from crewcost.domain.entities import SplitMode
from crewcost.domain.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    NoParticipantsError,
    SplitMismatchError,
    ValidationError,
)
from crewcost.domain.money import Money, multiply_by_ratio, sum_of

HUNDRED = Decimal(100)


@dataclass(frozen=True)
class Participant:
    """
    One member taking part in a split.

    weight is None for equal splits, a Money amount for exact splits and a
    percentage (0-100) for percentage splits.
    """

    member_id: int
    weight: Union[None, Money, Decimal] = None


@dataclass(frozen=True)
class SplitShare:
    """Amount one member owes for a cost."""

    member_id: int
    amount: Money
    mode: SplitMode


def compute_splits(
    total: Money,
    mode: SplitMode,
    participants: Sequence[Participant],
    tolerance: Optional[Decimal] = None
) -> List[SplitShare]:
    """
    Divide a total between participants.

    Args:
        total: Amount to divide (must not be negative)
        mode: Equal, exact or percentage
        participants: Ordered participants with mode-specific weights
        tolerance: Allowed deviation of percentages from 100; defaults to
            the configured splits.percentage_tolerance

    Returns:
        One share per participant, in input order, summing to total exactly

    Raises:
        NoParticipantsError: If participants is empty
        InvalidAmountError: Negative total or weight, or a weight of the wrong kind
        SplitMismatchError: Exact amounts or percentages do not add up
        ValidationError: A member appears more than once
    """
    if not participants:
        raise NoParticipantsError()
    if total.is_negative():
        raise InvalidAmountError(f"Split total cannot be negative: {total.to_decimal()}")

    member_ids = [p.member_id for p in participants]
    if len(set(member_ids)) != len(member_ids):
        raise ValidationError("participants", "each member may appear only once")

    if mode is SplitMode.EQUAL:
        return _split_equal(total, member_ids)
    if mode is SplitMode.EXACT:
        amounts = [_exact_weight(total, p) for p in participants]
        if len(participants) == 1:
            return [SplitShare(member_ids[0], total, mode)]
        return _split_exact(total, member_ids, amounts)
    if mode is SplitMode.PERCENTAGE:
        percentages = [_percentage_weight(p) for p in participants]
        if len(participants) == 1:
            return [SplitShare(member_ids[0], total, mode)]
        if tolerance is None:
            from crewcost.config import get_config
            tolerance = get_config().percentage_tolerance
        return _split_percentage(total, member_ids, percentages, tolerance)
    raise ValidationError("mode", f"unsupported split mode {mode!r}")


def validate_split_total(total: Money, shares: Sequence[SplitShare]) -> None:
    """
    Re-check shares computed elsewhere before they are persisted.

    Raises:
        NoParticipantsError: If there are no shares
        InvalidAmountError: If any share is negative
        CurrencyMismatchError: If a share is in another currency
        SplitMismatchError: If the shares do not sum to total
    """
    if not shares:
        raise NoParticipantsError()
    for share in shares:
        if share.amount.is_negative():
            raise InvalidAmountError(
                f"Share for member {share.member_id} cannot be negative"
            )
    actual = sum_of((s.amount for s in shares), total.currency)
    if actual != total:
        raise SplitMismatchError(str(total.to_decimal()), str(actual.to_decimal()))


def _split_equal(total: Money, member_ids: List[int]) -> List[SplitShare]:
    n = len(member_ids)
    base, remainder = divmod(total.cents, n)
    first_with_extra = n - remainder
    return [
        SplitShare(
            member_id,
            Money(base + (1 if index >= first_with_extra else 0), total.currency),
            SplitMode.EQUAL
        )
        for index, member_id in enumerate(member_ids)
    ]


def _exact_weight(total: Money, participant: Participant) -> Money:
    weight = participant.weight
    if not isinstance(weight, Money):
        raise InvalidAmountError(
            f"Exact split for member {participant.member_id} needs an amount"
        )
    if weight.currency != total.currency:
        raise CurrencyMismatchError(total.currency, weight.currency)
    if weight.is_negative():
        raise InvalidAmountError(
            f"Share for member {participant.member_id} cannot be negative"
        )
    return weight


def _split_exact(total: Money, member_ids: List[int], amounts: List[Money]) -> List[SplitShare]:
    actual = sum_of(amounts, total.currency)
    if actual != total:
        raise SplitMismatchError(str(total.to_decimal()), str(actual.to_decimal()))
    return [
        SplitShare(member_id, amount, SplitMode.EXACT)
        for member_id, amount in zip(member_ids, amounts)
    ]


def _percentage_weight(participant: Participant) -> Decimal:
    weight = participant.weight
    if isinstance(weight, (Money, bool)) or weight is None:
        raise InvalidAmountError(
            f"Percentage split for member {participant.member_id} needs a percentage"
        )
    percentage = weight if isinstance(weight, Decimal) else Decimal(str(weight))
    if percentage < 0 or percentage > HUNDRED:
        raise InvalidAmountError(
            f"Percentage for member {participant.member_id} must be between 0 and 100"
        )
    return percentage


def _split_percentage(
    total: Money,
    member_ids: List[int],
    percentages: List[Decimal],
    tolerance: Decimal
) -> List[SplitShare]:
    percentage_sum = sum(percentages, Decimal(0))
    if abs(percentage_sum - HUNDRED) > tolerance:
        raise SplitMismatchError("100%", f"{percentage_sum}%")

    cents = [multiply_by_ratio(total, pct / HUNDRED).cents for pct in percentages]
    drift = total.cents - sum(cents)

    # Rounding up too often leaves a deficit; take it back from the end
    # of the list without pushing any share below zero.
    index = len(cents) - 1
    while drift < 0 and index >= 0:
        taken = min(-drift, cents[index])
        cents[index] -= taken
        drift += taken
        index -= 1
    cents[-1] += drift

    return [
        SplitShare(member_id, Money(amount, total.currency), SplitMode.PERCENTAGE)
        for member_id, amount in zip(member_ids, cents)
    ]
