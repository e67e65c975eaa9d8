"""
Cost API Endpoints - The project cost ledger.

Implements:
- POST /api/v1/projects/{id}/costs - Record a cost with its split
- GET /api/v1/projects/{id}/costs - List costs, newest first
- GET /api/v1/costs/{id} - Get cost with splits
- POST /api/v1/costs/{id}/finalize - Move tentative cost to final

The split arrives as a tagged variant keyed by "mode" and is turned into
typed participants before it reaches the split calculator.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Tuple, Union
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from crewcost.models import get_db, User, Cost
from crewcost.domain.entities import CostStatus, SplitMode
from crewcost.domain.exceptions import DomainError
from crewcost.domain.money import Money
from crewcost.domain.services import CostLedgerService, Participant, ProjectService
from crewcost.api.v1.auth import get_current_active_user
from crewcost.api.v1.errors import to_http_exception
from crewcost.api.v1.serializers import MoneyOut, money_in, money_out

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class EqualSplitIn(BaseModel):
    """Divide the total evenly between the listed members."""
    mode: Literal["equal"]
    participants: List[int] = Field(default_factory=list, description="Member user ids")

    def to_participants(self, currency: str) -> List[Participant]:
        return [Participant(member_id=user_id) for user_id in self.participants]


class ExactShareIn(BaseModel):
    user_id: int
    amount: Decimal


class ExactSplitIn(BaseModel):
    """Caller states each member's amount; they must add up to the total."""
    mode: Literal["exact"]
    shares: List[ExactShareIn] = Field(default_factory=list)

    def to_participants(self, currency: str) -> List[Participant]:
        return [
            Participant(member_id=s.user_id, weight=money_in(s.amount, currency))
            for s in self.shares
        ]


class PercentageShareIn(BaseModel):
    user_id: int
    percentage: Decimal


class PercentageSplitIn(BaseModel):
    """Each member owes a percentage of the total; percentages add up to 100."""
    mode: Literal["percentage"]
    shares: List[PercentageShareIn] = Field(default_factory=list)

    def to_participants(self, currency: str) -> List[Participant]:
        return [Participant(member_id=s.user_id, weight=s.percentage) for s in self.shares]


SplitIn = Annotated[
    Union[EqualSplitIn, ExactSplitIn, PercentageSplitIn],
    Field(discriminator="mode")
]


class CostCreate(BaseModel):
    """Request model for recording a cost."""
    amount: Decimal = Field(..., description="Cost total in major units")
    category: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=2000)
    cost_date: date
    status: Literal["tentative", "final"] = "final"
    receipt_url: Optional[str] = Field(None, max_length=2000, description="URL from /receipts upload")
    payer_id: Optional[int] = Field(None, description="Paying member; defaults to the current user")
    split: SplitIn

    def split_request(self, currency: str) -> Tuple[SplitMode, List[Participant]]:
        return SplitMode(self.split.mode), self.split.to_participants(currency)


class SplitResponse(BaseModel):
    user_id: int
    amount: MoneyOut
    split_mode: str


class CostResponse(BaseModel):
    id: int
    project_id: int
    payer_id: int
    amount: MoneyOut
    category: str
    description: str
    cost_date: date
    status: str
    receipt_url: Optional[str]
    created_at: datetime
    splits: List[SplitResponse]


def cost_response(cost: Cost, currency: str) -> CostResponse:
    return CostResponse(
        id=cost.id,
        project_id=cost.project_id,
        payer_id=cost.payer_id,
        amount=money_out(Money(cost.amount_cents, currency)),
        category=cost.category,
        description=cost.description,
        cost_date=cost.cost_date,
        status=cost.status,
        receipt_url=cost.receipt_url,
        created_at=cost.created_at,
        splits=[
            SplitResponse(
                user_id=split.user_id,
                amount=money_out(Money(split.amount_cents, currency)),
                split_mode=split.split_mode,
            )
            for split in cost.splits
        ],
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/projects/{project_id}/costs",
    response_model=CostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a cost",
    description="Splits the cost between members and stores cost and splits together."
)
def create_cost(
    project_id: int,
    payload: CostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        project = ProjectService(db).get_project(current_user.id, project_id)
        mode, participants = payload.split_request(project.currency)
        cost = CostLedgerService(db).create_cost(
            actor_id=current_user.id,
            project_id=project_id,
            amount=money_in(payload.amount, project.currency),
            category=payload.category,
            cost_date=payload.cost_date,
            description=payload.description,
            mode=mode,
            participants=participants,
            receipt_url=payload.receipt_url,
            status=CostStatus(payload.status),
            payer_id=payload.payer_id,
        )
    except DomainError as e:
        raise to_http_exception(e)
    return cost_response(cost, project.currency)


@router.get(
    "/projects/{project_id}/costs",
    response_model=List[CostResponse],
    summary="List project costs"
)
def list_costs(
    project_id: int,
    status_filter: Optional[Literal["tentative", "final"]] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        project = ProjectService(db).get_project(current_user.id, project_id)
        costs = CostLedgerService(db).list_costs(
            current_user.id,
            project_id,
            CostStatus(status_filter) if status_filter else None
        )
    except DomainError as e:
        raise to_http_exception(e)
    return [cost_response(c, project.currency) for c in costs]


@router.get("/costs/{cost_id}", response_model=CostResponse, summary="Get a cost")
def get_cost(
    cost_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        cost = CostLedgerService(db).get_cost(current_user.id, cost_id)
    except DomainError as e:
        raise to_http_exception(e)
    return cost_response(cost, cost.project.currency)


@router.post("/costs/{cost_id}/finalize", response_model=CostResponse, summary="Finalize a tentative cost")
def finalize_cost(
    cost_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        cost = CostLedgerService(db).finalize_cost(current_user.id, cost_id)
    except DomainError as e:
        raise to_http_exception(e)
    return cost_response(cost, cost.project.currency)
