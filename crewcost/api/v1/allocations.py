"""
Allocation API Endpoints - Financial planner line items.

Implements:
- POST /api/v1/projects/{id}/allocations - Add a planned line item
- GET /api/v1/projects/{id}/allocations - List line items
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from crewcost.models import get_db, User, BudgetAllocation
from crewcost.domain.exceptions import DomainError
from crewcost.domain.money import Money
from crewcost.domain.services import AllocationService, ProjectService
from crewcost.api.v1.auth import get_current_active_user
from crewcost.api.v1.errors import to_http_exception
from crewcost.api.v1.serializers import MoneyOut, money_in, money_out

router = APIRouter()


class AllocationCreate(BaseModel):
    """Request model for a budget allocation."""
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., description="Planned amount in major units")
    ticket_ref: Optional[str] = Field(None, max_length=100, description="External ticket id")


class AllocationResponse(BaseModel):
    id: int
    project_id: int
    name: str
    amount: MoneyOut
    ticket_ref: Optional[str]
    created_at: datetime


def allocation_response(allocation: BudgetAllocation, currency: str) -> AllocationResponse:
    return AllocationResponse(
        id=allocation.id,
        project_id=allocation.project_id,
        name=allocation.name,
        amount=money_out(Money(allocation.amount_cents, currency)),
        ticket_ref=allocation.ticket_ref,
        created_at=allocation.created_at,
    )


@router.post(
    "/{project_id}/allocations",
    response_model=AllocationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a budget allocation"
)
def create_allocation(
    project_id: int,
    payload: AllocationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        project = ProjectService(db).get_project(current_user.id, project_id)
        allocation = AllocationService(db).create_allocation(
            actor_id=current_user.id,
            project_id=project_id,
            name=payload.name,
            amount=money_in(payload.amount, project.currency),
            ticket_ref=payload.ticket_ref,
        )
    except DomainError as e:
        raise to_http_exception(e)
    return allocation_response(allocation, project.currency)


@router.get(
    "/{project_id}/allocations",
    response_model=List[AllocationResponse],
    summary="List budget allocations"
)
def list_allocations(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        project = ProjectService(db).get_project(current_user.id, project_id)
        allocations = AllocationService(db).list_allocations(current_user.id, project_id)
    except DomainError as e:
        raise to_http_exception(e)
    return [allocation_response(a, project.currency) for a in allocations]
