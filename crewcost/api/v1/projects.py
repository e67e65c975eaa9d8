"""
Project API Endpoints - Projects, budget cap and membership.

Implements:
- POST /api/v1/projects - Create project (creator becomes owner)
- GET /api/v1/projects - List projects of the current user
- GET /api/v1/projects/{id} - Get project
- PUT /api/v1/projects/{id}/budget - Set or clear budget (owner)
- POST /api/v1/projects/{id}/members - Invite by email (owner)
- GET /api/v1/projects/{id}/members - List members
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from crewcost.config import get_config
from crewcost.models import get_db, User, Project, ProjectMember
from crewcost.domain.exceptions import DomainError
from crewcost.domain.money import Money
from crewcost.domain.services import ProjectService
from crewcost.api.v1.auth import get_current_active_user
from crewcost.api.v1.errors import to_http_exception
from crewcost.api.v1.serializers import MoneyOut, money_in, money_out

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class ProjectCreate(BaseModel):
    """Request model for creating a project."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="ISO currency code")
    budget: Optional[Decimal] = Field(None, description="Budget cap in major units; omit for no cap")


class BudgetUpdate(BaseModel):
    """Request model for the budget cap. null removes the cap."""
    budget: Optional[Decimal] = Field(None, description="New budget in major units")


class InviteRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    currency: str
    owner_id: int
    budget: Optional[MoneyOut]
    created_at: datetime


class MemberResponse(BaseModel):
    user_id: int
    name: Optional[str]
    email: str
    role: str
    joined_at: datetime


def project_response(project: Project) -> ProjectResponse:
    budget = None
    if project.budget_cents is not None:
        budget = Money(project.budget_cents, project.currency)
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        currency=project.currency,
        owner_id=project.owner_id,
        budget=money_out(budget),
        created_at=project.created_at,
    )


def member_response(member: ProjectMember) -> MemberResponse:
    return MemberResponse(
        user_id=member.user_id,
        name=member.user.name,
        email=member.user.email,
        role=member.role,
        joined_at=member.joined_at,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project"
)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    currency = (payload.currency or get_config().default_currency).upper()
    try:
        budget = money_in(payload.budget, currency) if payload.budget is not None else None
        project = ProjectService(db).create_project(
            actor_id=current_user.id,
            name=payload.name,
            currency=currency,
            description=payload.description,
            budget=budget,
        )
    except DomainError as e:
        raise to_http_exception(e)
    return project_response(project)


@router.get("", response_model=List[ProjectResponse], summary="List my projects")
def list_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        projects = ProjectService(db).list_projects(current_user.id)
    except DomainError as e:
        raise to_http_exception(e)
    return [project_response(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse, summary="Get project")
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        return project_response(ProjectService(db).get_project(current_user.id, project_id))
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{project_id}/budget", response_model=ProjectResponse, summary="Set project budget")
def update_budget(
    project_id: int,
    payload: BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    service = ProjectService(db)
    try:
        project = service.get_project(current_user.id, project_id)
        budget = money_in(payload.budget, project.currency) if payload.budget is not None else None
        project = service.update_budget(current_user.id, project_id, budget)
    except DomainError as e:
        raise to_http_exception(e)
    return project_response(project)


@router.post(
    "/{project_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite an existing user"
)
def invite_member(
    project_id: int,
    payload: InviteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        member = ProjectService(db).invite_member(current_user.id, project_id, payload.email)
    except DomainError as e:
        raise to_http_exception(e)
    return member_response(member)


@router.get("/{project_id}/members", response_model=List[MemberResponse], summary="List members")
def list_members(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        members = ProjectService(db).list_members(current_user.id, project_id)
    except DomainError as e:
        raise to_http_exception(e)
    return [member_response(m) for m in members]
