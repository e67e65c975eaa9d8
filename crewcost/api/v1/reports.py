"""
Report API Endpoints - Spending and budget overview for a project.

Implements:
- GET /api/v1/projects/{id}/report - Totals, categories, daily series, variance
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from crewcost.models import get_db, User
from crewcost.domain.exceptions import DomainError
from crewcost.domain.services import ReportService
from crewcost.api.v1.auth import get_current_active_user
from crewcost.api.v1.errors import to_http_exception
from crewcost.api.v1.serializers import MoneyOut, money_out

router = APIRouter()


class CategoryTotal(BaseModel):
    category: str
    amount: MoneyOut


class DailyTotal(BaseModel):
    day: date
    final: MoneyOut
    tentative: MoneyOut


class VarianceResponse(BaseModel):
    budget: Optional[MoneyOut]
    allocated: MoneyOut
    remaining: Optional[MoneyOut]
    over_budget: bool
    percent_used: Optional[Decimal]


class SummaryResponse(BaseModel):
    total: MoneyOut
    top_category: Optional[str]
    average_daily: MoneyOut


class ReportResponse(BaseModel):
    project_id: int
    currency: str
    cost_count: int
    total_final: MoneyOut
    total_tentative: MoneyOut
    total_all: MoneyOut
    categories: List[CategoryTotal]
    daily: List[DailyTotal]
    summary: SummaryResponse
    variance: VarianceResponse


@router.get("/{project_id}/report", response_model=ReportResponse, summary="Project report")
def project_report(
    project_id: int,
    window: Optional[int] = Query(None, ge=1, le=366, description="Days in the daily series"),
    top: Optional[int] = Query(None, ge=1, le=100, description="Categories to include"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        report = ReportService(db).project_report(current_user.id, project_id, window, top)
    except DomainError as e:
        raise to_http_exception(e)

    variance = report['variance']
    summary = report['summary']
    return ReportResponse(
        project_id=report['project_id'],
        currency=report['currency'],
        cost_count=report['cost_count'],
        total_final=money_out(report['total_final']),
        total_tentative=money_out(report['total_tentative']),
        total_all=money_out(report['total_all']),
        categories=[
            CategoryTotal(category=name, amount=money_out(amount))
            for name, amount in report['categories']
        ],
        daily=[
            DailyTotal(day=d.day, final=money_out(d.final), tentative=money_out(d.tentative))
            for d in report['daily']
        ],
        summary=SummaryResponse(
            total=money_out(summary.total),
            top_category=summary.top_category,
            average_daily=money_out(summary.average_daily),
        ),
        variance=VarianceResponse(
            budget=money_out(variance.budget),
            allocated=money_out(variance.allocated),
            remaining=money_out(variance.remaining),
            over_budget=variance.over_budget,
            percent_used=variance.percent_used,
        ),
    )
