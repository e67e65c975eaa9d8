"""
Tests for the project report assembled from the ledger and planner.
"""
import pytest
from datetime import date
from decimal import Decimal

from crewcost.domain.entities import CostStatus, SplitMode
from crewcost.domain.exceptions import NotProjectMemberError
from crewcost.domain.money import Money
from crewcost.domain.services import (
    AllocationService, CostLedgerService, Participant, ProjectService, ReportService
)


def usd(cents):
    return Money(cents, "USD")


def add_cost(db, actor, project, cents, category, day, status=CostStatus.FINAL):
    return CostLedgerService(db).create_cost(
        actor_id=actor.id, project_id=project.id, amount=usd(cents), category=category,
        cost_date=day, description="", mode=SplitMode.EQUAL,
        participants=[Participant(actor.id)], status=status,
    )


class TestProjectReport:

    def test_budget_scenario(self, db, project, alice, bob):
        allocations = AllocationService(db)
        allocations.create_allocation(alice.id, project.id, "Catering", usd(40000))
        allocations.create_allocation(bob.id, project.id, "Transport", usd(30000))

        report = ReportService(db).project_report(alice.id, project.id)
        variance = report['variance']
        assert variance.budget == usd(100000)
        assert variance.allocated == usd(70000)
        assert variance.remaining == usd(30000)
        assert variance.over_budget is False

        allocations.create_allocation(alice.id, project.id, "Lighting", usd(40000))
        variance = ReportService(db).project_report(alice.id, project.id)['variance']
        assert variance.remaining == usd(-10000)
        assert variance.over_budget is True
        assert variance.percent_used == Decimal("110.00")

    def test_totals_follow_finalization(self, db, project, alice):
        cost = add_cost(db, alice, project, 2500, "Food", date(2026, 3, 1), CostStatus.TENTATIVE)
        add_cost(db, alice, project, 7500, "Travel", date(2026, 3, 2))

        report = ReportService(db).project_report(alice.id, project.id)
        assert report['total_final'] == usd(7500)
        assert report['total_tentative'] == usd(2500)
        assert report['total_all'] == usd(10000)
        assert report['cost_count'] == 2

        CostLedgerService(db).finalize_cost(alice.id, cost.id)
        report = ReportService(db).project_report(alice.id, project.id)
        assert report['total_final'] == usd(10000)
        assert report['total_tentative'] == usd(0)
        assert report['categories'] == [("Travel", usd(7500)), ("Food", usd(2500))]

    def test_window_and_top_n(self, db, project, alice):
        for day, category in [(1, "A"), (2, "B"), (3, "C"), (4, "D")]:
            add_cost(db, alice, project, 100 * day, category, date(2026, 3, day))

        report = ReportService(db).project_report(alice.id, project.id, window_size=2, top_n=1)
        assert [d.day for d in report['daily']] == [date(2026, 3, 3), date(2026, 3, 4)]
        assert report['categories'] == [("D", usd(400))]
        assert report['summary'].top_category == "D"

    def test_no_budget(self, db, alice):
        project = ProjectService(db).create_project(alice.id, "Open", "USD")
        variance = ReportService(db).project_report(alice.id, project.id)['variance']
        assert variance.budget is None
        assert variance.remaining is None

    def test_outsider(self, db, project, outsider):
        with pytest.raises(NotProjectMemberError):
            ReportService(db).project_report(outsider.id, project.id)
