"""Tests for project, report and user services."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from model import (
    FinancialStatus,
    Milestone,
    MilestoneStatus,
    Objective,
    Quarter,
    ReportState,
    ReportStatus,
    Status,
    StatusType,
    Trend,
)
from service import ProjectService, ReportService, UserService


@pytest.fixture
def reports() -> ReportService:
    return ReportService()


@pytest.fixture
def report(reports):
    return reports.create_report(project_id=uuid.uuid4(), year=2023, quarter=Quarter.Q2)


# =============================================================================
# Projects
# =============================================================================


class TestProjectService:

    def _create(self, **overrides):
        kwargs = dict(
            name="Digital Permits",
            cps_identifier="CPS-0000001",
            description="",
            ministry="Citizens' Services",
            program="Digital Office",
            sponsor_id=uuid.uuid4(),
            manager_id=uuid.uuid4(),
            financial_contact_id=uuid.uuid4(),
            start=date(2022, 5, 15),
            estimated_end=date(2024, 3, 31),
        )
        kwargs.update(overrides)
        return ProjectService().create_project(**kwargs)

    def test_create(self):
        project = self._create()
        assert project.name == "Digital Permits"
        assert project.created_at == project.updated_at

    def test_estimated_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            self._create(estimated_end=date(2021, 1, 1))

    def test_progress_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            self._create(progress=120.0)

    def test_update_returns_new_instance(self):
        project = self._create()
        updated = ProjectService().update_project(project, {"phase": "Build", "progress": 25.0})

        assert updated.phase == "Build"
        assert updated.progress == 25.0
        assert project.phase == ""
        assert updated.id == project.id

    def test_failed_update_leaves_project_untouched(self):
        project = self._create()
        with pytest.raises(ValueError):
            ProjectService().update_project(project, {"estimated_end": date(2020, 1, 1)})
        assert project.estimated_end == date(2024, 3, 31)

    @pytest.mark.parametrize("key", ["id", "created_at", "colour"])
    def test_read_only_or_unknown_fields_rejected(self, key):
        with pytest.raises(ValueError):
            ProjectService().update_project(self._create(), {key: "x"})


# =============================================================================
# Report edits
# =============================================================================


class TestUpdateReport:

    def test_new_report_is_draft(self, report):
        assert report.state == ReportState.DRAFT

    def test_year_must_be_positive(self, reports):
        with pytest.raises(ValueError):
            reports.create_report(project_id=uuid.uuid4(), year=0, quarter=Quarter.Q1)

    def test_move_to_review(self, reports, report):
        reports.update_report(report, state=ReportState.REVIEW, progress=50.0)
        assert report.state == ReportState.REVIEW
        assert report.progress == 50.0

    def test_cannot_set_submitted_directly(self, reports, report):
        with pytest.raises(ValueError):
            reports.update_report(report, state=ReportState.SUBMITTED)

    def test_state_cannot_move_back(self, reports, report):
        reports.update_report(report, state=ReportState.REVIEW)
        with pytest.raises(ValueError):
            reports.update_report(report, state=ReportState.DRAFT)

    def test_invalid_progress_changes_nothing(self, reports, report):
        with pytest.raises(ValueError):
            reports.update_report(report, state=ReportState.REVIEW, progress=-1.0)
        assert report.state == ReportState.DRAFT

    def test_finance_is_replaced(self, reports, report):
        reports.update_report(report, finance=FinancialStatus(budget=10.0, estimated_total_cost=4.0))
        assert report.finance.project_variance == 6.0

    def test_submitted_report_is_read_only(self, reports, report):
        report.state = ReportState.SUBMITTED
        with pytest.raises(ValueError):
            reports.update_report(report, phase="Close")
        with pytest.raises(ValueError):
            reports.add_milestone(report, Milestone(name="Late"))


# =============================================================================
# Report items
# =============================================================================


class TestMilestones:

    def test_add_update_remove(self, reports, report):
        milestone = reports.add_milestone(report, Milestone(name="Design"))
        updated = reports.update_milestone(
            report, milestone.id, {"status": MilestoneStatus.COMPLETED, "progress": 100.0}
        )
        assert report.milestones == [updated]
        assert updated.status == MilestoneStatus.COMPLETED

        reports.remove_milestone(report, milestone.id)
        assert report.milestones == []

    def test_unknown_milestone(self, reports, report):
        with pytest.raises(LookupError):
            reports.update_milestone(report, uuid.uuid4(), {"name": "x"})

    def test_end_before_start_rejected(self, reports, report):
        with pytest.raises(ValueError):
            reports.add_milestone(
                report,
                Milestone(name="Backwards", start=date(2023, 5, 1), estimated_end=date(2023, 4, 1)),
            )

    def test_failed_update_keeps_original(self, reports, report):
        milestone = reports.add_milestone(report, Milestone(name="Design"))
        with pytest.raises(ValueError):
            reports.update_milestone(report, milestone.id, {"progress": 200.0})
        assert report.milestones[0].progress == 0.0


class TestObjectives:

    def test_add_update_remove(self, reports, report):
        objective = reports.add_objective(report, Objective(name="Go live"))
        updated = reports.update_objective(report, objective.id, {"status": Status.RED})
        assert report.objectives[0].status == Status.RED
        assert updated.name == "Go live"

        reports.remove_objective(report, objective.id)
        assert report.objectives == []

    def test_id_cannot_change(self, reports, report):
        objective = reports.add_objective(report, Objective(name="Go live"))
        with pytest.raises(ValueError):
            reports.update_objective(report, objective.id, {"id": uuid.uuid4()})


class TestStatuses:

    def test_duplicate_dimension_rejected(self, reports, report):
        reports.add_status(report, ReportStatus(type=StatusType.BUDGET))
        with pytest.raises(ValueError):
            reports.add_status(report, ReportStatus(type=StatusType.BUDGET))

    def test_update_to_taken_dimension_rejected(self, reports, report):
        reports.add_status(report, ReportStatus(type=StatusType.BUDGET))
        scope = reports.add_status(report, ReportStatus(type=StatusType.SCOPE))
        with pytest.raises(ValueError):
            reports.update_status(report, scope.id, {"type": StatusType.BUDGET})

    def test_update_trend(self, reports, report):
        entry = reports.add_status(report, ReportStatus(type=StatusType.SCHEDULE))
        updated = reports.update_status(report, entry.id, {"trend": Trend.DOWN, "status": Status.YELLOW})
        assert (updated.trend, updated.status) == (Trend.DOWN, Status.YELLOW)

    def test_remove_unknown(self, reports, report):
        with pytest.raises(LookupError):
            reports.remove_status(report, uuid.uuid4())


# =============================================================================
# Users
# =============================================================================


class TestUserService:

    def test_email_is_normalised(self):
        user = UserService().create_user(" Ada ", "Lovelace", " Ada@Gov.BC.ca ")
        assert user.first_name == "Ada"
        assert user.email == "ada@gov.bc.ca"

    def test_names_required(self):
        with pytest.raises(ValueError):
            UserService().create_user("", "Lovelace", "ada@gov.bc.ca")


# =============================================================================
# Null updates and creation-time item checks
# =============================================================================


class TestNullUpdates:

    def test_project_required_field_cannot_be_null(self):
        project = TestProjectService()._create()
        with pytest.raises(ValueError):
            ProjectService().update_project(project, {"progress": None})
        with pytest.raises(ValueError):
            ProjectService().update_project(project, {"name": None})

    def test_project_optional_field_can_be_cleared(self):
        project = TestProjectService()._create(end=date(2024, 6, 30))
        assert ProjectService().update_project(project, {"end": None}).end is None

    @pytest.mark.parametrize("field", ["type", "status", "trend"])
    def test_status_entry_fields_cannot_be_null(self, reports, report, field):
        entry = reports.add_status(report, ReportStatus(type=StatusType.SCOPE))
        with pytest.raises(ValueError):
            reports.update_status(report, entry.id, {field: None})
        assert report.statuses == [entry]

    def test_status_entry_needs_enum_values(self, reports, report):
        with pytest.raises(ValueError):
            reports.add_status(report, ReportStatus(type="budget"))


class TestCreateReportItems:

    def test_duplicate_status_types_rejected(self, reports):
        with pytest.raises(ValueError):
            reports.create_report(
                project_id=uuid.uuid4(),
                year=2023,
                quarter=Quarter.Q1,
                statuses=[ReportStatus(type=StatusType.BUDGET), ReportStatus(type=StatusType.BUDGET)],
            )

    def test_backwards_milestone_rejected(self, reports):
        with pytest.raises(ValueError):
            reports.create_report(
                project_id=uuid.uuid4(),
                year=2023,
                quarter=Quarter.Q1,
                milestones=[
                    Milestone(name="Backwards", start=date(2023, 5, 1), estimated_end=date(2023, 4, 1))
                ],
            )

    def test_milestone_progress_out_of_range_rejected(self, reports):
        with pytest.raises(ValueError):
            reports.check_items([Milestone(name="Over", progress=150.0)], [])
