"""Use-case tests against the in-memory unit of work."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

import pytest

from application import (
    CONTINUE_EDITING,
    SUBMITTED,
    AddMilestoneCommand,
    AddMilestoneUseCase,
    AddStatusCommand,
    AddStatusUseCase,
    ApplicationError,
    AuthorizationError,
    ConflictError,
    CreateProjectCommand,
    CreateProjectUseCase,
    CreateReportCommand,
    CreateReportUseCase,
    CreateUserCommand,
    CreateUserUseCase,
    DeleteProjectUseCase,
    GetReportUseCase,
    ListReportsUseCase,
    NotFoundError,
    RemoveMilestoneUseCase,
    RolloverReportUseCase,
    SubmitReportCommand,
    SubmitReportUseCase,
    UpdateMilestoneCommand,
    UpdateMilestoneUseCase,
    UpdateProjectCommand,
    UpdateProjectUseCase,
    UpdateReportCommand,
    UpdateReportUseCase,
)
from model import Milestone, Quarter, ReportState, ReportStatus, StatusType


def _create_project(uow, people, start=date(2022, 5, 15), **overrides):
    kwargs = dict(
        name="Digital Permits",
        cps_identifier="CPS-0000001",
        description="",
        ministry="Citizens' Services",
        program="Digital Office",
        sponsor_id=uuid.UUID(people["sponsor"].id),
        manager_id=uuid.UUID(people["manager"].id),
        financial_contact_id=uuid.UUID(people["finance"].id),
        start=start,
        estimated_end=date(2024, 3, 31),
        milestones=[Milestone(name="Design")],
    )
    kwargs.update(overrides)
    return CreateProjectUseCase().execute(CreateProjectCommand(**kwargs), uow)


def _only_report(uow, project_id):
    reports = ListReportsUseCase().execute(uuid.UUID(project_id), uow)
    assert len(reports) == 1
    return reports[0]


# =============================================================================
# Users
# =============================================================================


class TestUsers:

    def test_duplicate_email_conflicts(self, uow, people):
        with pytest.raises(ConflictError):
            CreateUserUseCase().execute(
                CreateUserCommand(first_name="Other", last_name="Person", email="SPONSOR@gov.bc.ca"),
                uow,
            )


# =============================================================================
# Projects
# =============================================================================


class TestProjects:

    def test_create_synthesizes_initial_report(self, uow, people):
        project = _create_project(uow, people)
        report = _only_report(uow, project.id)

        assert (report.year, report.quarter, report.state) == (2022, "Q2", "draft")
        assert report.submitter_id == people["manager"].id
        assert len(report.statuses) == 5
        assert [m.name for m in report.milestones] == ["Design"]

    def test_unknown_user_is_not_found(self, uow, people):
        with pytest.raises(NotFoundError):
            _create_project(uow, people, sponsor_id=uuid.uuid4())
        assert uow.projects.list_all() == []

    def test_invalid_initial_milestone_creates_nothing(self, uow, people):
        backwards = Milestone(name="Backwards", start=date(2023, 5, 1), estimated_end=date(2023, 4, 1))
        with pytest.raises(ApplicationError):
            _create_project(uow, people, milestones=[backwards])
        assert uow.projects.list_all() == []
        assert uow.reports.list_all() == []

    def test_update(self, uow, people):
        project = _create_project(uow, people)
        updated = UpdateProjectUseCase().execute(
            UpdateProjectCommand(project_id=uuid.UUID(project.id), changes={"phase": "Build"}), uow
        )
        assert updated.phase == "Build"

    def test_invalid_update_is_application_error(self, uow, people):
        project = _create_project(uow, people)
        with pytest.raises(ApplicationError):
            UpdateProjectUseCase().execute(
                UpdateProjectCommand(
                    project_id=uuid.UUID(project.id),
                    changes={"estimated_end": date(2000, 1, 1)},
                ),
                uow,
            )

    def test_delete_cascades_to_reports(self, uow, people):
        project = _create_project(uow, people)
        other = _create_project(uow, people, name="Licensing Portal")
        report = _only_report(uow, project.id)

        DeleteProjectUseCase().execute(uuid.UUID(project.id), uow)

        with pytest.raises(NotFoundError):
            GetReportUseCase().execute(uuid.UUID(report.id), uow)
        assert len(ListReportsUseCase().execute(uuid.UUID(other.id), uow)) == 1


# =============================================================================
# Reports
# =============================================================================


class TestReports:

    def test_duplicate_period_conflicts(self, uow, people):
        project = _create_project(uow, people)
        with pytest.raises(ConflictError):
            CreateReportUseCase().execute(
                CreateReportCommand(project_id=uuid.UUID(project.id), year=2022, quarter=Quarter.Q2),
                uow,
            )

    def test_unknown_project(self, uow):
        with pytest.raises(NotFoundError):
            CreateReportUseCase().execute(
                CreateReportCommand(project_id=uuid.uuid4(), year=2022, quarter=Quarter.Q1), uow
            )

    def test_list_is_ordered_and_filterable(self, uow, people):
        project = _create_project(uow, people, start=date(2022, 11, 1))
        pid = uuid.UUID(project.id)
        for year, quarter in ((2022, Quarter.Q3B), (2021, Quarter.Q1), (2022, Quarter.Q1)):
            CreateReportUseCase().execute(
                CreateReportCommand(project_id=pid, year=year, quarter=quarter), uow
            )

        listed = ListReportsUseCase().execute(pid, uow)
        assert [(r.year, r.quarter) for r in listed] == [
            (2021, "Q1"), (2022, "Q1"), (2022, "Q3b"), (2022, "Q4"),
        ]
        only_2022 = ListReportsUseCase().execute(pid, uow, year=2022, quarter=Quarter.Q1)
        assert [(r.year, r.quarter) for r in only_2022] == [(2022, "Q1")]

    def test_backwards_state_is_application_error(self, uow, people):
        report = _only_report(uow, _create_project(uow, people).id)
        rid = uuid.UUID(report.id)
        UpdateReportUseCase().execute(UpdateReportCommand(report_id=rid, state=ReportState.REVIEW), uow)
        with pytest.raises(ApplicationError):
            UpdateReportUseCase().execute(
                UpdateReportCommand(report_id=rid, state=ReportState.DRAFT), uow
            )


# =============================================================================
# Submit
# =============================================================================


class TestSubmit:

    NOW = datetime(2023, 7, 4, 9, 30, tzinfo=timezone.utc)

    def _review_report(self, uow, people):
        report = _only_report(uow, _create_project(uow, people).id)
        rid = uuid.UUID(report.id)
        UpdateReportUseCase().execute(UpdateReportCommand(report_id=rid, state=ReportState.REVIEW), uow)
        return rid

    def test_review_report_is_submitted(self, uow, people):
        rid = self._review_report(uow, people)
        user_id = uuid.UUID(people["sponsor"].id)

        result = SubmitReportUseCase().execute(
            SubmitReportCommand(report_id=rid, acting_user_id=user_id, now=self.NOW), uow
        )

        assert result.action == SUBMITTED
        assert result.report.state == "submitted"
        assert result.report.submitter_id == str(user_id)
        assert result.report.submitted_at == self.NOW.isoformat()
        assert uow.reports.get(rid).state == ReportState.SUBMITTED

    def test_draft_report_continues_editing(self, uow, people):
        report = _only_report(uow, _create_project(uow, people).id)
        result = SubmitReportUseCase().execute(
            SubmitReportCommand(
                report_id=uuid.UUID(report.id), acting_user_id=uuid.UUID(people["manager"].id)
            ),
            uow,
        )
        assert result.action == CONTINUE_EDITING
        assert result.report.state == "draft"
        assert result.report.submitted_at is None

    @pytest.mark.parametrize("acting_user_id", [None, uuid.uuid4()])
    def test_without_known_user_is_forbidden(self, uow, people, acting_user_id):
        rid = self._review_report(uow, people)
        with pytest.raises(AuthorizationError):
            SubmitReportUseCase().execute(
                SubmitReportCommand(report_id=rid, acting_user_id=acting_user_id), uow
            )
        assert uow.reports.get(rid).state == ReportState.REVIEW

    def test_resubmission_is_application_error(self, uow, people):
        rid = self._review_report(uow, people)
        cmd = SubmitReportCommand(report_id=rid, acting_user_id=uuid.UUID(people["sponsor"].id))
        SubmitReportUseCase().execute(cmd, uow)
        with pytest.raises(ApplicationError):
            SubmitReportUseCase().execute(cmd, uow)

    def test_submitted_report_rejects_item_edits(self, uow, people):
        rid = self._review_report(uow, people)
        SubmitReportUseCase().execute(
            SubmitReportCommand(report_id=rid, acting_user_id=uuid.UUID(people["sponsor"].id)), uow
        )
        with pytest.raises(ApplicationError):
            AddMilestoneUseCase().execute(
                AddMilestoneCommand(report_id=rid, milestone=Milestone(name="Late")), uow
            )


# =============================================================================
# Rollover
# =============================================================================


class TestRollover:

    def test_creates_next_draft_with_fresh_items(self, uow, people):
        original = _only_report(uow, _create_project(uow, people).id)

        rolled = RolloverReportUseCase().execute(uuid.UUID(original.id), uow)

        assert (rolled.year, rolled.quarter, rolled.state) == (2022, "Q3a", "draft")
        assert rolled.id != original.id
        assert rolled.submitter_id is None
        assert [m.name for m in rolled.milestones] == ["Design"]
        assert rolled.milestones[0].id != original.milestones[0].id
        assert len(rolled.statuses) == 5

    def test_rolling_over_twice_conflicts(self, uow, people):
        original = _only_report(uow, _create_project(uow, people).id)
        RolloverReportUseCase().execute(uuid.UUID(original.id), uow)
        with pytest.raises(ConflictError):
            RolloverReportUseCase().execute(uuid.UUID(original.id), uow)

    def test_rolled_report_is_independent(self, uow, people):
        original = _only_report(uow, _create_project(uow, people).id)
        rolled = RolloverReportUseCase().execute(uuid.UUID(original.id), uow)

        RemoveMilestoneUseCase().execute(
            uuid.UUID(rolled.id), uuid.UUID(rolled.milestones[0].id), uow
        )

        assert len(GetReportUseCase().execute(uuid.UUID(original.id), uow).milestones) == 1


# =============================================================================
# Report items
# =============================================================================


class TestItems:

    def test_unknown_milestone_is_not_found(self, uow, people):
        report = _only_report(uow, _create_project(uow, people).id)
        with pytest.raises(NotFoundError):
            UpdateMilestoneUseCase().execute(
                UpdateMilestoneCommand(
                    report_id=uuid.UUID(report.id), milestone_id=uuid.uuid4(), changes={"name": "x"}
                ),
                uow,
            )

    def test_duplicate_status_dimension(self, uow, people):
        report = _only_report(uow, _create_project(uow, people).id)
        with pytest.raises(ApplicationError):
            AddStatusUseCase().execute(
                AddStatusCommand(report_id=uuid.UUID(report.id), entry=ReportStatus(type=StatusType.SCOPE)),
                uow,
            )
