"""
application.py

Application layer for the Quarterly Project Report Tracker.

Overview
--------
The application layer sits between the presentation layer (API) and the
domain / service layer.  It is responsible for:

  1. Defining clean output DTOs (dataclasses) that carry only the data
     the presentation layer needs — no raw domain objects are leaked upward.
  2. Declaring abstract Repository interfaces so that the application layer
     remains fully persistence-agnostic (implementations live in infrastructure.py).
  3. Declaring the UnitOfWork abstraction so that multiple repository mutations
     inside a single use case are wrapped in one atomic transaction.
  4. Implementing Use Case handlers — one class per user-facing operation —
     that orchestrate service calls and repository reads/writes.

Structure
---------
DTOs
    UserDTO, ProjectDTO, ReportDTO, SubmissionResultDTO
    MilestoneDTO, ObjectiveDTO, ReportStatusDTO, KpiDTO, FinancialStatusDTO

Repository interfaces
    AbstractUserRepository
    AbstractProjectRepository
    AbstractReportRepository

Unit of Work
    AbstractUnitOfWork

Use Cases
    --- Users ---
    CreateUserUseCase, GetUserUseCase, ListUsersUseCase

    --- Projects ---
    CreateProjectUseCase      (also synthesizes the first report)
    UpdateProjectUseCase, GetProjectUseCase, ListProjectsUseCase
    DeleteProjectUseCase      (cascades to reports)

    --- Reports ---
    CreateReportUseCase, GetReportUseCase, ListReportsUseCase
    UpdateReportUseCase, DeleteReportUseCase
    SubmitReportUseCase, RolloverReportUseCase

    --- Report items ---
    List/Add/Update/Remove Milestone
    List/Add/Update/Remove Objective
    List/Add/Update/Remove Status

Design notes
------------
- Use cases receive commands and return DTOs; no domain objects cross the
  application boundary on the way out.
- Each use case accepts a UnitOfWork as its sole dependency.  The UoW
  exposes all repositories and handles commit/rollback.
- All timestamps flowing out are ISO-8601 strings (UTC) for easy JSON
  serialisation.
- Errors bubble up as ApplicationError subclasses (business) or
  ValueError (validation).
"""

from __future__ import annotations

import abc
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from model import (
    FinancialStatus,
    Kpi,
    Milestone,
    Objective,
    Project,
    Quarter,
    Report,
    ReportState,
    ReportStatus,
    User,
)
from service import (
    ProjectService,
    ReportLifecycleService,
    ReportService,
    UserService,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ApplicationError(Exception):
    """Raised when a use case cannot complete due to a business rule violation."""


class NotFoundError(ApplicationError):
    """Raised when a requested entity does not exist."""


class AuthorizationError(ApplicationError):
    """Raised when the operation needs an authenticated user and has none."""


class ConflictError(ApplicationError):
    """Raised when creating an entity would duplicate an existing one."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _fmt(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO-8601 UTC string, or None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def _fmt_date(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


def _fmt_id(value: Optional[uuid.UUID]) -> Optional[str]:
    return str(value) if value else None


# ===========================================================================
# DTO DEFINITIONS
# ===========================================================================

@dataclass
class UserDTO:
    id: str
    first_name: str
    last_name: str
    email: str
    is_active: bool
    created_at: str


@dataclass
class ProjectDTO:
    id: str
    name: str
    cps_identifier: str
    project_number: str
    description: str
    ministry: str
    program: str
    sponsor_id: Optional[str]
    manager_id: Optional[str]
    financial_contact_id: Optional[str]
    start: Optional[str]
    end: Optional[str]
    estimated_end: Optional[str]
    phase: str
    progress: float
    created_at: str
    updated_at: str


# ---------------------------------------------------------------------------
# Report DTOs
# ---------------------------------------------------------------------------

@dataclass
class MilestoneDTO:
    id: str
    name: str
    description: str
    status: str
    start: Optional[str]
    estimated_end: Optional[str]
    progress: float
    comments: str


@dataclass
class ObjectiveDTO:
    id: str
    name: str
    description: str
    estimated_end: Optional[str]
    status: str
    comments: str


@dataclass
class ReportStatusDTO:
    id: str
    type: str
    status: str
    trend: str
    comments: str


@dataclass
class KpiDTO:
    id: str
    name: str
    description: str
    unit: str
    baseline: float
    target: float
    value: float
    end: Optional[str]
    outcome: bool
    output: bool


@dataclass
class FinancialStatusDTO:
    fy_approved: float
    fy_sitting: float
    jv_to_ocio: float
    current_fy_actuals: float
    fy_forecast: float
    budget: float
    spend_to_end_of_pre_fy: float
    remaining: float
    estimated_total_cost: float
    project_variance: float


@dataclass
class ReportDTO:
    id: str
    project_id: str
    year: int
    quarter: str
    state: str
    phase: str
    progress: float
    estimated_end: Optional[str]
    submitter_id: Optional[str]
    submitted_at: Optional[str]
    milestones: List[MilestoneDTO]
    objectives: List[ObjectiveDTO]
    statuses: List[ReportStatusDTO]
    kpis: List[KpiDTO]
    finance: Optional[FinancialStatusDTO]
    created_at: str
    updated_at: str


@dataclass
class SubmissionResultDTO:
    """
    Outcome of the submit action.

    `action` is "submitted" when the report moved to SUBMITTED and
    "continue_editing" when it is still a DRAFT and must be completed first.
    """
    action: str
    report: ReportDTO


SUBMITTED = "submitted"
CONTINUE_EDITING = "continue_editing"


# ===========================================================================
# DTO ASSEMBLERS
# ===========================================================================

class _Assembler:
    """Converts domain model instances into DTOs."""

    @staticmethod
    def user(u: User) -> UserDTO:
        return UserDTO(
            id=str(u.id),
            first_name=u.first_name,
            last_name=u.last_name,
            email=u.email,
            is_active=u.is_active,
            created_at=_fmt(u.created_at),
        )

    @staticmethod
    def project(p: Project) -> ProjectDTO:
        return ProjectDTO(
            id=str(p.id),
            name=p.name,
            cps_identifier=p.cps_identifier,
            project_number=p.project_number,
            description=p.description,
            ministry=p.ministry,
            program=p.program,
            sponsor_id=_fmt_id(p.sponsor_id),
            manager_id=_fmt_id(p.manager_id),
            financial_contact_id=_fmt_id(p.financial_contact_id),
            start=_fmt_date(p.start),
            end=_fmt_date(p.end),
            estimated_end=_fmt_date(p.estimated_end),
            phase=p.phase,
            progress=round(p.progress, 2),
            created_at=_fmt(p.created_at),
            updated_at=_fmt(p.updated_at),
        )

    @staticmethod
    def milestone(m: Milestone) -> MilestoneDTO:
        return MilestoneDTO(
            id=str(m.id),
            name=m.name,
            description=m.description,
            status=m.status.value,
            start=_fmt_date(m.start),
            estimated_end=_fmt_date(m.estimated_end),
            progress=round(m.progress, 2),
            comments=m.comments,
        )

    @staticmethod
    def objective(o: Objective) -> ObjectiveDTO:
        return ObjectiveDTO(
            id=str(o.id),
            name=o.name,
            description=o.description,
            estimated_end=_fmt_date(o.estimated_end),
            status=o.status.value,
            comments=o.comments,
        )

    @staticmethod
    def status(s: ReportStatus) -> ReportStatusDTO:
        return ReportStatusDTO(
            id=str(s.id),
            type=s.type.value,
            status=s.status.value,
            trend=s.trend.value,
            comments=s.comments,
        )

    @staticmethod
    def kpi(k: Kpi) -> KpiDTO:
        return KpiDTO(
            id=str(k.id),
            name=k.name,
            description=k.description,
            unit=k.unit,
            baseline=k.baseline,
            target=k.target,
            value=k.value,
            end=_fmt_date(k.end),
            outcome=k.outcome,
            output=k.output,
        )

    @staticmethod
    def finance(f: Optional[FinancialStatus]) -> Optional[FinancialStatusDTO]:
        if f is None:
            return None
        return FinancialStatusDTO(
            fy_approved=f.fy_approved,
            fy_sitting=f.fy_sitting,
            jv_to_ocio=f.jv_to_ocio,
            current_fy_actuals=f.current_fy_actuals,
            fy_forecast=f.fy_forecast,
            budget=f.budget,
            spend_to_end_of_pre_fy=f.spend_to_end_of_pre_fy,
            remaining=f.remaining,
            estimated_total_cost=f.estimated_total_cost,
            project_variance=f.project_variance,
        )

    @staticmethod
    def report(r: Report) -> ReportDTO:
        return ReportDTO(
            id=str(r.id),
            project_id=str(r.project_id),
            year=r.year,
            quarter=r.quarter.value,
            state=r.state.value,
            phase=r.phase,
            progress=round(r.progress, 2),
            estimated_end=_fmt_date(r.estimated_end),
            submitter_id=_fmt_id(r.submitter_id),
            submitted_at=_fmt(r.submitted_at),
            milestones=[_Assembler.milestone(m) for m in r.milestones],
            objectives=[_Assembler.objective(o) for o in r.objectives],
            statuses=[_Assembler.status(s) for s in r.statuses],
            kpis=[_Assembler.kpi(k) for k in r.kpis],
            finance=_Assembler.finance(r.finance),
            created_at=_fmt(r.created_at),
            updated_at=_fmt(r.updated_at),
        )


# ===========================================================================
# REPOSITORY INTERFACES
# ===========================================================================

class AbstractUserRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, user_id: uuid.UUID) -> Optional[User]: ...
    @abc.abstractmethod
    def get_by_email(self, email: str) -> Optional[User]: ...
    @abc.abstractmethod
    def list_all(self) -> List[User]: ...
    @abc.abstractmethod
    def save(self, user: User) -> None: ...


class AbstractProjectRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, project_id: uuid.UUID) -> Optional[Project]: ...
    @abc.abstractmethod
    def list_all(self) -> List[Project]: ...
    @abc.abstractmethod
    def save(self, project: Project) -> None: ...
    @abc.abstractmethod
    def delete(self, project_id: uuid.UUID) -> None: ...


class AbstractReportRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, report_id: uuid.UUID) -> Optional[Report]: ...
    @abc.abstractmethod
    def get_for_period(
        self, project_id: uuid.UUID, year: int, quarter: Quarter
    ) -> Optional[Report]: ...
    @abc.abstractmethod
    def list_for_project(
        self,
        project_id: uuid.UUID,
        year: Optional[int] = None,
        quarter: Optional[Quarter] = None,
        state: Optional[ReportState] = None,
    ) -> List[Report]: ...
    @abc.abstractmethod
    def list_all(
        self,
        year: Optional[int] = None,
        quarter: Optional[Quarter] = None,
        state: Optional[ReportState] = None,
    ) -> List[Report]: ...
    @abc.abstractmethod
    def save(self, report: Report) -> None: ...
    @abc.abstractmethod
    def delete(self, report_id: uuid.UUID) -> None: ...


# ===========================================================================
# UNIT OF WORK
# ===========================================================================

class AbstractUnitOfWork(abc.ABC):
    """
    Groups all repositories under a single transactional boundary.
    Use as a context manager:

        with uow:
            uow.reports.save(report)
            uow.commit()
    """
    users: AbstractUserRepository
    projects: AbstractProjectRepository
    reports: AbstractReportRepository

    def __enter__(self) -> "AbstractUnitOfWork":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        else:
            self.commit()

    @abc.abstractmethod
    def commit(self) -> None: ...

    @abc.abstractmethod
    def rollback(self) -> None: ...


# ===========================================================================
# SERVICE SINGLETONS (shared across use cases)
# ===========================================================================

_lifecycle_svc = ReportLifecycleService()
_project_svc = ProjectService()
_report_svc = ReportService()
_user_svc = UserService()


# ===========================================================================
# USE CASE HELPERS
# ===========================================================================

def _get_user_or_raise(uow: AbstractUnitOfWork, user_id: uuid.UUID) -> User:
    user = uow.users.get(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    return user


def _get_project_or_raise(uow: AbstractUnitOfWork, project_id: uuid.UUID) -> Project:
    project = uow.projects.get(project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found.")
    return project


def _get_report_or_raise(uow: AbstractUnitOfWork, report_id: uuid.UUID) -> Report:
    report = uow.reports.get(report_id)
    if report is None:
        raise NotFoundError(f"Report {report_id} not found.")
    return report


def _ensure_period_free(
    uow: AbstractUnitOfWork, project_id: uuid.UUID, year: int, quarter: Quarter
) -> None:
    if uow.reports.get_for_period(project_id, year, quarter) is not None:
        raise ConflictError(
            f"A report for project {project_id} already exists for {year} {quarter.value}."
        )


def _edit_report(uow: AbstractUnitOfWork, report_id: uuid.UUID, edit) -> Any:
    """
    Load a report, apply `edit(report)` through the report service and save.
    Service errors are translated into application errors.
    """
    report = _get_report_or_raise(uow, report_id)
    try:
        result = edit(report)
    except LookupError as exc:
        raise NotFoundError(str(exc)) from exc
    except ValueError as exc:
        raise ApplicationError(str(exc)) from exc
    uow.reports.save(report)
    return result


# ===========================================================================
# USE CASES — USERS
# ===========================================================================

@dataclass
class CreateUserCommand:
    first_name: str
    last_name: str
    email: str


class CreateUserUseCase:
    def execute(self, cmd: CreateUserCommand, uow: AbstractUnitOfWork) -> UserDTO:
        with uow:
            if uow.users.get_by_email(cmd.email.strip().lower()) is not None:
                raise ConflictError(f"A user with email '{cmd.email}' already exists.")
            user = _user_svc.create_user(
                first_name=cmd.first_name,
                last_name=cmd.last_name,
                email=cmd.email,
            )
            uow.users.save(user)
            uow.commit()
            return _Assembler.user(user)


class GetUserUseCase:
    def execute(self, user_id: uuid.UUID, uow: AbstractUnitOfWork) -> UserDTO:
        with uow:
            return _Assembler.user(_get_user_or_raise(uow, user_id))


class ListUsersUseCase:
    def execute(self, uow: AbstractUnitOfWork) -> List[UserDTO]:
        with uow:
            return [_Assembler.user(u) for u in uow.users.list_all()]


# ===========================================================================
# USE CASES — PROJECTS
# ===========================================================================

@dataclass
class CreateProjectCommand:
    name: str
    cps_identifier: str
    description: str
    ministry: str
    program: str
    sponsor_id: uuid.UUID
    manager_id: uuid.UUID
    financial_contact_id: uuid.UUID
    start: date
    estimated_end: date
    end: Optional[date] = None
    project_number: str = ""
    phase: str = ""
    progress: float = 0.0
    milestones: List[Milestone] = field(default_factory=list)
    objectives: List[Objective] = field(default_factory=list)
    kpis: List[Kpi] = field(default_factory=list)


class CreateProjectUseCase:
    """
    Create a project and, in the same unit of work, its first report.
    The first report's period is derived from the project start date.
    """

    def execute(self, cmd: CreateProjectCommand, uow: AbstractUnitOfWork) -> ProjectDTO:
        with uow:
            for user_id in {cmd.sponsor_id, cmd.manager_id, cmd.financial_contact_id}:
                _get_user_or_raise(uow, user_id)

            try:
                project = _project_svc.create_project(
                    name=cmd.name,
                    cps_identifier=cmd.cps_identifier,
                    description=cmd.description,
                    ministry=cmd.ministry,
                    program=cmd.program,
                    sponsor_id=cmd.sponsor_id,
                    manager_id=cmd.manager_id,
                    financial_contact_id=cmd.financial_contact_id,
                    start=cmd.start,
                    estimated_end=cmd.estimated_end,
                    end=cmd.end,
                    project_number=cmd.project_number,
                    phase=cmd.phase,
                    progress=cmd.progress,
                )
                _report_svc.check_items(cmd.milestones, [])
                report = _lifecycle_svc.synthesize_initial_report(
                    project, cmd.milestones, cmd.objectives, cmd.kpis
                )
            except ValueError as exc:
                raise ApplicationError(str(exc)) from exc
            uow.projects.save(project)
            uow.reports.save(report)
            uow.commit()
            logger.info(
                "Project %s created; initial report %s for %d %s",
                project.id, report.id, report.year, report.quarter.value,
            )
            return _Assembler.project(project)


@dataclass
class UpdateProjectCommand:
    project_id: uuid.UUID
    changes: Dict[str, Any]


class UpdateProjectUseCase:
    def execute(self, cmd: UpdateProjectCommand, uow: AbstractUnitOfWork) -> ProjectDTO:
        with uow:
            project = _get_project_or_raise(uow, cmd.project_id)
            for key in ("sponsor_id", "manager_id", "financial_contact_id"):
                if cmd.changes.get(key) is not None:
                    _get_user_or_raise(uow, cmd.changes[key])
            try:
                project = _project_svc.update_project(project, cmd.changes)
            except ValueError as exc:
                raise ApplicationError(str(exc)) from exc
            uow.projects.save(project)
            uow.commit()
            return _Assembler.project(project)


class GetProjectUseCase:
    def execute(self, project_id: uuid.UUID, uow: AbstractUnitOfWork) -> ProjectDTO:
        with uow:
            return _Assembler.project(_get_project_or_raise(uow, project_id))


class ListProjectsUseCase:
    def execute(self, uow: AbstractUnitOfWork) -> List[ProjectDTO]:
        with uow:
            return [_Assembler.project(p) for p in uow.projects.list_all()]


class DeleteProjectUseCase:
    """Delete a project together with every report it owns."""

    def execute(self, project_id: uuid.UUID, uow: AbstractUnitOfWork) -> ProjectDTO:
        with uow:
            project = _get_project_or_raise(uow, project_id)
            reports = uow.reports.list_for_project(project_id)
            for report in reports:
                uow.reports.delete(report.id)
            uow.projects.delete(project_id)
            uow.commit()
            logger.info("Project %s deleted with %d report(s)", project_id, len(reports))
            return _Assembler.project(project)


# ===========================================================================
# USE CASES — REPORTS
# ===========================================================================

@dataclass
class CreateReportCommand:
    project_id: uuid.UUID
    year: int
    quarter: Quarter
    phase: str = ""
    progress: float = 0.0
    estimated_end: Optional[date] = None
    milestones: List[Milestone] = field(default_factory=list)
    objectives: List[Objective] = field(default_factory=list)
    statuses: List[ReportStatus] = field(default_factory=list)
    kpis: List[Kpi] = field(default_factory=list)
    finance: Optional[FinancialStatus] = None


class CreateReportUseCase:
    def execute(self, cmd: CreateReportCommand, uow: AbstractUnitOfWork) -> ReportDTO:
        with uow:
            _get_project_or_raise(uow, cmd.project_id)
            _ensure_period_free(uow, cmd.project_id, cmd.year, cmd.quarter)
            try:
                report = _report_svc.create_report(
                    project_id=cmd.project_id,
                    year=cmd.year,
                    quarter=cmd.quarter,
                    phase=cmd.phase,
                    progress=cmd.progress,
                    estimated_end=cmd.estimated_end,
                    milestones=cmd.milestones,
                    objectives=cmd.objectives,
                    statuses=cmd.statuses,
                    kpis=cmd.kpis,
                    finance=cmd.finance,
                )
            except ValueError as exc:
                raise ApplicationError(str(exc)) from exc
            uow.reports.save(report)
            uow.commit()
            return _Assembler.report(report)


class GetReportUseCase:
    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> ReportDTO:
        with uow:
            return _Assembler.report(_get_report_or_raise(uow, report_id))


class ListReportsUseCase:
    """
    List reports, oldest period first.  Without a project_id the listing
    spans every project (e.g. all SUBMITTED reports awaiting finance review).
    """

    def execute(
        self,
        project_id: Optional[uuid.UUID],
        uow: AbstractUnitOfWork,
        year: Optional[int] = None,
        quarter: Optional[Quarter] = None,
        state: Optional[ReportState] = None,
    ) -> List[ReportDTO]:
        with uow:
            if project_id is None:
                reports = uow.reports.list_all(year=year, quarter=quarter, state=state)
            else:
                reports = uow.reports.list_for_project(
                    project_id, year=year, quarter=quarter, state=state
                )
            ordering = list(Quarter)
            reports.sort(key=lambda r: (r.year, ordering.index(r.quarter)))
            return [_Assembler.report(r) for r in reports]


@dataclass
class UpdateReportCommand:
    report_id: uuid.UUID
    phase: Optional[str] = None
    progress: Optional[float] = None
    estimated_end: Optional[date] = None
    state: Optional[ReportState] = None
    finance: Optional[FinancialStatus] = None


class UpdateReportUseCase:
    def execute(self, cmd: UpdateReportCommand, uow: AbstractUnitOfWork) -> ReportDTO:
        with uow:
            report = _edit_report(
                uow,
                cmd.report_id,
                lambda r: _report_svc.update_report(
                    r,
                    phase=cmd.phase,
                    progress=cmd.progress,
                    estimated_end=cmd.estimated_end,
                    state=cmd.state,
                    finance=cmd.finance,
                ),
            )
            uow.commit()
            return _Assembler.report(report)


class DeleteReportUseCase:
    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> ReportDTO:
        with uow:
            report = _get_report_or_raise(uow, report_id)
            uow.reports.delete(report_id)
            uow.commit()
            return _Assembler.report(report)


@dataclass
class SubmitReportCommand:
    report_id: uuid.UUID
    acting_user_id: Optional[uuid.UUID]
    now: Optional[datetime] = None


class SubmitReportUseCase:
    """
    Submit a report that is in REVIEW.

    A DRAFT report is left untouched and the result tells the caller to
    continue editing it.  Without an authenticated user nothing changes and
    AuthorizationError is raised.
    """

    def execute(self, cmd: SubmitReportCommand, uow: AbstractUnitOfWork) -> SubmissionResultDTO:
        with uow:
            if cmd.acting_user_id is None or uow.users.get(cmd.acting_user_id) is None:
                logger.warning("Rejected submission of report %s: no authenticated user", cmd.report_id)
                raise AuthorizationError("You must be signed in to submit a report.")
            report = _get_report_or_raise(uow, cmd.report_id)
            try:
                submitted = _lifecycle_svc.submit(
                    report, cmd.acting_user_id, cmd.now or _utcnow()
                )
            except PermissionError as exc:
                raise AuthorizationError(str(exc)) from exc
            except ValueError as exc:
                raise ApplicationError(str(exc)) from exc

            if submitted.state != ReportState.SUBMITTED:
                return SubmissionResultDTO(
                    action=CONTINUE_EDITING, report=_Assembler.report(report)
                )
            uow.reports.save(submitted)
            uow.commit()
            logger.info("Report %s submitted by %s", submitted.id, submitted.submitter_id)
            return SubmissionResultDTO(action=SUBMITTED, report=_Assembler.report(submitted))


class RolloverReportUseCase:
    """
    Create next period's DRAFT report from an existing report, carrying its
    content forward as the new baseline.
    """

    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> ReportDTO:
        with uow:
            previous = _get_report_or_raise(uow, report_id)
            draft = _lifecycle_svc.advance_quarter(previous)
            report = _lifecycle_svc.report_from_draft(draft, _utcnow())
            _ensure_period_free(uow, report.project_id, report.year, report.quarter)
            uow.reports.save(report)
            uow.commit()
            logger.info(
                "Report %s rolled over to %s (%d %s)",
                previous.id, report.id, report.year, report.quarter.value,
            )
            return _Assembler.report(report)


# ===========================================================================
# USE CASES — MILESTONES
# ===========================================================================

class ListMilestonesUseCase:
    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> List[MilestoneDTO]:
        with uow:
            report = _get_report_or_raise(uow, report_id)
            return [_Assembler.milestone(m) for m in report.milestones]


@dataclass
class AddMilestoneCommand:
    report_id: uuid.UUID
    milestone: Milestone


class AddMilestoneUseCase:
    def execute(self, cmd: AddMilestoneCommand, uow: AbstractUnitOfWork) -> MilestoneDTO:
        with uow:
            milestone = _edit_report(
                uow, cmd.report_id, lambda r: _report_svc.add_milestone(r, cmd.milestone)
            )
            uow.commit()
            return _Assembler.milestone(milestone)


@dataclass
class UpdateMilestoneCommand:
    report_id: uuid.UUID
    milestone_id: uuid.UUID
    changes: Dict[str, Any]


class UpdateMilestoneUseCase:
    def execute(self, cmd: UpdateMilestoneCommand, uow: AbstractUnitOfWork) -> MilestoneDTO:
        with uow:
            milestone = _edit_report(
                uow,
                cmd.report_id,
                lambda r: _report_svc.update_milestone(r, cmd.milestone_id, cmd.changes),
            )
            uow.commit()
            return _Assembler.milestone(milestone)


class RemoveMilestoneUseCase:
    def execute(
        self, report_id: uuid.UUID, milestone_id: uuid.UUID, uow: AbstractUnitOfWork
    ) -> None:
        with uow:
            _edit_report(uow, report_id, lambda r: _report_svc.remove_milestone(r, milestone_id))
            uow.commit()


# ===========================================================================
# USE CASES — OBJECTIVES
# ===========================================================================

class ListObjectivesUseCase:
    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> List[ObjectiveDTO]:
        with uow:
            report = _get_report_or_raise(uow, report_id)
            return [_Assembler.objective(o) for o in report.objectives]


@dataclass
class AddObjectiveCommand:
    report_id: uuid.UUID
    objective: Objective


class AddObjectiveUseCase:
    def execute(self, cmd: AddObjectiveCommand, uow: AbstractUnitOfWork) -> ObjectiveDTO:
        with uow:
            objective = _edit_report(
                uow, cmd.report_id, lambda r: _report_svc.add_objective(r, cmd.objective)
            )
            uow.commit()
            return _Assembler.objective(objective)


@dataclass
class UpdateObjectiveCommand:
    report_id: uuid.UUID
    objective_id: uuid.UUID
    changes: Dict[str, Any]


class UpdateObjectiveUseCase:
    def execute(self, cmd: UpdateObjectiveCommand, uow: AbstractUnitOfWork) -> ObjectiveDTO:
        with uow:
            objective = _edit_report(
                uow,
                cmd.report_id,
                lambda r: _report_svc.update_objective(r, cmd.objective_id, cmd.changes),
            )
            uow.commit()
            return _Assembler.objective(objective)


class RemoveObjectiveUseCase:
    def execute(
        self, report_id: uuid.UUID, objective_id: uuid.UUID, uow: AbstractUnitOfWork
    ) -> None:
        with uow:
            _edit_report(uow, report_id, lambda r: _report_svc.remove_objective(r, objective_id))
            uow.commit()


# ===========================================================================
# USE CASES — STATUS ENTRIES
# ===========================================================================

class ListStatusesUseCase:
    def execute(self, report_id: uuid.UUID, uow: AbstractUnitOfWork) -> List[ReportStatusDTO]:
        with uow:
            report = _get_report_or_raise(uow, report_id)
            return [_Assembler.status(s) for s in report.statuses]


@dataclass
class AddStatusCommand:
    report_id: uuid.UUID
    entry: ReportStatus


class AddStatusUseCase:
    def execute(self, cmd: AddStatusCommand, uow: AbstractUnitOfWork) -> ReportStatusDTO:
        with uow:
            entry = _edit_report(
                uow, cmd.report_id, lambda r: _report_svc.add_status(r, cmd.entry)
            )
            uow.commit()
            return _Assembler.status(entry)


@dataclass
class UpdateStatusCommand:
    report_id: uuid.UUID
    status_id: uuid.UUID
    changes: Dict[str, Any]


class UpdateStatusUseCase:
    def execute(self, cmd: UpdateStatusCommand, uow: AbstractUnitOfWork) -> ReportStatusDTO:
        with uow:
            entry = _edit_report(
                uow,
                cmd.report_id,
                lambda r: _report_svc.update_status(r, cmd.status_id, cmd.changes),
            )
            uow.commit()
            return _Assembler.status(entry)


class RemoveStatusUseCase:
    def execute(
        self, report_id: uuid.UUID, status_id: uuid.UUID, uow: AbstractUnitOfWork
    ) -> None:
        with uow:
            _edit_report(uow, report_id, lambda r: _report_svc.remove_status(r, status_id))
            uow.commit()
