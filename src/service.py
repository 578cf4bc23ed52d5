"""
service.py

Service layer for the Quarterly Project Report Tracker.

Responsibilities
----------------
Each service class encapsulates all business logic for its domain.
Services receive and return domain model instances (from model.py).
No persistence is handled here — callers are responsible for storing
and retrieving models via a repository layer of their choosing.

Services
--------
- ReportLifecycleService  – Initial report synthesis, quarter rollover,
                            and the submission transition
- ProjectService          – Project creation and updates
- ReportService           – Report edits and owned-item management
                            (milestones, objectives, status entries)
- UserService             – User registration

Design notes
------------
- UTC datetimes are used throughout; callers must pass tz-aware values.
- Business rule violations raise a ValueError with a descriptive message.
- A missing acting user raises PermissionError.
- ReportLifecycleService never mutates its inputs and never reads the
  clock; the caller supplies "now".
"""

from __future__ import annotations

import dataclasses
import uuid
from datetime import date, datetime, timezone
from typing import (
    Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, TypeVar, get_args, get_type_hints,
)

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
    Status,
    StatusType,
    Trend,
    User,
)

# A Report-shaped mapping with every identity field removed.
ReportDraft = Dict[str, Any]

_Item = TypeVar("_Item", Milestone, Objective, ReportStatus)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_progress(progress: float) -> None:
    if not (0.0 <= progress <= 100.0):
        raise ValueError("progress must be between 0 and 100.")


def _check_not_before(start: Optional[date], end: Optional[date], end_name: str) -> None:
    if start and end and end < start:
        raise ValueError(f"{end_name} must not be before start.")


def _find_index(items: List[_Item], item_id: uuid.UUID, label: str) -> int:
    """Return the position of the item with the given id, or raise LookupError."""
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise LookupError(f"{label} {item_id} not found.")


def _nullable_fields(item: Any) -> FrozenSet[str]:
    """Names of the dataclass fields annotated as Optional[...]."""
    hints = get_type_hints(type(item))
    return frozenset(
        name for name, hint in hints.items() if type(None) in get_args(hint)
    )


def _merged(item: Any, changes: Dict[str, Any], read_only: FrozenSet[str] = frozenset({"id"})) -> Any:
    """
    Return a copy of a dataclass instance with `changes` applied.
    Only fields annotated Optional may be cleared with None.
    """
    writable = {f.name for f in dataclasses.fields(item)} - read_only
    unknown = set(changes) - writable
    if unknown:
        raise ValueError(f"Unknown or read-only fields: {sorted(unknown)}.")
    cleared = {k for k, v in changes.items() if v is None} - _nullable_fields(item)
    if cleared:
        raise ValueError(f"Fields cannot be null: {sorted(cleared)}.")
    return dataclasses.replace(item, **changes)


# ---------------------------------------------------------------------------
# Quarter arithmetic
# ---------------------------------------------------------------------------

# Successor of each quarter within the same fiscal year.  Q4 is deliberately
# absent: it and any unrecognised value take the year-end wraparound below.
NEXT_QUARTER: Dict[Quarter, Quarter] = {
    Quarter.Q1: Quarter.Q2,
    Quarter.Q2: Quarter.Q3A,
    Quarter.Q3A: Quarter.Q3B,
    Quarter.Q3B: Quarter.Q4,
}

WRAPAROUND_QUARTER = Quarter.Q1

# Zero-based start month → first reporting quarter.  Q3b is only reachable
# through rollover, never as a starting quarter.
_INITIAL_QUARTER_BY_MONTH: Dict[int, Quarter] = {
    **{m: Quarter.Q2 for m in (3, 4, 5)},
    **{m: Quarter.Q3A for m in (6, 7, 8)},
    **{m: Quarter.Q4 for m in (9, 10, 11)},
}


def next_quarter(quarter: Any, year: int) -> Tuple[Quarter, int]:
    """
    Return the (quarter, year) that follows the given period.

    Q1 → Q2 → Q3a → Q3b → Q4 → Q1 of the next year.  Anything that is not
    Q1, Q2, Q3a or Q3b (Q4 included) wraps to Q1 of the next year.
    """
    try:
        successor = NEXT_QUARTER.get(Quarter(quarter))
    except ValueError:
        successor = None
    if successor is None:
        return WRAPAROUND_QUARTER, year + 1
    return successor, year


def initial_quarter(start: date) -> Quarter:
    """First reporting quarter for a project starting on `start`."""
    return _INITIAL_QUARTER_BY_MONTH.get(start.month - 1, Quarter.Q1)


def strip_fields(tree: Any, fields: FrozenSet[str]) -> Any:
    """
    Return a copy of a nested mapping/list tree with every key in `fields`
    removed at every depth.  The input is left untouched.
    """
    if isinstance(tree, dict):
        return {
            key: strip_fields(value, fields)
            for key, value in tree.items()
            if key not in fields
        }
    if isinstance(tree, (list, tuple)):
        return [strip_fields(value, fields) for value in tree]
    return tree


# ---------------------------------------------------------------------------
# ReportLifecycleService
# ---------------------------------------------------------------------------

class ReportLifecycleService:
    """
    Pure transformations that create reports and move them through their
    lifecycle:

        DRAFT ──(move to review)──▶ REVIEW ──(submit)──▶ SUBMITTED
    """

    # Fields that only make sense for a stored report.
    PERSISTENCE_FIELDS: FrozenSet[str] = frozenset(
        {"id", "submitter_id", "submitted_at", "created_at", "updated_at"}
    )
    # Identity of owned items (milestones, objectives, statuses, kpis).
    IDENTITY_FIELDS: FrozenSet[str] = frozenset({"id"})

    def synthesize_initial_report(
        self,
        project: Project,
        milestones: Sequence[Milestone],
        objectives: Sequence[Objective],
        kpis: Sequence[Kpi],
    ) -> Report:
        """
        Build the first report of a newly created project (unsaved).

        The reporting period is derived from the project's start date.
        Every status dimension starts GREEN / STEADY.
        """
        if project.start is None or project.estimated_end is None:
            raise ValueError(
                "A project needs both start and estimated_end to synthesize its first report."
            )
        statuses = [
            ReportStatus(type=dimension, status=Status.GREEN, trend=Trend.STEADY, comments="")
            for dimension in StatusType
        ]
        return Report(
            project_id=project.id,
            year=project.start.year,
            quarter=initial_quarter(project.start),
            state=ReportState.DRAFT,
            phase="",
            progress=0.0,
            estimated_end=project.estimated_end,
            submitter_id=project.manager_id,
            milestones=list(milestones),
            objectives=list(objectives),
            statuses=statuses,
            kpis=list(kpis),
            created_at=project.created_at,
            updated_at=project.created_at,
        )

    def advance_quarter(self, previous: Report) -> ReportDraft:
        """
        Derive next period's report from `previous`.

        The current content (milestones, objectives, statuses, kpis, finance)
        is carried forward as the new baseline, stripped of every identifier
        so it can be stored as fresh data.  The state is reset to DRAFT.
        """
        tree = dataclasses.asdict(previous)
        draft = {k: v for k, v in tree.items() if k not in self.PERSISTENCE_FIELDS}
        draft = strip_fields(draft, self.IDENTITY_FIELDS)
        draft["quarter"], draft["year"] = next_quarter(previous.quarter, previous.year)
        draft["state"] = ReportState.DRAFT
        return draft

    def report_from_draft(self, draft: ReportDraft, now: datetime) -> Report:
        """Materialise a draft into a new Report with fresh identifiers."""
        finance = draft.get("finance")
        return Report(
            project_id=draft["project_id"],
            year=draft["year"],
            quarter=Quarter(draft["quarter"]),
            state=ReportState(draft["state"]),
            phase=draft.get("phase", ""),
            progress=draft.get("progress", 0.0),
            estimated_end=draft.get("estimated_end"),
            milestones=[Milestone(**m) for m in draft.get("milestones", [])],
            objectives=[Objective(**o) for o in draft.get("objectives", [])],
            statuses=[ReportStatus(**s) for s in draft.get("statuses", [])],
            kpis=[Kpi(**k) for k in draft.get("kpis", [])],
            finance=FinancialStatus(**finance) if finance else None,
            created_at=now,
            updated_at=now,
        )

    def submit(
        self,
        report: Report,
        acting_user_id: Optional[uuid.UUID],
        now: datetime,
    ) -> Report:
        """
        Submit a report that is in REVIEW.

        - No acting user → PermissionError; nothing changes.
        - DRAFT → returned unchanged; the report still needs editing.
        - SUBMITTED → ValueError; submission is terminal.
        """
        if acting_user_id is None:
            raise PermissionError("An authenticated user is required to submit a report.")
        if report.state == ReportState.SUBMITTED:
            raise ValueError(f"Report {report.id} has already been submitted.")
        if report.state != ReportState.REVIEW:
            return report
        return dataclasses.replace(
            report,
            state=ReportState.SUBMITTED,
            submitter_id=acting_user_id,
            submitted_at=now,
            updated_at=now,
        )


# ---------------------------------------------------------------------------
# ProjectService
# ---------------------------------------------------------------------------

class ProjectService:
    """
    Manages project creation and updates.
    """

    def create_project(
        self,
        name: str,
        cps_identifier: str,
        description: str,
        ministry: str,
        program: str,
        sponsor_id: uuid.UUID,
        manager_id: uuid.UUID,
        financial_contact_id: uuid.UUID,
        start: date,
        estimated_end: date,
        end: Optional[date] = None,
        project_number: str = "",
        phase: str = "",
        progress: float = 0.0,
    ) -> Project:
        """Create and return a new Project instance (unsaved)."""
        _check_not_before(start, estimated_end, "estimated_end")
        _check_not_before(start, end, "end")
        _check_progress(progress)
        now = _utcnow()
        return Project(
            name=name,
            cps_identifier=cps_identifier,
            project_number=project_number,
            description=description,
            ministry=ministry,
            program=program,
            sponsor_id=sponsor_id,
            manager_id=manager_id,
            financial_contact_id=financial_contact_id,
            start=start,
            end=end,
            estimated_end=estimated_end,
            phase=phase,
            progress=progress,
            created_at=now,
            updated_at=now,
        )

    def update_project(self, project: Project, changes: Dict[str, Any]) -> Project:
        """
        Return the project with field-level updates applied.  The original
        instance is left untouched if any rule fails.
        """
        updated = _merged(project, changes, frozenset({"id", "created_at", "updated_at"}))
        _check_not_before(updated.start, updated.estimated_end, "estimated_end")
        _check_not_before(updated.start, updated.end, "end")
        _check_progress(updated.progress)
        updated.updated_at = _utcnow()
        return updated


# ---------------------------------------------------------------------------
# ReportService
# ---------------------------------------------------------------------------

class ReportService:
    """
    Manages report edits and the items a report owns.

    A SUBMITTED report is read-only.  The state may only move forward, and
    only the submit transition may set SUBMITTED.
    """

    def create_report(
        self,
        project_id: uuid.UUID,
        year: int,
        quarter: Quarter,
        phase: str = "",
        progress: float = 0.0,
        estimated_end: Optional[date] = None,
        milestones: Optional[List[Milestone]] = None,
        objectives: Optional[List[Objective]] = None,
        statuses: Optional[List[ReportStatus]] = None,
        kpis: Optional[List[Kpi]] = None,
        finance: Optional[FinancialStatus] = None,
    ) -> Report:
        """Create and return a new DRAFT Report (unsaved)."""
        if year < 1:
            raise ValueError("year must be a positive integer.")
        _check_progress(progress)
        self.check_items(milestones or [], statuses or [])
        now = _utcnow()
        return Report(
            project_id=project_id,
            year=year,
            quarter=quarter,
            state=ReportState.DRAFT,
            phase=phase,
            progress=progress,
            estimated_end=estimated_end,
            milestones=list(milestones or []),
            objectives=list(objectives or []),
            statuses=list(statuses or []),
            kpis=list(kpis or []),
            finance=finance,
            created_at=now,
            updated_at=now,
        )

    def update_report(
        self,
        report: Report,
        phase: Optional[str] = None,
        progress: Optional[float] = None,
        estimated_end: Optional[date] = None,
        state: Optional[ReportState] = None,
        finance: Optional[FinancialStatus] = None,
    ) -> Report:
        """Apply field-level updates to an editable report."""
        self._require_editable(report)
        if state is not None:
            if state == ReportState.SUBMITTED:
                raise ValueError("Use the submit action to submit a report.")
            if state.rank < report.state.rank:
                raise ValueError(
                    f"Report state cannot move back from {report.state.value} to {state.value}."
                )
        if progress is not None:
            _check_progress(progress)

        if state is not None:
            report.state = state
        if progress is not None:
            report.progress = progress
        if phase is not None:
            report.phase = phase
        if estimated_end is not None:
            report.estimated_end = estimated_end
        if finance is not None:
            report.finance = finance
        report.updated_at = _utcnow()
        return report

    # --- Milestones ---------------------------------------------------------

    def add_milestone(self, report: Report, milestone: Milestone) -> Milestone:
        self._require_editable(report)
        self._check_milestone(milestone)
        report.milestones.append(milestone)
        report.updated_at = _utcnow()
        return milestone

    def update_milestone(
        self, report: Report, milestone_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Milestone:
        self._require_editable(report)
        index = _find_index(report.milestones, milestone_id, "Milestone")
        milestone = _merged(report.milestones[index], changes)
        self._check_milestone(milestone)
        report.milestones[index] = milestone
        report.updated_at = _utcnow()
        return milestone

    def remove_milestone(self, report: Report, milestone_id: uuid.UUID) -> Milestone:
        self._require_editable(report)
        index = _find_index(report.milestones, milestone_id, "Milestone")
        report.updated_at = _utcnow()
        return report.milestones.pop(index)

    @staticmethod
    def _check_milestone(milestone: Milestone) -> None:
        _check_progress(milestone.progress)
        _check_not_before(milestone.start, milestone.estimated_end, "estimated_end")

    # --- Objectives ---------------------------------------------------------

    def add_objective(self, report: Report, objective: Objective) -> Objective:
        self._require_editable(report)
        report.objectives.append(objective)
        report.updated_at = _utcnow()
        return objective

    def update_objective(
        self, report: Report, objective_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Objective:
        self._require_editable(report)
        index = _find_index(report.objectives, objective_id, "Objective")
        objective = _merged(report.objectives[index], changes)
        report.objectives[index] = objective
        report.updated_at = _utcnow()
        return objective

    def remove_objective(self, report: Report, objective_id: uuid.UUID) -> Objective:
        self._require_editable(report)
        index = _find_index(report.objectives, objective_id, "Objective")
        report.updated_at = _utcnow()
        return report.objectives.pop(index)

    # --- Status entries -----------------------------------------------------

    def add_status(self, report: Report, entry: ReportStatus) -> ReportStatus:
        """Add a status entry.  Each dimension may appear at most once."""
        self._require_editable(report)
        self._check_status(entry)
        if any(s.type == entry.type for s in report.statuses):
            raise ValueError(f"Report already has a '{entry.type.value}' status entry.")
        report.statuses.append(entry)
        report.updated_at = _utcnow()
        return entry

    def update_status(
        self, report: Report, status_id: uuid.UUID, changes: Dict[str, Any]
    ) -> ReportStatus:
        self._require_editable(report)
        index = _find_index(report.statuses, status_id, "Status entry")
        entry = _merged(report.statuses[index], changes)
        self._check_status(entry)
        if any(s.type == entry.type and s.id != entry.id for s in report.statuses):
            raise ValueError(f"Report already has a '{entry.type.value}' status entry.")
        report.statuses[index] = entry
        report.updated_at = _utcnow()
        return entry

    def remove_status(self, report: Report, status_id: uuid.UUID) -> ReportStatus:
        self._require_editable(report)
        index = _find_index(report.statuses, status_id, "Status entry")
        report.updated_at = _utcnow()
        return report.statuses.pop(index)

    @staticmethod
    def _check_status(entry: ReportStatus) -> None:
        for value, enum_cls in (
            (entry.type, StatusType),
            (entry.status, Status),
            (entry.trend, Trend),
        ):
            if not isinstance(value, enum_cls):
                raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}.")

    # --- Guards -------------------------------------------------------------

    def check_items(
        self, milestones: Sequence[Milestone], statuses: Sequence[ReportStatus]
    ) -> None:
        """Validate the items a new report is created with."""
        for milestone in milestones:
            self._check_milestone(milestone)
        seen = set()
        for entry in statuses:
            self._check_status(entry)
            if entry.type in seen:
                raise ValueError(f"Duplicate '{entry.type.value}' status entry.")
            seen.add(entry.type)

    @staticmethod
    def _require_editable(report: Report) -> None:
        if report.state == ReportState.SUBMITTED:
            raise ValueError(f"Report {report.id} has been submitted and can no longer be changed.")


# ---------------------------------------------------------------------------
# UserService
# ---------------------------------------------------------------------------

class UserService:

    def create_user(self, first_name: str, last_name: str, email: str) -> User:
        """Create and return a new User (unsaved)."""
        if not first_name.strip() or not last_name.strip():
            raise ValueError("Both first_name and last_name are required.")
        return User(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip().lower(),
            is_active=True,
            created_at=_utcnow(),
        )
