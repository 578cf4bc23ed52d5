"""
model.py

Domain models for the Quarterly Project Report Tracker.

Entities
--------
- User
- Project
- Report
- Milestone
- Objective
- ReportStatus
- Kpi
- FinancialStatus

All models use Python dataclasses for clean, framework-agnostic definitions.
UUID primary keys are used throughout for portability.
Timestamps are always stored in UTC.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Quarter(str, Enum):
    """
    Fiscal reporting period.

    The fiscal year has five periods: the third quarter is split into two
    sub-periods, Q3a and Q3b.
    """
    Q1 = "Q1"
    Q2 = "Q2"
    Q3A = "Q3a"
    Q3B = "Q3b"
    Q4 = "Q4"


class ReportState(str, Enum):
    """Lifecycle state of a report.  Declaration order is lifecycle order."""
    DRAFT = "draft"
    REVIEW = "review"
    SUBMITTED = "submitted"

    @property
    def rank(self) -> int:
        return list(ReportState).index(self)


class Status(str, Enum):
    """Traffic-light health indicator."""
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Trend(str, Enum):
    UP = "up"
    STEADY = "steady"
    DOWN = "down"


class StatusType(str, Enum):
    """Dimensions a report is rated on.  Every report carries one entry per dimension."""
    OVERALL = "overall"
    SCOPE = "scope"
    BUDGET = "budget"
    SCHEDULE = "schedule"
    OTHER = "other"


class MilestoneStatus(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    COMPLETED = "completed"
    NOT_STARTED = "not_started"


# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------


@dataclass
class User:
    """
    A person known to the system.

    Users are referenced by projects (sponsor, manager, financial contact)
    and by reports (submitter).
    """
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


@dataclass
class Project:
    """
    A government project whose progress is reported every fiscal quarter.

    Deleting a project deletes all of its reports.
    """
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = ""
    cps_identifier: str = ""
    project_number: str = ""
    description: str = ""
    ministry: str = ""
    program: str = ""

    sponsor_id: Optional[uuid.UUID] = None             # FK → User.id
    manager_id: Optional[uuid.UUID] = None             # FK → User.id
    financial_contact_id: Optional[uuid.UUID] = None   # FK → User.id

    start: Optional[date] = None
    end: Optional[date] = None
    estimated_end: Optional[date] = None

    phase: str = ""
    progress: float = 0.0       # 0.0 – 100.0

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Report-owned items
# ---------------------------------------------------------------------------


@dataclass
class Milestone:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = ""
    description: str = ""
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    start: Optional[date] = None
    estimated_end: Optional[date] = None
    progress: float = 0.0
    comments: str = ""


@dataclass
class Objective:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = ""
    description: str = ""
    estimated_end: Optional[date] = None
    status: Status = Status.GREEN
    comments: str = ""


@dataclass
class ReportStatus:
    """Health rating of one dimension (scope, budget, ...) of a report."""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    type: StatusType = StatusType.OVERALL
    status: Status = Status.GREEN
    trend: Trend = Trend.STEADY
    comments: str = ""


@dataclass
class Kpi:
    """
    Key performance indicator tracked against a baseline and a target.

    `outcome` / `output` flag whether the indicator measures a programme
    outcome or a direct deliverable.
    """
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = ""
    description: str = ""
    unit: str = ""
    baseline: float = 0.0
    target: float = 0.0
    value: float = 0.0
    end: Optional[date] = None
    outcome: bool = False
    output: bool = False


@dataclass
class FinancialStatus:
    """Financial figures entered for a reporting period (all in dollars)."""
    fy_approved: float = 0.0
    fy_sitting: float = 0.0
    jv_to_ocio: float = 0.0
    current_fy_actuals: float = 0.0
    fy_forecast: float = 0.0
    budget: float = 0.0
    spend_to_end_of_pre_fy: float = 0.0
    remaining: float = 0.0
    estimated_total_cost: float = 0.0

    @property
    def project_variance(self) -> float:
        """Variance to budget; negative when the project is over budget."""
        return self.budget - self.estimated_total_cost


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class Report:
    """
    The status report of one project for one fiscal year and quarter.

    At most one report exists per (project_id, year, quarter); this is
    enforced at the application layer.  A report is never modified once it
    reaches SUBMITTED.
    """
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    project_id: uuid.UUID = field(default_factory=uuid.uuid4)   # FK → Project.id
    year: int = 0
    quarter: Quarter = Quarter.Q1
    state: ReportState = ReportState.DRAFT

    phase: str = ""
    progress: float = 0.0       # 0.0 – 100.0
    estimated_end: Optional[date] = None

    submitter_id: Optional[uuid.UUID] = None   # FK → User.id
    submitted_at: Optional[datetime] = None

    milestones: List[Milestone] = field(default_factory=list)
    objectives: List[Objective] = field(default_factory=list)
    statuses: List[ReportStatus] = field(default_factory=list)
    kpis: List[Kpi] = field(default_factory=list)
    finance: Optional[FinancialStatus] = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
