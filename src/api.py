"""
api.py

REST API layer for the Quarterly Project Report Tracker.

Framework : FastAPI
Auth      : Bearer token — the token is the acting user's UUID, resolved by
            the get_current_user_id dependency.  Only the submit action
            requires it; the real token-verification logic (JWT / cookie)
            belongs in infrastructure.

Structure
---------
  Routers (all prefixed under /api/v1)
  ├── /users                               — user registration
  ├── /projects                            — project CRUD (create also
  │                                          synthesizes the first report)
  └── /reports                             — report CRUD
      ├── /{report_id}/submit              — REVIEW → SUBMITTED
      ├── /{report_id}/rollover            — next quarter's draft
      ├── /{report_id}/milestones          — milestone CRUD
      ├── /{report_id}/objectives          — objective CRUD
      └── /{report_id}/statuses            — status entry CRUD

Error handling
--------------
  NotFoundError      → 404
  AuthorizationError → 403
  ConflictError      → 409
  ApplicationError   → 422
  ValueError         → 422
  Unhandled          → 500 (FastAPI default)

Response envelope
-----------------
  Success  : { "data": <payload> }
  Error    : { "detail": "<message>" }

Running
-------
  uvicorn api:app --reload
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi_mcp import FastApiMCP
from pydantic import BaseModel, EmailStr, Field, field_validator

from config import get_settings
from infrastructure import InMemoryUnitOfWork
from application import (
    # Exceptions
    ApplicationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    # Commands
    CreateProjectCommand,
    CreateReportCommand,
    SubmitReportCommand,
    UpdateProjectCommand,
    UpdateReportCommand,
    # Use cases
    CreateProjectUseCase,
    CreateReportUseCase,
    SubmitReportUseCase,
    AbstractUnitOfWork,
)
from model import (
    FinancialStatus,
    Kpi,
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

logger = logging.getLogger(__name__)
settings = get_settings()


# ===========================================================================
# OPENAPI CUSTOMISATION — tag order and descriptions
# ===========================================================================

tags_metadata = [
    {
        "name": "Health",
        "description": "Liveness probe.",
    },
    {
        "name": "Users",
        "description": (
            "People referenced by projects (sponsor, manager, financial contact) "
            "and by submitted reports."
        ),
    },
    {
        "name": "Projects",
        "description": (
            "Project management.  Creating a project also creates its first "
            "quarterly report, dated from the project start.  Deleting a project "
            "deletes its reports."
        ),
    },
    {
        "name": "Reports",
        "description": (
            "Quarterly status reports.  A report moves DRAFT → REVIEW → SUBMITTED; "
            "a submitted report is read-only.  Rollover creates the next quarter's "
            "draft from an existing report."
        ),
    },
    {
        "name": "Milestones",
        "description": "Milestones tracked inside a report.",
    },
    {
        "name": "Objectives",
        "description": "Business objectives tracked inside a report.",
    },
    {
        "name": "Report Statuses",
        "description": (
            "Health of each report dimension (overall, scope, budget, schedule, "
            "other), with a trend."
        ),
    },
]


# ---------------------------------------------------------------------------
# App bootstrap
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.app_title,
    version="1.0.0",
    description=(
        "REST API for government project status reporting: projects, quarterly "
        "reports, milestones, objectives, status dimensions, submission and "
        "quarter rollover."
    ),
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------

@app.exception_handler(NotFoundError)
async def not_found_handler(request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def authorization_handler(request, exc: AuthorizationError):
    logger.warning("403 on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    logger.debug("422 on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)


def get_uow() -> AbstractUnitOfWork:
    """Returns the in-memory Unit of Work (no database required)."""
    return InMemoryUnitOfWork()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[uuid.UUID]:
    """
    Resolve the bearer token to a user UUID.  Returns None when the request
    is anonymous or the token is malformed; use cases decide whether that
    is acceptable.
    """
    if credentials is None:
        return None
    try:
        return uuid.UUID(credentials.credentials)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Envelope helper
# ---------------------------------------------------------------------------

def _ok(data: Any) -> Dict:
    """Wrap a DTO or list of DTOs in the standard success envelope."""
    if dataclasses.is_dataclass(data):
        return {"data": dataclasses.asdict(data)}
    if isinstance(data, list):
        return {
            "data": [
                dataclasses.asdict(item) if dataclasses.is_dataclass(item) else item
                for item in data
            ]
        }
    return {"data": data}


def _one_of(enum_cls, value: str) -> str:
    valid = {member.value for member in enum_cls}
    if value not in valid:
        raise ValueError(f"must be one of: {sorted(valid)}")
    return value


# ===========================================================================
# REQUEST BODY SCHEMAS  (Pydantic v2)
# ===========================================================================

# ---------------------------------------------------------------------------
# User schemas
# ---------------------------------------------------------------------------

class CreateUserRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


# ---------------------------------------------------------------------------
# Report item schemas
# ---------------------------------------------------------------------------

class MilestoneRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    status: str = Field(
        default=MilestoneStatus.NOT_STARTED.value,
        description="One of: green, yellow, red, completed, not_started",
    )
    start: Optional[date] = None
    estimated_end: Optional[date] = None
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    comments: str = Field(default="")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _one_of(MilestoneStatus, v)

    def to_domain(self) -> Milestone:
        return Milestone(**{**self.model_dump(), "status": MilestoneStatus(self.status)})


class UpdateMilestoneRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = None
    start: Optional[date] = None
    estimated_end: Optional[date] = None
    progress: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    comments: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(MilestoneStatus, v)

    def changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True)
        if changes.get("status") is not None:
            changes["status"] = MilestoneStatus(changes["status"])
        return changes


class ObjectiveRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    estimated_end: Optional[date] = None
    status: str = Field(default=Status.GREEN.value, description="One of: green, yellow, red")
    comments: str = Field(default="")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _one_of(Status, v)

    def to_domain(self) -> Objective:
        return Objective(**{**self.model_dump(), "status": Status(self.status)})


class UpdateObjectiveRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    estimated_end: Optional[date] = None
    status: Optional[str] = None
    comments: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(Status, v)

    def changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True)
        if changes.get("status") is not None:
            changes["status"] = Status(changes["status"])
        return changes


class ReportStatusRequest(BaseModel):
    type: str = Field(..., description="One of: overall, scope, budget, schedule, other")
    status: str = Field(default=Status.GREEN.value)
    trend: str = Field(default=Trend.STEADY.value, description="One of: up, steady, down")
    comments: str = Field(default="")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _one_of(StatusType, v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _one_of(Status, v)

    @field_validator("trend")
    @classmethod
    def validate_trend(cls, v: str) -> str:
        return _one_of(Trend, v)

    def to_domain(self) -> ReportStatus:
        return ReportStatus(
            type=StatusType(self.type),
            status=Status(self.status),
            trend=Trend(self.trend),
            comments=self.comments,
        )


class UpdateReportStatusRequest(BaseModel):
    type: Optional[str] = None
    status: Optional[str] = None
    trend: Optional[str] = None
    comments: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(StatusType, v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(Status, v)

    @field_validator("trend")
    @classmethod
    def validate_trend(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(Trend, v)

    def changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True)
        for key, enum_cls in (("type", StatusType), ("status", Status), ("trend", Trend)):
            if changes.get(key) is not None:
                changes[key] = enum_cls(changes[key])
        return changes


class KpiRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    unit: str = Field(default="")
    baseline: float = 0.0
    target: float = 0.0
    value: float = 0.0
    end: Optional[date] = None
    outcome: bool = False
    output: bool = False

    def to_domain(self) -> Kpi:
        return Kpi(**self.model_dump())


class FinancialStatusRequest(BaseModel):
    fy_approved: float = 0.0
    fy_sitting: float = 0.0
    jv_to_ocio: float = 0.0
    current_fy_actuals: float = 0.0
    fy_forecast: float = 0.0
    budget: float = 0.0
    spend_to_end_of_pre_fy: float = 0.0
    remaining: float = 0.0
    estimated_total_cost: float = 0.0

    def to_domain(self) -> FinancialStatus:
        return FinancialStatus(**self.model_dump())


# ---------------------------------------------------------------------------
# Project schemas
# ---------------------------------------------------------------------------

class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=8, max_length=50)
    cps_identifier: str = Field(..., min_length=11, max_length=11)
    project_number: str = Field(default="")
    description: str = Field(default="")
    ministry: str = Field(..., min_length=6)
    program: str = Field(..., min_length=5)
    sponsor_id: uuid.UUID
    manager_id: uuid.UUID
    financial_contact_id: uuid.UUID
    start: date
    end: Optional[date] = None
    estimated_end: date
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    phase: str = Field(default="")
    milestones: List[MilestoneRequest] = Field(default_factory=list)
    objectives: List[ObjectiveRequest] = Field(default_factory=list)
    kpis: List[KpiRequest] = Field(default_factory=list)


class UpdateProjectRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=8, max_length=50)
    cps_identifier: Optional[str] = Field(default=None, min_length=11, max_length=11)
    project_number: Optional[str] = None
    description: Optional[str] = None
    ministry: Optional[str] = Field(default=None, min_length=6)
    program: Optional[str] = Field(default=None, min_length=5)
    sponsor_id: Optional[uuid.UUID] = None
    manager_id: Optional[uuid.UUID] = None
    financial_contact_id: Optional[uuid.UUID] = None
    start: Optional[date] = None
    end: Optional[date] = None
    estimated_end: Optional[date] = None
    progress: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    phase: Optional[str] = None


# ---------------------------------------------------------------------------
# Report schemas
# ---------------------------------------------------------------------------

class CreateReportRequest(BaseModel):
    project_id: uuid.UUID
    year: int = Field(..., ge=1)
    quarter: str = Field(..., description="One of: Q1, Q2, Q3a, Q3b, Q4")
    phase: str = Field(default="")
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    estimated_end: Optional[date] = None
    milestones: List[MilestoneRequest] = Field(default_factory=list)
    objectives: List[ObjectiveRequest] = Field(default_factory=list)
    statuses: List[ReportStatusRequest] = Field(default_factory=list)
    kpis: List[KpiRequest] = Field(default_factory=list)
    finance: Optional[FinancialStatusRequest] = None

    @field_validator("quarter")
    @classmethod
    def validate_quarter(cls, v: str) -> str:
        return _one_of(Quarter, v)


class UpdateReportRequest(BaseModel):
    phase: Optional[str] = None
    progress: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    estimated_end: Optional[date] = None
    state: Optional[str] = Field(
        default=None,
        description="draft or review; use the submit action to submit.",
    )
    finance: Optional[FinancialStatusRequest] = None

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _one_of(ReportState, v)


# ===========================================================================
# ROUTERS
# ===========================================================================

api_v1 = APIRouter(prefix=settings.api_prefix)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

user_router = APIRouter(prefix="/users", tags=["Users"])


@user_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def create_user(
    body: CreateUserRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import CreateUserUseCase, CreateUserCommand
    cmd = CreateUserCommand(
        first_name=body.first_name,
        last_name=body.last_name,
        email=str(body.email),
    )
    return _ok(CreateUserUseCase().execute(cmd, uow))


@user_router.get("", summary="List all users")
def list_users(uow: AbstractUnitOfWork = Depends(get_uow)):
    from application import ListUsersUseCase
    return _ok(ListUsersUseCase().execute(uow))


@user_router.get("/{user_id}", summary="Get a user by ID")
def get_user(
    user_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import GetUserUseCase
    return _ok(GetUserUseCase().execute(user_id, uow))


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

project_router = APIRouter(prefix="/projects", tags=["Projects"])


@project_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a project and its first quarterly report",
)
def create_project(
    body: CreateProjectRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    """
    The first report is a DRAFT for the fiscal year and quarter in which the
    project starts, submitted on behalf of the project manager, with every
    status dimension GREEN / STEADY.  Milestones, objectives and KPIs given
    here are placed on that report.
    """
    cmd = CreateProjectCommand(
        name=body.name,
        cps_identifier=body.cps_identifier,
        project_number=body.project_number,
        description=body.description,
        ministry=body.ministry,
        program=body.program,
        sponsor_id=body.sponsor_id,
        manager_id=body.manager_id,
        financial_contact_id=body.financial_contact_id,
        start=body.start,
        end=body.end,
        estimated_end=body.estimated_end,
        progress=body.progress,
        phase=body.phase,
        milestones=[m.to_domain() for m in body.milestones],
        objectives=[o.to_domain() for o in body.objectives],
        kpis=[k.to_domain() for k in body.kpis],
    )
    return _ok(CreateProjectUseCase().execute(cmd, uow))


@project_router.get("", summary="List all projects")
def list_projects(uow: AbstractUnitOfWork = Depends(get_uow)):
    from application import ListProjectsUseCase
    return _ok(ListProjectsUseCase().execute(uow))


@project_router.get("/{project_id}", summary="Get a project by ID")
def get_project(
    project_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import GetProjectUseCase
    return _ok(GetProjectUseCase().execute(project_id, uow))


@project_router.patch("/{project_id}", summary="Update project fields")
def update_project(
    body: UpdateProjectRequest,
    project_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    cmd = UpdateProjectCommand(
        project_id=project_id,
        changes=body.model_dump(exclude_unset=True),
    )
    from application import UpdateProjectUseCase
    return _ok(UpdateProjectUseCase().execute(cmd, uow))


@project_router.delete("/{project_id}", summary="Delete a project and all of its reports")
def delete_project(
    project_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import DeleteProjectUseCase
    return _ok(DeleteProjectUseCase().execute(project_id, uow))


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

report_router = APIRouter(prefix="/reports", tags=["Reports"])


@report_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a report for a project period",
)
def create_report(
    body: CreateReportRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    """Only one report may exist per project, year and quarter (409 otherwise)."""
    cmd = CreateReportCommand(
        project_id=body.project_id,
        year=body.year,
        quarter=Quarter(body.quarter),
        phase=body.phase,
        progress=body.progress,
        estimated_end=body.estimated_end,
        milestones=[m.to_domain() for m in body.milestones],
        objectives=[o.to_domain() for o in body.objectives],
        statuses=[s.to_domain() for s in body.statuses],
        kpis=[k.to_domain() for k in body.kpis],
        finance=body.finance.to_domain() if body.finance else None,
    )
    return _ok(CreateReportUseCase().execute(cmd, uow))


@report_router.get("", summary="List reports, optionally for one project")
def list_reports(
    project_id: Optional[uuid.UUID] = Query(
        default=None, description="Only this project's reports; omit to list across projects"
    ),
    year: Optional[int] = Query(default=None, ge=1),
    quarter: Optional[str] = Query(default=None, description="Q1, Q2, Q3a, Q3b or Q4"),
    state: Optional[str] = Query(default=None, description="draft, review or submitted"),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import ListReportsUseCase
    result = ListReportsUseCase().execute(
        project_id,
        uow,
        year=year,
        quarter=Quarter(_one_of(Quarter, quarter)) if quarter else None,
        state=ReportState(_one_of(ReportState, state)) if state else None,
    )
    return _ok(result)


@report_router.get("/{report_id}", summary="Get a report by ID")
def get_report(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import GetReportUseCase
    return _ok(GetReportUseCase().execute(report_id, uow))


@report_router.patch("/{report_id}", summary="Update report fields or move it to review")
def update_report(
    body: UpdateReportRequest,
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    cmd = UpdateReportCommand(
        report_id=report_id,
        phase=body.phase,
        progress=body.progress,
        estimated_end=body.estimated_end,
        state=ReportState(body.state) if body.state else None,
        finance=body.finance.to_domain() if body.finance else None,
    )
    from application import UpdateReportUseCase
    return _ok(UpdateReportUseCase().execute(cmd, uow))


@report_router.delete("/{report_id}", summary="Delete a report")
def delete_report(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import DeleteReportUseCase
    return _ok(DeleteReportUseCase().execute(report_id, uow))


@report_router.post("/{report_id}/submit", summary="Submit a report that is in review")
def submit_report(
    report_id: uuid.UUID = Path(...),
    current_user_id: Optional[uuid.UUID] = Depends(get_current_user_id),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    """
    A report in REVIEW becomes SUBMITTED and is stamped with the acting user
    and the submission time (`action = "submitted"`).  A DRAFT report is left
    as is and the caller should continue editing it
    (`action = "continue_editing"`).  Anonymous requests get 403.
    """
    cmd = SubmitReportCommand(report_id=report_id, acting_user_id=current_user_id)
    return _ok(SubmitReportUseCase().execute(cmd, uow))


@report_router.post(
    "/{report_id}/rollover",
    status_code=status.HTTP_201_CREATED,
    summary="Create next quarter's draft from this report",
)
def rollover_report(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import RolloverReportUseCase
    return _ok(RolloverReportUseCase().execute(report_id, uow))


# ---------------------------------------------------------------------------
# Milestones
# ---------------------------------------------------------------------------

milestone_router = APIRouter(prefix="/reports/{report_id}/milestones", tags=["Milestones"])


@milestone_router.get("", summary="List the milestones of a report")
def list_milestones(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import ListMilestonesUseCase
    return _ok(ListMilestonesUseCase().execute(report_id, uow))


@milestone_router.post("", status_code=status.HTTP_201_CREATED, summary="Add a milestone")
def add_milestone(
    body: MilestoneRequest,
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import AddMilestoneUseCase, AddMilestoneCommand
    cmd = AddMilestoneCommand(report_id=report_id, milestone=body.to_domain())
    return _ok(AddMilestoneUseCase().execute(cmd, uow))


@milestone_router.patch("/{milestone_id}", summary="Update a milestone")
def update_milestone(
    body: UpdateMilestoneRequest,
    report_id: uuid.UUID = Path(...),
    milestone_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import UpdateMilestoneUseCase, UpdateMilestoneCommand
    cmd = UpdateMilestoneCommand(
        report_id=report_id, milestone_id=milestone_id, changes=body.changes()
    )
    return _ok(UpdateMilestoneUseCase().execute(cmd, uow))


@milestone_router.delete(
    "/{milestone_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a milestone",
)
def remove_milestone(
    report_id: uuid.UUID = Path(...),
    milestone_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import RemoveMilestoneUseCase
    RemoveMilestoneUseCase().execute(report_id, milestone_id, uow)


# ---------------------------------------------------------------------------
# Objectives
# ---------------------------------------------------------------------------

objective_router = APIRouter(prefix="/reports/{report_id}/objectives", tags=["Objectives"])


@objective_router.get("", summary="List the objectives of a report")
def list_objectives(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import ListObjectivesUseCase
    return _ok(ListObjectivesUseCase().execute(report_id, uow))


@objective_router.post("", status_code=status.HTTP_201_CREATED, summary="Add an objective")
def add_objective(
    body: ObjectiveRequest,
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import AddObjectiveUseCase, AddObjectiveCommand
    cmd = AddObjectiveCommand(report_id=report_id, objective=body.to_domain())
    return _ok(AddObjectiveUseCase().execute(cmd, uow))


@objective_router.patch("/{objective_id}", summary="Update an objective")
def update_objective(
    body: UpdateObjectiveRequest,
    report_id: uuid.UUID = Path(...),
    objective_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import UpdateObjectiveUseCase, UpdateObjectiveCommand
    cmd = UpdateObjectiveCommand(
        report_id=report_id, objective_id=objective_id, changes=body.changes()
    )
    return _ok(UpdateObjectiveUseCase().execute(cmd, uow))


@objective_router.delete(
    "/{objective_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an objective",
)
def remove_objective(
    report_id: uuid.UUID = Path(...),
    objective_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import RemoveObjectiveUseCase
    RemoveObjectiveUseCase().execute(report_id, objective_id, uow)


# ---------------------------------------------------------------------------
# Report statuses
# ---------------------------------------------------------------------------

status_router = APIRouter(prefix="/reports/{report_id}/statuses", tags=["Report Statuses"])


@status_router.get("", summary="List the status entries of a report")
def list_statuses(
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import ListStatusesUseCase
    return _ok(ListStatusesUseCase().execute(report_id, uow))


@status_router.post("", status_code=status.HTTP_201_CREATED, summary="Add a status entry")
def add_status(
    body: ReportStatusRequest,
    report_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import AddStatusUseCase, AddStatusCommand
    cmd = AddStatusCommand(report_id=report_id, entry=body.to_domain())
    return _ok(AddStatusUseCase().execute(cmd, uow))


@status_router.patch("/{status_id}", summary="Update a status entry")
def update_status(
    body: UpdateReportStatusRequest,
    report_id: uuid.UUID = Path(...),
    status_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import UpdateStatusUseCase, UpdateStatusCommand
    cmd = UpdateStatusCommand(report_id=report_id, status_id=status_id, changes=body.changes())
    return _ok(UpdateStatusUseCase().execute(cmd, uow))


@status_router.delete(
    "/{status_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a status entry",
)
def remove_status(
    report_id: uuid.UUID = Path(...),
    status_id: uuid.UUID = Path(...),
    uow: AbstractUnitOfWork = Depends(get_uow),
):
    from application import RemoveStatusUseCase
    RemoveStatusUseCase().execute(report_id, status_id, uow)


# ===========================================================================
# REGISTER ROUTERS
# ===========================================================================

api_v1.include_router(user_router)
api_v1.include_router(project_router)
api_v1.include_router(report_router)
api_v1.include_router(milestone_router)
api_v1.include_router(objective_router)
api_v1.include_router(status_router)

app.include_router(api_v1)


# ===========================================================================
# HEALTH CHECK
# ===========================================================================

@app.get("/health", tags=["Health"], summary="Service health check")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# MCP Server — exposes all API routes as MCP tools
# Accessible at: http://localhost:8000/mcp
# ---------------------------------------------------------------------------
mcp = FastApiMCP(app)
mcp.mount()
