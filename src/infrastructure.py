"""
infrastructure.py

Process-local storage for users, projects and quarterly reports.

Each aggregate lives in its own dict keyed by UUID inside an
InMemoryDatabase.  Repositories are thin adapters over those dicts; report
lookups by period and state are linear scans, which is plenty for the
handful of reports a project accumulates per fiscal year.

Tests build a fresh InMemoryDatabase per case and hand it to
InMemoryUnitOfWork; the running API shares the module-level `_db`.
A persistent backend only needs to implement the Abstract* interfaces
from application.py and be wired in through `get_uow`.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from application import (
    AbstractProjectRepository,
    AbstractReportRepository,
    AbstractUnitOfWork,
    AbstractUserRepository,
)
from model import Project, Quarter, Report, ReportState, User


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class _Store(dict):
    """Entities keyed by their `id`."""

    def fetch(self, key: uuid.UUID):
        return self.get(key)

    def put(self, obj) -> None:
        self[obj.id] = obj

    def remove(self, key: uuid.UUID) -> None:
        self.pop(key, None)

    def all(self) -> list:
        return list(self.values())


class InMemoryDatabase:
    def __init__(self):
        self.users:    _Store = _Store()
        self.projects: _Store = _Store()
        self.reports:  _Store = _Store()


# Backing store of the running API; emptied on restart.
_db = InMemoryDatabase()


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

class InMemoryUserRepository(AbstractUserRepository):
    def __init__(self, store: _Store): self._s = store
    def get(self, user_id):           return self._s.fetch(user_id)
    def get_by_email(self, email):
        return next((u for u in self._s.all() if u.email == email), None)
    def list_all(self):               return self._s.all()
    def save(self, user):             self._s.put(user)


class InMemoryProjectRepository(AbstractProjectRepository):
    def __init__(self, store: _Store): self._s = store
    def get(self, project_id):        return self._s.fetch(project_id)
    def list_all(self):               return self._s.all()
    def save(self, project):          self._s.put(project)
    def delete(self, project_id):     self._s.remove(project_id)


def _matches(
    report: Report,
    year: Optional[int],
    quarter: Optional[Quarter],
    state: Optional[ReportState],
) -> bool:
    return (
        (year is None or report.year == year)
        and (quarter is None or report.quarter == quarter)
        and (state is None or report.state == state)
    )


class InMemoryReportRepository(AbstractReportRepository):
    def __init__(self, store: _Store): self._s = store
    def get(self, report_id):         return self._s.fetch(report_id)
    def save(self, report):           self._s.put(report)
    def delete(self, report_id):      self._s.remove(report_id)

    def get_for_period(self, project_id, year, quarter) -> Optional[Report]:
        return next(
            (
                r for r in self._s.all()
                if r.project_id == project_id and r.year == year and r.quarter == quarter
            ),
            None,
        )

    def list_for_project(
        self,
        project_id: uuid.UUID,
        year: Optional[int] = None,
        quarter: Optional[Quarter] = None,
        state: Optional[ReportState] = None,
    ) -> List[Report]:
        return [
            r for r in self._s.all()
            if r.project_id == project_id and _matches(r, year, quarter, state)
        ]

    def list_all(
        self,
        year: Optional[int] = None,
        quarter: Optional[Quarter] = None,
        state: Optional[ReportState] = None,
    ) -> List[Report]:
        return [r for r in self._s.all() if _matches(r, year, quarter, state)]


# ---------------------------------------------------------------------------
# Unit of Work
# ---------------------------------------------------------------------------

class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    Repositories over one InMemoryDatabase.  Writes land in the dicts as soon
    as `save` is called, so commit() and rollback() have nothing to do; the
    services validate before they mutate to keep failed edits out.
    """

    def __init__(self, db: InMemoryDatabase = _db):
        self.users    = InMemoryUserRepository(db.users)
        self.projects = InMemoryProjectRepository(db.projects)
        self.reports  = InMemoryReportRepository(db.reports)

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass
