"""Shared fixtures: an isolated in-memory database per test."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from api import app, get_uow
from application import CreateUserCommand, CreateUserUseCase
from infrastructure import InMemoryDatabase, InMemoryUnitOfWork


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def uow(db) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(db)


@pytest.fixture
def people(uow):
    """Sponsor, manager and financial contact, keyed by role."""
    created = {}
    for role, first in (("sponsor", "Sam"), ("manager", "Morgan"), ("finance", "Frankie")):
        dto = CreateUserUseCase().execute(
            CreateUserCommand(first_name=first, last_name="Tester", email=f"{role}@gov.bc.ca"),
            uow,
        )
        created[role] = dto
    return created


@pytest.fixture
def client(db):
    app.dependency_overrides[get_uow] = lambda: InMemoryUnitOfWork(db)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def project_payload():
    """A valid project creation body, minus the user references."""
    return {
        "name": "Digital Permits",
        "cps_identifier": "CPS-0000001",
        "description": "Online permit applications",
        "ministry": "Citizens' Services",
        "program": "Digital Office",
        "start": date(2022, 5, 15).isoformat(),
        "estimated_end": date(2024, 3, 31).isoformat(),
    }
