"""
main.py

Entry point for the Quarterly Project Report Tracker API.

Wires the in-memory infrastructure into the FastAPI app, configures logging
and starts uvicorn.

Usage
-----
    # Option 1 — run directly (host/port/reload read from REPORTS_* env vars)
    python main.py

    # Option 2 — run via uvicorn CLI (recommended for development)
    uvicorn main:app --reload --port 8000

Once running, open your browser at:
    http://localhost:8000/docs      ← Swagger UI
    http://localhost:8000/redoc     ← ReDoc
    http://localhost:8000/health    ← liveness check
    http://localhost:8000/mcp       ← MCP server

Quick-start walkthrough (use Swagger UI or curl)
-------------------------------------------------
1.  POST  /api/v1/users                     — register sponsor, manager and
                                              financial contact; copy an "id",
                                              it is your bearer token
2.  POST  /api/v1/projects                  — create a project; its first
                                              DRAFT report is created with it
3.  GET   /api/v1/reports?project_id=<id>   — find that report
4.  POST  /api/v1/reports/{id}/milestones   — add milestones, objectives, ...
5.  PATCH /api/v1/reports/{id}              — {"state": "review"}
6.  POST  /api/v1/reports/{id}/submit       — Authorization: Bearer <user-id>
7.  POST  /api/v1/reports/{id}/rollover     — open next quarter's draft

Authentication note
-------------------
The get_current_user_id dependency expects the raw user UUID as the Bearer
token (e.g. "Bearer 550e8400-e29b-41d4-a716-446655440000").  Replace it with
a real JWT implementation before going to production.
"""

import logging

import uvicorn

from api import app, get_uow
from config import get_settings
from infrastructure import InMemoryUnitOfWork

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# ---------------------------------------------------------------------------
# Wire the concrete Unit of Work into the FastAPI dependency system.
# To swap databases, replace InMemoryUnitOfWork with your SQL implementation.
# ---------------------------------------------------------------------------

app.dependency_overrides[get_uow] = lambda: InMemoryUnitOfWork()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )
