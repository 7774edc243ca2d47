"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Response

from api.models.responses import HealthResponse
from core import database
from core.config import API_VERSION

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(response: Response):
    """
    Report whether the calendar database exists and has every table the
    feed reads from. 503 when it doesn't, so monitors can alert on it.
    """
    problem = database.check_database(database.DB_PATH)
    if problem:
        response.status_code = 503

    return HealthResponse(
        status="unhealthy" if problem else "healthy",
        version=API_VERSION,
        database_available=problem is None,
        timestamp=datetime.now(timezone.utc).isoformat(),
        error=problem,
    )
