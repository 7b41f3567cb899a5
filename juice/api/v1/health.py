"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from juice.core.config import get_settings
from juice.core.database import check_db_connected, get_db
from juice.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Service status, environment and whether the database answers."""
    connected = check_db_connected(db)
    return HealthResponse(
        environment=get_settings().APP_ENV,
        database="connected" if connected else "disconnected",
    )
