"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability, for load balancers and uptime checks."""

    status: Literal["ok"] = "ok"
    service: str = Field(default="the-juice", description="Service name")
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Omitted when the check is not performed",
    )
