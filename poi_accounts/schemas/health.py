"""Health check response schema."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service status plus user-store connectivity."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the process runs under")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the user store succeeded",
    )
