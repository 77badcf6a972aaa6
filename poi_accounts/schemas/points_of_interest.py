"""Schemas for points of interest referenced by favorites."""

from pydantic import BaseModel, ConfigDict


class PointOfInterestRead(BaseModel):
    """Point of interest as returned in favorites listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
