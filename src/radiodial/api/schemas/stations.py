"""API schemas for the station catalog."""

from typing import Literal

from pydantic import BaseModel, Field

from radiodial.api.schemas.playback import StationSchema

SearchBy = Literal["name", "tag", "country"]


class StationSearchResponse(BaseModel):
    """Response schema for catalog search."""

    query: str
    by: SearchBy
    count: int = Field(..., ge=0)
    stations: list[StationSchema]
