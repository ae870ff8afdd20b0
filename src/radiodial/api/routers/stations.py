"""Station catalog search and lookup."""

from fastapi import APIRouter, Depends, HTTPException, Query

from radiodial.api.dependencies import get_radio_browser_client
from radiodial.api.schemas import SearchBy, StationSchema, StationSearchResponse
from radiodial.infrastructure.integrations import RadioBrowserClient

router = APIRouter()


@router.get("/search", response_model=StationSearchResponse)
async def search_stations(
    q: str = Query(..., min_length=1, description="Search text"),
    by: SearchBy = Query("name", description="Search by name, tag or country"),
    limit: int | None = Query(None, ge=1, le=500, description="Max results"),
    catalog: RadioBrowserClient = Depends(get_radio_browser_client),
) -> StationSearchResponse:
    """Search the Radio-Browser catalog, most popular stations first."""
    stations = await catalog.search(q, by=by, limit=limit)
    return StationSearchResponse(
        query=q,
        by=by,
        count=len(stations),
        stations=[StationSchema.from_domain(station) for station in stations],
    )


@router.get("/{station_uuid}", response_model=StationSchema)
async def get_station(
    station_uuid: str,
    catalog: RadioBrowserClient = Depends(get_radio_browser_client),
) -> StationSchema:
    """Look up one catalog station, e.g. to refresh a saved favorite."""
    station = await catalog.get_station(station_uuid)
    if station is None:
        raise HTTPException(status_code=404, detail=f"Station not found: {station_uuid}")
    return StationSchema.from_domain(station)
