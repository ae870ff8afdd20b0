"""Source selection: which metadata sources apply to a station.

Pure functions, no I/O. Decision order (first match wins):

1. NTS           name contains "nts" or URL contains "nts.live"
2. Cashmere      name contains "cashmere" or URL/homepage contains "cashmereradio"
3. Airtime Pro   host is <key>.out.airtime.pro
4. Multi-source  everything else: Icecast, Radio-Browser, HLS, ICY, Generic raced
                 together (HLS first when the URL is an .m3u8 playlist)
"""

import logging
import re
from urllib.parse import urlsplit

from radiodial.domain.entities import StationDescriptor
from radiodial.domain.exceptions import MalformedStationError
from radiodial.domain.value_objects import (
    AirtimeProPlan,
    CashmerePlan,
    FetcherPlan,
    GenericSource,
    HlsSource,
    IcecastSource,
    IcySource,
    MetadataSource,
    MultiSourcePlan,
    NtsPlan,
    RadioBrowserSource,
)

logger = logging.getLogger(__name__)

CASHMERE_ENDPOINT = "https://cashmereradio.airtime.pro/api/live-info-v2"
_AIRTIME_PRO_HOST = re.compile(r"^([^.]+)\.out\.airtime\.pro$", re.IGNORECASE)

# Status pages Icecast-family servers expose, in the order we list them.
ICECAST_STATUS_PATHS: tuple[str, ...] = (
    "/status-json.xsl",
    "/status.json",
    "/stats.json",
    "/status?json=1",
)


def derive_airtime_pro_endpoint(stream_url: str | None) -> str | None:
    """live-info-v2 endpoint for a <key>.out.airtime.pro stream, else None.

    Example:
        https://foo.out.airtime.pro/foo_a -> https://foo.airtime.pro/api/live-info-v2
    """
    if not stream_url:
        return None
    try:
        host = urlsplit(stream_url).hostname or ""
    except ValueError:
        return None
    match = _AIRTIME_PRO_HOST.match(host)
    if not match:
        return None
    return f"https://{match.group(1)}.airtime.pro/api/live-info-v2"


def derive_icecast_endpoints(stream_url: str) -> tuple[tuple[str, ...], str] | None:
    """Candidate status endpoints on the stream host plus the mount path.

    Returns:
        (endpoints, mount), or None when the URL has no host
    """
    try:
        parts = urlsplit(stream_url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    origin = f"{parts.scheme}://{parts.netloc}"
    return tuple(f"{origin}{path}" for path in ICECAST_STATUS_PATHS), parts.path


def select_plan(station: StationDescriptor) -> FetcherPlan:
    """Build the fetcher plan for a station.

    Raises:
        MalformedStationError: If the station has no stream URL
    """
    url = (station.url or "").strip()
    if not url:
        raise MalformedStationError("Station has no stream URL", station_id=station.id)

    name = (station.name or "").lower()
    lowered_url = url.lower()
    homepage = (station.homepage or "").lower()

    if "nts" in name or "nts.live" in lowered_url:
        return NtsPlan(stream_url=url)

    if "cashmere" in name or "cashmereradio" in lowered_url or "cashmereradio" in homepage:
        return CashmerePlan(endpoint=CASHMERE_ENDPOINT)

    airtime_endpoint = derive_airtime_pro_endpoint(url)
    if airtime_endpoint:
        return AirtimeProPlan(endpoint=airtime_endpoint)

    sources: list[MetadataSource] = []
    icecast = derive_icecast_endpoints(url)
    if icecast is not None:
        endpoints, mount = icecast
        sources.append(IcecastSource(endpoints=endpoints, mount=mount))
    if station.id:
        sources.append(RadioBrowserSource(station_id=station.id, station_name=station.name))
    hls = HlsSource(url=url)
    sources.append(hls)
    sources.append(IcySource(url=url))
    sources.append(GenericSource(url=url))

    # Soft priority hint, the other sources still race
    if station.is_hls:
        sources.remove(hls)
        sources.insert(0, hls)

    plan = MultiSourcePlan(sources=tuple(sources))
    logger.debug("Plan for %s: %s", station.name or url, plan.source_types)
    return plan
