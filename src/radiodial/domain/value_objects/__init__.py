"""Domain value objects."""

from radiodial.domain.value_objects.fetcher_plan import (
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
from radiodial.domain.value_objects.now_playing import (
    GENERIC_DENYLIST,
    RawFields,
    compose_now_playing,
    extract_station_fields,
    is_generic_or_invalid,
    is_valid_now_playing,
    normalize,
    parse_artist_title,
    parse_station_metadata,
)

__all__ = [
    "GENERIC_DENYLIST",
    "AirtimeProPlan",
    "CashmerePlan",
    "FetcherPlan",
    "GenericSource",
    "HlsSource",
    "IcecastSource",
    "IcySource",
    "MetadataSource",
    "MultiSourcePlan",
    "NtsPlan",
    "RadioBrowserSource",
    "RawFields",
    "compose_now_playing",
    "extract_station_fields",
    "is_generic_or_invalid",
    "is_valid_now_playing",
    "normalize",
    "parse_artist_title",
    "parse_station_metadata",
]
