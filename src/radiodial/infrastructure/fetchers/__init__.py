"""Protocol fetchers, one per stream-server family."""

from radiodial.infrastructure.fetchers.airtime_pro import AirtimeProFetcher
from radiodial.infrastructure.fetchers.base import MetadataFetcher
from radiodial.infrastructure.fetchers.generic import GenericFetcher
from radiodial.infrastructure.fetchers.hls import HlsFetcher
from radiodial.infrastructure.fetchers.icecast import IcecastFetcher
from radiodial.infrastructure.fetchers.icy import IcyFetcher
from radiodial.infrastructure.fetchers.nts import NtsFetcher
from radiodial.infrastructure.fetchers.radio_browser import RadioBrowserFetcher

__all__ = [
    "AirtimeProFetcher",
    "GenericFetcher",
    "HlsFetcher",
    "IcecastFetcher",
    "IcyFetcher",
    "MetadataFetcher",
    "NtsFetcher",
    "RadioBrowserFetcher",
]
