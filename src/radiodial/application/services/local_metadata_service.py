"""Run a fetcher plan with the local protocol fetchers."""

import logging

import httpx

from radiodial.application.services.race_coordinator import first_non_null
from radiodial.config import FetcherSettings, RadioBrowserSettings
from radiodial.domain.entities import MetadataResult
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
from radiodial.infrastructure.fetchers import (
    AirtimeProFetcher,
    GenericFetcher,
    HlsFetcher,
    IcecastFetcher,
    IcyFetcher,
    NtsFetcher,
    RadioBrowserFetcher,
)

logger = logging.getLogger(__name__)


class LocalMetadataService:
    """Dispatch a FetcherPlan to the matching fetcher(s).

    Single-source plans go straight to their fetcher. A MultiSourcePlan races all
    its sources through first_non_null.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: FetcherSettings,
        radio_browser_settings: RadioBrowserSettings | None = None,
    ) -> None:
        radio_browser_settings = radio_browser_settings or RadioBrowserSettings()
        self.nts = NtsFetcher(client, settings.nts_timeout)
        self.airtime_pro = AirtimeProFetcher(client, settings.airtime_timeout)
        self.icecast = IcecastFetcher(client, settings.icecast_timeout)
        self.icy = IcyFetcher(client, settings.icy_timeout, range_bytes=settings.icy_range_bytes)
        self.generic = GenericFetcher(client, settings.generic_timeout)
        self.hls = HlsFetcher(client, settings.hls_timeout)
        self.radio_browser = RadioBrowserFetcher(
            client, settings.radio_browser_timeout, base_url=radio_browser_settings.base_url
        )

    async def fetch(self, plan: FetcherPlan) -> MetadataResult | None:
        """Execute a plan, None if no source has anything."""
        if isinstance(plan, NtsPlan):
            return await self.nts.fetch(plan)
        if isinstance(plan, CashmerePlan | AirtimeProPlan):
            return await self.airtime_pro.fetch(plan)
        if isinstance(plan, MultiSourcePlan):
            return await first_non_null(self._fetch_source(source) for source in plan.sources)
        raise TypeError(f"Unknown fetcher plan: {type(plan).__name__}")

    async def _fetch_source(self, source: MetadataSource) -> MetadataResult | None:
        if isinstance(source, IcecastSource):
            return await self.icecast.fetch(source)
        if isinstance(source, RadioBrowserSource):
            return await self.radio_browser.fetch(source)
        if isinstance(source, HlsSource):
            return await self.hls.fetch(source)
        if isinstance(source, IcySource):
            return await self.icy.fetch(source)
        if isinstance(source, GenericSource):
            return await self.generic.fetch(source)
        raise TypeError(f"Unknown metadata source: {type(source).__name__}")
