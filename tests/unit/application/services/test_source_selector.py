"""Tests for source selection."""

import pytest

from radiodial.application.services.source_selector import (
    CASHMERE_ENDPOINT,
    derive_airtime_pro_endpoint,
    derive_icecast_endpoints,
    select_plan,
)
from radiodial.domain.entities import StationDescriptor
from radiodial.domain.exceptions import MalformedStationError
from radiodial.domain.value_objects import (
    AirtimeProPlan,
    CashmerePlan,
    GenericSource,
    HlsSource,
    IcecastSource,
    IcySource,
    MultiSourcePlan,
    NtsPlan,
    RadioBrowserSource,
)


class TestDerivations:
    """Test endpoint derivation helpers."""

    def test_airtime_pro_endpoint(self) -> None:
        """Test airtime pro endpoint."""
        assert (
            derive_airtime_pro_endpoint("https://foo.out.airtime.pro/foo_a")
            == "https://foo.airtime.pro/api/live-info-v2"
        )

    @pytest.mark.parametrize(
        "url", [None, "", "https://stream.example/radio", "https://out.airtime.pro/x"]
    )
    def test_airtime_pro_endpoint_absent(self, url: str | None) -> None:
        """Test airtime pro endpoint absent."""
        assert derive_airtime_pro_endpoint(url) is None

    def test_icecast_endpoints_keep_port_and_mount(self) -> None:
        """Test icecast endpoints keep port and mount."""
        derived = derive_icecast_endpoints("http://stream.example:8000/live.mp3")
        assert derived is not None
        endpoints, mount = derived
        assert endpoints[0] == "http://stream.example:8000/status-json.xsl"
        assert "http://stream.example:8000/status?json=1" in endpoints
        assert mount == "/live.mp3"

    def test_icecast_endpoints_need_a_host(self) -> None:
        """Test icecast endpoints need a host."""
        assert derive_icecast_endpoints("not a url") is None


class TestSelectPlan:
    """Test select_plan decision order."""

    def test_missing_url_raises(self) -> None:
        """Test missing URL raises."""
        with pytest.raises(MalformedStationError) as exc_info:
            select_plan(StationDescriptor(id="s1", name="No URL"))
        assert exc_info.value.station_id == "s1"

    def test_nts_by_name(self) -> None:
        """Test NTS by name."""
        plan = select_plan(
            StationDescriptor(name="NTS 2", url="https://stream-relay-geo.ntslive.net/stream2")
        )
        assert plan == NtsPlan(stream_url="https://stream-relay-geo.ntslive.net/stream2")

    def test_nts_by_url(self) -> None:
        """Test NTS by URL."""
        plan = select_plan(StationDescriptor(name="Other", url="https://www.nts.live/stream"))
        assert isinstance(plan, NtsPlan)

    def test_cashmere_by_homepage(self) -> None:
        """Test cashmere by homepage."""
        plan = select_plan(
            StationDescriptor(
                name="Some Station",
                url="https://cashmere.out.example/stream",
                homepage="https://cashmereradio.com",
            )
        )
        assert plan == CashmerePlan(endpoint=CASHMERE_ENDPOINT)

    def test_airtime_pro(self) -> None:
        """Test *.out.airtime.pro hosts get the Airtime Pro plan."""
        plan = select_plan(StationDescriptor(name="Foo", url="https://foo.out.airtime.pro/foo_a"))
        assert plan == AirtimeProPlan(endpoint="https://foo.airtime.pro/api/live-info-v2")

    def test_multi_source_for_ordinary_station(self, station: StationDescriptor) -> None:
        """Test multi source for ordinary station."""
        plan = select_plan(station)
        assert isinstance(plan, MultiSourcePlan)
        assert [type(s) for s in plan.sources] == [
            IcecastSource,
            RadioBrowserSource,
            HlsSource,
            IcySource,
            GenericSource,
        ]
        icecast = plan.sources[0]
        assert isinstance(icecast, IcecastSource)
        assert icecast.mount == "/radio"

    def test_hls_goes_first_for_playlists(self) -> None:
        """Test HLS goes first for playlists."""
        plan = select_plan(
            StationDescriptor(id="x", name="Playlist FM", url="https://cdn.example/live.m3u8")
        )
        assert isinstance(plan, MultiSourcePlan)
        assert isinstance(plan.sources[0], HlsSource)
        assert len(plan.sources) == 5

    def test_no_radio_browser_source_without_id(self) -> None:
        """Test no radio browser source without ID."""
        plan = select_plan(StationDescriptor(name="Anon", url="https://stream.example/radio"))
        assert isinstance(plan, MultiSourcePlan)
        assert not any(isinstance(s, RadioBrowserSource) for s in plan.sources)
