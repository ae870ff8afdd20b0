"""Fetcher plans: which metadata sources apply to a station.

A plan is built once per station by the source selector and thrown away on
station change. Plans and sources are plain frozen dataclasses, the fetchers
know how to execute them.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IcecastSource:
    """Icecast-family status endpoints derived from the stream host."""

    endpoints: tuple[str, ...]
    mount: str = ""


@dataclass(frozen=True)
class RadioBrowserSource:
    """Station catalog lookup by catalog id."""

    station_id: str
    station_name: str = ""


@dataclass(frozen=True)
class HlsSource:
    """HLS playlist scan."""

    url: str


@dataclass(frozen=True)
class IcySource:
    """Inline ICY metadata from the audio stream itself."""

    url: str


@dataclass(frozen=True)
class GenericSource:
    """Partner special cases plus conventional now-playing endpoints."""

    url: str


MetadataSource = Union[IcecastSource, RadioBrowserSource, HlsSource, IcySource, GenericSource]


@dataclass(frozen=True)
class NtsPlan:
    """NTS Radio live API."""

    stream_url: str


@dataclass(frozen=True)
class CashmerePlan:
    """Cashmere Radio's fixed Airtime Pro endpoint."""

    endpoint: str


@dataclass(frozen=True)
class AirtimeProPlan:
    """Airtime Pro live-info endpoint derived from an *.out.airtime.pro host."""

    endpoint: str


@dataclass(frozen=True)
class MultiSourcePlan:
    """Several sources raced against each other, in priority order."""

    sources: tuple[MetadataSource, ...]

    @property
    def source_types(self) -> list[str]:
        """Class names of the sources, for logging."""
        return [type(source).__name__ for source in self.sources]


FetcherPlan = Union[NtsPlan, CashmerePlan, AirtimeProPlan, MultiSourcePlan]
