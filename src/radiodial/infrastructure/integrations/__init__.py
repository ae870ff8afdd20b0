"""External integration client implementations."""

from radiodial.infrastructure.integrations.http_pool import HttpClientPool
from radiodial.infrastructure.integrations.metadata_proxy_client import (
    MetadataProxyClient,
    map_proxy_source,
    should_use_proxy,
)
from radiodial.infrastructure.integrations.radio_browser_client import RadioBrowserClient

__all__ = [
    "HttpClientPool",
    "MetadataProxyClient",
    "RadioBrowserClient",
    "map_proxy_source",
    "should_use_proxy",
]
