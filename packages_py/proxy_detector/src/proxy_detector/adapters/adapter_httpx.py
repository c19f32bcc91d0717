"""
Adapter for httpx library.
"""
import logging
from typing import Any, Dict, Optional, Type, Union

import httpx

from ..types import ProxyConfig, ProxyMode, ProxyServer

logger = logging.getLogger(__name__)

Transport = Union[httpx.HTTPTransport, httpx.AsyncHTTPTransport]


def bypass_pattern(entry: str) -> Optional[str]:
    """Map a bypass entry to an httpx mount pattern, or None if unsupported."""
    entry = entry.strip()
    if not entry or entry == "<local>":
        return None
    # httpx mount patterns cannot express CIDR ranges or paths
    if "/" in entry:
        return None
    if entry.startswith("*."):
        return f"all://{entry}"
    if entry.startswith("."):
        return f"all://*{entry}"
    return f"all://{entry}"


def proxy_url(server: ProxyServer) -> str:
    return f"http://{server}"


class HttpxAdapter:
    """Builds httpx clients that route through a detected proxy.

    Only named proxies can be applied directly. Auto-detect and PAC
    configurations need script evaluation, which happens elsewhere, so
    clients for them connect directly.
    """

    @property
    def name(self) -> str:
        return "httpx"

    def get_mounts(
        self,
        config: ProxyConfig,
        transport_cls: Type[Transport] = httpx.HTTPTransport,
    ) -> Dict[str, Optional[Transport]]:
        """Mount table routing http/https through the proxies and bypassed hosts direct."""
        mounts: Dict[str, Optional[Transport]] = {}
        if config.mode != ProxyMode.NAMED_PROXY:
            return mounts

        for entry in config.bypass_list:
            pattern = bypass_pattern(entry)
            if pattern is None:
                logger.debug(f"Skipping bypass entry '{entry}' not expressible as an httpx mount")
                continue
            mounts[pattern] = None

        if config.http_proxy is not None:
            mounts["http://"] = transport_cls(proxy=proxy_url(config.http_proxy))
        if config.https_proxy is not None:
            mounts["https://"] = transport_cls(proxy=proxy_url(config.https_proxy))
        return mounts

    def get_client_kwargs(
        self,
        config: ProxyConfig,
        transport_cls: Type[Transport] = httpx.HTTPTransport,
    ) -> Dict[str, Any]:
        """Build kwargs for an httpx client."""
        # Detection already consulted the environment
        kwargs: Dict[str, Any] = {"trust_env": False}

        if config.mode in (ProxyMode.AUTO_DETECT, ProxyMode.AUTO_CONFIG_URL):
            logger.warning(
                f"Proxy mode {config.mode.value} from {config.source} requires PAC evaluation; connecting directly"
            )

        mounts = self.get_mounts(config, transport_cls)
        if mounts:
            kwargs["mounts"] = mounts
        return kwargs

    def create_sync_client(self, config: ProxyConfig, **client_kwargs: Any) -> httpx.Client:
        """Create httpx.Client."""
        kwargs = self.get_client_kwargs(config, httpx.HTTPTransport)
        kwargs.update(client_kwargs)
        logger.debug(f"Creating httpx.Client for {config.mode.value} config from {config.source}")
        return httpx.Client(**kwargs)

    def create_async_client(self, config: ProxyConfig, **client_kwargs: Any) -> httpx.AsyncClient:
        """Create httpx.AsyncClient."""
        kwargs = self.get_client_kwargs(config, httpx.AsyncHTTPTransport)
        kwargs.update(client_kwargs)
        logger.debug(f"Creating httpx.AsyncClient for {config.mode.value} config from {config.source}")
        return httpx.AsyncClient(**kwargs)
