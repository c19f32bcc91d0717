"""
Proxy server string helpers.

Proxy servers travel between sources as WinHTTP-style strings: either a
single ``host:port`` used for every scheme, or a ``;``-separated list of
``scheme=host:port`` entries.
"""
import re
import logging
from typing import Optional, Tuple
from urllib.parse import urlsplit

from .errors import MalformedSourceError
from .types import ProxyServer

logger = logging.getLogger(__name__)

DEFAULT_PROXY_PORT = 80

_WHITESPACE_RE = re.compile(r"\s")
_BYPASS_SPLIT_RE = re.compile(r"[;,\s]+")


def _parse_port(value: str, context: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise MalformedSourceError(f"Invalid port '{value}' for {context}")
    if not 1 <= port <= 65535:
        raise MalformedSourceError(f"Port {port} out of range for {context}")
    return port


def parse_server(value: str) -> ProxyServer:
    """Parse ``[scheme://][user:pass@]host[:port]`` into a ProxyServer.

    Credentials are dropped. IPv6 hosts must be bracketed.
    """
    value = value.strip()
    if not value or _WHITESPACE_RE.search(value):
        raise MalformedSourceError(f"Unparseable proxy server '{value}'")
    if "://" not in value:
        value = f"//{value}"
    try:
        parts = urlsplit(value)
        host = parts.hostname
        port = parts.port
    except ValueError as e:
        raise MalformedSourceError(f"Unparseable proxy server '{value.lstrip('/')}': {e}")
    if not host:
        raise MalformedSourceError(f"Proxy server '{value.lstrip('/')}' has no host")
    if port is None:
        port = DEFAULT_PROXY_PORT
    elif port == 0:
        raise MalformedSourceError(f"Port 0 out of range for {host}")
    return ProxyServer(host=host, port=port)


def parse_proxy_server(value: Optional[str]) -> Tuple[Optional[ProxyServer], Optional[ProxyServer]]:
    """Split a proxy string into ``(http_proxy, https_proxy)``.

    Entries for schemes other than http and https are ignored. A string
    that yields no http or https server is malformed.
    """
    if value is None or not value.strip():
        raise MalformedSourceError("Proxy server string is empty")

    if "=" not in value:
        server = parse_server(value)
        return server, server

    http_proxy: Optional[ProxyServer] = None
    https_proxy: Optional[ProxyServer] = None
    for entry in value.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        scheme, sep, server = entry.partition("=")
        if not sep:
            raise MalformedSourceError(f"Proxy entry '{entry}' is missing a scheme")
        scheme = scheme.strip().lower()
        if scheme == "http":
            http_proxy = parse_server(server)
        elif scheme == "https":
            https_proxy = parse_server(server)
        else:
            logger.debug(f"Ignoring proxy entry for unsupported scheme '{scheme}'")

    if http_proxy is None and https_proxy is None:
        raise MalformedSourceError(f"Proxy string '{value}' has no http or https entry")
    return http_proxy, https_proxy


def parse_bypass_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a bypass list on ``;``, ``,`` or whitespace, keeping order."""
    if not value:
        return ()
    return tuple(item for item in _BYPASS_SPLIT_RE.split(value) if item)


def build_proxy_string(http_host: str, http_port: str, ssl_host: str, ssl_port: str) -> str:
    """Combine per-scheme host/port pairs into one proxy string.

    Equal servers, or a single configured scheme, give ``host:port``.
    Different servers give ``http=host:port;https=host:port``.
    """
    http_host = (http_host or "").strip()
    http_port = (http_port or "").strip()
    ssl_host = (ssl_host or "").strip()
    ssl_port = (ssl_port or "").strip()

    if http_host and not http_port:
        raise MalformedSourceError(f"HTTP proxy host '{http_host}' has no port")
    if ssl_host and not ssl_port:
        raise MalformedSourceError(f"SSL proxy host '{ssl_host}' has no port")
    if not http_host and not ssl_host:
        raise MalformedSourceError("No proxy host configured")

    http_proxy = f"{http_host}:{_parse_port(http_port, http_host)}" if http_host else ""
    ssl_proxy = f"{ssl_host}:{_parse_port(ssl_port, ssl_host)}" if ssl_host else ""

    if not ssl_proxy:
        return http_proxy
    if not http_proxy:
        return ssl_proxy
    if http_proxy.lower() == ssl_proxy.lower():
        return http_proxy
    return f"http={http_proxy};https={ssl_proxy}"
