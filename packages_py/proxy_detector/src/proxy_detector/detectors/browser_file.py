"""
Browser preferences file detector.

Reads the proxy settings Firefox stores in a profile's ``prefs.js``:

    user_pref("network.proxy.type", 1);
    user_pref("network.proxy.http", "proxy.example.com");
    user_pref("network.proxy.http_port", 8080);

A preferences file can run to thousands of lines, so the parsed result is
cached and reused until the file's modification time changes.
"""
import re
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from ..errors import MalformedSourceError
from ..proxy_string import build_proxy_string, parse_proxy_server
from ..sources import FileReader, ProfileLocator
from ..types import ProxyConfig
from .base import ProxyDetector

logger = logging.getLogger(__name__)

PROXY_TYPE_NO_PROXY = 0
PROXY_TYPE_NAMED_PROXY = 1
PROXY_TYPE_AUTO_CONFIG_URL = 2
PROXY_TYPE_AUTO_DETECT = 4

PREF_TYPE = "type"
PREF_AUTOCONFIG_URL = "autoconfig_url"
PREF_HTTP = "http"
PREF_HTTP_PORT = "http_port"
PREF_SSL = "ssl"
PREF_SSL_PORT = "ssl_port"

RECOGNIZED_PREFS = (PREF_TYPE, PREF_AUTOCONFIG_URL, PREF_HTTP, PREF_HTTP_PORT, PREF_SSL, PREF_SSL_PORT)

_PREF_LINE_RE = re.compile(
    r'^\s*user_pref\(\s*"network\.proxy\.([A-Za-z_]+)"\s*,\s*(.*?)\s*\)\s*;'
)


def parse_prefs_line(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(pref, value)`` when ``line`` sets a recognized proxy pref.

    String values are unquoted. Other lines and malformed assignments
    give None.
    """
    match = _PREF_LINE_RE.match(line)
    if not match:
        return None
    name, raw = match.group(1), match.group(2)
    if name not in RECOGNIZED_PREFS or not raw:
        return None
    if raw.startswith('"'):
        if len(raw) < 2 or not raw.endswith('"'):
            return None
        return name, raw[1:-1]
    return name, raw


def parse_prefs(lines: Iterable[str]) -> Dict[str, str]:
    """Scan every line, keeping the last value set for each pref."""
    prefs: Dict[str, str] = {}
    for line in lines:
        parsed = parse_prefs_line(line)
        if parsed:
            prefs[parsed[0]] = parsed[1]
    return prefs


def interpret_prefs(prefs: Dict[str, str], source: str = "") -> ProxyConfig:
    """Turn accumulated prefs into a config.

    The type is a bit field. A present auto-config URL wins when the
    auto-config bit is set, or when auto-detect is combined with another
    bit. Plain auto-detect ignores a leftover URL. Then auto-detect, then
    named.
    """
    raw_type = prefs.get(PREF_TYPE)
    if raw_type is None:
        return ProxyConfig.direct(source=source)
    try:
        proxy_type = int(raw_type)
    except ValueError:
        raise MalformedSourceError(f"Proxy type '{raw_type}' is not an integer")
    if proxy_type < 0:
        raise MalformedSourceError(f"Proxy type {proxy_type} is negative")

    if proxy_type == PROXY_TYPE_NO_PROXY:
        return ProxyConfig.direct(source=source)

    url = (prefs.get(PREF_AUTOCONFIG_URL) or "").strip()
    url_selected = proxy_type & PROXY_TYPE_AUTO_CONFIG_URL or (
        proxy_type & PROXY_TYPE_AUTO_DETECT and proxy_type != PROXY_TYPE_AUTO_DETECT
    )
    if url and url_selected:
        return ProxyConfig.auto_config(url, source=source)

    if proxy_type & PROXY_TYPE_AUTO_DETECT:
        return ProxyConfig.auto_detect(source=source)

    if proxy_type & PROXY_TYPE_NAMED_PROXY:
        proxy = build_proxy_string(
            prefs.get(PREF_HTTP, ""),
            prefs.get(PREF_HTTP_PORT, ""),
            prefs.get(PREF_SSL, ""),
            prefs.get(PREF_SSL_PORT, ""),
        )
        http_proxy, https_proxy = parse_proxy_server(proxy)
        return ProxyConfig.named(http_proxy, https_proxy, source=source)

    if proxy_type & PROXY_TYPE_AUTO_CONFIG_URL:
        raise MalformedSourceError("Proxy type selects auto-config but no URL is set")

    raise MalformedSourceError(f"Unsupported proxy type {proxy_type}")


@dataclass(frozen=True)
class _CacheEntry:
    profile: str
    path: str
    mtime: int
    config: ProxyConfig


class BrowserConfigFileDetector(ProxyDetector):
    """Detects proxy settings from a browser profile's preferences file.

    The cache holds one entry for the last parsed file. Every call
    re-stats the file and reuses the entry only while the profile, path
    and modification time all match. ``_lock`` serializes the whole
    stat/compare/parse/store sequence for this instance.

    A read failure drops the entry rather than serving it, so a file that
    stops being readable never hides a settings change.
    """

    def __init__(self, locator: ProfileLocator, reader: FileReader, browser_name: str = "firefox"):
        self.locator = locator
        self.reader = reader
        self.browser_name = browser_name
        self._cache: Optional[_CacheEntry] = None
        self._lock = threading.Lock()
        self.parse_count = 0

    @property
    def source(self) -> str:
        return "Firefox"

    def _detect(self) -> Optional[ProxyConfig]:
        located = self.locator.resolve(self.browser_name)
        if not located:
            logger.debug(f"No {self.browser_name} profile found")
            return None
        profile, path = located

        with self._lock:
            try:
                mtime = self.reader.stat_mtime(path)
                if mtime is None:
                    self._cache = None
                    logger.debug(f"Preferences file {path} does not exist")
                    return None

                entry = self._cache
                if entry and entry.profile == profile and entry.path == path and entry.mtime == mtime:
                    logger.debug(f"Using cached proxy config for profile '{profile}'")
                    return entry.config

                config = self._parse_file(path)
            except FileNotFoundError:
                self._cache = None
                logger.debug(f"Preferences file {path} disappeared while reading")
                return None
            except Exception:
                self._cache = None
                raise

            self._cache = _CacheEntry(profile=profile, path=path, mtime=mtime, config=config)
            return config

    def _parse_file(self, path: str) -> ProxyConfig:
        logger.debug(f"Parsing preferences file {path}")
        prefs = parse_prefs(self.reader.read_lines(path))
        self.parse_count += 1
        return interpret_prefs(prefs, source=self.source)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None
