"""
Registry override detectors.
"""
import logging
from typing import Dict, Optional

from ..errors import MalformedSourceError
from ..proxy_string import parse_bypass_list, parse_proxy_server
from ..sources import KeyValueStore
from ..types import ProxyConfig
from .base import ProxyDetector

logger = logging.getLogger(__name__)

NET_CONFIG_VALUE = "NetConfig"
UPDATE_DEV_PATH = r"HKLM\SOFTWARE\ProxyDetector\UpdateDev"

_KNOWN_KEYS = ("wpad", "script", "proxy", "bypass")
_PROXY_SCHEMES = ("http", "https", "ftp", "socks")


def parse_net_config(value: str) -> Dict[str, str]:
    """Parse ``wpad=true;script=...;proxy=...;bypass=...`` into a dict.

    ``proxy`` may hold a per-scheme list, as in
    ``proxy=http=a:80;https=b:443``. Scheme entries that follow it are
    folded back into the proxy value.
    """
    settings: Dict[str, str] = {}
    last_key = None
    for entry in value.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, val = entry.partition("=")
        key = key.strip().lower()
        if sep and last_key == "proxy" and key in _PROXY_SCHEMES:
            settings["proxy"] = f"{settings['proxy']};{entry}"
            continue
        if not sep or key not in _KNOWN_KEYS:
            raise MalformedSourceError(f"Unrecognized NetConfig entry '{entry}'")
        settings[key] = val.strip()
        last_key = key
    return settings


class RegistryOverrideDetector(ProxyDetector):
    """Reads an administrative proxy override from a key/value store."""

    def __init__(self, store: KeyValueStore, reg_path: str):
        self.store = store
        self.reg_path = reg_path

    @property
    def source(self) -> str:
        return "RegistryOverride"

    def _detect(self) -> Optional[ProxyConfig]:
        value = self.store.read(self.reg_path, NET_CONFIG_VALUE)
        if value is None:
            return None
        if not isinstance(value, str):
            raise MalformedSourceError(f"{NET_CONFIG_VALUE} at {self.reg_path} holds {type(value).__name__}, expected a string")

        settings = parse_net_config(value)
        bypass = parse_bypass_list(settings.get("bypass"))

        if settings.get("script"):
            return ProxyConfig.auto_config(settings["script"], bypass_list=bypass)

        if settings.get("proxy"):
            http_proxy, https_proxy = parse_proxy_server(settings["proxy"])
            return ProxyConfig.named(http_proxy, https_proxy, bypass_list=bypass)

        wpad = settings.get("wpad", "").lower()
        if wpad == "true":
            return ProxyConfig.auto_detect(bypass_list=bypass)
        if wpad == "false":
            return ProxyConfig.direct(bypass_list=bypass)

        raise MalformedSourceError(f"NetConfig '{value}' at {self.reg_path} selects no proxy mode")


class UpdateDevDetector(RegistryOverrideDetector):
    """Developer override read from a fixed location."""

    def __init__(self, store: KeyValueStore):
        super().__init__(store, UPDATE_DEV_PATH)

    @property
    def source(self) -> str:
        return "UpdateDev"
