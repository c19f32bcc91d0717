"""
Managed-policy proxy detectors.

Group policy and device management expose the same four queries. One
detection algorithm (``PolicyDetector``) runs against whichever query set
it is given, so the two sources cannot drift apart in how they interpret
a policy.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import MalformedSourceError
from ..proxy_string import parse_bypass_list, parse_proxy_server
from ..sources import DeviceManagementStore, PolicyStore
from ..types import ProxyConfig
from .base import ProxyDetector

logger = logging.getLogger(__name__)

MODE_DIRECT = "direct"
MODE_AUTO_DETECT = "auto_detect"
MODE_PAC_SCRIPT = "pac_script"
MODE_FIXED_SERVERS = "fixed_servers"
MODE_SYSTEM = "system"


class PolicyQueries(ABC):
    """Capability set the policy detection algorithm reads from."""

    @abstractmethod
    def is_managed(self) -> bool:
        pass

    @abstractmethod
    def get_mode(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_pac_url(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_server(self) -> Optional[str]:
        pass

    def get_bypass_list(self) -> Optional[str]:
        return None


class StorePolicyQueries(PolicyQueries):
    """Queries that read named fields from a policy store."""

    MODE_FIELD = "ProxyMode"
    PAC_URL_FIELD = "ProxyPacUrl"
    SERVER_FIELD = "ProxyServer"
    BYPASS_FIELD = "ProxyBypassList"

    def __init__(self, store: PolicyStore):
        self.store = store

    def _read_text(self, field: str) -> Optional[str]:
        value = self.store.read(field)
        if value is not None and not isinstance(value, str):
            raise MalformedSourceError(f"Policy field '{field}' holds {type(value).__name__}, expected a string")
        return value

    def is_managed(self) -> bool:
        return self.store.is_managed()

    def get_mode(self) -> Optional[str]:
        return self._read_text(self.MODE_FIELD)

    def get_pac_url(self) -> Optional[str]:
        return self._read_text(self.PAC_URL_FIELD)

    def get_server(self) -> Optional[str]:
        return self._read_text(self.SERVER_FIELD)

    def get_bypass_list(self) -> Optional[str]:
        return self._read_text(self.BYPASS_FIELD)


class GroupPolicyQueries(StorePolicyQueries):
    """Queries backed by the group-policy store."""


class DeviceManagementQueries(StorePolicyQueries):
    """Queries backed by the device-management store.

    Device management delivers the proxy policy under its own field names.
    """

    MODE_FIELD = "proxy_mode"
    PAC_URL_FIELD = "proxy_pac_url"
    SERVER_FIELD = "proxy_server"
    BYPASS_FIELD = "proxy_bypass_list"

    def __init__(self, store: DeviceManagementStore):
        super().__init__(store)


class PolicyDetector(ProxyDetector):
    """Interprets a managed proxy policy."""

    def __init__(self, queries: PolicyQueries, source: str):
        self.queries = queries
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    def _detect(self) -> Optional[ProxyConfig]:
        if not self.queries.is_managed():
            return None

        mode = (self.queries.get_mode() or "").strip().lower()
        if not mode:
            raise MalformedSourceError("Managed proxy policy has no mode")

        bypass = parse_bypass_list(self.queries.get_bypass_list())

        if mode == MODE_DIRECT:
            return ProxyConfig.direct(bypass_list=bypass)

        if mode == MODE_AUTO_DETECT:
            return ProxyConfig.auto_detect(bypass_list=bypass)

        if mode == MODE_PAC_SCRIPT:
            pac_url = (self.queries.get_pac_url() or "").strip()
            if not pac_url:
                raise MalformedSourceError("Policy mode 'pac_script' has no PAC URL")
            return ProxyConfig.auto_config(pac_url, bypass_list=bypass)

        if mode == MODE_FIXED_SERVERS:
            server = self.queries.get_server()
            if not server or not server.strip():
                raise MalformedSourceError("Policy mode 'fixed_servers' has no proxy server")
            http_proxy, https_proxy = parse_proxy_server(server)
            return ProxyConfig.named(http_proxy, https_proxy, bypass_list=bypass)

        if mode == MODE_SYSTEM:
            logger.debug(f"[{self.source}] policy defers to system settings")
            return None

        raise MalformedSourceError(f"Unknown policy proxy mode '{mode}'")


class GroupPolicyDetector(PolicyDetector):
    def __init__(self, store: PolicyStore):
        super().__init__(GroupPolicyQueries(store), "GroupPolicy")


class DeviceManagementDetector(PolicyDetector):
    def __init__(self, store: DeviceManagementStore):
        super().__init__(DeviceManagementQueries(store), "DeviceManagement")
