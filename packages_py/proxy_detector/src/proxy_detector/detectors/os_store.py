"""
Per-user OS proxy store detectors.

These only work when the caller runs as, or impersonates, the user whose
settings are stored. Outside that context they report a mismatch instead
of returning another user's settings.
"""
from abc import abstractmethod
from typing import Optional

from ..errors import ContextMismatchError
from ..sources import OSProxyStoreQuery
from ..types import ProxyConfig
from .base import ProxyDetector


class OSStoreDetector(ProxyDetector):
    def __init__(self, query: OSProxyStoreQuery):
        self.query = query

    def _detect(self) -> Optional[ProxyConfig]:
        if not self.query.in_user_context():
            raise ContextMismatchError("Caller is not running in the user's security context")
        return self._query()

    @abstractmethod
    def _query(self) -> Optional[ProxyConfig]:
        pass


class OSAutoDetectDetector(OSStoreDetector):
    """WPAD auto-detection setting."""

    @property
    def source(self) -> str:
        return "OSWPAD"

    def _query(self) -> Optional[ProxyConfig]:
        return self.query.get_auto_detect()


class OSAutoConfigDetector(OSStoreDetector):
    """PAC script URL setting."""

    @property
    def source(self) -> str:
        return "OSPAC"

    def _query(self) -> Optional[ProxyConfig]:
        return self.query.get_auto_config()


class OSNamedDetector(OSStoreDetector):
    """Manually configured proxy servers."""

    @property
    def source(self) -> str:
        return "OSNamed"

    def _query(self) -> Optional[ProxyConfig]:
        return self.query.get_named()
