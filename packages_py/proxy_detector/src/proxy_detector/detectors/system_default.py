from typing import Optional

from ..sources import SystemProxyQuery
from ..types import ProxyConfig
from .base import ProxyDetector


class DefaultSystemDetector(ProxyDetector):
    """Proxy settings configured for the OS network stack."""

    def __init__(self, query: SystemProxyQuery):
        self.query = query

    @property
    def source(self) -> str:
        return "SystemDefault"

    def _detect(self) -> Optional[ProxyConfig]:
        return self.query.get_default()
