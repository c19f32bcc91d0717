"""
Data models for proxy detection.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator


class ProxyMode(str, Enum):
    """Mutually exclusive proxy strategy."""
    NO_PROXY = "no_proxy"
    AUTO_DETECT = "auto_detect"
    AUTO_CONFIG_URL = "auto_config_url"
    NAMED_PROXY = "named_proxy"


class FailureKind(str, Enum):
    """Why a detector produced no configuration."""
    ABSENT = "absent"
    MALFORMED_SOURCE = "malformed_source"
    ACCESS_DENIED = "access_denied"
    CONTEXT_MISMATCH = "context_mismatch"
    IO_FAILURE = "io_failure"


class ProxyServer(BaseModel):
    """A single proxy endpoint."""
    model_config = {"frozen": True}

    host: str = Field(min_length=1, description="Proxy host name or address")
    port: int = Field(ge=1, le=65535, description="Proxy port")

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class ProxyConfig(BaseModel):
    """Resolved proxy configuration produced by a detector.

    Instances are immutable. Fields that do not belong to ``mode`` must be
    empty, so a config can never carry a PAC URL while claiming to be a
    named proxy.
    """
    model_config = {"frozen": True}

    mode: ProxyMode = ProxyMode.NO_PROXY
    auto_config_url: Optional[str] = Field(default=None, description="PAC script URL")
    http_proxy: Optional[ProxyServer] = Field(default=None, description="Proxy for http:// requests")
    https_proxy: Optional[ProxyServer] = Field(default=None, description="Proxy for https:// requests")
    bypass_list: Tuple[str, ...] = Field(default_factory=tuple, description="Hosts exempt from proxying")
    source: str = Field(default="", description="Label of the detector that produced this config")

    @model_validator(mode="after")
    def validate_mode_fields(self) -> "ProxyConfig":
        """Reject fields that do not belong to the active mode."""
        if self.mode == ProxyMode.AUTO_CONFIG_URL:
            if not self.auto_config_url:
                raise ValueError("auto_config_url mode requires 'auto_config_url'")
        elif self.auto_config_url is not None:
            raise ValueError(f"'auto_config_url' is not allowed in {self.mode.value} mode")

        has_server = self.http_proxy is not None or self.https_proxy is not None
        if self.mode == ProxyMode.NAMED_PROXY:
            if not has_server:
                raise ValueError("named_proxy mode requires 'http_proxy' or 'https_proxy'")
        elif has_server:
            raise ValueError(f"proxy servers are not allowed in {self.mode.value} mode")

        return self

    @classmethod
    def direct(cls, source: str = "", bypass_list: Tuple[str, ...] = ()) -> "ProxyConfig":
        return cls(mode=ProxyMode.NO_PROXY, bypass_list=tuple(bypass_list), source=source)

    @classmethod
    def auto_detect(cls, source: str = "", bypass_list: Tuple[str, ...] = ()) -> "ProxyConfig":
        return cls(mode=ProxyMode.AUTO_DETECT, bypass_list=tuple(bypass_list), source=source)

    @classmethod
    def auto_config(cls, url: str, source: str = "", bypass_list: Tuple[str, ...] = ()) -> "ProxyConfig":
        return cls(
            mode=ProxyMode.AUTO_CONFIG_URL,
            auto_config_url=url,
            bypass_list=tuple(bypass_list),
            source=source,
        )

    @classmethod
    def named(
        cls,
        http_proxy: Optional[ProxyServer],
        https_proxy: Optional[ProxyServer],
        bypass_list: Tuple[str, ...] = (),
        source: str = "",
    ) -> "ProxyConfig":
        return cls(
            mode=ProxyMode.NAMED_PROXY,
            http_proxy=http_proxy,
            https_proxy=https_proxy,
            bypass_list=tuple(bypass_list),
            source=source,
        )

    def proxy_string(self) -> Optional[str]:
        """Render the named servers as a WinHTTP-style proxy string.

        Returns ``host:port`` when both schemes share a server, otherwise
        ``http=host:port;https=host:port`` with only the configured schemes.
        """
        if self.mode != ProxyMode.NAMED_PROXY:
            return None
        if self.http_proxy == self.https_proxy:
            return str(self.http_proxy)
        parts = []
        if self.http_proxy is not None:
            parts.append(f"http={self.http_proxy}")
        if self.https_proxy is not None:
            parts.append(f"https={self.https_proxy}")
        return ";".join(parts)

    def with_source(self, source: str) -> "ProxyConfig":
        """Return a copy labelled with ``source``."""
        if source == self.source:
            return self
        return self.model_copy(update={"source": source})


@dataclass(frozen=True)
class DetectionFailure:
    """Diagnostic record for a detector that produced nothing."""
    kind: FailureKind
    source: str
    reason: str

    def __str__(self) -> str:
        return f"{self.source}: {self.kind.value} ({self.reason})"


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a single ``detect()`` call. Exactly one field is set."""
    config: Optional[ProxyConfig] = None
    failure: Optional[DetectionFailure] = None

    @property
    def found(self) -> bool:
        return self.config is not None


@dataclass
class ResolveResult:
    """Outcome of walking the detector chain."""
    config: Optional[ProxyConfig] = None
    source: Optional[str] = None
    diagnostics: List[DetectionFailure] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.config is not None
