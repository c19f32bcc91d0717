"""
Proxy detection package.

Resolves the effective proxy configuration by asking a prioritized chain
of configuration sources and returning the first one that applies.
"""
from .types import (
    ProxyMode,
    ProxyServer,
    ProxyConfig,
    FailureKind,
    DetectionFailure,
    DetectionResult,
    ResolveResult,
)
from .errors import (
    ProxyDetectionError,
    MalformedSourceError,
    AccessDeniedError,
    ContextMismatchError,
    IOFailureError,
    SettingsError,
)
from .proxy_string import build_proxy_string, parse_proxy_server, parse_bypass_list
from .sources import (
    KeyValueStore,
    PolicyStore,
    DeviceManagementStore,
    SystemProxyQuery,
    OSProxyStoreQuery,
    ProfileLocator,
    FileReader,
    InMemoryKeyValueStore,
    InMemoryPolicyStore,
    StaticSystemProxyQuery,
    StaticOSProxyStoreQuery,
    StaticProfileLocator,
    InMemoryFileReader,
)
from .system import EnvironmentSystemProxyQuery, LocalFileReader, FirefoxProfileLocator
from .detectors import (
    ProxyDetector,
    RegistryOverrideDetector,
    UpdateDevDetector,
    PolicyQueries,
    GroupPolicyQueries,
    DeviceManagementQueries,
    PolicyDetector,
    GroupPolicyDetector,
    DeviceManagementDetector,
    DefaultSystemDetector,
    OSAutoDetectDetector,
    OSAutoConfigDetector,
    OSNamedDetector,
    BrowserConfigFileDetector,
)
from .chain import DetectorChain
from .settings import DetectorSettings, load_settings
from .factory import Collaborators, create_detector_chain, create_detectors, default_collaborators

__all__ = [
    "ProxyMode",
    "ProxyServer",
    "ProxyConfig",
    "FailureKind",
    "DetectionFailure",
    "DetectionResult",
    "ResolveResult",
    "ProxyDetectionError",
    "MalformedSourceError",
    "AccessDeniedError",
    "ContextMismatchError",
    "IOFailureError",
    "SettingsError",
    "build_proxy_string",
    "parse_proxy_server",
    "parse_bypass_list",
    "KeyValueStore",
    "PolicyStore",
    "DeviceManagementStore",
    "SystemProxyQuery",
    "OSProxyStoreQuery",
    "ProfileLocator",
    "FileReader",
    "InMemoryKeyValueStore",
    "InMemoryPolicyStore",
    "StaticSystemProxyQuery",
    "StaticOSProxyStoreQuery",
    "StaticProfileLocator",
    "InMemoryFileReader",
    "EnvironmentSystemProxyQuery",
    "LocalFileReader",
    "FirefoxProfileLocator",
    "ProxyDetector",
    "RegistryOverrideDetector",
    "UpdateDevDetector",
    "PolicyQueries",
    "GroupPolicyQueries",
    "DeviceManagementQueries",
    "PolicyDetector",
    "GroupPolicyDetector",
    "DeviceManagementDetector",
    "DefaultSystemDetector",
    "OSAutoDetectDetector",
    "OSAutoConfigDetector",
    "OSNamedDetector",
    "BrowserConfigFileDetector",
    "DetectorChain",
    "DetectorSettings",
    "load_settings",
    "Collaborators",
    "create_detector_chain",
    "create_detectors",
    "default_collaborators",
]
