"""
Proxy detectors, one per configuration source.
"""
from .base import ProxyDetector
from .registry import RegistryOverrideDetector, UpdateDevDetector, parse_net_config
from .policy import (
    PolicyQueries,
    StorePolicyQueries,
    GroupPolicyQueries,
    DeviceManagementQueries,
    PolicyDetector,
    GroupPolicyDetector,
    DeviceManagementDetector,
)
from .system_default import DefaultSystemDetector
from .os_store import OSStoreDetector, OSAutoDetectDetector, OSAutoConfigDetector, OSNamedDetector
from .browser_file import BrowserConfigFileDetector, parse_prefs_line, parse_prefs, interpret_prefs

__all__ = [
    "ProxyDetector",
    "RegistryOverrideDetector",
    "UpdateDevDetector",
    "parse_net_config",
    "PolicyQueries",
    "StorePolicyQueries",
    "GroupPolicyQueries",
    "DeviceManagementQueries",
    "PolicyDetector",
    "GroupPolicyDetector",
    "DeviceManagementDetector",
    "DefaultSystemDetector",
    "OSStoreDetector",
    "OSAutoDetectDetector",
    "OSAutoConfigDetector",
    "OSNamedDetector",
    "BrowserConfigFileDetector",
    "parse_prefs_line",
    "parse_prefs",
    "interpret_prefs",
]
