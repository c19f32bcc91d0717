"""
Factory for building detector chains.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from .chain import DetectorChain
from .detectors import (
    BrowserConfigFileDetector,
    DefaultSystemDetector,
    DeviceManagementDetector,
    GroupPolicyDetector,
    OSAutoConfigDetector,
    OSAutoDetectDetector,
    OSNamedDetector,
    ProxyDetector,
    RegistryOverrideDetector,
    UpdateDevDetector,
)
from .settings import DetectorSettings
from .sources import (
    DeviceManagementStore,
    FileReader,
    KeyValueStore,
    OSProxyStoreQuery,
    PolicyStore,
    ProfileLocator,
    SystemProxyQuery,
)
from .system import EnvironmentSystemProxyQuery, FirefoxProfileLocator, LocalFileReader

logger = logging.getLogger(__name__)


@dataclass
class Collaborators:
    """External sources supplied by the embedding application.

    A detector whose collaborator is missing is left out of the chain.
    """
    key_value_store: Optional[KeyValueStore] = None
    policy_store: Optional[PolicyStore] = None
    device_management_store: Optional[DeviceManagementStore] = None
    system_query: Optional[SystemProxyQuery] = None
    os_store_query: Optional[OSProxyStoreQuery] = None
    profile_locator: Optional[ProfileLocator] = None
    file_reader: Optional[FileReader] = None


def default_collaborators(settings: Optional[DetectorSettings] = None) -> Collaborators:
    """Collaborators available on any machine without platform bindings."""
    settings = settings or DetectorSettings()
    return Collaborators(
        system_query=EnvironmentSystemProxyQuery(),
        profile_locator=FirefoxProfileLocator(settings.browser_app_data_dir),
        file_reader=LocalFileReader(),
    )


def create_detectors(settings: DetectorSettings, collaborators: Collaborators) -> List[ProxyDetector]:
    """Build detectors in priority order.

    Overrides come first, then device management ahead of group policy,
    then the system default, then browser detectors when requested.
    """
    detectors: List[ProxyDetector] = []
    c = collaborators

    if c.key_value_store is not None:
        if settings.update_dev_enabled:
            detectors.append(UpdateDevDetector(c.key_value_store))
        if settings.registry_override_path:
            detectors.append(RegistryOverrideDetector(c.key_value_store, settings.registry_override_path))

    if c.device_management_store is not None:
        detectors.append(DeviceManagementDetector(c.device_management_store))
    if c.policy_store is not None:
        detectors.append(GroupPolicyDetector(c.policy_store))

    if c.system_query is not None:
        detectors.append(DefaultSystemDetector(c.system_query))

    if settings.include_browser_detectors:
        locator = c.profile_locator or FirefoxProfileLocator(settings.browser_app_data_dir)
        reader = c.file_reader or LocalFileReader()
        detectors.append(BrowserConfigFileDetector(locator, reader))
        if c.os_store_query is not None:
            detectors.append(OSAutoDetectDetector(c.os_store_query))
            detectors.append(OSAutoConfigDetector(c.os_store_query))
            detectors.append(OSNamedDetector(c.os_store_query))

    return detectors


def create_detector_chain(
    settings: Optional[DetectorSettings] = None,
    collaborators: Optional[Collaborators] = None,
) -> DetectorChain:
    """Create a DetectorChain; collaborators default to ``default_collaborators()``."""
    settings = settings or DetectorSettings()
    if collaborators is None:
        collaborators = default_collaborators(settings)
    detectors = create_detectors(settings, collaborators)
    if not detectors:
        logger.warning("Detector chain is empty; every resolve will find nothing")
    return DetectorChain(detectors)
