"""
Collaborator interfaces consumed by detectors.

The embedding application owns these. Detectors only read through them,
and each interface is kept as narrow as the detectors need. In-memory
implementations are provided for tests and for applications that load
their settings from elsewhere.
"""
import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from .types import ProxyConfig


class KeyValueStore(ABC):
    """Registry-style store of named values under a path."""

    @abstractmethod
    def read(self, path: str, name: str) -> Optional[str]:
        """Return the value, or None when the path or name does not exist."""
        pass


class PolicyStore(ABC):
    """Administrator-managed policy values."""

    @abstractmethod
    def is_managed(self) -> bool:
        pass

    @abstractmethod
    def read(self, field: str) -> Optional[str]:
        pass


class DeviceManagementStore(PolicyStore):
    """Policy values pushed by a device-management service."""
    pass


class SystemProxyQuery(ABC):
    """OS network-stack default proxy settings."""

    @abstractmethod
    def get_default(self) -> Optional[ProxyConfig]:
        pass


class OSProxyStoreQuery(ABC):
    """Per-user OS proxy store, split by configuration class."""

    @abstractmethod
    def in_user_context(self) -> bool:
        """Whether the caller runs as (or impersonates) the store's user."""
        pass

    @abstractmethod
    def get_auto_detect(self) -> Optional[ProxyConfig]:
        pass

    @abstractmethod
    def get_auto_config(self) -> Optional[ProxyConfig]:
        pass

    @abstractmethod
    def get_named(self) -> Optional[ProxyConfig]:
        pass


class ProfileLocator(ABC):
    """Finds a browser's active profile."""

    @abstractmethod
    def resolve(self, browser_name: str) -> Optional[Tuple[str, str]]:
        """Return ``(profile_name, prefs_file_path)`` or None."""
        pass


class FileReader(ABC):
    """File primitive used by the browser config detector."""

    @abstractmethod
    def stat_mtime(self, path: str) -> Optional[int]:
        """Return the modification timestamp, or None when the file is absent.

        Raises OSError when the file exists but cannot be inspected.
        """
        pass

    @abstractmethod
    def read_lines(self, path: str) -> Iterable[str]:
        """Return the file's lines. Raises OSError on read failure."""
        pass


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------

class InMemoryKeyValueStore(KeyValueStore):
    """KeyValueStore backed by ``{path: {name: value}}``."""

    def __init__(self, values: Optional[Dict[str, Dict[str, str]]] = None):
        self._values = {path.lower(): {k.lower(): v for k, v in names.items()}
                        for path, names in (values or {}).items()}

    def read(self, path: str, name: str) -> Optional[str]:
        return self._values.get(path.lower(), {}).get(name.lower())


class InMemoryPolicyStore(DeviceManagementStore):
    """Policy store backed by a dict. Usable for both policy sources."""

    def __init__(self, values: Optional[Dict[str, str]] = None, managed: Optional[bool] = None):
        self._values = dict(values or {})
        self._managed = bool(self._values) if managed is None else managed

    def is_managed(self) -> bool:
        return self._managed

    def read(self, field: str) -> Optional[str]:
        return self._values.get(field)


class StaticSystemProxyQuery(SystemProxyQuery):
    def __init__(self, config: Optional[ProxyConfig] = None):
        self._config = config

    def get_default(self) -> Optional[ProxyConfig]:
        return self._config


class StaticOSProxyStoreQuery(OSProxyStoreQuery):
    def __init__(
        self,
        auto_detect: Optional[ProxyConfig] = None,
        auto_config: Optional[ProxyConfig] = None,
        named: Optional[ProxyConfig] = None,
        user_context: bool = True,
    ):
        self._auto_detect = auto_detect
        self._auto_config = auto_config
        self._named = named
        self._user_context = user_context

    def in_user_context(self) -> bool:
        return self._user_context

    def get_auto_detect(self) -> Optional[ProxyConfig]:
        return self._auto_detect

    def get_auto_config(self) -> Optional[ProxyConfig]:
        return self._auto_config

    def get_named(self) -> Optional[ProxyConfig]:
        return self._named


class StaticProfileLocator(ProfileLocator):
    """ProfileLocator backed by ``{browser_name: (profile_name, path)}``."""

    def __init__(self, profiles: Optional[Dict[str, Tuple[str, str]]] = None):
        self._profiles = {k.lower(): v for k, v in (profiles or {}).items()}

    def resolve(self, browser_name: str) -> Optional[Tuple[str, str]]:
        return self._profiles.get(browser_name.lower())


class InMemoryFileReader(FileReader):
    """FileReader over in-memory files with explicit timestamps.

    ``read_count`` records how many times each path was read.
    """

    def __init__(self):
        self._files: Dict[str, Tuple[int, str]] = {}
        self._errors: Dict[str, OSError] = {}
        self._lock = threading.Lock()
        self.read_count: Dict[str, int] = {}

    def write(self, path: str, content: str, mtime: int) -> None:
        with self._lock:
            self._files[path] = (mtime, content)

    def remove(self, path: str) -> None:
        with self._lock:
            self._files.pop(path, None)

    def fail_reads(self, path: str, error: Optional[OSError] = None) -> None:
        """Make subsequent reads of ``path`` raise ``error``."""
        with self._lock:
            self._errors[path] = error or PermissionError(13, "Permission denied", path)

    def allow_reads(self, path: str) -> None:
        with self._lock:
            self._errors.pop(path, None)

    def stat_mtime(self, path: str) -> Optional[int]:
        with self._lock:
            entry = self._files.get(path)
        return entry[0] if entry else None

    def read_lines(self, path: str) -> List[str]:
        with self._lock:
            if path in self._errors:
                raise self._errors[path]
            if path not in self._files:
                raise FileNotFoundError(2, "No such file or directory", path)
            self.read_count[path] = self.read_count.get(path, 0) + 1
            return self._files[path][1].splitlines()
