"""
Default collaborator implementations backed by the local machine.
"""
import os
import sys
import logging
import configparser
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .errors import MalformedSourceError
from .proxy_string import parse_bypass_list, parse_server
from .sources import FileReader, ProfileLocator, SystemProxyQuery
from .types import ProxyConfig

logger = logging.getLogger(__name__)

PREFS_FILE_NAME = "prefs.js"


def _env_value(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name) or environ.get(name.lower())
    return value.strip() if value and value.strip() else None


class EnvironmentSystemProxyQuery(SystemProxyQuery):
    """System default read from the conventional proxy environment variables.

    Uses HTTPS_PROXY / HTTP_PROXY for the servers and NO_PROXY for the
    bypass list. Lower-case names are honoured too.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def get_default(self) -> Optional[ProxyConfig]:
        environ = os.environ if self._environ is None else self._environ

        https_value = _env_value(environ, "HTTPS_PROXY")
        http_value = _env_value(environ, "HTTP_PROXY")
        if not https_value and not http_value:
            logger.debug("No proxy environment variables set")
            return None

        http_proxy = parse_server(http_value) if http_value else None
        https_proxy = parse_server(https_value) if https_value else None
        bypass = parse_bypass_list(_env_value(environ, "NO_PROXY"))
        return ProxyConfig.named(http_proxy, https_proxy, bypass_list=bypass)


class LocalFileReader(FileReader):
    """Reads files from the local file system."""

    def __init__(self, encoding: str = "latin-1"):
        self.encoding = encoding

    def stat_mtime(self, path: str) -> Optional[int]:
        try:
            return os.stat(path).st_mtime_ns
        except FileNotFoundError:
            return None

    def read_lines(self, path: str) -> List[str]:
        with open(path, "r", encoding=self.encoding, errors="replace") as f:
            return f.read().splitlines()


def default_firefox_app_data_dir() -> Path:
    """Platform location of the Firefox profiles directory."""
    if sys.platform.startswith("win"):
        base = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(base) / "Mozilla" / "Firefox"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Firefox"
    return Path.home() / ".mozilla" / "firefox"


class FirefoxProfileLocator(ProfileLocator):
    """Finds the default Firefox profile by reading ``profiles.ini``.

    An ``[Install*]`` section's ``Default`` path wins. Otherwise the
    ``[Profile*]`` section marked ``Default=1`` is used, falling back to
    the first profile listed.
    """

    BROWSER_NAME = "firefox"

    def __init__(self, app_data_dir: Optional[str] = None):
        self.app_data_dir = Path(app_data_dir) if app_data_dir else default_firefox_app_data_dir()

    def resolve(self, browser_name: str) -> Optional[Tuple[str, str]]:
        if browser_name.lower() != self.BROWSER_NAME:
            logger.debug(f"FirefoxProfileLocator cannot resolve browser '{browser_name}'")
            return None

        ini_path = self.app_data_dir / "profiles.ini"
        if not ini_path.exists():
            logger.debug(f"No profiles.ini at {ini_path}")
            return None

        parser = configparser.ConfigParser(interpolation=None)
        try:
            with open(ini_path, "r", encoding="utf-8", errors="replace") as f:
                parser.read_file(f)
        except configparser.Error as e:
            raise MalformedSourceError(f"Unparseable {ini_path}: {e}")

        profiles = [parser[s] for s in parser.sections() if s.lower().startswith("profile")]
        if not profiles:
            logger.debug(f"No profile sections in {ini_path}")
            return None

        install_default = None
        for section in parser.sections():
            if section.lower().startswith("install") and parser[section].get("Default"):
                install_default = parser[section].get("Default")
                break

        chosen = None
        if install_default:
            chosen = next((p for p in profiles if p.get("Path") == install_default), None)
        if chosen is None:
            chosen = next((p for p in profiles if p.get("Default") == "1"), profiles[0])

        rel_path = chosen.get("Path")
        if not rel_path:
            raise MalformedSourceError(f"Profile '{chosen.name}' in {ini_path} has no Path")

        if chosen.get("IsRelative", "1") == "1":
            profile_dir = self.app_data_dir / rel_path
        else:
            profile_dir = Path(rel_path)

        name = chosen.get("Name") or chosen.name
        return name, str(profile_dir / PREFS_FILE_NAME)
