"""
Detector settings loaded from YAML with environment overrides.

Example ``proxy_detector.yaml``::

    registry_override_path: 'HKLM\\SOFTWARE\\Example\\Proxy'
    update_dev_enabled: false
    include_browser_detectors: true
    browser_app_data_dir: /home/me/.mozilla/firefox
    log_level: INFO
"""
import os
import logging
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import SettingsError

logger = logging.getLogger(__name__)

ENV_SETTINGS_FILE = "PROXY_DETECTOR_CONFIG"
ENV_REGISTRY_PATH = "PROXY_DETECTOR_REGISTRY_PATH"
ENV_INCLUDE_BROWSER = "PROXY_DETECTOR_INCLUDE_BROWSER"
ENV_LOG_LEVEL = "PROXY_DETECTOR_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DetectorSettings(BaseModel):
    """Which detectors the chain contains and how they are configured."""
    registry_override_path: Optional[str] = Field(default=None, description="Key holding the NetConfig override")
    update_dev_enabled: bool = Field(default=False, description="Honour the developer override key")
    include_browser_detectors: bool = Field(default=False, description="Append browser detectors to the chain")
    browser_app_data_dir: Optional[str] = Field(default=None, description="Firefox profiles directory")
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


def _resolve(arg: Any, env_key: str, environ: Mapping[str, str], config: Dict[str, Any], config_key: str) -> Any:
    """Resolve a value: argument, then env var, then file value."""
    if arg is not None:
        return arg
    val = environ.get(env_key)
    if val is not None and val != "":
        return val
    return config.get(config_key)


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise SettingsError(f"Settings file not found: {path}", path)
    except yaml.YAMLError as e:
        raise SettingsError(f"YAML parsing error in {path}: {e}", path)

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping", path)
    return data


def load_settings(
    path: Optional[str] = None,
    include_browser_detectors: Optional[bool] = None,
    log_level: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DetectorSettings:
    """Load settings from ``path`` (or ``$PROXY_DETECTOR_CONFIG``) and the environment."""
    environ = os.environ if environ is None else environ
    path = path or environ.get(ENV_SETTINGS_FILE)

    data: Dict[str, Any] = _read_yaml(path) if path else {}
    if path:
        logger.debug(f"Loaded detector settings from {path}")

    overrides = {
        "registry_override_path": _resolve(None, ENV_REGISTRY_PATH, environ, data, "registry_override_path"),
        "include_browser_detectors": _resolve(
            include_browser_detectors, ENV_INCLUDE_BROWSER, environ, data, "include_browser_detectors"
        ),
        "log_level": _resolve(log_level, ENV_LOG_LEVEL, environ, data, "log_level"),
    }
    merged = dict(data)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DetectorSettings(**merged)
    except ValidationError as e:
        raise SettingsError(f"Invalid detector settings: {e}", path)
