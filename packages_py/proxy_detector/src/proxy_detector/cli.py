"""
Command-line interface for proxy-detector.

Usage:
    proxy-detect
    proxy-detect --config proxy_detector.yaml --browser --log-level DEBUG
"""
import json
import logging
from typing import Any, Dict, Optional

import click

from .errors import SettingsError
from .factory import create_detector_chain
from .settings import load_settings
from .types import ResolveResult


def result_to_dict(result: ResolveResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "found": result.found,
        "source": result.source,
        "config": None,
        "proxy_string": None,
        "diagnostics": [
            {"source": d.source, "kind": d.kind.value, "reason": d.reason}
            for d in result.diagnostics
        ],
    }
    if result.config is not None:
        data["config"] = result.config.model_dump(mode="json")
        data["proxy_string"] = result.config.proxy_string()
    return data


@click.command()
@click.version_option(version="0.1.0", prog_name="proxy-detect")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False), help="Settings YAML file")
@click.option("--browser/--no-browser", default=None, help="Include browser detectors")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
def main(config_path: Optional[str], browser: Optional[bool], log_level: Optional[str]):
    """Resolve the effective proxy configuration and print it as JSON."""
    try:
        settings = load_settings(config_path, include_browser_detectors=browser, log_level=log_level)
    except SettingsError as e:
        raise click.ClickException(str(e))

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    chain = create_detector_chain(settings)
    result = chain.resolve()
    click.echo(json.dumps(result_to_dict(result), indent=2))


if __name__ == "__main__":
    main()
