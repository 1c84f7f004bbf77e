import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .config import API_KEY_ENV
from .errors import ConfigError
from .models import MapConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "width": 640,
    "height": 640,
    "zoom": 1,
    "scale": 1,
    "center": {"lat": 40.7128, "lng": -74.0060},
}


def load_config(path: Path) -> MapConfig:
    """
    Read a JSON map config, filling unspecified keys from DEFAULT_CONFIG.

    Missing, null and other falsy values fall back to the default and are
    reported in a single notice. Zoom is the exception: 0 is a valid zoom,
    so only a missing or null zoom is defaulted. Anything that isn't JSON,
    or values of the wrong type, raise ConfigError.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError("ERR_CONFIG_READ", f"{path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError("ERR_CONFIG_PARSE", f"{path}: {exc}") from exc
    return parse_config(data)


def _is_unset(key: str, value: object) -> bool:
    if key == "zoom":
        return value is None
    return not value


def parse_config(data: object) -> MapConfig:
    if not isinstance(data, dict):
        raise ConfigError("ERR_CONFIG_PARSE", "Top level of the config must be an object")

    missing = [key for key in DEFAULT_CONFIG if _is_unset(key, data.get(key))]
    if missing:
        logger.warning(
            "The following keys were unspecified and are being defaulted: %s",
            ", ".join(missing),
        )

    merged = {
        key: default if key in missing else data[key]
        for key, default in DEFAULT_CONFIG.items()
    }
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigError("ERR_CONFIG_INVALID", "options must be an object")
    options = dict(options)
    api_key = os.environ.get(API_KEY_ENV)
    if api_key and "key" not in options:
        options["key"] = api_key
    merged["options"] = options

    try:
        return MapConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError("ERR_CONFIG_INVALID", str(exc)) from exc
