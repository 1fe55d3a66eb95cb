"""Configuration loader.

Loads settings from ~/.factup/config.json and lets environment variables
override them. A ``.env`` file is read at startup by :mod:`factup.main`.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .facts.errors import CategoryNotFoundError
from .facts.provider import parse_category

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".factup"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.json"

ENV_PREFIX = "FACTUP_"


@dataclass
class FactUpConfig:
    """Application settings.

    Attributes:
        ninja_api_key: API key for the keyworded fact source.
        request_timeout: Timeout in seconds for every HTTP request.
        prefetch: Whether to pre-fetch the next fact in the background.
        speech_poll_interval: Seconds between speech completion checks.
        data_dir: Where preferences and logs are written.
        default_category: Category shown at startup.
    """

    ninja_api_key: str = ""
    request_timeout: float = 10.0
    prefetch: bool = True
    speech_poll_interval: float = 0.5
    data_dir: Path | None = None
    default_category: str = "General"
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.data_dir is None:
            self.data_dir = DEFAULT_DATA_DIR

        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        if self.speech_poll_interval <= 0:
            raise ValueError("speech_poll_interval must be positive")

        try:
            self.default_category = parse_category(self.default_category).value
        except CategoryNotFoundError as e:
            raise ValueError(str(e)) from e

    @property
    def preferences_path(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "preferences.json"

    @property
    def log_dir(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "logs"


def _env_overrides() -> dict[str, Any]:
    """Collect FACTUP_* environment overrides, skipping unparseable values."""
    overrides: dict[str, Any] = {}

    api_key = os.getenv(f"{ENV_PREFIX}NINJA_API_KEY")
    if api_key:
        overrides["ninja_api_key"] = api_key

    timeout = os.getenv(f"{ENV_PREFIX}REQUEST_TIMEOUT")
    if timeout:
        try:
            overrides["request_timeout"] = float(timeout)
        except ValueError:
            logger.warning("Ignoring invalid %sREQUEST_TIMEOUT=%r", ENV_PREFIX, timeout)

    prefetch = os.getenv(f"{ENV_PREFIX}PREFETCH")
    if prefetch:
        overrides["prefetch"] = prefetch.lower() in ("1", "true", "yes", "y")

    data_dir = os.getenv(f"{ENV_PREFIX}DATA_DIR")
    if data_dir:
        overrides["data_dir"] = data_dir

    category = os.getenv(f"{ENV_PREFIX}DEFAULT_CATEGORY")
    if category:
        overrides["default_category"] = category

    return overrides


def load_config(config_path: Path | None = None) -> FactUpConfig:
    """Load FactUpConfig from a JSON file plus environment overrides.

    The config file is a flat object:
    ```json
    {
      "ninja_api_key": "...",
      "request_timeout": 10,
      "prefetch": true,
      "default_category": "Science"
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        FactUpConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                data = loaded
            else:
                logger.warning("Config in %s is not an object. Using defaults.", path)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)

    data.update(_env_overrides())
    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> FactUpConfig:
    """Parse config dictionary into FactUpConfig, dropping invalid values."""
    defaults = FactUpConfig()
    known = {
        "ninja_api_key",
        "request_timeout",
        "prefetch",
        "speech_poll_interval",
        "data_dir",
        "default_category",
    }

    api_key = data.get("ninja_api_key", defaults.ninja_api_key)
    if not isinstance(api_key, str):
        api_key = defaults.ninja_api_key

    timeout = data.get("request_timeout", defaults.request_timeout)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        timeout = defaults.request_timeout

    poll = data.get("speech_poll_interval", defaults.speech_poll_interval)
    if not isinstance(poll, (int, float)) or poll <= 0:
        poll = defaults.speech_poll_interval

    prefetch = data.get("prefetch", defaults.prefetch)
    if not isinstance(prefetch, bool):
        prefetch = defaults.prefetch

    data_dir = data.get("data_dir")
    data_dir = Path(data_dir).expanduser() if isinstance(data_dir, str) and data_dir else None

    category = data.get("default_category", defaults.default_category)
    try:
        category = parse_category(str(category)).value
    except CategoryNotFoundError:
        logger.warning("Unknown default_category %r, using %s", category, defaults.default_category)
        category = defaults.default_category

    return FactUpConfig(
        ninja_api_key=api_key,
        request_timeout=float(timeout),
        prefetch=prefetch,
        speech_poll_interval=float(poll),
        data_dir=data_dir,
        default_category=category,
        extra={k: v for k, v in data.items() if k not in known},
    )


def save_config(config: FactUpConfig, config_path: Path | None = None) -> None:
    """Save FactUpConfig to a JSON file.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = dict(config.extra)
    data.update(
        {
            "ninja_api_key": config.ninja_api_key,
            "request_timeout": config.request_timeout,
            "prefetch": config.prefetch,
            "speech_poll_interval": config.speech_poll_interval,
            "default_category": config.default_category,
        }
    )
    if config.data_dir is not None and config.data_dir != DEFAULT_DATA_DIR:
        data["data_dir"] = str(config.data_dir)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
