# SafeImage - Utils Configuration

"""
Centralized configuration for SafeImage widgets.
All defaults are exposed here so presets and the demo share one source.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Union

import yaml

from safe_image.utils.logging import get_logger

logger = get_logger(__name__)

CONFIG: Dict[str, Any] = {
    # ===========================================================================
    # Retry policy
    # ===========================================================================
    "max_retries": 3,               # Automatic retries per bound resource
    "retry_delay_ms": 2000,         # Fixed delay between a failure and its retry
    "connectivity_enabled": True,   # Show OFFLINE and hold loads while disconnected

    # ===========================================================================
    # Shimmer placeholder
    # ===========================================================================
    "show_shimmer": True,
    "shimmer_duration_ms": 1500,    # One sweep from -1.0 to 2.0
    "shimmer_interval_ms": 16,      # Repaint cadence (~60 fps)
    "shimmer_base_color": "#E0E0E0",       # grey[300]
    "shimmer_highlight_color": "#F5F5F5",  # grey[100]

    # ===========================================================================
    # Rendering
    # ===========================================================================
    "fit": "cover",                 # cover / contain / fill
    "fallback_icon_size": 32,       # Used when the widget has no fixed size

    # ===========================================================================
    # Presets (builders)
    # ===========================================================================
    "thumbnail_max_retries": 2,
    "thumbnail_retry_delay_ms": 500,
}

FIT_MODES = ("cover", "contain", "fill")


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


def get_config() -> Dict[str, Any]:
    """Return a copy of the configuration dictionary."""
    return CONFIG.copy()


def get(key: str, default: Any = None) -> Any:
    """Get a configuration value by key."""
    return CONFIG.get(key, default)


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for one widget."""
    max_retries: int = 3
    retry_delay_ms: int = 2000
    connectivity_enabled: bool = True

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay_ms < 0:
            raise ValueError("retry_delay_ms must be >= 0")

    @classmethod
    def from_config(cls, **overrides) -> "RetryConfig":
        """Build from CONFIG defaults, applying non-None overrides."""
        values = {
            "max_retries": CONFIG["max_retries"],
            "retry_delay_ms": CONFIG["retry_delay_ms"],
            "connectivity_enabled": CONFIG["connectivity_enabled"],
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(
            max_retries=int(values["max_retries"]),
            retry_delay_ms=int(values["retry_delay_ms"]),
            connectivity_enabled=bool(values["connectivity_enabled"]),
        )


def load_config(path: Union[str, Path], apply: bool = True) -> Dict[str, Any]:
    """
    Load configuration overrides from a YAML file.

    Args:
        path: YAML file with a top-level mapping of CONFIG keys.
        apply: If True, merge the overrides into CONFIG.

    Returns:
        The merged configuration (a copy).

    Raises:
        ConfigError: If the file is not a mapping, has unknown keys,
            or sets an invalid value.
    """
    path = Path(path)
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path.name}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping")

    unknown = sorted(set(data) - set(CONFIG))
    if unknown:
        raise ConfigError(f"Unknown config keys in {path.name}: {', '.join(unknown)}")

    merged = CONFIG.copy()
    merged.update(data)

    if merged["fit"] not in FIT_MODES:
        raise ConfigError(f"fit must be one of {FIT_MODES}, got {merged['fit']!r}")
    try:
        RetryConfig(
            max_retries=int(merged["max_retries"]),
            retry_delay_ms=int(merged["retry_delay_ms"]),
            connectivity_enabled=bool(merged["connectivity_enabled"]),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(str(e)) from e

    if apply:
        CONFIG.update(data)
        logger.info(f"Loaded {len(data)} config override(s) from {path.name}")
    return merged
