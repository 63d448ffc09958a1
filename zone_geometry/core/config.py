"""Geometry pipeline configuration loaded from environment variables.

All configuration values have sensible defaults. The hosting API process
reads them once at startup and threads the resulting object through
every batch call.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration surfaces at startup rather
    than as silently distorted geometry.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from zone_geometry.core.constants import DEFAULT_COUNTRY_CODE, DEFAULT_SIMPLIFY_TOLERANCE_DEG
from zone_geometry.core.exceptions import PipelineError

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class GeometryConfig:
    """Immutable geometry pipeline configuration.

    Attributes:
        default_country: Country whose projection parameters callers fall
            back to when a batch names an unregistered country.
        simplify_tolerance_deg: RDP tolerance in degrees (post-projection).
        worker_max_workers: Thread count of the background batch worker.
        close_rings: Whether serialised Polygon rings repeat the first point.
    """

    default_country: str = DEFAULT_COUNTRY_CODE
    simplify_tolerance_deg: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG
    worker_max_workers: int = 1
    close_rings: bool = False

    @classmethod
    def from_env(cls) -> GeometryConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, empty, or
                not a recognised boolean.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``GEOMETRY_WORKER_MAX_WORKERS=abc``).
        """
        config = cls(
            default_country=os.getenv("GEOMETRY_DEFAULT_COUNTRY", DEFAULT_COUNTRY_CODE).strip().upper(),
            simplify_tolerance_deg=float(
                os.getenv("GEOMETRY_SIMPLIFY_TOLERANCE_DEG", str(DEFAULT_SIMPLIFY_TOLERANCE_DEG))
            ),
            worker_max_workers=int(os.getenv("GEOMETRY_WORKER_MAX_WORKERS", "1")),
            close_rings=_parse_bool("GEOMETRY_CLOSE_RINGS", os.getenv("GEOMETRY_CLOSE_RINGS", "false")),
        )
        _validate(config)
        return config


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")


def _validate(config: GeometryConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.default_country:
        raise ConfigValidationError(
            "GEOMETRY_DEFAULT_COUNTRY",
            config.default_country,
            "must not be empty",
        )

    if config.simplify_tolerance_deg < 0:
        raise ConfigValidationError(
            "GEOMETRY_SIMPLIFY_TOLERANCE_DEG",
            config.simplify_tolerance_deg,
            "must be >= 0 (degrees)",
        )

    if config.worker_max_workers < 1:
        raise ConfigValidationError(
            "GEOMETRY_WORKER_MAX_WORKERS",
            config.worker_max_workers,
            "must be >= 1",
        )
