"""
Runtime settings for tween evaluation.

Settings are plain values with environment overrides; nothing is persisted.
"""
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from stween.logging.logger import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = ("1", "true", "on", "yes")
_FALSE_VALUES = ("0", "false", "off", "no")


def _parse_bool(raw: Optional[str], default: bool, key: str) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Ignoring unrecognised value %r for %s", raw, key)
    return default


@dataclass(frozen=True)
class TweenSettings:
    """Evaluation policy for a TweenRegistry."""
    clamp_position: bool = False            # Clamp elapsed/duration to [0, 1] before easing
    sample_before_increment: bool = False   # Sample at the pre-increment elapsed time
    default_easing: str = "linear"          # EasingCurve value for new records

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TweenSettings":
        """
        Build settings from STWEEN_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            TweenSettings with overrides applied on top of the defaults
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        settings = cls(
            clamp_position=_parse_bool(
                env.get("STWEEN_CLAMP_POSITION"), defaults.clamp_position,
                "STWEEN_CLAMP_POSITION"),
            sample_before_increment=_parse_bool(
                env.get("STWEEN_SAMPLE_BEFORE_INCREMENT"), defaults.sample_before_increment,
                "STWEEN_SAMPLE_BEFORE_INCREMENT"),
            default_easing=(env.get("STWEEN_DEFAULT_EASING") or defaults.default_easing).strip().lower(),
        )
        if settings != defaults:
            logger.debug("TweenSettings from environment: %s", settings)
        return settings

    def with_overrides(self, **changes) -> "TweenSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


_default_settings: Optional[TweenSettings] = None


def get_default_settings() -> TweenSettings:
    """Get the process-wide settings, read from the environment on first use."""
    global _default_settings
    if _default_settings is None:
        _default_settings = TweenSettings.from_env()
    return _default_settings


def set_default_settings(settings: Optional[TweenSettings]) -> None:
    """Replace the process-wide settings. None re-reads the environment on next use."""
    global _default_settings
    _default_settings = settings
