"""Runtime settings with typed configuration and fail-fast validation.

Settings are read from ``WEAKDEPS_*`` environment variables.

Examples
--------
>>> from weakdeps.settings import load_settings
>>> settings = load_settings(hints_enabled=False)
>>> settings.hints_enabled
False
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from weakdeps.errors import SettingsError
from weakdeps.logging import get_logger

__all__ = [
    "WeakDepsSettings",
    "load_settings",
]

logger = get_logger(__name__)


class WeakDepsSettings(BaseSettings):
    """Diagnostic and logging toggles (``WEAKDEPS_*`` namespace)."""

    model_config = SettingsConfigDict(env_prefix="WEAKDEPS_", extra="forbid")

    hints_enabled: bool = Field(
        default=True, description="Install the missing-extension hint for generic functions"
    )
    hint_prefix: str = Field(
        default="HINT: ", description="Text written before each missing-extension hint"
    )
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )


def load_settings(**overrides: object) -> WeakDepsSettings:
    """Load :class:`WeakDepsSettings` with optional overrides.

    Parameters
    ----------
    **overrides : object
        Field values taking precedence over the environment.

    Returns
    -------
    WeakDepsSettings
        Validated settings.

    Raises
    ------
    SettingsError
        If the environment or the overrides fail validation.
    """
    try:
        return WeakDepsSettings(**overrides)  # type: ignore[arg-type]  # BaseSettings accepts arbitrary field kwargs
    except Exception as exc:
        msg = f"Failed to load settings: {exc}"
        logger.exception(
            "Settings loading failed",
            extra={"operation": "load_settings", "error_type": type(exc).__name__},
        )
        raise SettingsError(
            msg,
            cause=exc,
            context={"validation_error": str(exc)},
        ) from exc
