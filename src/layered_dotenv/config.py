from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_PROFILE_PREFIX = ".env"
DEFAULT_PROFILES_VAR = "PROFILES"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LoaderSettings:
    profile_prefix: str
    profiles_var: str
    coerce_values: bool


class ConfigError(ValueError):
    pass


def _env_or_default(name: str, default: str) -> str:
    """Read an environment variable or return a default when missing/empty."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _optional_env(name: str) -> Optional[str]:
    """Read an optional environment variable.

    Returns None when missing or empty.
    """
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value if value != "" else None


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag.

    Raises ConfigError if the value is set but not a recognised flag.
    """
    value = _optional_env(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean flag (got {value!r})")


def debug_enabled() -> bool:
    value = os.getenv("DOTENV_DEBUG")
    if value is None:
        return False
    return value.strip().lower() in _TRUE


def load_settings() -> LoaderSettings:
    """Load loader defaults from environment variables.

    Optional:
    - DOTENV_PROFILE_PREFIX (defaults to .env)
    - DOTENV_PROFILES_VAR (defaults to PROFILES)
    - DOTENV_COERCE (defaults to off)
    """
    prefix = _env_or_default("DOTENV_PROFILE_PREFIX", DEFAULT_PROFILE_PREFIX)
    profiles_var = _env_or_default("DOTENV_PROFILES_VAR", DEFAULT_PROFILES_VAR)
    coerce = _env_flag("DOTENV_COERCE")

    if "," in profiles_var or "=" in profiles_var:
        raise ConfigError("DOTENV_PROFILES_VAR must be a plain variable name")

    return LoaderSettings(
        profile_prefix=prefix,
        profiles_var=profiles_var,
        coerce_values=coerce,
    )
