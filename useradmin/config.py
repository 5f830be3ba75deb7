"""Configuration management for the user administration console."""
from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .client import DEFAULT_API_BASE_URL

_ENV_PREFIX = "USERADMIN_"
_KNOWN_KEYS = {
    "api_base_url",
    "request_timeout",
    "session_secret",
    "session_ttl_hours",
    "secure_cookies",
    "log_level",
}


def _env_flag(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _positive_float(value: object, field_name: str) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{field_name} must be greater than zero")
    return number


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the web console."""

    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 30.0
    session_secret: str = ""
    session_ttl_hours: float = 8.0
    secure_cookies: bool = False
    log_level: str = "INFO"

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Settings":
        """Create :class:`Settings` from raw configuration values."""
        unknown = set(data.keys()) - _KNOWN_KEYS
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        base_url = str(data.get("api_base_url") or DEFAULT_API_BASE_URL).strip().rstrip("/")
        secure = data.get("secure_cookies", False)
        if isinstance(secure, str):
            secure = _env_flag(secure)

        return Settings(
            api_base_url=base_url or DEFAULT_API_BASE_URL,
            request_timeout=_positive_float(data.get("request_timeout", 30.0), "request_timeout"),
            session_secret=str(data.get("session_secret") or ""),
            session_ttl_hours=_positive_float(data.get("session_ttl_hours", 8.0), "session_ttl_hours"),
            secure_cookies=bool(secure),
            log_level=str(data.get("log_level") or "INFO").upper(),
        )

    def with_session_secret(self) -> "Settings":
        """Return settings guaranteed to carry a session secret."""
        if self.session_secret:
            return self
        return replace(self, session_secret=secrets.token_urlsafe(32))


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    return (Path(__file__).resolve().parent.parent / "config" / "useradmin.yaml").resolve(strict=False)


def _read_config_file(config_path: Path, *, required: bool) -> Dict[str, object]:
    if not config_path.exists():
        if required:
            raise RuntimeError(f"Configuration file not found: {config_path}")
        return {}
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping of settings")
    return raw


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, object]:
    overrides: Dict[str, object] = {}
    for key in _KNOWN_KEYS:
        value = environ.get(_ENV_PREFIX + key.upper())
        if value is not None and value.strip():
            overrides[key] = value.strip()
    # USERADMIN_SESSION_SECURE is an alias for USERADMIN_SECURE_COOKIES.
    secure = environ.get(_ENV_PREFIX + "SESSION_SECURE")
    if secure is not None:
        overrides["secure_cookies"] = _env_flag(secure)
    return overrides


def load_settings(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from the YAML file, then apply ``USERADMIN_*`` overrides."""
    env = os.environ if environ is None else environ
    explicit = config_path is not None or bool(env.get(_ENV_PREFIX + "CONFIG"))
    path = config_path or resolve_config_path(env.get(_ENV_PREFIX + "CONFIG"))

    data = _read_config_file(path, required=explicit)
    data.update(_env_overrides(env))
    return Settings.from_dict(data)


__all__ = ["Settings", "load_settings", "resolve_config_path"]
