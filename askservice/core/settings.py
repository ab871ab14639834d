"""Startup configuration: base TOML file layered with environment overrides.

Resolution order (later wins):

1. built-in defaults (``DEFAULTS``)
2. the TOML file at ``ASKSERVICE_CONFIG`` (default: ``config.toml`` in the project root)
3. one environment variable per field, listed in ``ENV_OVERRIDES``

The GigaChat credential is read from ``GIGACHAT_TOKEN`` only; it never lives in
the file. A missing credential is a normal state that puts the service in
mock mode. Anything malformed raises ``ConfigError`` and aborts startup.
"""

from __future__ import annotations

import copy
import logging
import math
import os
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from askservice import __version__
from askservice.core.env import load_env

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config.toml"

ENV_PREFIX = "ASKSERVICE_"
CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG"
TOKEN_ENV = "GIGACHAT_TOKEN"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_ENVIRONMENTS = {"development", "production", "staging", "test"}


class ConfigError(RuntimeError):
    """Raised at startup when configuration cannot be resolved."""

    code = "CONFIG_ERROR"


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int


@dataclass(frozen=True)
class GigaChatConfig:
    enabled: bool
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float
    base_url: str
    auth_url: str
    scope: str
    verify_ssl: bool


@dataclass(frozen=True)
class Settings:
    environment: str
    version: str
    config_path: Optional[Path]
    server: ServerConfig
    gigachat: GigaChatConfig
    gigachat_token: Optional[str]
    system_prompt: Optional[str]
    log_level: str
    log_json: bool
    log_file: str

    @property
    def remote_enabled(self) -> bool:
        return self.gigachat_token is not None

    def __repr__(self) -> str:
        token = "***" if self.gigachat_token else None
        return (
            f"Settings(environment={self.environment!r}, version={self.version!r}, "
            f"config_path={self.config_path!r}, server={self.server!r}, "
            f"gigachat={self.gigachat!r}, gigachat_token={token!r}, "
            f"log_level={self.log_level!r})"
        )


DEFAULTS: dict[str, dict[str, Any]] = {
    "app": {
        "environment": "development",
        "system_prompt": "",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "gigachat": {
        "enabled": True,
        "model": "GigaChat",
        "temperature": 0.7,
        "max_tokens": 1024,
        "timeout_seconds": 30.0,
        "base_url": "https://gigachat.devices.sberbank.ru/api/v1",
        "auth_url": "https://ngw.devices.sberbank.ru:9443/api/v2/oauth",
        "scope": "GIGACHAT_API_PERS",
        "verify_ssl": True,
    },
    "logging": {
        "level": "INFO",
        "json": False,
        "file": "",
    },
}


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_str(raw: str) -> str:
    return raw.strip()


# Every recognised override: variable name -> (section, field, parser).
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    f"{ENV_PREFIX}ENVIRONMENT": ("app", "environment", _parse_str),
    f"{ENV_PREFIX}SYSTEM_PROMPT": ("app", "system_prompt", str),
    f"{ENV_PREFIX}SERVER_HOST": ("server", "host", _parse_str),
    f"{ENV_PREFIX}SERVER_PORT": ("server", "port", int),
    f"{ENV_PREFIX}GIGACHAT_ENABLED": ("gigachat", "enabled", _parse_bool),
    f"{ENV_PREFIX}GIGACHAT_MODEL": ("gigachat", "model", _parse_str),
    f"{ENV_PREFIX}GIGACHAT_TEMPERATURE": ("gigachat", "temperature", float),
    f"{ENV_PREFIX}GIGACHAT_MAX_TOKENS": ("gigachat", "max_tokens", int),
    f"{ENV_PREFIX}GIGACHAT_TIMEOUT_SECONDS": ("gigachat", "timeout_seconds", float),
    f"{ENV_PREFIX}GIGACHAT_BASE_URL": ("gigachat", "base_url", _parse_str),
    f"{ENV_PREFIX}GIGACHAT_AUTH_URL": ("gigachat", "auth_url", _parse_str),
    f"{ENV_PREFIX}GIGACHAT_SCOPE": ("gigachat", "scope", _parse_str),
    f"{ENV_PREFIX}GIGACHAT_VERIFY_SSL": ("gigachat", "verify_ssl", _parse_bool),
    f"{ENV_PREFIX}LOG_LEVEL": ("logging", "level", _parse_str),
    f"{ENV_PREFIX}LOG_JSON": ("logging", "json", _parse_bool),
    f"{ENV_PREFIX}LOG_FILE": ("logging", "file", _parse_str),
}


def _read_config_file(path: Path, *, explicit: bool) -> dict[str, Any]:
    if not path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc

    for section, value in raw.items():
        if section not in DEFAULTS:
            logging.getLogger(__name__).warning("Ignoring unknown config section [%s] in %s", section, path)
            continue
        if not isinstance(value, dict):
            raise ConfigError(f"[{section}] must be a table")
    return raw


def _merge_file(base: dict[str, dict[str, Any]], raw: Mapping[str, Any]) -> None:
    for section, fields in base.items():
        overrides = raw.get(section) or {}
        for key, value in overrides.items():
            if key not in fields:
                raise ConfigError(f"unknown config key: {section}.{key}")
            fields[key] = value


def _merge_env(base: dict[str, dict[str, Any]], environ: Mapping[str, str]) -> None:
    for name, (section, key, parser) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None:
            continue
        try:
            base[section][key] = parser(raw)
        except ValueError as exc:
            raise ConfigError(f"invalid value for {name}: {raw!r}") from exc


def _require_type(section: str, key: str, value: Any, expected: type | tuple[type, ...]) -> Any:
    # bool is an int subclass; reject it where a number is expected
    if isinstance(value, bool) and bool not in (expected if isinstance(expected, tuple) else (expected,)):
        raise ConfigError(f"{section}.{key} must not be a boolean")
    if not isinstance(value, expected):
        raise ConfigError(f"{section}.{key} has invalid type {type(value).__name__}")
    return value


def _build_gigachat(fields: Mapping[str, Any]) -> GigaChatConfig:
    enabled = _require_type("gigachat", "enabled", fields["enabled"], bool)
    model = str(_require_type("gigachat", "model", fields["model"], str)).strip()
    if not model:
        raise ConfigError("gigachat.model must not be empty")
    temperature = float(_require_type("gigachat", "temperature", fields["temperature"], (int, float)))
    if not math.isfinite(temperature) or not 0.0 <= temperature <= 2.0:
        raise ConfigError("gigachat.temperature must be between 0 and 2")
    max_tokens = _require_type("gigachat", "max_tokens", fields["max_tokens"], int)
    if max_tokens < 1:
        raise ConfigError("gigachat.max_tokens must be >= 1")
    timeout_seconds = float(_require_type("gigachat", "timeout_seconds", fields["timeout_seconds"], (int, float)))
    if not math.isfinite(timeout_seconds) or timeout_seconds <= 0:
        raise ConfigError("gigachat.timeout_seconds must be a finite number > 0")
    base_url = str(_require_type("gigachat", "base_url", fields["base_url"], str)).strip().rstrip("/")
    auth_url = str(_require_type("gigachat", "auth_url", fields["auth_url"], str)).strip()
    for key, url in (("base_url", base_url), ("auth_url", auth_url)):
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"gigachat.{key} must be an http(s) URL")
    scope = str(_require_type("gigachat", "scope", fields["scope"], str)).strip()
    if not scope:
        raise ConfigError("gigachat.scope must not be empty")
    return GigaChatConfig(
        enabled=enabled,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout_seconds=timeout_seconds,
        base_url=base_url,
        auth_url=auth_url,
        scope=scope,
        verify_ssl=_require_type("gigachat", "verify_ssl", fields["verify_ssl"], bool),
    )


def load_settings(
    config_path: Path | str | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve settings from defaults, the config file and ``environ``.

    ``environ`` defaults to ``os.environ``. Nothing here touches global state,
    so tests can call it with their own mapping.
    """
    env = os.environ if environ is None else environ

    explicit = config_path is not None or bool((env.get(CONFIG_PATH_ENV) or "").strip())
    if config_path is None:
        config_path = (env.get(CONFIG_PATH_ENV) or "").strip() or DEFAULT_CONFIG_PATH
    path = Path(config_path).expanduser()

    merged = copy.deepcopy(DEFAULTS)
    raw = _read_config_file(path, explicit=explicit)
    _merge_file(merged, raw)
    _merge_env(merged, env)

    app = merged["app"]
    environment = str(_require_type("app", "environment", app["environment"], str)).strip().lower()
    if environment not in _ENVIRONMENTS:
        raise ConfigError(f"invalid app.environment: {environment}")

    server = merged["server"]
    host = str(_require_type("server", "host", server["host"], str)).strip()
    port = _require_type("server", "port", server["port"], int)
    if not host:
        raise ConfigError("server.host must not be empty")
    if not 1 <= port <= 65535:
        raise ConfigError("server.port must be between 1 and 65535")

    gigachat = _build_gigachat(merged["gigachat"])

    log = merged["logging"]
    log_level = str(_require_type("logging", "level", log["level"], str)).strip().upper() or "INFO"
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"invalid logging.level: {log_level}")

    system_prompt = str(_require_type("app", "system_prompt", app["system_prompt"], str)).strip() or None

    token = (env.get(TOKEN_ENV) or "").strip() or None
    if not gigachat.enabled:
        token = None

    return Settings(
        environment=environment,
        version=__version__,
        config_path=path if path.exists() else None,
        server=ServerConfig(host=host, port=port),
        gigachat=gigachat,
        gigachat_token=token,
        system_prompt=system_prompt,
        log_level=log_level,
        log_json=_require_type("logging", "json", log["json"], bool),
        log_file=str(_require_type("logging", "file", log["file"], str)).strip(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, resolved once."""
    load_env()
    return load_settings()


__all__ = [
    "ConfigError",
    "ENV_OVERRIDES",
    "GigaChatConfig",
    "ServerConfig",
    "Settings",
    "get_settings",
    "load_settings",
]
