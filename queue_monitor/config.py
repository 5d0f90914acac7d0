"""Runtime settings: defaults, optional YAML file, then environment variables."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from queue_monitor.core.errors import InvalidArgumentError
from queue_monitor.domain import DEFAULT_QUEUE

BACKEND_REDIS = "redis"
BACKEND_IN_MEMORY = "in-memory"
BACKEND_TYPES = (BACKEND_REDIS, BACKEND_IN_MEMORY)


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_number(name: str, value: Any, kind: type) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from None


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return _split_list(value)
    return [str(item) for item in value]


@dataclass(slots=True)
class RedisSettings:
    addr: str = "localhost:6379"
    password: str = ""
    db: int = 0


@dataclass(slots=True)
class Settings:
    host: str = "0.0.0.0"
    port: str = "8080"
    backend: str = BACKEND_REDIS
    redis: RedisSettings = field(default_factory=RedisSettings)
    default_queue: str = DEFAULT_QUEUE
    queues: list[str] = field(default_factory=list)
    registered_tasks: list[str] = field(default_factory=list)
    request_timeout: float = 5.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def apply(self, values: Mapping[str, Any]) -> "Settings":
        """Overlay a (possibly partial) mapping such as a parsed YAML file."""

        for name in ("host", "port", "backend", "default_queue"):
            if values.get(name) is not None:
                setattr(self, name, str(values[name]))
        if values.get("request_timeout") is not None:
            self.request_timeout = _as_number("request_timeout", values["request_timeout"], float)
        for name in ("queues", "registered_tasks", "cors_origins"):
            if values.get(name) is not None:
                setattr(self, name, _as_list(values[name]))

        redis_values = values.get("redis") or {}
        if not isinstance(redis_values, Mapping):
            raise InvalidArgumentError("redis settings must be a mapping of addr, password and db")
        if redis_values.get("addr"):
            self.redis.addr = str(redis_values["addr"])
        if redis_values.get("password") is not None:
            self.redis.password = str(redis_values["password"])
        if redis_values.get("db") is not None:
            self.redis.db = _as_number("redis.db", redis_values["db"], int)
        return self

    def apply_env(self, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        self.apply(
            {
                "host": env.get("QUEUE_MONITOR_HOST"),
                "port": env.get("QUEUE_MONITOR_PORT"),
                "backend": env.get("QUEUE_MONITOR_BACKEND"),
                "default_queue": env.get("QUEUE_MONITOR_DEFAULT_QUEUE"),
                "queues": env.get("QUEUE_MONITOR_QUEUES"),
                "registered_tasks": env.get("QUEUE_MONITOR_TASKS"),
                "request_timeout": env.get("QUEUE_MONITOR_TIMEOUT"),
                "cors_origins": env.get("API_CORS_ORIGINS") or None,
                "redis": {
                    "addr": env.get("REDIS_ADDR"),
                    "password": env.get("REDIS_PASSWORD"),
                    "db": env.get("REDIS_DB"),
                },
            }
        )
        return self

    def validate(self) -> None:
        if self.backend not in BACKEND_TYPES:
            raise InvalidArgumentError(
                f"invalid broker type: {self.backend} (must be {', '.join(BACKEND_TYPES)})"
            )
        if not self.port:
            raise InvalidArgumentError("server port cannot be empty")
        if not str(self.port).isdigit():
            raise InvalidArgumentError(f"server port must be numeric: {self.port}")
        if self.request_timeout <= 0:
            raise InvalidArgumentError("request timeout must be positive")
        if not self.default_queue:
            raise InvalidArgumentError("default queue cannot be empty")


def load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise InvalidArgumentError(f"config file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"config file {path} must contain a mapping")
    return data


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from defaults, an optional YAML file and the environment."""

    env = os.environ if environ is None else environ
    settings = Settings()
    path = config_path or env.get("QUEUE_MONITOR_CONFIG")
    if path:
        settings.apply(load_yaml(Path(path).expanduser()))
    return settings.apply_env(env)
