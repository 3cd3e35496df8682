from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - MONGO_URI: connection string of the document store. Default 'mongodb://localhost:27017/'
    - MONGO_DB: database name. Default 'golang_todo'
    - MONGO_COLLECTION: collection holding todo documents. Default 'todo'
    - MONGO_TIMEOUT_MS: server selection timeout used when connecting (default: 5000)
    - HOST / PORT: listening address (default: 0.0.0.0:9000)
    - SHUTDOWN_TIMEOUT: grace period in seconds for in-flight requests on shutdown (default: 5)
    - IDLE_TIMEOUT: keep-alive timeout in seconds for idle connections (default: 60)
    - LOG_LEVEL: root logging level (default: INFO)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    mongo_uri: str
    mongo_db: str
    mongo_collection: str
    mongo_timeout_ms: int
    host: str
    port: int
    shutdown_timeout: int
    idle_timeout: int
    log_level: str
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        mongo_uri=_get_env("MONGO_URI", "mongodb://localhost:27017/").strip(),
        mongo_db=_get_env("MONGO_DB", "golang_todo").strip(),
        mongo_collection=_get_env("MONGO_COLLECTION", "todo").strip(),
        mongo_timeout_ms=_parse_int(_get_env("MONGO_TIMEOUT_MS", "5000"), 5000),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "9000"), 9000),
        shutdown_timeout=_parse_int(_get_env("SHUTDOWN_TIMEOUT", "5"), 5),
        idle_timeout=_parse_int(_get_env("IDLE_TIMEOUT", "60"), 60),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
