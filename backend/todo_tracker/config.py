import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_JWT_SECRET = "change-me-in-production"


@dataclass(frozen=True)
class Settings:
    """
    Application settings, built once at startup and injected into create_app.

    Env vars:
    - DATABASE_URL: SQLAlchemy URL of the store (default sqlite:///./todo.db)
    - JWT_SECRET: HMAC key used to sign bearer tokens
    - JWT_ALGORITHM: signature algorithm (default HS256)
    - TOKEN_TTL_HOURS: lifetime of issued tokens (default 24)
    - BCRYPT_ROUNDS: bcrypt work factor (default 12)
    - ALLOWED_ORIGINS: comma-separated CORS origins, '*' by default
    - LOG_LEVEL: root log level (default INFO)
    """

    database_url: str = "sqlite:///./todo.db"
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24
    bcrypt_rounds: int = 12
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _parse_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _parse_origins(value: str) -> List[str]:
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def get_settings() -> Settings:
    """Return settings loaded from environment variables."""
    return Settings(
        database_url=_get_env("DATABASE_URL", "sqlite:///./todo.db"),
        jwt_secret=_get_env("JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256"),
        token_ttl_hours=_parse_int("TOKEN_TTL_HOURS", 24),
        bcrypt_rounds=_parse_int("BCRYPT_ROUNDS", 12),
        allowed_origins=_parse_origins(_get_env("ALLOWED_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )
