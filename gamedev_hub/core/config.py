# gamedev_hub/core/config.py
from pathlib import Path
from typing import Literal

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Game Dev Hub"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Discord OAuth (required)
    CLIENT_ID: str
    CLIENT_SECRET: str

    DISCORD_API_BASE: str = "https://discord.com/api"
    DISCORD_CDN_BASE: str = "https://cdn.discordapp.com"
    OAUTH_REDIRECT_URI: str = "http://localhost:8080/connect/callback"
    # "form" sends client credentials in the body, "basic" as an Authorization header
    OAUTH_AUTH_STYLE: Literal["form", "basic"] = "form"

    # Community gate
    GUILD_ID: str = "489531295848726528"
    DEFAULT_BIO: str = "No bio provided."

    # Sessions (required secret)
    SESSION_SECRET: str
    SESSION_ALG: str = "HS256"
    SESSION_MAX_AGE_SECONDS: int = 7 * 24 * 60 * 60  # 7 days
    SESSION_COOKIE_NAME: str = "gdh_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = "lax"

    # DB
    DATABASE_URL: str = "sqlite:///./gdh.db"
    SCHEMA_PATH: Path = PACKAGE_DIR / "schema.sql"

    # Load .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def _missing_fields(exc: ValidationError) -> list[str]:
    return [
        ".".join(str(p) for p in err["loc"])
        for err in exc.errors()
        if err.get("type") == "missing"
    ]


def build_settings(env_file: str | None = ".env", **overrides) -> Settings:
    """
    Build settings from the environment, failing fast with a ConfigError
    instead of letting half-configured requests reach the provider.
    """
    try:
        s = Settings(_env_file=env_file, **overrides)
    except ValidationError as e:
        missing = _missing_fields(e)
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}") from e
        raise ConfigError(f"Invalid configuration: {e}") from e

    for name in ("CLIENT_ID", "CLIENT_SECRET", "SESSION_SECRET"):
        if not getattr(s, name).strip():
            raise ConfigError(f"Missing required configuration: {name}")

    # Heroku-style URLs
    if s.DATABASE_URL.startswith("postgres://"):
        s.DATABASE_URL = s.DATABASE_URL.replace("postgres://", "postgresql://", 1)

    return s
