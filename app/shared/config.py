from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv


load_dotenv()


DEFAULT_BACKEND_BASE_URL = "https://venturloopbackend-v-1-0-9.onrender.com"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    google_client_id: str
    google_client_secret: str
    google_redirect_uri: str
    linkedin_client_id: str
    linkedin_client_secret: str
    linkedin_redirect_uri: str
    jwt_secret: str
    jwt_ttl_days: int
    backend_base_url: str
    deep_link_scheme: str
    oauth_http_timeout_seconds: float
    cors_allow_origins: tuple[str, ...]
    log_level: str
    host: str
    port: int

    def __repr__(self) -> str:
        return (
            "Settings("
            f"backend_base_url={self.backend_base_url!r}, "
            f"deep_link_scheme={self.deep_link_scheme!r}, "
            f"oauth_http_timeout_seconds={self.oauth_http_timeout_seconds!r}, "
            f"log_level={self.log_level!r})"
        )


def load_settings() -> Settings:
    return Settings(
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        google_client_secret=_env("GOOGLE_CLIENT_SECRET", ""),
        google_redirect_uri=_env("GOOGLE_REDIRECT_URI", ""),
        linkedin_client_id=_env("LINKEDIN_CLIENT_ID", ""),
        linkedin_client_secret=_env("LINKEDIN_CLIENT_SECRET", ""),
        linkedin_redirect_uri=_env("LINKEDIN_REDIRECT_URI", ""),
        jwt_secret=_env("JWT_SECRET", ""),
        jwt_ttl_days=int(_env("JWT_TTL_DAYS", "7")),
        backend_base_url=_env("BACKEND_BASE_URL", DEFAULT_BACKEND_BASE_URL),
        deep_link_scheme=_env("DEEP_LINK_SCHEME", "venturloop"),
        oauth_http_timeout_seconds=float(_env("OAUTH_HTTP_TIMEOUT_SECONDS", "10")),
        cors_allow_origins=_csv("CORS_ALLOW_ORIGINS", "*"),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        host=_env("HOST", "0.0.0.0"),
        port=int(_env("PORT", "5000")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
