from __future__ import annotations

import os
from dataclasses import dataclass


def _csv(value: str) -> list[str]:
    items: list[str] = []
    for part in (value or "").split(","):
        item = part.strip()
        if item:
            items.append(item)
    return items


def _env_str(name: str, default: str) -> str:
    return str(os.getenv(name, default) or default)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = str(os.getenv(name, "") or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class BaseConfig:
    ENV: str = "development"
    DEBUG: bool = False
    TESTING: bool = False

    APP_VERSION: str = "dev"
    TIMEZONE_DISPLAY: str = "Asia/Manila"

    MONGODB_URI: str = "mongodb://localhost:27017"
    DB_NAME: str = "hr2"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    JWT_SECRET: str = "dev-secret"
    JWT_EXP_MINUTES: int = 1440
    AUTH_COOKIE_NAME: str = "token"

    CORS_ORIGINS: list[str] | str = "http://localhost:3000,http://127.0.0.1:3000"
    CORS_ALLOW_CREDENTIALS: bool = True

    LOG_LEVEL: str = "INFO"

    RATE_LIMIT_GLOBAL: str = "1200 per minute"
    RATE_LIMIT_DEFAULT: str = "300 per minute"
    RATE_LIMIT_LOGIN: str = "30 per minute"
    RATE_LIMIT_SUBMIT: str = "20 per minute"

    DEFAULT_PASSING_SCORE: int = 70
    DEFAULT_DURATION_MINUTES: int = 30
    NEEDS_IMPROVEMENT_BELOW: int = 70

    def __post_init__(self) -> None:
        for name in (
            "APP_VERSION",
            "TIMEZONE_DISPLAY",
            "MONGODB_URI",
            "DB_NAME",
            "JWT_SECRET",
            "AUTH_COOKIE_NAME",
            "RATE_LIMIT_GLOBAL",
            "RATE_LIMIT_DEFAULT",
            "RATE_LIMIT_LOGIN",
            "RATE_LIMIT_SUBMIT",
        ):
            object.__setattr__(self, name, _env_str(name, getattr(self, name)))

        for name in (
            "MONGO_SERVER_SELECTION_TIMEOUT_MS",
            "JWT_EXP_MINUTES",
            "DEFAULT_PASSING_SCORE",
            "DEFAULT_DURATION_MINUTES",
            "NEEDS_IMPROVEMENT_BELOW",
        ):
            object.__setattr__(self, name, _env_int(name, getattr(self, name)))

        cors_raw = os.getenv("CORS_ORIGINS")
        if cors_raw is not None:
            cors_raw = str(cors_raw or "").strip()
            if cors_raw == "*":
                object.__setattr__(self, "CORS_ORIGINS", "*")
            else:
                object.__setattr__(self, "CORS_ORIGINS", _csv(cors_raw))
        else:
            object.__setattr__(self, "CORS_ORIGINS", _csv(str(self.CORS_ORIGINS)))

        object.__setattr__(
            self, "CORS_ALLOW_CREDENTIALS", _env_bool("CORS_ALLOW_CREDENTIALS", self.CORS_ALLOW_CREDENTIALS)
        )
        object.__setattr__(self, "LOG_LEVEL", _env_str("LOG_LEVEL", self.LOG_LEVEL).upper())

    @property
    def IS_PRODUCTION(self) -> bool:
        return str(self.ENV or "").lower() == "production"

    def validate(self) -> None:
        if self.IS_PRODUCTION and str(self.JWT_SECRET or "").strip() in {"", "dev-secret"}:
            raise RuntimeError("JWT_SECRET must be set in production")
        if self.IS_PRODUCTION and str(self.MONGODB_URI or "").startswith("mongomock://"):
            raise RuntimeError("MONGODB_URI must point at a real MongoDB in production")
        if not 0 <= self.DEFAULT_PASSING_SCORE <= 100:
            raise RuntimeError("DEFAULT_PASSING_SCORE must be between 0 and 100")
        if self.DEFAULT_DURATION_MINUTES <= 0:
            raise RuntimeError("DEFAULT_DURATION_MINUTES must be positive")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    ENV: str = "development"
    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    ENV: str = "production"
    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    ENV: str = "testing"
    TESTING: bool = True
    JWT_SECRET: str = "test-secret"
    MONGODB_URI: str = "mongomock://localhost"
    DB_NAME: str = "hr2_test"


def get_config() -> BaseConfig:
    env = str(os.getenv("ENV") or os.getenv("APP_ENV") or "development").strip().lower()
    if env in {"prod", "production"}:
        cfg: BaseConfig = ProductionConfig()
    elif env in {"test", "testing"}:
        cfg = TestingConfig()
    else:
        cfg = DevelopmentConfig()

    cfg.validate()
    return cfg
