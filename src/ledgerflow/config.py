"""Runtime configuration.

All settings come from environment variables and have defaults, so a bare
checkout runs against a local SQLite file with AI suggestions disabled.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ConfigValidationError(ValueError):
    """Raised when an environment value cannot be used."""


def _int(env: Mapping[str, str], key: str, default: int, minimum: int = 1) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigValidationError(f"{key} must be an integer, got '{raw}'")
    if value < minimum:
        raise ConfigValidationError(f"{key} must be at least {minimum}, got {value}")
    return value


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigValidationError(f"{key} must be a number, got '{raw}'")
    if value <= 0:
        raise ConfigValidationError(f"{key} must be positive, got {value}")
    return value


def _str(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    accounts_api_url: Optional[str] = None
    ai_endpoint: Optional[str] = None
    ai_api_key: Optional[str] = None
    ai_deployment: str = "gpt-4"
    ai_api_version: str = "2024-02-01"
    ai_timeout_seconds: float = 30.0
    import_batch_size: int = 10
    categorization_workers: int = 4
    training_data_path: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 7072

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_endpoint and self.ai_api_key)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Raises:
        ConfigValidationError: If a numeric value is malformed
    """
    if env is None:
        env = os.environ

    return Settings(
        database_url=_str(env, "LEDGERFLOW_DATABASE_URL"),
        database_path=_str(env, "LEDGERFLOW_DB_PATH"),
        accounts_api_url=_str(env, "ACCOUNTS_API_URL"),
        ai_endpoint=_str(env, "AI_ENDPOINT"),
        ai_api_key=_str(env, "AI_API_KEY"),
        ai_deployment=_str(env, "AI_DEPLOYMENT") or "gpt-4",
        ai_api_version=_str(env, "AI_API_VERSION") or "2024-02-01",
        ai_timeout_seconds=_float(env, "AI_TIMEOUT_SECONDS", 30.0),
        import_batch_size=_int(env, "IMPORT_BATCH_SIZE", 10),
        categorization_workers=_int(env, "CATEGORIZATION_WORKERS", 4),
        training_data_path=_str(env, "TRAINING_DATA_PATH"),
        host=_str(env, "LEDGERFLOW_HOST") or "127.0.0.1",
        port=_int(env, "LEDGERFLOW_PORT", 7072),
    )
