"""
BuildOffice Configuration — Load and validate buildoffice.yaml at startup.

Usage:
    from buildoffice.engine.config import load_config, get_config
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from buildoffice.engine.errors import ConfigError

CONFIG_FILENAME = "buildoffice.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for buildoffice.yaml
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    url: str = "sqlite:///buildoffice.db"
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    pool_pre_ping: bool = True


class LogAsyncQueueConfig(BaseModel):
    flush_interval_ms: int = 100
    flush_batch_size: int = 50
    max_queue_size: int = 10000


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".buildoffice/logs"
    async_queue: LogAsyncQueueConfig = LogAsyncQueueConfig()

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level '{v}'")
        return v


class DocumentsConfig(BaseModel):
    url_prefix: str = "/api/documents"
    max_upload_size_mb: int = 50
    progress_steps: int = 10
    previewable_types: List[str] = Field(
        default_factory=lambda: ["pdf", "jpg", "jpeg", "png", "gif", "txt", "doc", "docx"]
    )
    thumbnail_types: List[str] = Field(
        default_factory=lambda: ["pdf", "jpg", "jpeg", "png", "gif", "doc", "docx"]
    )


class FinancialConfig(BaseModel):
    tax_rate: Decimal = Decimal("0.10")
    due_soon_days: int = 3
    quotation_prefix: str = "QUO"
    purchase_order_prefix: str = "PO"
    invoice_prefix: str = "INV"

    @field_validator("tax_rate")
    @classmethod
    def validate_tax_rate(cls, v: Decimal) -> Decimal:
        if v < 0 or v > 1:
            raise ValueError(f"tax_rate must be between 0 and 1, got {v}")
        return v


class BuildOfficeConfig(BaseModel):
    """Root model for buildoffice.yaml."""
    name: str = "BuildOffice"
    environment: str = "dev"

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    documents: DocumentsConfig = DocumentsConfig()
    financial: FinancialConfig = FinancialConfig()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_config: Optional[BuildOfficeConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for buildoffice.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_config(config_path: Optional[str] = None) -> BuildOfficeConfig:
    """
    Load and validate buildoffice.yaml.

    Args:
        config_path: Explicit path to buildoffice.yaml. If None, auto-discovers.

    Returns:
        Validated BuildOfficeConfig instance. Defaults when the file is missing.

    Raises:
        ConfigError: the file exists but is not valid YAML or fails validation.
    """
    global _config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILENAME)

    path = Path(config_path)
    if not path.exists():
        _config = BuildOfficeConfig()
        return _config

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}", object_ref=str(path))

    # Allow the app name/environment to sit under an "app:" key
    app_data = raw.get("app", {})
    config_data = {
        "name": app_data.get("name", raw.get("name", "BuildOffice")),
        "environment": app_data.get("environment", raw.get("environment", "dev")),
        "database": raw.get("database", {}),
        "logging": raw.get("logging", {}),
        "documents": raw.get("documents", {}),
        "financial": raw.get("financial", {}),
    }

    try:
        _config = BuildOfficeConfig(**config_data)
    except PydanticValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {path}",
            object_ref=str(path),
            validation_errors=e.errors(),
        )
    return _config


def get_config() -> BuildOfficeConfig:
    """Get the currently loaded config, loading if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get the current environment."""
    return get_config().environment
