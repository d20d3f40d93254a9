"""Configuration management for the event rule decompiler."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from jde_er import PROJECT_DIR

ENVIRONMENTS = ("prd", "acc", "dev", "local")


class SpecStoreConfig(BaseModel):
    """Where the file-backed spec resolver reads its metadata."""

    catalog_path: Optional[Path] = Field(default=None, description="YAML catalog of tables, data dictionary titles and BSFNs")
    templates_dir: Optional[Path] = Field(default=None, description="Directory of <template>.xml DSTMPL files")

    @property
    def enabled(self) -> bool:
        return self.catalog_path is not None or self.templates_dir is not None


class DecompilerConfig(BaseModel):
    """Project configuration."""

    environment: str = Field(default="local")
    log_level: str = Field(default="INFO", description="Root log level for the command line")
    log_format: str = Field(default="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s")
    spec_store: SpecStoreConfig = Field(default_factory=SpecStoreConfig)

    model_config = {"arbitrary_types_allowed": True}  # Allow Path objects

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Accept any standard logging level name."""
        level = str(v).upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_yaml_and_env(
        cls, config_path: str | Path | None = None, env: str = "local", env_dir: str | Path | None = None
    ) -> "DecompilerConfig":
        """Load configuration from both YAML and environment files."""
        if env not in ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {env}")

        config_path = Path(config_path) if config_path else PROJECT_DIR / "config" / "project_config_er.yml"
        env_dir = Path(env_dir) if env_dir else PROJECT_DIR / "config"

        # Load environment-specific .env file
        env_file = env_dir / f".env.{env}"
        if env_file.exists():
            load_dotenv(env_file, override=True)
        else:
            # Fallback to root .env if exists
            load_dotenv(override=True)

        # Load YAML config
        env_config: dict = {}
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
                env_config = yaml_config.get(env) or {}

        spec_config = env_config.get("spec_store") or {}
        spec_store = SpecStoreConfig(
            catalog_path=os.getenv("ER_CATALOG_PATH") or spec_config.get("catalog_path"),
            templates_dir=os.getenv("ER_TEMPLATES_DIR") or spec_config.get("templates_dir"),
        )

        return cls(
            environment=env,
            log_level=os.getenv("ER_LOG_LEVEL") or env_config.get("log_level", "INFO"),
            spec_store=spec_store,
        )


# Singleton pattern for config
_config: Optional[DecompilerConfig] = None


def get_config(env: Optional[str] = None) -> DecompilerConfig:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        env = env or os.getenv("ENVIRONMENT", "local")
        _config = DecompilerConfig.from_yaml_and_env(env=env)
    return _config


def reset_config():
    """Reset configuration singleton (useful for testing)."""
    global _config
    _config = None


def configure_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """Configure the root logger with a single stream handler."""
    config = get_config()
    root_logger = logging.getLogger()
    root_logger.setLevel((level or config.log_level).upper())
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=fmt or config.log_format, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    return root_logger


# Rebuild models to resolve forward references (required for Pydantic v2)
SpecStoreConfig.model_rebuild()
DecompilerConfig.model_rebuild()
