"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env.<env> or system)
2. Environment-specific YAML config file (development.yaml, test.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from solders.pubkey import Pubkey

DEFAULT_ESCROW_PROGRAM_ID = "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"


class Settings(BaseSettings):
    """
    Sequestre settings with environment variable support.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Sequestre"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")

    # Escrow program
    ESCROW_PROGRAM_ID: str = Field(
        default=DEFAULT_ESCROW_PROGRAM_ID,
        description="Address the escrow program is registered at",
    )

    # Ledger economics (Solana defaults)
    RENT_LAMPORTS_PER_BYTE_YEAR: int = Field(default=3480, ge=0)
    RENT_EXEMPTION_THRESHOLD: float = Field(default=2.0, ge=0.0)
    LAMPORTS_PER_SIGNATURE: int = Field(default=5000, ge=0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)
    LOG_VERBOSE: int = Field(default=1, ge=0, le=3)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("ESCROW_PROGRAM_ID")
    @classmethod
    def validate_program_id(cls, v: str) -> str:
        """Validate base58 program address."""
        try:
            Pubkey.from_string(v)
        except ValueError as e:
            raise ValueError(f"Invalid ESCROW_PROGRAM_ID: {v}") from e
        return v

    @property
    def escrow_program_id(self) -> Pubkey:
        return Pubkey.from_string(self.ESCROW_PROGRAM_ID)


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        pydantic.ValidationError: If a value fails validation
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("ENV", "development")

    if env_file is None:
        env_file = f".env.{environment}"
    if config_file is None:
        config_file = f"{environment}.yaml"

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    env_config_path = config_dir / config_file
    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config.update(loaded)

    merged_config.setdefault("ENV", environment)

    # Init kwargs outrank the environment in pydantic-settings
    for key in list(merged_config):
        if key in os.environ:
            del merged_config[key]

    return Settings(**merged_config)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
