"""
Pydantic models for YAML client configuration.
Provides schema validation with clear error messages for client settings.
"""

from __future__ import annotations
from typing import Dict, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator


class ClientConfig(BaseModel):
    """Configuration for an API client."""
    base_url: str = Field("", description="Base URL that relative request URLs are joined onto")
    timeout_s: float = Field(30, gt=0, le=600, description="Transport timeout in seconds")
    headers: Dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        if v and not v.startswith(('http://', 'https://')):
            raise ValueError('base_url must be a valid HTTP/HTTPS URL')
        return v


class LoggingConfig(BaseModel):
    """Where to find the logging dictConfig."""
    config_path: str = Field("configs/logging.yaml", description="Path to a YAML logging dictConfig")
    level: Optional[str] = Field(None, description="Fallback level when the config file is missing")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        if v is not None and v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError('level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL')
        return v.upper() if v else v


class ApiResponseConfig(BaseModel):
    """Root configuration model."""
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str) -> ApiResponseConfig:
    """
    Load and validate a client configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated ApiResponseConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is malformed or the configuration is invalid
    """
    import yaml

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    try:
        return ApiResponseConfig(**raw_config)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            field_path = '.'.join(str(loc) for loc in error['loc'])
            error_messages.append(f"  {field_path}: {error['msg']}")

        raise ValueError(
            f"Configuration validation failed for {config_path}:\n" +
            '\n'.join(error_messages)
        ) from e
