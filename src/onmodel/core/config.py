"""Configuration management for On-Model Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the ONMODEL_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (ONMODEL_* prefix)
2. .env file in the project root
3. Default values defined in OnModelConfig

The provider settings additionally accept the bare variable names used by the
Replicate tooling, so an existing shell setup keeps working:

    REPLICATE_API_TOKEN=r8_...
    REPLICATE_MODEL=black-forest-labs/flux-dev
    REPLICATE_MODEL_VERSION=b31258cc...

Example .env file:
    ONMODEL_REPLICATE_API_TOKEN=r8_...
    ONMODEL_POLL_INTERVAL=2.5
    ONMODEL_GENERATION_TIMEOUT=120
    ONMODEL_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The API token is optional at this point: its absence only becomes an error
when a batch is actually run (see :mod:`onmodel.core.orchestrator`), so the
service can still start and serve presets without credentials.

Usage Example
-------------
    from onmodel.core.config import config

    print(config.replicate_model)
    print(config.generation_timeout)
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REPLICATE_MODEL = "black-forest-labs/flux-dev"
DEFAULT_REPLICATE_VERSION = "b31258cccc611453ca3b52990d4ec23bafa714a7e3f777510c232fbd65dc9b6f"


class OnModelConfig(BaseSettings):
    """Main configuration for On-Model Studio.

    Attributes
    ----------
    Provider Settings:
        replicate_api_token : str | None
            Bearer token for the prediction API (required to run a batch)
        replicate_model : str
            Model identifier sent when no version is pinned
        replicate_model_version : str | None
            Model version hash; takes precedence over ``replicate_model``
        replicate_api_url : str
            Base URL of the predictions API

    Generation Settings:
        guidance_scale : float
            Classifier-free guidance scale sent with every job
        num_inference_steps : int
            Diffusion step count sent with every job
        output_format : Literal["png", "jpg", "webp"]
            Image format requested from the provider

    Polling Settings:
        poll_interval : float
            Seconds to wait between status checks
        generation_timeout : float
            Seconds after submission before a job is abandoned
        request_timeout : float
            Timeout for each individual HTTP call to the provider

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by ``main()``

    Examples
    --------
        >>> custom_config = OnModelConfig(
        ...     replicate_api_token="r8_test",
        ...     poll_interval=0.5,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ONMODEL_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Provider settings
    replicate_api_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ONMODEL_REPLICATE_API_TOKEN", "REPLICATE_API_TOKEN"),
        description="Bearer token for the Replicate predictions API",
    )
    replicate_model: str = Field(
        default=DEFAULT_REPLICATE_MODEL,
        validation_alias=AliasChoices("ONMODEL_REPLICATE_MODEL", "REPLICATE_MODEL"),
        description="Model identifier used when no version is pinned",
    )
    replicate_model_version: str | None = Field(
        default=DEFAULT_REPLICATE_VERSION,
        validation_alias=AliasChoices("ONMODEL_REPLICATE_MODEL_VERSION", "REPLICATE_MODEL_VERSION"),
        description="Pinned model version hash (empty to address the model by name)",
    )
    replicate_api_url: str = Field(
        default="https://api.replicate.com/v1",
        description="Base URL of the predictions API",
    )

    # Generation settings
    guidance_scale: float = Field(default=4.0, ge=0.0, le=20.0)
    num_inference_steps: int = Field(default=30, ge=1, le=100)
    output_format: Literal["png", "jpg", "webp"] = Field(default="png")

    # Polling settings
    poll_interval: float = Field(
        default=2.5,
        description="Seconds between prediction status checks",
        ge=0.0,
    )
    generation_timeout: float = Field(
        default=120.0,
        description="Seconds after submission before a job is reported as timed out",
        gt=0.0,
    )
    request_timeout: float = Field(
        default=60.0,
        description="Timeout for a single HTTP call to the provider",
        gt=0.0,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: str = Field(default="INFO")

    @property
    def has_credentials(self) -> bool:
        """Whether a non-blank provider token is configured."""
        return bool(self.replicate_api_token and self.replicate_api_token.strip())


# Global configuration instance
# Loaded once at import from ONMODEL_* / REPLICATE_* variables and .env.
config = OnModelConfig()
