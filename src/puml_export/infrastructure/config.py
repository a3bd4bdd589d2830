"""Configuration management for puml-export.

This module provides a configuration system that supports:
- Configuration files in TOML format
- Environment variables
- Multiple configuration file locations (project, user, system)
- Type-safe configuration using Pydantic

Configuration Priority (highest to lowest):
1. Environment variables
2. Project configuration file (.puml-export/config.toml or puml-export.toml)
3. User configuration file (~/.config/puml-export/config.toml)
4. System configuration file (/etc/puml-export/config.toml)
5. Default values

Environment Variable Naming:
- Nested fields: PUML_EXPORT_<SECTION>__<FIELD> (e.g., PUML_EXPORT_SERVER__URL)
- Proxy: http_proxy or HTTP_PROXY (no prefix)
"""

import logging
import os
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from puml_export.core.output_format import OutputFormat
from puml_export.infrastructure.http_client import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

APP_NAME = "puml-export"

DEFAULT_SERVER_URL = "http://www.plantuml.com/plantuml"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LegacyEnvSettingsSource(PydanticBaseSettingsSource):
    """Settings source for environment variables without the PUML_EXPORT_ prefix.

    The first variable of each list that is set and non-empty wins.
    """

    LEGACY_ENV_VARS = {
        ("http", "proxy"): ["http_proxy", "HTTP_PROXY"],
    }

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        raise ValueError(f"Field {field_name} not found in legacy environment")

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}

        for field_path, env_vars in self.LEGACY_ENV_VARS.items():
            env_value = next(
                (os.environ[var] for var in env_vars if os.environ.get(var)), None
            )
            if env_value is None:
                continue

            current = data
            for part in field_path[:-1]:
                current = current.setdefault(part, {})
            current[field_path[-1]] = env_value

        return data


class ServerConfig(BaseModel):
    """PlantUML server configuration."""

    url: str = Field(
        default=DEFAULT_SERVER_URL,
        description="Base URL of the PlantUML server",
    )

    output_format: str = Field(
        default="svg",
        description="Default output format (ascii, txt, png, svg)",
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        return OutputFormat.parse(v).value

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Server URL must not be empty")
        return v.strip()


class HttpConfig(BaseModel):
    """HTTP client configuration."""

    proxy: str = Field(
        default="",
        description="Proxy URL for requests to the PlantUML server",
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout (seconds)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_to_file: bool = Field(
        default=False,
        description="Also write log messages to a file in the user log directory",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {LOG_LEVELS}, got {v}")
        return v_upper


class PumlExportConfig(BaseSettings):
    """Main puml-export configuration.

    Environment Variables:
        - PUML_EXPORT_SERVER__URL: PlantUML server URL
        - PUML_EXPORT_SERVER__OUTPUT_FORMAT: Default output format
        - PUML_EXPORT_HTTP__TIMEOUT: Request timeout
        - PUML_EXPORT_LOGGING__LOG_LEVEL: Logging level
        - http_proxy / HTTP_PROXY: Proxy URL (no prefix)
    """

    model_config = SettingsConfigDict(
        env_prefix="PUML_EXPORT_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="PlantUML server configuration",
    )

    http: HttpConfig = Field(
        default_factory=HttpConfig,
        description="HTTP client configuration",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.parse(self.server.output_format)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources and their priority for settings.

        Priority order (highest to lowest):
        1. Environment variables with PUML_EXPORT_ prefix
        2. Proxy environment variables
        3. Project configuration file
        4. User configuration file
        5. System configuration file
        6. Init settings (programmatic)
        """
        config_files = find_config_files()

        # Lowest priority first; reversed below
        toml_sources = []
        for kind in ("system", "user", "project"):
            config_file = config_files[kind]
            if config_file:
                toml_sources.append(TomlConfigSettingsSource(settings_cls, toml_file=config_file))
                logger.debug(f"Loaded {kind} config: {config_file}")

        return (
            env_settings,
            LegacyEnvSettingsSource(settings_cls),
            *reversed(toml_sources),
            init_settings,
        )


def find_config_files() -> dict[str, Path | None]:
    """Find configuration files in standard locations.

    Returns:
        Dictionary with keys 'system', 'user', 'project', each containing
        a Path to the config file if it exists, or None otherwise.
    """
    config_files: dict[str, Path | None] = {
        "system": None,
        "user": None,
        "project": None,
    }

    for kind, location in get_config_file_locations().items():
        if kind != "project" and location.exists():
            config_files[kind] = location

    # .puml-export/config.toml takes precedence over puml-export.toml
    cwd = Path.cwd()
    for project_config in (cwd / f".{APP_NAME}" / "config.toml", cwd / f"{APP_NAME}.toml"):
        if project_config.exists():
            config_files["project"] = project_config
            break

    return config_files


def get_config_file_locations() -> dict[str, Path]:
    """Get the standard configuration file locations.

    Returns:
        Dictionary with keys 'system', 'user', 'project', each containing
        the Path where the config file should be located (may not exist).
    """
    user_config_dir = Path(platformdirs.user_config_dir(APP_NAME, appauthor=False))
    return {
        "system": Path("/etc") / APP_NAME / "config.toml",
        "user": user_config_dir / "config.toml",
        "project": Path.cwd() / f".{APP_NAME}" / "config.toml",
    }


# Lazily initialized on first access
_config: PumlExportConfig | None = None


def get_config(reload: bool = False) -> PumlExportConfig:
    """Get the global configuration instance.

    Args:
        reload: If True, reload the configuration from files and environment.

    Returns:
        The global PumlExportConfig instance.
    """
    global _config

    if _config is None or reload:
        _config = PumlExportConfig()

    return _config
