"""Configuration management for URL shortener."""

import os
from typing import Optional, Tuple, Type

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from web_app.server import (
    DEFAULT_ADDRESS,
    DEFAULT_COOLDOWN,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    ServerConfig,
)

# Development config file, overridable with YAUS_CONFIG_FILE
DEFAULT_CONFIG_FILE = os.path.join("configs", "devel", "config.yaml")


class StorageSettings(BaseModel):
    """Storage backend settings."""

    path: str = Field(
        default="./",
        description="Directory holding the database"
    )

    backend: str = Field(
        default="sqlite",
        description="Storage backend (sqlite or memory)"
    )


class TimeoutSettings(BaseModel):
    """Per-connection timeouts, in seconds."""

    write: float = Field(default=DEFAULT_WRITE_TIMEOUT, gt=0)
    read: float = Field(default=DEFAULT_READ_TIMEOUT, gt=0)
    idle: float = Field(default=DEFAULT_IDLE_TIMEOUT, gt=0)


class ServerSettings(BaseModel):
    """HTTP server settings."""

    address: str = Field(
        default=DEFAULT_ADDRESS,
        description="Listen address as host:port (empty host means all interfaces)"
    )

    timeout: TimeoutSettings = Field(default_factory=TimeoutSettings)

    cooldown: float = Field(
        default=DEFAULT_COOLDOWN,
        gt=0,
        description="Seconds granted to in-flight requests on shutdown"
    )


class HasherSettings(BaseModel):
    """Key derivation settings."""

    name: str = Field(
        default="md5",
        description="Hasher used to derive keys (md5 or base62)"
    )

    length: int = Field(
        default=6,
        ge=1,
        description="Key length for the base62 hasher"
    )


class Settings(BaseSettings):
    """Application configuration."""

    storage: StorageSettings = Field(default_factory=StorageSettings)

    server: ServerSettings = Field(default_factory=ServerSettings)

    hasher: HasherSettings = Field(default_factory=HasherSettings)

    validate_urls: bool = Field(
        default=False,
        description="Reject URLs that are not http(s) with a host"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = SettingsConfigDict(
        env_prefix="YAUS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # The YAML file sits below the environment
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=os.environ.get("YAUS_CONFIG_FILE", DEFAULT_CONFIG_FILE),
            ),
            file_secret_settings,
        )

    def server_config(self) -> ServerConfig:
        """Build the immutable server configuration."""
        return ServerConfig(
            address=self.server.address,
            write_timeout=self.server.timeout.write,
            read_timeout=self.server.timeout.read,
            idle_timeout=self.server.timeout.idle,
            cooldown=self.server.cooldown,
        )


def load_settings(**overrides) -> Settings:
    """Load configuration from the config file and environment."""
    return Settings(**overrides)
