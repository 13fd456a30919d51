"""
Configuration system for parse-schema using Pydantic.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "parse-server.config.json"

ENV_APPLICATION_ID = "PARSE_SERVER_APPLICATION_ID"
ENV_MASTER_KEY = "PARSE_SERVER_MASTER_KEY"
ENV_PUBLIC_SERVER_URL = "PARSE_PUBLIC_SERVER_URL"


class ParseServerConfig(BaseSettings):
    """Connection to the Parse Server administrative API.

    Values come from a config document (``publicServerURL``, ``appId``,
    ``masterKey``) or from the ``PARSE_*`` environment variables.
    """

    public_server_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("publicServerURL", ENV_PUBLIC_SERVER_URL),
        description="Public URL of the Parse Server, including the mount path",
    )
    app_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("appId", ENV_APPLICATION_ID),
        description="Parse application id",
    )
    master_key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("masterKey", ENV_MASTER_KEY),
        description="Parse master key",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("public_server_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def schemas_url(self) -> str:
        """URL of the schemas endpoint."""
        return f"{self.public_server_url}/schemas"

    def headers(self) -> Dict[str, str]:
        """Headers required by administrative requests."""
        return {
            "X-Parse-Application-Id": self.app_id,
            "X-Parse-Master-Key": self.master_key,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParseServerConfig":
        """Load configuration from a JSON or YAML document."""
        path = Path(path)

        if not path.exists():
            raise ConfigurationError(f"No config at '{path}'")

        suffix = path.suffix.lower()
        try:
            with open(path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                elif suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    raise ConfigurationError(
                        f"Invalid config file type: '{path.suffix}'",
                        details={"path": str(path)},
                    )
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid config: expected a mapping in '{path}'"
            )

        data = cls._expand_env_vars(data)

        # model_validate skips the settings sources, so only the document counts
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(_describe_validation_error(e)) from e

    @classmethod
    def _expand_env_vars(cls, data: Any) -> Any:
        """Recursively expand environment variables in configuration data."""
        if isinstance(data, dict):
            return {k: cls._expand_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._expand_env_vars(item) for item in data]
        elif isinstance(data, str):
            return os.path.expandvars(data)
        else:
            return data


class ReconcileOptions(BaseModel):
    """Options for the converge and prune operations."""

    prefix: Optional[str] = Field(None, description="Class name namespace prefix")
    delete_classes: bool = Field(
        True, description="Delete remote classes missing from the local schema"
    )
    delete_fields: bool = Field(
        True, description="Delete remote fields missing from or changed in the local schema"
    )
    dry_run: bool = Field(False, description="Plan operations without applying them")

    @field_validator("prefix")
    @classmethod
    def empty_prefix_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class TypeScriptOptions(BaseModel):
    """Options for the TypeScript definition generator."""

    prefix: Optional[str] = Field(None, description="Class name namespace prefix")
    sdk: bool = Field(True, description="Emit types for the Parse JS SDK")
    global_sdk: bool = Field(
        False, description="Assume a global Parse object instead of importing it"
    )
    subclass: bool = Field(
        False, description="Emit registered Parse.Object subclasses instead of type aliases"
    )

    @field_validator("prefix")
    @classmethod
    def empty_prefix_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level"
    )
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure root logging once, at the process boundary."""
    config = config or LoggingConfig()
    logging.basicConfig(level=config.level, format=config.format, force=True)


def load_config(config_path: Optional[Union[str, Path]] = None) -> ParseServerConfig:
    """
    Build the connection configuration.

    The environment (process variables and ``.env``) wins when all three
    ``PARSE_*`` variables are set; otherwise the config document at
    *config_path* (default ``config/parse-server.config.json``) is read and
    a partial environment is ignored.

    Raises:
        ConfigurationError: If no usable configuration is found
    """
    try:
        config = ParseServerConfig()
    except ValidationError:
        logger.debug("Environment incomplete, falling back to config file")
    else:
        logger.info("Using config from environment")
        return config

    path = Path(config_path or DEFAULT_CONFIG_PATH).resolve()
    logger.debug(f"Loading config from {path}")
    return ParseServerConfig.from_file(path)


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        key = ".".join(str(part) for part in item["loc"]) or "<root>"
        if item["type"] == "missing":
            problems.append(f"Missing key '{key}'")
        else:
            problems.append(f"'{key}': {item['msg']}")
    return "Invalid config: " + "; ".join(problems)
