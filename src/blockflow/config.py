from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from blockflow.exceptions import ConfigError
from blockflow.logging import get_logger

__all__ = [
    "BlockflowConfig",
    "SerializerConfig",
    "OutputConfig",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_FILENAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_FILENAME = "blockflow.yaml"


class SerializerConfig(BaseModel):
    """Settings for workflow serialization.

    Attributes:
        validate_required: Run pre-execution validation when the caller does
            not say otherwise (CLI default).
        check_references: Warn about ``<block.output>`` references to blocks
            outside the referencing block's accessibility set.
    """

    validate_required: bool = False
    check_references: bool = True


class OutputConfig(BaseModel):
    """Settings for writing serialized workflows."""

    format: Literal["json", "yaml"] = "json"
    indent: int = Field(default=2, ge=0, le=8)


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning(
                            f"Config file {yaml_file} is empty, using defaults."
                        )
                    elif isinstance(loaded, dict):
                        self._config_data = loaded
                    else:
                        raise ConfigError(
                            message=f"Config file {yaml_file} must contain a mapping",
                            field=None,
                            value=type(loaded).__name__,
                        )
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


# Set by load_config() so settings_customise_sources can see an explicit path.
_project_config_override: Path | None = None


class BlockflowConfig(BaseSettings):
    """Root configuration object containing all blockflow settings."""

    model_config = SettingsConfigDict(
        env_prefix="BLOCKFLOW_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    serializer: SerializerConfig = Field(default_factory=SerializerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init arguments
        2. Environment variables (BLOCKFLOW_*)
        3. Project YAML config (./blockflow.yaml)
        4. User YAML config (~/.config/blockflow/config.yaml)
        """
        project_config_path = (
            _project_config_override
            if _project_config_override is not None
            else Path.cwd() / PROJECT_CONFIG_FILENAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/blockflow/config.yaml
    """
    return Path.home() / ".config" / "blockflow" / "config.yaml"


def load_config(config_path: Path | None = None) -> BlockflowConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to project config file. Defaults to
            ./blockflow.yaml

    Returns:
        BlockflowConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    global _project_config_override

    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME

    if not config_path.exists():
        logger.info("No project configuration found, using defaults.")

    _project_config_override = config_path
    try:
        return BlockflowConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_override = None
