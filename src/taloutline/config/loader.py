"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Direct kwargs
2. Environment variables (TAL_OUTLINE__SECTION__KEY)
3. Repo YAML (./.tal-outline.yaml)
4. Global YAML (~/.config/tal-outline/config.yaml)
5. Built-in defaults
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from taloutline.config.models import (
    LoggingConfig,
    ScanConfig,
    TalOutlineConfig,
    WatchConfig,
)
from taloutline.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/tal-outline/config.yaml").expanduser()
REPO_CONFIG_NAME = ".tal-outline.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class TalOutlineSettings(BaseSettings):
        """Root config. Env vars: TAL_OUTLINE__LOGGING__LEVEL, TAL_OUTLINE__SCAN__ENCODING, etc."""

        model_config = SettingsConfigDict(
            env_prefix="TAL_OUTLINE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        scan: ScanConfig = ScanConfig()
        watch: WatchConfig = WatchConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return TalOutlineSettings


def load_config(
    project_root: Path | None = None,
    *,
    config_path: Path | None = None,
    **kwargs: Any,
) -> TalOutlineConfig:
    """Load config: defaults < global yaml < repo yaml < env vars < kwargs.

    Args:
        project_root: Directory holding ``.tal-outline.yaml``.
                      Defaults to current working directory.
        config_path: Explicit config file; replaces the repo YAML and must exist.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On missing explicit file, invalid YAML, or validation errors.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError.file_not_found(str(config_path))
        repo_config = _load_yaml(config_path)
    else:
        repo_config = _load_yaml((project_root or Path.cwd()) / REPO_CONFIG_NAME)

    yaml_config = _deep_merge(_load_yaml(GLOBAL_CONFIG_PATH), repo_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return TalOutlineConfig.model_validate(settings.model_dump())
