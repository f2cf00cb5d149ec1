"""Load configuration from YAML files, environment and overrides.

Precedence, highest first: keyword overrides, SEARCHVARIANTS__* environment
variables, the repo's .searchvariants/config.yaml, the user's global
~/.config/searchvariants/config.yaml, built-in defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from searchvariants.config.models import SearchVariantsConfig
from searchvariants.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/searchvariants/config.yaml").expanduser()
REPO_CONFIG_PATH = Path(".searchvariants") / "config.yaml"
ENV_PREFIX = "SEARCHVARIANTS__"


def config_files(root: Path) -> list[Path]:
    """YAML files read for root, lowest precedence first."""
    return [GLOBAL_CONFIG_PATH, root / REPO_CONFIG_PATH]


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlFilesSource(PydanticBaseSettingsSource):
    """YAML files merged section by section, later files winning."""

    def __init__(self, settings_cls: type[BaseSettings], paths: list[Path]) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        for path in paths:
            self._data = _deep_merge(self._data, _load_yaml(path))

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._data


def _settings_for(paths: list[Path]) -> type[BaseSettings]:
    # One class per load so concurrent loads never share a YAML source
    class _Settings(SearchVariantsConfig, BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix=ENV_PREFIX,
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlFilesSource(settings_cls, paths))

    return _Settings


def load_config(root: Path | None = None, **overrides: Any) -> SearchVariantsConfig:
    """Resolve the configuration for root (default: the working directory).

    Raises:
        ConfigError: On unparseable YAML or a value that fails validation.
    """
    settings_cls = _settings_for(config_files(root or Path.cwd()))
    try:
        settings = settings_cls(**overrides)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return SearchVariantsConfig.model_validate(settings.model_dump())
