import os
from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import AnyUrl, BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TASKDESK_LOGGER(BaseModel):
    LOG_DIR: str = "~/.cache/taskdesk/logs"
    USE_STRUCTLOG: bool = True
    FILE_LOGGING: bool = True


# Unshadowed alias: inside CoreSettings the field name shadows the class name.
_TaskdeskLoggerSettings = TASKDESK_LOGGER


class CoreSettings(BaseSettings):
    """Process-wide settings read from ``TASKDESK_LOGGER__*`` environment variables."""

    TASKDESK_LOGGER: _TaskdeskLoggerSettings = _TaskdeskLoggerSettings()

    model_config = SettingsConfigDict(env_nested_delimiter="__")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def _expand_tilde(obj):
            if isinstance(obj, str):
                return os.path.expanduser(obj) if obj.startswith("~") else obj
            if isinstance(obj, dict):
                return {k: _expand_tilde(v) for k, v in obj.items()}
            return obj

        def env_settings_expanded():
            return _expand_tilde(env_settings())

        return (
            init_settings,
            env_settings_expanded,
            dotenv_settings,
            file_secret_settings,
        )


# Union alias used across the package for configuration overrides
SettingsLike = Union[
    Dict[str, Any],
    List[Union[Dict[str, Any], BaseSettings, BaseModel]],
    BaseSettings,
    BaseModel,
    None,
]


class _AttrView:
    """Lightweight attribute-access wrapper around a mapping.

    Enables access like obj.SECTION.KEY for nested dictionaries.
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getattr__(self, name: str):
        if name in self._data:
            return _wrap(self._data[name])
        raise AttributeError(f"No such attribute: {name}")

    def __getitem__(self, key: str):
        return _wrap(self._data[key])

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"_AttrView({self._data!r})"


def _wrap(value: Any) -> Any:
    if isinstance(value, dict):
        return _AttrView(value)
    if isinstance(value, list):
        return [(_AttrView(v) if isinstance(v, dict) else v) for v in value]
    return value


class Config(dict):
    """Unified configuration manager for Taskdesk components.

    The ``Config`` class consolidates configuration from dictionaries and Pydantic ``BaseSettings`` / ``BaseModel``
    objects, overlays environment variables (``SECTION__KEY``) and supports attribute-style access to nested keys.
    Values are kept as strings (mirroring what the environment provides); ``SecretStr`` fields are masked and can
    only be read back with ``get_secret``.

    Example:
        >>> from taskdesk.core import Config
        >>> config = Config.load(defaults={"BOARD": {"URL": "http://localhost:8080"}})
        >>> config.BOARD.URL
        'http://localhost:8080'
    """

    MASK = "********"

    def __init__(self, extra_settings: SettingsLike = None, *, apply_env: bool = True):
        self._secret_paths: set[Tuple[str, ...]] = set()
        self._secrets: Dict[Tuple[str, ...], str] = {}

        merged: Dict[str, Any] = {}
        for item in self._as_list(extra_settings):
            merged = self._deep_update(merged, self._to_dict(item, self._secret_paths))

        # Overlay environment variables last so they can override provided settings
        if apply_env:
            merged = self._apply_env_overrides(merged)

        super().__init__(self._stringify_and_mask(merged))

    def __getattr__(self, name: str):
        """Enable attribute-style access for top-level keys."""
        if name in self:
            return _wrap(self[name])
        raise AttributeError(f"No such attribute: {name}")

    @classmethod
    def load(
        cls,
        *,
        defaults: SettingsLike = None,
        overrides: SettingsLike = None,
    ) -> "Config":
        """Create a Config from defaults, environment variables and runtime overrides, in increasing precedence.

        Defaults may nest models under section names, e.g. ``{"TASKBOARD": TaskBoardSettings()}``; ``SecretStr``
        fields of those models stay masked even when an environment variable replaces their value.
        """
        secret_paths: set[Tuple[str, ...]] = set()
        base: Dict[str, Any] = {}
        for item in cls._as_list(defaults):
            base = cls._deep_update(base, cls._to_dict(item, secret_paths))
        base = cls._apply_env_overrides(base)
        for item in cls._as_list(overrides):
            base = cls._deep_update(base, cls._to_dict(item, secret_paths))

        config = cls.__new__(cls)
        config._secret_paths = secret_paths
        config._secrets = {}
        dict.__init__(config, config._stringify_and_mask(base))
        return config

    def get_secret(self, *path: str) -> Optional[str]:
        """Retrieve a secret by path components, e.g., get_secret("TASKBOARD", "JWT_SECRET")."""
        return self._secrets.get(tuple(path))

    @staticmethod
    def _as_list(settings: SettingsLike) -> List[Any]:
        if settings is None:
            return []
        if isinstance(settings, list):
            return [s for s in settings if isinstance(s, (dict, BaseModel))]
        return [settings]

    @staticmethod
    def _deep_update(base: dict, override: dict) -> dict:
        """Recursively update nested dictionaries."""
        for k, v in (override or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                base[k] = Config._deep_update(base.get(k, {}), v)
            else:
                base[k] = v
        return base

    @staticmethod
    def _apply_env_overrides(base: dict, delimiter: str = "__") -> dict:
        result = deepcopy(base)

        for env_key, env_value in os.environ.items():
            if delimiter not in env_key:
                continue
            parts = [p.strip().upper() for p in env_key.split(delimiter) if p.strip()]
            # Only overlay sections that the defaults declare
            if len(parts) < 2 or parts[0] not in result:
                continue
            node = result
            for key in parts[:-1]:
                if key not in node or not isinstance(node[key], dict):
                    node[key] = {}
                node = node[key]
            # Stored as given, e.g. "007123" stays "007123"
            node[parts[-1]] = env_value

        return result

    def _stringify_and_mask(self, data: Dict[str, Any]) -> Dict[str, Any]:
        def convert(v: Any, path: Tuple[str, ...]):
            if isinstance(v, SecretStr):
                self._secrets[path] = v.get_secret_value()
                return self.MASK
            if isinstance(v, dict):
                return {k: convert(x, path + (k,)) for k, x in v.items()}
            if isinstance(v, (list, tuple, set)):
                return [convert(x, path) for x in v]
            sval = str(v) if isinstance(v, AnyUrl) or not isinstance(v, str) else v
            if path in self._secret_paths:
                self._secrets[path] = sval
                return self.MASK
            return os.path.expanduser(sval) if sval.startswith("~") else sval

        return convert(data, ())

    @classmethod
    def _collect_secret_paths_from_model(cls, model_cls: type[BaseModel], prefix: Tuple[str, ...] = ()) -> set:
        paths: set[Tuple[str, ...]] = set()
        for name, field in getattr(model_cls, "__pydantic_fields__", {}).items():
            ann = getattr(field, "annotation", None)
            if ann is SecretStr or (get_origin(ann) is Union and SecretStr in get_args(ann)):
                paths.add(prefix + (name,))
            elif isinstance(ann, type) and issubclass(ann, BaseModel):
                paths.update(cls._collect_secret_paths_from_model(ann, prefix + (name,)))
        return paths

    @classmethod
    def _to_dict(cls, item: Any, secret_paths: set, prefix: Tuple[str, ...] = ()) -> Dict[str, Any]:
        """Flatten models (top-level or nested in a dict) into plain dicts, recording their secret paths."""
        if isinstance(item, BaseModel):
            secret_paths.update(cls._collect_secret_paths_from_model(type(item), prefix))
            return cls._to_dict(dict(item), secret_paths, prefix)
        result: Dict[str, Any] = {}
        for k, v in item.items():
            if isinstance(v, (BaseModel, dict)):
                result[k] = cls._to_dict(v, secret_paths, prefix + (k,))
            else:
                result[k] = v
        return result
