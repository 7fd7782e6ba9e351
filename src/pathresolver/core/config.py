"""Configuration management.

Loads and merges resolver configuration from multiple sources with proper
precedence.
"""

import os
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..resolver.package import PackageContext
from ..util.log import Log
from .config_loader import deep_merge, load_json_file
from .config_schema import (
    DEFAULT_CONDITIONS,
    HostKind,
    LoggingConfig,
    PackageConfig,
    ResolverConfig,
    SelfReferencePolicy,
)
from .env import Env
from .global_paths import GlobalPath

log = Log.create({"service": "config"})

CONFIG_FILES = ("pathresolver.json", "pathresolver.jsonc")

ENV_OVERRIDES = {
    "PATHRESOLVER_BASE_PATH": ("base_path",),
    "PATHRESOLVER_SELF_REFERENCE": ("self_reference",),
    "PATHRESOLVER_HOST": ("host",),
    "PATHRESOLVER_LOG_LEVEL": ("logging", "level"),
}

__all__ = [
    "DEFAULT_CONDITIONS",
    "ConfigError",
    "ConfigManager",
    "HostKind",
    "LoggingConfig",
    "PackageConfig",
    "ResolverConfig",
    "SelfReferencePolicy",
]


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


_config_var: ContextVar['ConfigManager'] = ContextVar('_config_var')


def _env_overrides() -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for name, keys in ENV_OVERRIDES.items():
        value = Env.get(name)
        if not value:
            continue
        target = result
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value
    return result


class ConfigManager:
    """Configuration management.

    Instance-based with ContextVar for scoping. Class methods delegate
    to the current instance.

    Sources, lowest precedence first:
    1. Global config (pathresolver.json in the user config directory)
    2. Project configs found walking up from the directory, root first
    3. Environment variable overrides (PATHRESOLVER_*)
    4. npm package context, when no package is configured
    """

    def __init__(self) -> None:
        self._cache: Optional[ResolverConfig] = None
        self._sources: List[str] = []

    # -- ContextVar plumbing --

    @classmethod
    def current(cls) -> 'ConfigManager':
        try:
            return _config_var.get()
        except LookupError:
            instance = cls()
            _config_var.set(instance)
            return instance

    @classmethod
    def provide(cls, instance: 'ConfigManager') -> Token['ConfigManager']:
        return _config_var.set(instance)

    @classmethod
    def restore(cls, token: Token['ConfigManager']) -> None:
        _config_var.reset(token)

    # -- Public API (class methods delegate to current instance) --

    @classmethod
    def reset(cls) -> None:
        """Reset cached configuration."""
        inst = cls.current()
        inst._cache = None
        inst._sources = []

    @classmethod
    def load(cls, directory: str = ".") -> ResolverConfig:
        return cls.current()._load(directory)

    @classmethod
    def sources(cls) -> List[str]:
        """Config files that contributed to the cached configuration."""
        return cls.current()._sources.copy()

    # -- Instance methods --

    def _load(self, directory: str = ".") -> ResolverConfig:
        if self._cache is not None:
            return self._cache

        result: Dict[str, Any] = {}
        sources: List[str] = []

        # 1. Global config
        for filename in CONFIG_FILES:
            filepath = os.path.join(GlobalPath.config(), filename)
            data = load_json_file(filepath)
            if data:
                result = deep_merge(result, data)
                sources.append(filepath)
                log.info("loaded global config", {"path": filepath})

        # 2. Project configs (search up from directory)
        current = Path(directory).resolve()
        project_configs: List[Path] = []
        while True:
            for filename in CONFIG_FILES:
                filepath = current / filename
                if filepath.is_file():
                    project_configs.append(filepath)
            if current == current.parent:
                break
            current = current.parent

        for filepath in reversed(project_configs):
            data = load_json_file(filepath)
            if data:
                result = deep_merge(result, data)
                sources.append(str(filepath))
                log.info("loaded project config", {"path": str(filepath)})

        # 3. Environment overrides
        overrides = _env_overrides()
        if overrides:
            result = deep_merge(result, overrides)
            log.debug("applied environment overrides", {"keys": sorted(overrides)})

        # 4. npm package context
        if not result.get("package"):
            context = PackageContext.from_env()
            if context is not None:
                result["package"] = {"name": context.name, "manifest": context.manifest}

        try:
            config = ResolverConfig.model_validate(result)
        except ValidationError as e:
            origin = sources[-1] if sources else "environment"
            raise ConfigError(origin, str(e)) from e

        self._cache = config
        self._sources = sources
        return config
