"""Configuration file loading utilities — JSONC parsing, env substitution, deep merge."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict

import commentjson

from ..util.log import Log
from .env import Env

log = Log.create({"service": "config.loader"})


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries; ``override`` wins on conflicts."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def substitute_env_vars(text: str) -> str:
    """Replace ``{env:VAR}`` patterns with environment variable values."""
    def replacer(match: re.Match[str]) -> str:
        return Env.get(match.group(1)) or ""

    return re.sub(r"\{env:([^}]+)\}", replacer, text)


def load_json_file(filepath: str | Path) -> Dict[str, Any]:
    """Load a JSON or JSONC file, returning ``{}`` on any I/O or parse error."""
    path = Path(filepath)
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
        data = commentjson.loads(substitute_env_vars(text))
    except (OSError, ValueError, UnicodeDecodeError) as e:
        log.error("failed to load config file", {"path": str(path), "error": str(e)})
        return {}

    if not isinstance(data, dict):
        log.error("config file is not an object", {"path": str(path)})
        return {}
    return data
