"""Tagged structured logging.

Loggers carry a set of tags (``service`` at minimum) that are rendered with
every record. Output is off until ``Log.configure`` enables a sink, so the
library stays silent when embedded in another program.
"""

import json
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..core.global_paths import GlobalPath

KEEP_LOG_FILES = 10


class LogLevel(str, Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "LogLevel":
        if value is None:
            return cls.INFO
        text = value.strip().upper()
        if text == "WARNING":
            return cls.WARN
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"invalid log level: {value}") from None


_PRIORITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


class LogFormat(str, Enum):
    """Log output format."""

    KV = "kv"
    JSON = "json"
    PRETTY = "pretty"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LogFormat":
        if value is None:
            return cls.KV
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"invalid log format: {value}") from None


@dataclass
class LogSettings:
    """Process-wide sink configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.KV
    console: bool = False
    file: bool = False
    file_path: Optional[str] = None
    handle: Optional[TextIO] = None


_settings = LogSettings()
_last = time.time()


def _describe_error(error: BaseException, depth: int = 0) -> str:
    text = f"{type(error).__name__}: {error}"
    if error.__cause__ is not None and depth < 10:
        text += " Caused by: " + _describe_error(error.__cause__, depth + 1)
    return text


def _plain(value: Any) -> Any:
    if isinstance(value, BaseException):
        return _describe_error(value)
    if value is None or isinstance(value, (dict, list, tuple, int, float, bool)):
        return value
    return str(value)


def _kv(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    text = str(value)
    if text == "" or "=" in text or any(ch.isspace() for ch in text):
        return json.dumps(text, ensure_ascii=False)
    return text


def _render(level: LogLevel, message: Any, fields: Dict[str, Any]) -> str:
    global _last

    now = time.time()
    delta = int((now - _last) * 1000)
    _last = now
    stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    data = {k: _plain(v) for k, v in fields.items() if v is not None}

    if _settings.format == LogFormat.JSON:
        payload = {
            "time": stamp,
            "delta_ms": delta,
            "level": level.value.lower(),
            "msg": _plain(message),
            **data,
        }
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n"

    pairs = " ".join(f"{k}={_kv(v)}" for k, v in data.items())
    if _settings.format == LogFormat.PRETTY:
        suffix = f" ({pairs})" if pairs else ""
        return f"{stamp} {level.value} {message or ''}{suffix} +{delta}ms\n"

    parts = [stamp, f"+{delta}ms", f"level={level.value.lower()}", f"msg={_kv(_plain(message))}", pairs]
    return " ".join(part for part in parts if part) + "\n"


class Logger:
    """Logger bound to a set of tags."""

    def __init__(self, tags: Optional[Dict[str, Any]] = None):
        self.tags = tags or {}

    def _emit(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> None:
        if not (_settings.console or _settings.handle):
            return
        if level.priority < _settings.level.priority:
            return
        line = _render(level, message, {**self.tags, **(extra or {})})
        if _settings.console:
            sys.stderr.write(line)
            sys.stderr.flush()
        if _settings.handle:
            _settings.handle.write(line)
            _settings.handle.flush()

    def debug(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.DEBUG, message, extra)

    def info(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.INFO, message, extra)

    def warn(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.WARN, message, extra)

    def warning(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        """Alias for warn()."""
        self.warn(message, extra)

    def error(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.ERROR, message, extra)


class Log:
    """Logger factory and sink configuration."""

    _loggers: Dict[str, Logger] = {}

    @classmethod
    def create(cls, tags: Optional[Dict[str, Any]] = None) -> Logger:
        """Create or retrieve a logger.

        Loggers tagged with a ``service`` are cached by service name.
        """
        tags = tags or {}
        service = tags.get("service")
        if not isinstance(service, str) or not service:
            return Logger(tags=tags)
        if service not in cls._loggers:
            cls._loggers[service] = Logger(tags=tags)
        return cls._loggers[service]

    @classmethod
    def configure(
        cls,
        *,
        level: Optional[LogLevel] = None,
        format: Optional[LogFormat] = None,
        console: Optional[bool] = None,
        file: Optional[bool] = None,
        dev: bool = False,
    ) -> None:
        """Configure sinks and output format.

        Args:
            level: Minimum level to output
            format: Record format
            console: Write records to stderr
            file: Write records to a file under ``GlobalPath.log()``
            dev: Use ``dev.log`` instead of a timestamped file name
        """
        if level is not None:
            _settings.level = level
        if format is not None:
            _settings.format = format
        if console is not None:
            _settings.console = console
        if file is not None:
            _settings.file = file

        cls.close()
        if not _settings.file:
            _settings.file_path = None
            return

        log_dir = Path(GlobalPath.log())
        log_dir.mkdir(parents=True, exist_ok=True)
        cls._prune(log_dir)
        if dev:
            log_path = log_dir / "dev.log"
        else:
            stamp = datetime.now().isoformat().split(".")[0].replace(":", "")
            log_path = log_dir / f"{stamp}.log"

        _settings.file_path = str(log_path)
        _settings.handle = log_path.open("w", encoding="utf-8")

    @classmethod
    def file(cls) -> str:
        """Get the current log file path."""
        return _settings.file_path or ""

    @classmethod
    def _prune(cls, log_dir: Path) -> None:
        """Keep only the newest timestamped log files."""
        files = sorted(log_dir.glob("????-??-??T??????.log"), key=lambda p: p.stat().st_mtime)
        for old in files[:-KEEP_LOG_FILES]:
            old.unlink(missing_ok=True)

    @classmethod
    def close(cls) -> None:
        """Close the log file handle if open."""
        if _settings.handle:
            _settings.handle.close()
            _settings.handle = None

    @classmethod
    def reset(cls) -> None:
        """Turn every sink off and restore defaults."""
        cls.close()
        _settings.level = LogLevel.INFO
        _settings.format = LogFormat.KV
        _settings.console = False
        _settings.file = False
        _settings.file_path = None
