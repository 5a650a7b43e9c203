"""Structured JSONL runtime log of fad scans.

Every line is one JSON object carrying ``ts``, ``level``, ``event``, ``pid``
and ``thread`` plus the event's own fields. The events fad writes:

``scan.started`` (info)
    start paths, scanner limit and depth limit.
``scan.completed`` (info)
    elapsed time, pool size, traversal counters and peak scanners in use.
``scan.dir.error`` (warning)
    a directory or entry could not be read; the scan carried on.
``scan.task.failed`` (error)
    a directory scan raised something other than an ``OSError``.
``settings.invalid`` (warning)
    the settings file could not be used and defaults were applied.

``FAD_LOG_LEVEL`` picks the threshold (default ``warning``, ``off`` disables
the log) and ``FAD_LOG_FILE`` overrides the file under the user state dir.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from fad.paths import runtime_log_path

LogLevel = Literal["off", "error", "warning", "info", "debug"]

LEVEL_ENV = "FAD_LOG_LEVEL"
FILE_ENV = "FAD_LOG_FILE"
DEFAULT_LEVEL: LogLevel = "warning"

_LEVEL_VALUES: dict[str, int] = {
    "off": 100,
    "error": 40,
    "warning": 30,
    "info": 20,
    "debug": 10,
}
_LEVEL_ALIASES = {"warn": "warning", "none": "off", "disabled": "off", "0": "off"}

_runtime_logger: "RuntimeLogger | None" = None


def parse_level(value: str | None, default: LogLevel = DEFAULT_LEVEL) -> LogLevel:
    if not value:
        return default
    normalized = value.strip().lower()
    normalized = _LEVEL_ALIASES.get(normalized, normalized)
    if normalized not in _LEVEL_VALUES:
        return default
    return normalized  # type: ignore[return-value]


@dataclass(slots=True)
class RuntimeLogger:
    level: LogLevel
    sink_path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def enabled(self, level: str) -> bool:
        current = _LEVEL_VALUES.get(self.level, _LEVEL_VALUES[DEFAULT_LEVEL])
        return current < _LEVEL_VALUES["off"] and _LEVEL_VALUES[level] >= current

    def log(self, level: LogLevel, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        payload = {
            "ts": datetime.now(UTC).isoformat(),
            "level": level,
            "event": event,
            "pid": os.getpid(),
            "thread": threading.current_thread().name,
            **fields,
        }
        line = json.dumps(payload, sort_keys=True)
        # Scanner threads log concurrently; one line per write under the lock.
        with self._lock:
            try:
                self.sink_path.parent.mkdir(parents=True, exist_ok=True)
                with self.sink_path.open("a", encoding="utf-8") as handle:
                    handle.write(line + "\n")
            except OSError:
                # A lost log line is not a scan error.
                return

    def scan_started(self, *, paths: Sequence[str], scanners: int, max_depth: int) -> None:
        self.log("info", "scan.started", paths=list(paths), scanners=scanners, max_depth=max_depth)

    def scan_completed(
        self,
        *,
        elapsed_s: float,
        found: int,
        peak_scanners: int,
        **counters: int,
    ) -> None:
        self.log(
            "info",
            "scan.completed",
            elapsed_s=round(elapsed_s, 3),
            found=found,
            peak_scanners=peak_scanners,
            **counters,
        )

    def dir_error(self, path: str, *, stage: str, message: str) -> None:
        self.log("warning", "scan.dir.error", path=path, stage=stage, message=message)

    def task_failed(self, path: str, *, error: BaseException) -> None:
        self.log("error", "scan.task.failed", path=path, error=repr(error))

    def settings_invalid(self, path: Path, *, message: str) -> None:
        self.log("warning", "settings.invalid", path=str(path), message=message)


class _DisabledLogger(RuntimeLogger):
    def __init__(self) -> None:
        super().__init__(level="off", sink_path=Path(os.devnull))

    def log(self, level: LogLevel, event: str, **fields: Any) -> None:  # noqa: ARG002
        return


def configure_runtime_logging(
    *,
    level: str | None = None,
    log_file: str | Path | None = None,
) -> RuntimeLogger:
    """Install the process-wide logger from arguments, falling back to the environment."""
    global _runtime_logger

    effective_level = parse_level(level or os.getenv(LEVEL_ENV))
    if effective_level == "off":
        _runtime_logger = _DisabledLogger()
        return _runtime_logger

    raw_file = log_file or os.getenv(FILE_ENV)
    sink_path = runtime_log_path() if raw_file is None else Path(raw_file).expanduser().resolve()
    _runtime_logger = RuntimeLogger(level=effective_level, sink_path=sink_path)
    _runtime_logger.log(
        "info",
        "logging.configured",
        configured_level=effective_level,
        sink_path=str(sink_path),
    )
    return _runtime_logger


def get_runtime_logger() -> RuntimeLogger:
    global _runtime_logger
    if _runtime_logger is None:
        _runtime_logger = configure_runtime_logging()
    return _runtime_logger
