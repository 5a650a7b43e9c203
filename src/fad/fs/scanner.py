"""Concurrent directory scanning that feeds the candidate pool.

Every directory discovered gets its own scan task, submitted eagerly to a
worker pool sized to the concurrency gate. The executor queue is the pending
work queue; the gate bounds how many scans touch the file system at once.
"""

from __future__ import annotations

import concurrent.futures
import os
import stat
import sys
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, TextIO

from fad.age import Age
from fad.candidates import Candidate, CandidatePool
from fad.fs.filtering import IgnoreRules
from fad.fs.gate import ConcurrencyGate
from fad.fs.types import FileType, classify_mode
from fad.runtime_logging import get_runtime_logger

ListDirFunc = Callable[[str], Iterable[Any]]
StatFunc = Callable[[str], os.stat_result]


def list_dir(path: str) -> list[os.DirEntry[str]]:
    with os.scandir(path) as it:
        return list(it)


@dataclass(slots=True)
class ScanStatistics:
    dirs: int = 0
    files: int = 0
    others: int = 0
    ignored: int = 0
    errors: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def increment(self, counter: str) -> None:
        with self._lock:
            setattr(self, counter, getattr(self, counter) + 1)

    def total(self) -> int:
        return self.dirs + self.files + self.others + self.ignored + self.errors


@dataclass(frozen=True, slots=True)
class ScanOptions:
    max_depth: int = 0
    suppress_errors: bool = False
    print_ignored: bool = False


class Scanner:
    def __init__(
        self,
        *,
        pool: CandidatePool,
        gate: ConcurrencyGate,
        rules: IgnoreRules | None = None,
        options: ScanOptions | None = None,
        baseline: float | None = None,
        stderr: TextIO | None = None,
        list_dir_func: ListDirFunc = list_dir,
        stat_func: StatFunc = os.stat,
    ) -> None:
        self.pool = pool
        self.gate = gate
        self.rules = rules or IgnoreRules()
        self.options = options or ScanOptions()
        self.baseline = time.time() if baseline is None else baseline
        self.stats = ScanStatistics()
        self._stderr = stderr
        self._list_dir = list_dir_func
        self._stat = stat_func
        self._logger = get_runtime_logger()

        self._sink_lock = threading.Lock()
        self._pending = 0
        self._pending_cond = threading.Condition()
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    def run(self, paths: Sequence[str]) -> tuple[CandidatePool, ScanStatistics]:
        """Scan every path, wait for the whole fan-out, and return the sorted pool."""
        started = time.monotonic()
        self._logger.scan_started(
            paths=paths, scanners=self.gate.limit, max_depth=self.options.max_depth
        )
        try:
            for path in paths:
                # Command line paths bypass the path ignore rules.
                self.descend(0, os.path.normpath(path))
            self.wait()
        finally:
            self.close()

        self.pool.sort_ascending()
        self._logger.scan_completed(
            elapsed_s=time.monotonic() - started,
            found=len(self.pool),
            peak_scanners=self.gate.peak_in_use,
            dirs=self.stats.dirs,
            files=self.stats.files,
            others=self.stats.others,
            ignored=self.stats.ignored,
            errors=self.stats.errors,
        )
        return self.pool, self.stats

    def descend(self, depth: int, path: str) -> None:
        """Queue a scan of ``path`` unless it lies beyond the depth limit.

        ``depth`` is the distance below a starting path. The pending count is
        bumped before submission so ``wait()`` never sees a transient zero.
        """
        if self.options.max_depth > 0 and depth >= self.options.max_depth:
            return

        with self._pending_cond:
            self._pending += 1
        self.stats.increment("dirs")
        self._pool_executor().submit(self._run_task, depth, path)

    def wait(self) -> None:
        with self._pending_cond:
            while self._pending > 0:
                self._pending_cond.wait()

    def close(self) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def scan(self, depth: int, path: str) -> None:
        """Find the youngest entry of ``path`` and offer it to the pool.

        The directory itself seeds the youngest candidate: if its mtime is the
        most recent, the last activity in it was a deletion. Subdirectories are
        never candidates here; their own scans seed from their own mtime.
        """
        try:
            dir_info = self._stat(path)
        except OSError as exc:
            self._report_error(path, f"Error: Getting File Info: {exc}", stage="stat")
            return

        if not stat.S_ISDIR(dir_info.st_mode):
            self._report_error(path, f"Error: {path} is not a directory", stage="stat")
            return

        youngest: Candidate | None = None
        dir_type = classify_mode(dir_info.st_mode)
        if self.rules.ignored_by_type(dir_type):
            self.stats.increment("ignored")
            self._report_ignored(f"Ignored type {dir_type.code}:{path}")
        else:
            youngest = self._candidate(path, dir_type, dir_info.st_mtime)

        try:
            entries = self._list_dir(path)
        except OSError as exc:
            self._report_error(path, f"Error: Reading Directory {path} {exc}", stage="list")
            entries = []

        for entry in entries:
            try:
                info = entry.stat(follow_symlinks=False)
            except OSError as exc:
                self._report_error(path, f"Error: {exc}", stage="entry")
                continue

            child = os.path.join(path, entry.name)
            rule = self.rules.ignored_by_path(child)
            if rule is not None:
                self.stats.increment("ignored")
                self._report_ignored(f"Ignored {rule}:{child}")
                continue

            file_type = classify_mode(info.st_mode)
            if file_type is FileType.DIRECTORY:
                self.descend(depth + 1, child)
                continue

            if self.rules.ignored_by_type(file_type):
                self.stats.increment("ignored")
                self._report_ignored(f"Ignored type {file_type.code}:{child}")
                continue

            self.stats.increment("files" if file_type is FileType.REGULAR else "others")
            current = self._candidate(child, file_type, info.st_mtime)
            # Equal ages favour the later entry, including over the directory itself.
            if youngest is None or current.age.le(youngest.age):
                youngest = current

        if youngest is not None:
            self.pool.admit(youngest)

    def _candidate(self, path: str, file_type: FileType, mtime: float) -> Candidate:
        return Candidate(path=path, file_type=file_type, age=Age.from_instants(self.baseline, mtime))

    def _run_task(self, depth: int, path: str) -> None:
        try:
            with self.gate:
                self.scan(depth, path)
        except Exception as exc:
            self.stats.increment("errors")
            self._logger.task_failed(path, error=exc)
            if not self.options.suppress_errors:
                self._emit(f"Error: {path}: {exc}")
        finally:
            with self._pending_cond:
                self._pending -= 1
                if self._pending == 0:
                    self._pending_cond.notify_all()

    def _pool_executor(self) -> concurrent.futures.ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=self.gate.limit,
                    thread_name_prefix="fad-scan",
                )
            return self._executor

    def _report_error(self, path: str, message: str, *, stage: str) -> None:
        self.stats.increment("errors")
        self._logger.dir_error(path, stage=stage, message=message)
        if not self.options.suppress_errors:
            self._emit(message)

    def _report_ignored(self, message: str) -> None:
        if self.options.print_ignored:
            self._emit(message)

    def _emit(self, line: str) -> None:
        stream = self._stderr if self._stderr is not None else sys.stderr
        encoding = getattr(stream, "encoding", None) or "utf-8"
        # Undecodable file names arrive as lone surrogates; print them escaped.
        text = line.encode(encoding, "backslashreplace").decode(encoding)
        with self._sink_lock:
            stream.write(text + "\n")
            stream.flush()
