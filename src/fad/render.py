"""Text rendering of scan results."""

from __future__ import annotations

import os

from fad.candidates import Candidate, CandidatePool
from fad.fs.gate import ConcurrencyGate
from fad.fs.scanner import ScanStatistics
from fad.fs.types import FileType


def format_candidate(candidate: Candidate, *, width: int, dirname_only: bool = False) -> str:
    path = os.path.normpath(candidate.path)
    type_code = candidate.file_type.code
    if dirname_only:
        path = os.path.dirname(path) or "."
        type_code = FileType.DIRECTORY.code
    return f"{candidate.age.compact():>{width}}:{type_code}:{path}"


def candidate_lines(pool: CandidatePool, *, dirname_only: bool = False) -> list[str]:
    width = pool.max_age_width()
    return [format_candidate(item, width=width, dirname_only=dirname_only) for item in pool]


def stats_line(
    stats: ScanStatistics,
    *,
    found: int,
    gate: ConcurrencyGate,
    elapsed_s: float,
) -> str:
    return (
        f"Elapse: {elapsed_s:0.1f}s {gate.peak_in_use}/{gate.limit} Found: {found} "
        f"Dirs: {stats.dirs} Files: {stats.files} Others: {stats.others} "
        f"Ignored: {stats.ignored} Errors: {stats.errors}"
    )
