"""Bounded set of the youngest directory candidates found by a scan."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass

from fad.age import Age
from fad.fs.types import FileType


@dataclass(frozen=True, slots=True)
class Candidate:
    """The most recently modified entry found in one directory.

    It is a candidate because a younger one can evict it from the pool.
    """

    path: str
    file_type: FileType
    age: Age


class CandidatePool:
    """Keeps up to ``max_entries`` of the youngest candidates no older than ``max_age``.

    ``admit()`` is safe to call from many scanner threads. ``sort_ascending()``
    and the read helpers are only meant for use once scanning has finished.
    """

    def __init__(self, max_entries: int = 0, max_age: Age | None = None) -> None:
        self.max_entries = max_entries
        self.max_age = max_age or Age()
        self._lock = threading.Lock()
        self._entries: list[Candidate] = []
        self._oldest = 0

    def admit(self, candidate: Candidate) -> bool:
        """Add ``candidate`` if it qualifies. Returns True when it was kept.

        1. Older than max_age (when set): discard.
        2. Room left (or unlimited): append.
        3. Younger than the current oldest: replace the oldest.
        4. Otherwise discard.
        """
        with self._lock:
            if self.max_age.is_set and candidate.age.gt(self.max_age, truncate=True):
                return False

            if self.max_entries == 0 or len(self._entries) < self.max_entries:
                self._entries.append(candidate)
                if self._entries[self._oldest].age.lt(candidate.age):
                    self._oldest = len(self._entries) - 1
                return True

            if not candidate.age.lt(self._entries[self._oldest].age):
                return False

            self._entries[self._oldest] = candidate
            # Replacing the oldest invalidates the hint; rescan for the new oldest.
            self._oldest = 0
            for index, entry in enumerate(self._entries):
                if entry.age.gt(self._entries[self._oldest].age):
                    self._oldest = index
            return True

    def sort_ascending(self) -> None:
        self._entries.sort(key=lambda entry: entry.age.seconds)

    def max_age_width(self) -> int:
        return max((len(entry.age.compact()) for entry in self._entries), default=0)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(list(self._entries))
