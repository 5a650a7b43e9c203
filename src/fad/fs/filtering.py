"""Path and type ignore rules compiled from settings."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

import pathspec

from fad.config.models import Settings, split_comma_string
from fad.fs.types import FileType


class IgnoreRuleError(ValueError):
    """An ignore rule in the settings cannot be compiled."""


@dataclass(frozen=True, slots=True)
class IgnoreRules:
    bases: frozenset[str] = frozenset()
    contains: tuple[str, ...] = ()
    regexes: tuple[re.Pattern[str], ...] = ()
    globs: pathspec.PathSpec | None = None
    types: frozenset[FileType] = frozenset()

    @classmethod
    def compile(cls, settings: Settings) -> IgnoreRules:
        regexes: list[re.Pattern[str]] = []
        for pattern in split_comma_string(settings.ignore_regexes):
            try:
                regexes.append(re.compile(pattern))
            except re.error as exc:
                raise IgnoreRuleError(f"--iregexes '{pattern}' does not compile: {exc}") from exc

        globs = None
        glob_patterns = split_comma_string(settings.ignore_globs)
        if glob_patterns:
            globs = pathspec.PathSpec.from_lines("gitwildmatch", glob_patterns)

        types: set[FileType] = set()
        for code in split_comma_string(settings.ignore_types):
            try:
                types.add(FileType.from_code(code))
            except ValueError as exc:
                raise IgnoreRuleError(f"--itypes {exc}") from exc

        return cls(
            bases=frozenset(split_comma_string(settings.ignore_bases)),
            contains=tuple(item.upper() for item in split_comma_string(settings.ignore_contains)),
            regexes=tuple(regexes),
            globs=globs,
            types=frozenset(types),
        )

    def ignored_by_path(self, path: str) -> str | None:
        """Return the label of the first rule matching ``path``, or None."""
        if self.matches_bases(path):
            return "bases"
        if self.matches_contains(path):
            return "contains"
        if self.matches_regexes(path):
            return "regexes"
        if self.matches_globs(path):
            return "globs"
        return None

    def ignored_by_type(self, file_type: FileType) -> bool:
        return file_type in self.types

    def matches_bases(self, path: str) -> bool:
        return os.path.basename(path) in self.bases

    def matches_contains(self, path: str) -> bool:
        upper = path.upper()
        return any(item in upper for item in self.contains)

    def matches_regexes(self, path: str) -> bool:
        return any(regex.search(path) for regex in self.regexes)

    def matches_globs(self, path: str) -> bool:
        if self.globs is None:
            return False
        # Globs see every path as relative to the scan roots.
        return self.globs.match_file(path.replace(os.sep, "/").lstrip("/"))
