"""Settings schema for fad."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fad.age import Age, parse_age
from fad.fs.types import FileType

DEFAULT_PRINT_LIMIT = 23  # fits a 24-line terminal
DEFAULT_SCANNER_LIMIT = 10
DEFAULT_IGNORE_BASES = (
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".cache",
    "__pycache__",
    "node_modules",
    ".DS_Store",
)
DEFAULT_IGNORE_TYPES = FileType.DIRECTORY.code

COMMA = ","
APPEND_PREFIX = "+"

COMMA_FIELDS = (
    "ignore_bases",
    "ignore_contains",
    "ignore_regexes",
    "ignore_globs",
    "ignore_types",
)


def split_comma_string(value: str) -> list[str]:
    if not value:
        return []
    return value.split(COMMA)


def merge_comma_string(current: str, value: str) -> str:
    """Replace ``current`` with ``value``, or append when ``value`` starts with '+'."""
    if not value.startswith(APPEND_PREFIX):
        return value
    addition = value[len(APPEND_PREFIX) :]
    if not current:
        return addition
    return f"{current}{COMMA}{addition}"


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    print_dirname: bool = Field(default=False, description="Print just the dirname of paths")
    print_ignored: bool = Field(default=False, description="Print paths ignored by filters")
    print_stats: bool = Field(default=False, description="Print summary statistics")
    suppress_errors: bool = Field(default=False, description="Suppress file-system errors")

    max_age: str = Field(default="", description="Print paths no older than this age")
    max_count: int = Field(default=DEFAULT_PRINT_LIMIT, ge=1)
    max_depth: int = Field(default=0, ge=0, description="0 is unlimited")
    max_scanners: int = Field(default=DEFAULT_SCANNER_LIMIT, ge=1)

    ignore_bases: str = Field(default=COMMA.join(DEFAULT_IGNORE_BASES))
    ignore_contains: str = Field(default="")
    ignore_regexes: str = Field(default="")
    ignore_globs: str = Field(default="")
    ignore_types: str = Field(default=DEFAULT_IGNORE_TYPES)

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, value: str) -> str:
        value = value.strip()
        if value:
            parse_age(value)
        return value

    @field_validator("ignore_types")
    @classmethod
    def validate_ignore_types(cls, value: str) -> str:
        for code in split_comma_string(value):
            FileType.from_code(code)
        return value

    def age_limit(self) -> Age:
        if not self.max_age:
            return Age()
        return parse_age(self.max_age)

    def merged(self, overrides: dict[str, object]) -> Settings:
        """Return a copy with ``overrides`` applied; comma-string fields honour '+'."""
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key in COMMA_FIELDS and isinstance(value, str):
                value = merge_comma_string(data[key], value)
            data[key] = value
        return Settings.model_validate(data)
