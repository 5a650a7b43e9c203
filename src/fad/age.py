"""Relative ages measured against a single scan baseline.

An age is the distance in whole seconds between the baseline instant captured
when a run starts and some sampled instant, typically a modification time.
Positive ages lie in the past, negative ages in the future:

    -ve <-----0-----> +ve
    young             old
"""

from __future__ import annotations

import math
from dataclasses import dataclass

SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = (365 * DAY) + (5 * HOUR) + (49 * MINUTE) + (12 * SECOND)  # mean Gregorian year
MONTH = YEAR // 12
MAX_AGE_SECONDS = 999 * YEAR

UNIT_SECONDS: dict[str, int] = {
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
    "D": DAY,
    "W": WEEK,
    "M": MONTH,
    "Y": YEAR,
}

# Coarsest first; the first threshold met wins when rendering.
_COMPACT_UNITS: tuple[tuple[int, str], ...] = (
    (YEAR, "Y"),
    (MONTH, "M"),
    (WEEK, "W"),
    (DAY, "D"),
    (HOUR, "h"),
    (MINUTE, "m"),
)


class AgeParseError(ValueError):
    """Base class for rejected age specifications."""


class InvalidAgeFormat(AgeParseError):
    pass


class InvalidAgeUnit(AgeParseError):
    pass


class AgeRangeExceeded(AgeParseError):
    pass


def _round_to(seconds: int, granularity: int) -> int:
    return (seconds + granularity // 2) // granularity


@dataclass(frozen=True, slots=True)
class Age:
    seconds: int = 0
    granularity: int = 0
    text: str = ""

    @classmethod
    def from_instants(cls, baseline: float, sampled: float) -> Age:
        return cls(seconds=math.floor(baseline - sampled))

    @property
    def is_set(self) -> bool:
        return self.seconds > 0

    def gt(self, other: Age, truncate: bool = False) -> bool:
        """Return True if this age is strictly older than ``other``.

        With ``truncate`` both ages are rounded to the coarser of their two
        granularities first, so ages that render identically in compact form
        (3W versus 3.2W) compare as not greater.
        """
        granularity = SECOND
        if truncate:
            granularity = max(self.granularity, other.granularity, SECOND)
        return _round_to(self.seconds, granularity) > _round_to(other.seconds, granularity)

    def lt(self, other: Age) -> bool:
        return self.seconds < other.seconds

    def le(self, other: Age) -> bool:
        # Ties favour the receiver.
        return self.seconds <= other.seconds

    def compact(self) -> str:
        """Render in at most a few characters, coarsening the unit as the age grows."""
        if self.seconds < 0:
            return "fut"
        for threshold, unit in _COMPACT_UNITS:
            if self.seconds >= threshold:
                return f"{_round_to(self.seconds, threshold)}{unit}"
        return f"{self.seconds}s"

    def __str__(self) -> str:
        return self.text


def parse_age(text: str) -> Age:
    """Parse 1-5 decimal digits followed by a single unit letter, e.g. ``3D`` or ``12h``.

    A leading zero is only accepted for the bare value ``0``.
    """
    if len(text) < 2 or len(text) > 6:
        raise InvalidAgeFormat(f"Age '{text}' must be 1-5 digits + unit")
    if text[0] == "0" and len(text) > 2:
        raise InvalidAgeFormat(f"First digit of '{text}' cannot be zero")

    digits, unit = text[:-1], text[-1]
    granularity = UNIT_SECONDS.get(unit)
    if granularity is None:
        raise InvalidAgeUnit(
            f"Age '{text}' has invalid unit '{unit}' - expect s,m,h,D,W,M or Y"
        )
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidAgeFormat(f"Age '{text}' has invalid digits '{digits}'")

    seconds = int(digits) * granularity
    if seconds > MAX_AGE_SECONDS:
        raise AgeRangeExceeded(
            f"Age '{text}' exceeds maximum value of {MAX_AGE_SECONDS // YEAR} years"
        )
    return Age(seconds=seconds, granularity=granularity, text=text)
