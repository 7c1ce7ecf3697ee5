from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Union


NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

# signed 64-bit nanoseconds, about 2562047h either way
MAX_NANOSECONDS = 2**63 - 1
MIN_NANOSECONDS = -(2**63)

UNIT_NANOS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}
_UNIT_ALIASES = {"µs": "us", "μs": "us"}

_COMPONENT_RE = re.compile(r"(\d*(?:\.\d*)?)([^\d.]+)")


class DurationError(ValueError):
    """Raised when a duration string or unit cannot be understood."""


def _normalize_unit(unit: str) -> str:
    unit = _UNIT_ALIASES.get(unit, unit)
    if unit not in UNIT_NANOS:
        raise DurationError(f"Unknown duration unit: {unit!r}")
    return unit


def _scaled(magnitude: Decimal, unit: str) -> int:
    if not magnitude.is_finite():
        raise DurationError(f"Invalid duration magnitude: {magnitude}")
    # fractional nanoseconds are truncated
    return int(magnitude * UNIT_NANOS[unit])


def _decimal_text(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{str(frac).rjust(width, '0').rstrip('0')}"


def _canonical_text(nanoseconds: int) -> str:
    """Render with the largest units that fit, e.g. ``1h2m3.5s`` or ``1.5ms``."""
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    remaining = abs(nanoseconds)

    if remaining < SECOND:
        for unit in ("ms", "us"):
            if remaining >= UNIT_NANOS[unit]:
                return f"{sign}{_decimal_text(remaining, UNIT_NANOS[unit])}{unit}"
        return f"{sign}{remaining}ns"

    hours, remaining = divmod(remaining, HOUR)
    minutes, remaining = divmod(remaining, MINUTE)
    seconds = f"{_decimal_text(remaining, SECOND)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


@dataclass(frozen=True, slots=True)
class Duration:
    """A length of time that remembers the unit it is written in.

    The magnitude is kept as whole nanoseconds; ``unit`` only affects how the
    value is rendered back to text, so ``Duration.parse("5ms")`` prints as
    ``"5ms"`` rather than ``"5000000ns"``.
    """

    nanoseconds: int
    unit: str = "ns"

    def __post_init__(self) -> None:
        if self.unit not in UNIT_NANOS:
            raise DurationError(f"Unknown duration unit: {self.unit!r}")
        if not MIN_NANOSECONDS <= self.nanoseconds <= MAX_NANOSECONDS:
            raise DurationError(f"Invalid duration {self.nanoseconds}ns: overflow")

    @classmethod
    def of(cls, value: Union[int, float, str, Decimal], unit: str) -> "Duration":
        unit = _normalize_unit(unit)
        try:
            magnitude = Decimal(str(value))
        except InvalidOperation as exc:
            raise DurationError(f"Invalid duration magnitude: {value!r}") from exc
        return cls(_scaled(magnitude, unit), unit)

    @classmethod
    def from_milliseconds(cls, value: Union[int, float]) -> "Duration":
        return cls.of(value, "ms")

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """Parse strings such as ``"5ms"``, ``"-1.5h"`` or ``"1m30s"``.

        The unit of the last component becomes the remembered unit.
        """
        original = text
        text = text.strip()
        sign = 1
        if text[:1] in ("+", "-"):
            sign = -1 if text[0] == "-" else 1
            text = text[1:]
        if text == "0":
            return cls(0, "s")
        if not text:
            raise DurationError(f"Invalid duration: {original!r}")

        total = 0
        unit = ""
        pos = 0
        while pos < len(text):
            match = _COMPONENT_RE.match(text, pos)
            if not match or not any(ch.isdigit() for ch in match.group(1)):
                raise DurationError(f"Invalid duration: {original!r}")
            number, raw_unit = match.groups()
            try:
                unit = _normalize_unit(raw_unit)
            except DurationError as exc:
                raise DurationError(
                    f"Unknown unit {raw_unit!r} in duration {original!r}"
                ) from exc
            total += _scaled(Decimal(number), unit)
            if total > MAX_NANOSECONDS + (sign < 0):
                raise DurationError(f"Invalid duration {original!r}: overflow")
            pos = match.end()
        return cls(sign * total, unit)

    @property
    def timedelta(self) -> timedelta:
        # sub-microsecond remainders are truncated toward zero
        micros = abs(self.nanoseconds) // MICROSECOND
        return timedelta(microseconds=-micros if self.nanoseconds < 0 else micros)

    def same_length(self, other: "Duration") -> bool:
        return self.nanoseconds == other.nanoseconds

    def __str__(self) -> str:
        scale = UNIT_NANOS[self.unit]
        if self.nanoseconds % scale == 0:
            return f"{self.nanoseconds // scale}{self.unit}"
        return _canonical_text(self.nanoseconds)
