"""Canonical duration text, e.g. ``72h3m0.5s``.

Durations travel as ``datetime.timedelta`` everywhere in the package.  The text
form is unit-suffixed with no separators between the pairs: optional sign, then
``<number><unit>`` pairs where the unit is one of ns, us/µs, ms, s, m or h.
"""

import re
from datetime import timedelta

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

# Both micro signs are accepted on input (U+00B5 and U+03BC); output always uses U+00B5.
_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,
    "μs": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# Signed 64-bit nanosecond range, anything past it is rejected as overflow.
_MAX_NANOS = (1 << 63) - 1
_MAX_WHOLE_DIGITS = len(str(_MAX_NANOS))
_MAX_FRACTION_DIGITS = 18

_PAIR = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")


class ParseError(ValueError):
    """Raised when a duration token can't be parsed."""

    def __init__(self, message, text):
        super().__init__(message)
        self.text = text


def to_nanoseconds(d: timedelta) -> int:
    return (d.days * 86400 + d.seconds) * SECOND + d.microseconds * MICROSECOND


def from_nanoseconds(nanos: int) -> timedelta:
    # timedelta stops at microseconds, so anything finer is truncated toward zero.
    magnitude = timedelta(microseconds=abs(nanos) // MICROSECOND)
    return -magnitude if nanos < 0 else magnitude


def _fraction_digits(remainder, precision):
    if not remainder:
        return ""
    return "." + f"{remainder:0{precision}d}".rstrip("0")


def _with_fraction(value, precision):
    whole, remainder = divmod(value, 10 ** precision)
    return f"{whole}{_fraction_digits(remainder, precision)}"


def format_duration(d: timedelta) -> str:
    """Return the canonical text for ``d``.

    Zero is ``0s``.  Below one second the largest of ns/µs/ms that keeps a
    non-zero integer part is used (``1.5ms``).  From one second up the form is
    ``[<h>h][<m>m]<s>[.<frac>]s`` and minutes are always written once hours
    are (``1h0m0s``).
    """
    nanos = to_nanoseconds(d)
    if nanos == 0:
        return "0s"

    sign = "-" if nanos < 0 else ""
    u = abs(nanos)

    if u < SECOND:
        if u < MICROSECOND:
            return f"{sign}{u}ns"
        if u < MILLISECOND:
            return f"{sign}{_with_fraction(u, 3)}µs"
        return f"{sign}{_with_fraction(u, 6)}ms"

    seconds, remainder = divmod(u, SECOND)
    text = f"{seconds % 60}{_fraction_digits(remainder, 9)}s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def parse_duration(text: str) -> timedelta:
    """Parse canonical duration text (``"1h15m30.5s"``, ``"-2ms"``, ``"0"``).

    Pairs may come in any order and repeat; their values are summed.  Raises
    ParseError on empty input, a missing or unknown unit, a number without
    digits, or a value outside the signed 64-bit nanosecond range.
    """
    s = text
    negative = False
    if s[:1] in ("-", "+"):
        negative = s[0] == "-"
        s = s[1:]

    # A bare zero is the only unit-less form allowed.
    if s == "0":
        return timedelta(0)
    if not s:
        raise ParseError(f"invalid duration {text!r}", text)

    total = 0
    pos = 0
    while pos < len(s):
        match = _PAIR.match(s, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ParseError(f"invalid duration {text!r}", text)
        if not unit:
            raise ParseError(f"missing unit in duration {text!r}", text)
        if unit not in _UNITS:
            raise ParseError(f"unknown unit {unit!r} in duration {text!r}", text)

        # More significant digits than the int64 nanosecond maximum can't fit in any unit.
        whole = whole.lstrip("0")
        if len(whole) > _MAX_WHOLE_DIGITS:
            raise ParseError(f"invalid duration {text!r}: out of range", text)
        # Fraction digits past _MAX_FRACTION_DIGITS are below nanosecond precision for every unit, drop them.
        frac = (frac or "")[:_MAX_FRACTION_DIGITS]

        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)

        if total > _MAX_NANOS + (1 if negative else 0):
            raise ParseError(f"invalid duration {text!r}: out of range", text)
        pos = match.end()

    return from_nanoseconds(-total if negative else total)
