"""String helpers with the byte-oriented semantics the shell relies on."""

from __future__ import annotations

from itertools import takewhile

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"


def atoi(text: str) -> int:
    """Parse a leading, optionally signed decimal integer.

    Leading whitespace is skipped and parsing stops at the first non-digit.
    A string without digits yields 0.
    """
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest[:1] in ("+", "-"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    digits = "".join(takewhile(lambda char: char in _DIGITS, rest))
    return sign * int(digits) if digits else 0


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping the empty pieces."""
    return [piece for piece in text.split(sep) if piece]


def strtrim(text: str, charset: str) -> str:
    """Remove every character of ``charset`` from both ends of ``text``."""
    return text.strip(charset) if charset else text


def strnstr(haystack: str, needle: str, length: int) -> int | None:
    """Index of ``needle`` lying wholly within the first ``length`` characters.

    An empty needle is found at index 0; ``None`` means no match.
    """
    if not needle:
        return 0
    index = haystack.find(needle, 0, max(length, 0))
    return None if index < 0 else index


def _compare(first: str, second: str, limit: int | None) -> int:
    left = first.encode("utf-8")
    right = second.encode("utf-8")
    span = min(len(left), len(right))
    if limit is not None:
        span = min(span, limit)
    for a, b in zip(left[:span], right[:span]):
        if a != b:
            return a - b
    if limit is not None and span == limit:
        return 0
    a = left[span] if span < len(left) else 0
    b = right[span] if span < len(right) else 0
    return a - b


def strncmp(first: str, second: str, n: int) -> int:
    """Compare at most ``n`` bytes; returns the difference of the first mismatch."""
    if n < 0:
        raise ValueError("n must not be negative")
    return _compare(first, second, n)


def strcmp(first: str | None, second: str | None) -> int:
    """Compare two strings bytewise; a missing operand compares as -1."""
    if first is None or second is None:
        return -1
    return _compare(first, second, None)