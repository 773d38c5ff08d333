"""Spoken-numeral conversion.

Converts the fixed Chinese numeral vocabulary used on location into numeric
strings:

- Digits 零..九
- Units 十 / 百 / 千 / 万
- Decimal marker 点

Short runs of bare digits ("二三") are read digit by digit, the way crews
read out values, rather than as positional numbers. Characters outside the
vocabulary are ignored.
"""

import re

DIGITS = {
    "零": 0,
    "一": 1,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}

UNITS = {
    "十": 10,
    "百": 100,
    "千": 1000,
    "万": 10000,
}

DECIMAL_MARKER = "点"

SPOKEN_CHARS = "".join(DIGITS) + "".join(UNITS) + DECIMAL_MARKER

ARABIC_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")
SPOKEN_PATTERN = re.compile(rf"^[{SPOKEN_CHARS}]+$")


def is_spoken_numeral(token: str) -> bool:
    """Check whether a token is made only of spoken-numeral characters."""
    return bool(SPOKEN_PATTERN.match(token))


def has_magnitude(token: str) -> bool:
    """Check whether a token carries a unit or a decimal marker."""
    return any(c in UNITS or c == DECIMAL_MARKER for c in token)


def digit_string(char: str) -> str:
    """Map a single digit word to its digit, empty for anything else."""
    value = DIGITS.get(char)
    return "" if value is None else str(value)


def parse_numeral(token: str) -> str:
    """Convert an Arabic or spoken numeral token into a numeric string.

    Args:
        token: Numeral token, e.g. "35", "三十五", "三点一四" or "二三".

    Returns:
        Numeric string. Never raises; noise yields partial or empty output.
    """
    if ARABIC_PATTERN.match(token):
        return token

    if not has_magnitude(token):
        # "二三" -> "23", one digit per character
        return "".join(digit_string(c) for c in token)

    return _parse_positional(token)


def _parse_positional(token: str) -> str:
    """Parse a numeral with units and an optional decimal part."""
    if DECIMAL_MARKER in token:
        parts = token.split(DECIMAL_MARKER)
        integer_part = parts[0]
        fraction_part = parts[1] if len(parts) > 1 else ""
        fraction = "".join(digit_string(c) for c in fraction_part)
        return f"{_parse_integer(integer_part)}.{fraction}"

    return str(_parse_integer(token))


def _parse_integer(text: str) -> int:
    """Accumulate a positional integer.

    Each unit multiplies the digit seen just before it (1 when none) and adds
    the product to the running section; a trailing digit is added as ones.
    """
    section = 0
    pending = 0
    for char in text:
        if char in DIGITS:
            pending = DIGITS[char]
        elif char in UNITS:
            section += (pending or 1) * UNITS[char]
            pending = 0
    return section + pending
