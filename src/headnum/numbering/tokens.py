"""
Numbering tokens and numeral-style arithmetic for heading labels.

This module provides:
- The supported numeral styles (decimal, alphabetic, roman; upper and lower case)
- Conversion between integers and their string form in each style
- Tokens holding one heading level's counter, with increment and predecessor
- Rendering of a stack of tokens into a label like " V.C.123"
- Seeding a level's counter from a user-supplied "start at" value

Key concepts:
- Every style is backed by an integer ordinal, so increment and predecessor share
  one arithmetic core and only parsing and rendering are style-specific
- Ordinal 0 is the "zeroth" value: decimal renders it as 0, alphabetic as "Z"
  (the letter before "A" in the cyclic alphabet), roman as the sentinel "0"
- Alphabetic values are bijective base-26 ("Z" is 26, "AA" is 27)

Usage:
    from headnum.numbering.tokens import (
        NumberingStyle,
        make_numbering_string,
        next_token,
        start_at_or_zeroth_in_style,
    )

    seed = start_at_or_zeroth_in_style("C", NumberingStyle.alpha_upper)
    first = next_token(seed)  # AlphaToken rendering "C"
    make_numbering_string([first], ":")  # " C:"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union


class NumberingStyle(str, Enum):
    """Numeral style of one heading level. Values are the style letters used in settings."""

    decimal = "1"  # 1, 2, 3, 10, 100
    alpha_upper = "A"  # A, B, C, ... Z, AA, AB
    alpha_lower = "a"  # a, b, c, ... z, aa, ab
    roman_upper = "I"  # I, II, III, IV, V
    roman_lower = "i"  # i, ii, iii, iv, v

    @property
    def is_alpha(self) -> bool:
        return self in (NumberingStyle.alpha_upper, NumberingStyle.alpha_lower)

    @property
    def is_roman(self) -> bool:
        return self in (NumberingStyle.roman_upper, NumberingStyle.roman_lower)

    @property
    def is_lower(self) -> bool:
        return self in (NumberingStyle.alpha_lower, NumberingStyle.roman_lower)


ROMAN_ZERO = "0"
"""Sentinel rendering of roman ordinal 0. Not a numeral; incrementing it yields "I"."""

ALPHA_ZERO = "Z"
"""Rendering of alphabetic ordinal 0, so that incrementing it yields "A"."""


# === Number Conversion Functions ===


def int_to_roman(n: int) -> str:
    """
    Convert a positive integer to an uppercase Roman numeral string.
    Values above 3999 are written with repeated "M".
    """
    if n <= 0:
        raise ValueError("Roman numerals must be positive")
    result = []
    for value, numeral in [
        (1000, "M"),
        (900, "CM"),
        (500, "D"),
        (400, "CD"),
        (100, "C"),
        (90, "XC"),
        (50, "L"),
        (40, "XL"),
        (10, "X"),
        (9, "IX"),
        (5, "V"),
        (4, "IV"),
        (1, "I"),
    ]:
        while n >= value:
            result.append(numeral)
            n -= value
    return "".join(result)


def roman_to_int(s: str) -> int:
    """Convert a Roman numeral string to integer. Does not check well-formedness."""
    s = s.upper()
    values = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}
    result = 0
    prev = 0
    for char in reversed(s):
        curr = values.get(char, 0)
        if curr < prev:
            result -= curr
        else:
            result += curr
        prev = curr
    return result


def int_to_alpha(n: int) -> str:
    """Convert a positive integer to uppercase bijective base-26 (A, B, ..., Z, AA, AB, ...)."""
    if n <= 0:
        raise ValueError("Alpha values must be positive")
    result = []
    while n > 0:
        n -= 1
        result.append(chr(ord("A") + (n % 26)))
        n //= 26
    return "".join(reversed(result))


def alpha_to_int(s: str) -> int:
    """Convert an alphabetic string to integer (A=1, B=2, ..., Z=26, AA=27, ...)."""
    s = s.upper()
    result = 0
    for char in s:
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


# Well-formed roman numerals in [1, 3999], subtractive notation only.
_ROMAN_PATTERN = re.compile(r"^M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})$")
_DECIMAL_PATTERN = re.compile(r"^[+-]?\d+$")
_ALPHA_UPPER_PATTERN = re.compile(r"^[A-Z]+$")
_ALPHA_LOWER_PATTERN = re.compile(r"^[a-z]+$")


def format_ordinal(style: NumberingStyle | str, n: int) -> str:
    """
    Render an ordinal in the given style. Ordinal 0 renders as the style's zeroth
    value ("0" for decimal and roman, "Z"/"z" for alphabetic).
    """
    style = NumberingStyle(style)
    if style == NumberingStyle.decimal:
        return str(n)
    if n == 0:
        text = ALPHA_ZERO if style.is_alpha else ROMAN_ZERO
    elif style.is_alpha:
        text = int_to_alpha(n)
    else:
        text = int_to_roman(n)
    return text.lower() if style.is_lower else text


def parse_ordinal(text: str, style: NumberingStyle | str) -> int | None:
    """
    Parse text as a value in the given style. Returns None if the text is not a
    valid representation under that style (including a case mismatch).
    """
    style = NumberingStyle(style)
    if style == NumberingStyle.decimal:
        if not _DECIMAL_PATTERN.match(text):
            return None
        return int(text)
    if style.is_alpha:
        pattern = _ALPHA_LOWER_PATTERN if style.is_lower else _ALPHA_UPPER_PATTERN
        if not pattern.match(text):
            return None
        return alpha_to_int(text)
    # Roman: the case must match the style
    expected_case = text.lower() if style.is_lower else text.upper()
    if not text or text != expected_case:
        return None
    if not _ROMAN_PATTERN.match(text.upper()):
        return None
    return roman_to_int(text)


# === Tokens ===


@dataclass(frozen=True)
class DecimalToken:
    """A decimal counter. Its value is the integer itself."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Decimal token value must be an integer: {self.value!r}")

    @property
    def style(self) -> NumberingStyle:
        return NumberingStyle.decimal

    @property
    def ordinal(self) -> int:
        return self.value


@dataclass(frozen=True)
class AlphaToken:
    """
    An alphabetic counter, stored as its bijective base-26 ordinal.

    Ordinal 0 is the zeroth value and renders as "Z"; it is distinct from ordinal 26,
    which also renders as "Z" but increments to "AA".
    """

    style: NumberingStyle
    ordinal: int

    def __post_init__(self) -> None:
        if not NumberingStyle(self.style).is_alpha:
            raise ValueError(f"Not an alphabetic style: {self.style!r}")
        if self.ordinal < 0:
            raise ValueError(f"Alphabetic ordinal must not be negative: {self.ordinal}")
        object.__setattr__(self, "style", NumberingStyle(self.style))

    @property
    def value(self) -> str:
        return format_ordinal(self.style, self.ordinal)


@dataclass(frozen=True)
class RomanToken:
    """A roman numeral counter, stored as its integer ordinal. Ordinal 0 renders as "0"."""

    style: NumberingStyle
    ordinal: int

    def __post_init__(self) -> None:
        if not NumberingStyle(self.style).is_roman:
            raise ValueError(f"Not a roman style: {self.style!r}")
        if self.ordinal < 0:
            raise ValueError(f"Roman ordinal must not be negative: {self.ordinal}")
        object.__setattr__(self, "style", NumberingStyle(self.style))

    @property
    def value(self) -> str:
        return format_ordinal(self.style, self.ordinal)


NumberingToken = Union[DecimalToken, AlphaToken, RomanToken]


def _token_with_ordinal(style: NumberingStyle, ordinal: int) -> NumberingToken:
    if style == NumberingStyle.decimal:
        return DecimalToken(ordinal)
    if style.is_alpha:
        return AlphaToken(style, ordinal)
    return RomanToken(style, ordinal)


def numbering_token(style: NumberingStyle | str, value: int | str) -> NumberingToken:
    """
    Build a token from a style and a value representation: an integer for decimal,
    a letter string for alphabetic, a numeral string (or "0") for roman.

    Raises:
        ValueError: if the value is not representable in the style.
    """
    style = NumberingStyle(style)
    if style == NumberingStyle.decimal:
        return DecimalToken(value)  # pyright: ignore[reportArgumentType]
    if not isinstance(value, str):
        raise ValueError(f"Value for style {style.value!r} must be a string: {value!r}")
    if style.is_roman and value == ROMAN_ZERO:
        return RomanToken(style, 0)
    ordinal = parse_ordinal(value, style)
    if ordinal is None:
        raise ValueError(f"Invalid value {value!r} for style {style.value!r}")
    return _token_with_ordinal(style, ordinal)


def zeroth_token(style: NumberingStyle | str) -> NumberingToken:
    """The pre-first token of a style; one increment yields the style's first value."""
    return _token_with_ordinal(NumberingStyle(style), 0)


def first_token(style: NumberingStyle | str) -> NumberingToken:
    """The first real value of a style: 1, "A", "a", "I" or "i"."""
    return next_token(zeroth_token(style))


def next_token(token: NumberingToken) -> NumberingToken:
    return _token_with_ordinal(token.style, token.ordinal + 1)


def previous_token(token: NumberingToken) -> NumberingToken:
    """
    Inverse of `next_token`. The zeroth value is its own predecessor. Decimal
    tokens may be negative; alphabetic and roman ordinals never go below 0.
    """
    if token.ordinal == 0:
        return token
    if isinstance(token, DecimalToken):
        return DecimalToken(token.value - 1)
    return _token_with_ordinal(token.style, token.ordinal - 1)


def parse_token(text: str, style: NumberingStyle | str) -> NumberingToken | None:
    """Parse text as a token of the given style, or None if it is not valid there."""
    style = NumberingStyle(style)
    ordinal = parse_ordinal(text, style)
    if ordinal is None:
        return None
    return _token_with_ordinal(style, ordinal)


def printable_token(token: NumberingToken) -> str:
    return str(token.value)


# === Rendering and Seeding ===


def make_numbering_string(stack: list[NumberingToken], separator: str = "") -> str:
    """
    Render a stack of tokens as a heading label.

    The label starts with a space, joins the token values with "." in stack order
    (outermost first) and ends with the separator. An empty stack renders as " ".

    Examples:
        [I "V", A "C", 1 123] with "" -> " V.C.123"
        [1 2, 1 1] with ":" -> " 2.1:"
    """
    if not stack:
        return " "
    return " " + ".".join(printable_token(token) for token in stack) + separator


def start_at_or_zeroth_in_style(start_at: str, style: NumberingStyle | str) -> NumberingToken:
    """
    Compute the seed token for a level, so that one `next_token` call yields the
    intended first value.

    A start-at value that is empty or cannot be read under the given style (e.g.
    "3" for an alphabetic style) is discarded in favor of the style's zeroth value.

    Examples:
        ("", "A") -> A "Z" (zeroth)
        ("3", "1") -> 1 2
        ("V", "I") -> I "IV"
        ("I", "I") -> I "0"
    """
    style = NumberingStyle(style)
    if start_at == "":
        return zeroth_token(style)
    parsed = parse_token(start_at, style)
    if parsed is None:
        return zeroth_token(style)
    return previous_token(parsed)
