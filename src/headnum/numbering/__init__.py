"""
Numeral styles, counter tokens and label rendering for heading numbering.

No imports from `headnum` outside this package.

Usage::

    from headnum.numbering import make_numbering_string, next_token, start_at_or_zeroth_in_style

    token = next_token(start_at_or_zeroth_in_style("", "I"))
    make_numbering_string([token])  # " I"
"""

from headnum.numbering.tokens import (
    AlphaToken,
    DecimalToken,
    NumberingStyle,
    NumberingToken,
    RomanToken,
    first_token,
    make_numbering_string,
    next_token,
    numbering_token,
    parse_token,
    previous_token,
    start_at_or_zeroth_in_style,
    zeroth_token,
)

__all__ = [
    "AlphaToken",
    "DecimalToken",
    "NumberingStyle",
    "NumberingToken",
    "RomanToken",
    "first_token",
    "make_numbering_string",
    "next_token",
    "numbering_token",
    "parse_token",
    "previous_token",
    "start_at_or_zeroth_in_style",
    "zeroth_token",
]
