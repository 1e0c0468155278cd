# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Fractional ranks over a fixed alphabet.

A rank is read as a base-62 fraction whose digits are the positions of its
characters in ``ALPHABET``. Because the alphabet is in code point order,
plain string comparison orders ranks the same way as their fractional
values. ``between`` finds the shortest string strictly inside two bounds by
walking digit by digit, like long division towards a midpoint.
"""

from __future__ import annotations

from typing import Optional

from yawt.core.errors import ValidationError

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
MAX_DIGIT = len(ALPHABET) - 1

_DIGITS = {ch: i for i, ch in enumerate(ALPHABET)}


class InvalidRankError(ValidationError):
    pass


class InvalidBoundOrderError(ValidationError):
    pass


def is_valid_rank(rank: object) -> bool:
    return isinstance(rank, str) and bool(rank) and all(ch in _DIGITS for ch in rank)


def between(lower: Optional[str], upper: Optional[str]) -> str:
    """Return a rank ``r`` with ``lower < r < upper``; ``None`` means unbounded."""
    if lower is not None and not is_valid_rank(lower):
        raise InvalidRankError(f"Invalid lower rank: {lower!r}")
    if upper is not None and not is_valid_rank(upper):
        raise InvalidRankError(f"Invalid upper rank: {upper!r}")
    if lower is not None and upper is not None and lower >= upper:
        raise InvalidBoundOrderError(
            f"Lower rank must be < upper rank (got {lower!r} >= {upper!r})"
        )

    # While the digits written so far equal upper's prefix, upper still
    # constrains the next digit. Once we fall below it, only lower does.
    upper_tight = upper is not None
    digits = []
    i = 0
    while True:
        lo = _DIGITS[lower[i]] if lower is not None and i < len(lower) else 0
        if upper_tight:
            if i >= len(upper):
                raise InvalidBoundOrderError(
                    f"No rank exists between {lower!r} and {upper!r}"
                )
            hi = _DIGITS[upper[i]]
        else:
            hi = MAX_DIGIT

        if hi - lo > 1:
            digits.append(ALPHABET[(lo + hi) // 2])
            return "".join(digits)

        digits.append(ALPHABET[lo])
        if lo < hi:
            upper_tight = False
        i += 1


def initial() -> str:
    return between(None, None)


def after(last: str) -> str:
    return between(last, None)


def before(first: str) -> str:
    return between(None, first)
