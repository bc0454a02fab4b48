"""Split svg number lists into floats.

:author: Shay Hill
:created: 2025-11-02

Svg number lists are compact. Any of these are legal and mean the same thing:

    "1, -2, 3"
    "1 -2 3"
    "1-2 3"

A minus sign both ends the current number and starts the next one. A second
decimal point does the same thing, so "0.5.5" is two numbers. A sign directly
after an exponent marker belongs to the exponent ("1e-5" is one number).

The lexer stops at a letter (other than an exponent marker) or a closing
parenthesis and reports where it stopped, so the path interpreter and the
transform parser can both use it.
"""

from __future__ import annotations

import string
from typing import NamedTuple

from svg_picture.exceptions import MalformedNumberError

_EXPONENT_MARKERS = frozenset("eE")

# letters (path commands or not) end a number list, as does the close of a transform
_STOP_CHARS = frozenset(string.ascii_letters + ")") - _EXPONENT_MARKERS

_DELIMITERS = frozenset(" \t\n\r\f,")

_SIGNS = frozenset("+-")


class NumberParse(NamedTuple):
    """Floats read from a string and the index where reading stopped.

    `next_index` is the index of the stop character (command letter or ")"), or the
    length of the string if the string ran out first.
    """

    numbers: list[float]
    next_index: int


def _to_float(token: str, source: str) -> float:
    """Convert one token to a float.

    :param token: a run of non-delimiter characters
    :param source: the full string (for the error message)
    :return: float value of token
    :raise MalformedNumberError: if the token is not a float
    """
    try:
        return float(token)
    except ValueError as e:
        raise MalformedNumberError(token, source) from e


def parse_numbers(text: str, start: int = 0) -> NumberParse:
    """Read floats from text starting at index `start`.

    :param text: a string of svg numbers, possibly followed by a command letter
    :param start: index at which to start reading
    :return: NumberParse(numbers, next_index)
    :raise MalformedNumberError: if a token cannot be converted to a float

        >>> parse_numbers("100,-50.5 .25").numbers
        [100.0, -50.5, 0.25]
        >>> parse_numbers("1-2-3").numbers
        [1.0, -2.0, -3.0]
        >>> parse_numbers("10 20L30 40")
        NumberParse(numbers=[10.0, 20.0], next_index=5)
    """
    numbers: list[float] = []
    token_start: int | None = None
    has_point = False
    has_exponent = False

    def flush(end: int) -> None:
        nonlocal token_start, has_point, has_exponent
        if token_start is not None:
            numbers.append(_to_float(text[token_start:end], text))
        token_start = None
        has_point = False
        has_exponent = False

    i = start
    while i < len(text):
        char = text[i]
        if char in _STOP_CHARS:
            flush(i)
            return NumberParse(numbers, i)
        if char in _DELIMITERS:
            flush(i)
        elif char in _SIGNS:
            if token_start is None or text[i - 1] not in _EXPONENT_MARKERS:
                flush(i)
                token_start = i
        elif char == ".":
            if has_point or has_exponent:
                flush(i)
            if token_start is None:
                token_start = i
            has_point = True
        else:
            if token_start is None:
                token_start = i
            if char in _EXPONENT_MARKERS:
                has_exponent = True
        i += 1

    if token_start is not None and text[token_start:].strip():
        flush(len(text))
    return NumberParse(numbers, len(text))


def parse_number_list(text: str) -> list[float]:
    """Read every float in a string like a `points` or `viewBox` attribute.

    :param text: delimited numbers
    :return: list of floats
    :raise MalformedNumberError: if any token is not a float
    """
    return parse_numbers(text).numbers
