"""Errors and warnings raised while reading svg into a picture.

:author: Shay Hill
:created: 2025-11-02

Only two problems stop a parse: xml that cannot be read and numbers in path data
that cannot be read. Both reach the caller as an SvgParseError. Everything else is
a warning. A half-drawn icon is more useful than no icon at all, so the walker
reports the problem and carries on.

Filter the warnings in the usual way if they bother you:

    import warnings
    warnings.simplefilter("ignore", SvgParseWarning)
"""

from __future__ import annotations


class SvgParseError(Exception):
    """A fatal error reading an svg document. The cause is in `__cause__`."""


class MalformedNumberError(ValueError):
    """A token in path data or a number list is not a number."""

    def __init__(self, token: str, source: str) -> None:
        """Record the bad token and the string it came from.

        :param token: the text that failed to convert to a float
        :param source: the full string being lexed
        """
        self.token = token
        self.source = source
        super().__init__(f"Cannot parse number '{token}' in '{source}'")


class SvgParseWarning(UserWarning):
    """Base class for recoverable problems in an svg document."""


class UnresolvedColorWarning(SvgParseWarning):
    """A color string could not be interpreted. Black is used instead."""


class UnresolvedGradientWarning(SvgParseWarning):
    """A `url(#id)` paint references no known gradient. Black is used instead."""


class UnresolvedUseWarning(SvgParseWarning):
    """A `use` element references a missing (or currently expanding) id."""


class InvalidTransformWarning(SvgParseWarning):
    """One term of a transform attribute could not be read and was skipped."""


class InvalidPathCommandWarning(SvgParseWarning):
    """A letter in path data is not a path command and was skipped."""
