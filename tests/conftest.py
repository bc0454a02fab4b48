"""Test configuration for pytest.

:author: Shay Hill
:created: 7/2/2019
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


def pytest_assertrepr_compare(
    config: Any, op: str, left: str, right: str
) -> list[str] | None:
    """See full error diffs"""
    del config
    if op in ("==", "!="):
        return [f"{left} {op} {right}"]
    return None


TEST_RESOURCES = Path(__file__).parent / "resources"

# 1x1 png
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6"
    + "kgAAAABJRU5ErkJggg=="
)


def wrap_svg(body: str, width: int = 100, height: int = 100) -> str:
    """Put svg elements inside an svg root of the given size."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" '
        + 'xmlns:xlink="http://www.w3.org/1999/xlink" '
        + f'width="{width}" height="{height}">{body}</svg>'
    )
