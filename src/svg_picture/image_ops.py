"""Decode images embedded in an svg as base64 data uris.

This module requires the Pillow library. Only `data:` hrefs are read. An image
linked by file name or url is a resource load, and resource loading belongs to
the caller.

:author: Shay Hill
:created: 2024-11-20
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
import io
import logging
import re
from typing import Protocol

from paragraphs import par

try:
    from PIL import Image, UnidentifiedImageError
except ImportError as err:
    msg = par(
        """PIL is not installed. Install it using 'pip install Pillow' to use
        svg_picture.image_ops module."""
    )
    raise ImportError(msg) from err

_LOGGER = logging.getLogger(__name__)

_DATA_URI = re.compile(
    r"^\s*data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<data>.*)$", re.DOTALL
)


@dataclasses.dataclass(frozen=True)
class ImagePixels:
    """Encoded image bytes and their pixel dimensions.

    :param data: the encoded image (png, jpeg, ...) as it appeared in the document
    :param width: pixel width
    :param height: pixel height
    :param mime: media type from the data uri, e.g. "image/png"
    """

    data: bytes = dataclasses.field(repr=False)
    width: int
    height: int
    mime: str = "image/png"

    def to_data_uri(self) -> str:
        """Return the string you'll need to embed the image in an svg.

        :return: argument for xlink:href
        """
        base64_encoded_result_str = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime};base64," + base64_encoded_result_str


class ImageDecoder(Protocol):
    """Anything that can find the pixel dimensions of encoded image bytes."""

    def __call__(self, data: bytes) -> tuple[int, int] | None:
        """Return (width, height) or None if the bytes are not an image."""
        ...


def get_image_size(data: bytes) -> tuple[int, int] | None:
    """Get pixel dimensions with Pillow.

    :param data: encoded image bytes
    :return: (width, height) or None if Pillow cannot identify the image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        _LOGGER.debug("cannot identify embedded image: %s", e)
        return None


def read_data_uri(href: str) -> tuple[str, bytes] | None:
    """Split a base64 data uri into media type and bytes.

    :param href: e.g. "data:image/png;base64,iVBORw0..."
    :return: (mime, bytes) or None if href is not a base64 data uri

        >>> read_data_uri("data:image/png;base64,AAEC")
        ('image/png', b'\\x00\\x01\\x02')
        >>> read_data_uri("picture.png") is None
        True
    """
    match = _DATA_URI.match(href)
    if match is None or "base64" not in match["params"]:
        return None
    payload = "".join(match["data"].split())
    try:
        data = base64.b64decode(payload)
    except (binascii.Error, ValueError):
        return None
    return match["mime"] or "image/png", data


def decode_image(
    href: str | None, decoder: ImageDecoder | None = None
) -> ImagePixels | None:
    """Decode an image element's href.

    :param href: image href attribute value
    :param decoder: optional replacement for `get_image_size`
    :return: ImagePixels or None if the href is not an embedded image that the
        decoder can read
    """
    if href is None:
        return None
    mime_data = read_data_uri(href)
    if mime_data is None:
        return None
    mime, data = mime_data
    size = (decoder or get_image_size)(data)
    if size is None:
        return None
    width, height = size
    return ImagePixels(data, width, height, mime)
