"""Reuse parsed documents while something else still holds them.

:author: Shay Hill
:created: 2025-11-09

Icons get parsed over and over. A DocumentCache maps a key you choose (a file
name, a resource id) to the Document parsed from it. Values are held weakly, so
the cache never keeps a Document alive by itself. Once every caller lets go of a
Document, the next request parses again.

A cached Document is only reused if it was parsed with the same override color
as the request. Otherwise it is parsed again and replaces the cached entry.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING

from svg_picture.main import ParserConfig, parse_svg

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from svg_picture.display_list import Document

_LOGGER = logging.getLogger(__name__)


class DocumentCache:
    """Weak, thread-safe map of source keys to parsed Documents.

    :param config: parser configuration for every parse through this cache. The
        override color can be changed per request.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        """Create an empty cache."""
        self.config = config or ParserConfig()
        self._documents: weakref.WeakValueDictionary[Hashable, Document] = (
            weakref.WeakValueDictionary()
        )
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of documents still alive in the cache."""
        return len(self._documents)

    def __contains__(self, key: Hashable) -> bool:
        """True if a document for key is still alive in the cache."""
        return key in self._documents

    def get(
        self,
        key: Hashable,
        load: Callable[[], str | bytes],
        override_color: int | None = None,
    ) -> Document:
        """Get a cached document or parse a new one.

        :param key: identity of the source, e.g. a file path
        :param load: called (with the lock held) to get the svg text on a miss
        :param override_color: optional 0xRRGGBB override color
        :return: the cached Document if it is alive and was parsed with the same
            override color, else a newly parsed (and now cached) Document
        :raise SvgParseError: if the svg cannot be parsed
        """
        with self._lock:
            document = self._documents.get(key)
            if document is not None and document.override_color == override_color:
                _LOGGER.debug("document cache hit: %s", key)
                return document
            _LOGGER.debug("document cache miss: %s", key)
            config = self.config.with_override_color(override_color)
            document = parse_svg(load(), config=config)
            self._documents[key] = document
            return document

    def clear(self) -> None:
        """Forget every cached document."""
        with self._lock:
            self._documents.clear()
