"""Content parsing by declared format.

Maps each ``ContentType`` to a parser callable.  The dispatch table is an
immutable mapping built once at import; ``ContentParser`` accepts a
different table for callers that need to swap a parser out.

Parse failures are never suppressed — see ``PARSE_ERRORS``.
"""

import csv
import io
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping

import soupsieve
from bs4 import BeautifulSoup
from lxml import etree

from .paths import ContentType

logger = logging.getLogger(__name__)

Parser = Callable[[bytes], Any]

# Exceptions raised for malformed content of a declared format.
PARSE_ERRORS: tuple[type[Exception], ...] = (
    csv.Error,
    json.JSONDecodeError,
    etree.XMLSyntaxError,
    soupsieve.SelectorSyntaxError,
)


def _text(raw: bytes | str) -> str:
    return raw.decode("utf-8") if isinstance(raw, bytes) else raw


def parse_css(raw: bytes | str) -> soupsieve.SoupSieve:
    """Compile a CSS selector expression."""
    return soupsieve.compile(_text(raw).strip())


def parse_csv(raw: bytes | str) -> list[list[str]]:
    """Parse CSV text into a list of rows.

    Uses the strict ``excel`` dialect so stray quotes raise ``csv.Error``
    instead of being silently absorbed.
    """
    reader = csv.reader(io.StringIO(_text(raw), newline=""), strict=True)
    return list(reader)


def parse_html(raw: bytes | str) -> BeautifulSoup:
    """Parse an HTML document with the lxml backend."""
    return BeautifulSoup(raw, "lxml")


def parse_json(raw: bytes | str) -> Any:
    """Decode a JSON document."""
    return json.loads(raw)


def parse_xml(raw: bytes | str) -> etree._Element:
    """Parse an XML document and return its root element.

    Entities are left unsubstituted and no DTDs are fetched over the
    network.
    """
    data = raw.encode("utf-8") if isinstance(raw, str) else raw
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(data, parser)


CONTENT_PARSERS: Mapping[str, Parser | None] = MappingProxyType(
    {
        ContentType.CSS.value: parse_css,
        ContentType.CSV.value: parse_csv,
        ContentType.HTML.value: parse_html,
        ContentType.JSON.value: parse_json,
        ContentType.PLAIN.value: None,
        ContentType.XML.value: parse_xml,
    }
)


class ContentParser:
    """Dispatches raw content to a format-specific parser.

    Attributes:
        parsers: Read-only mapping of type tag to parser.  A ``None`` entry
            (or a tag missing from the mapping) passes content through.
    """

    def __init__(self, parsers: Mapping[str, Parser | None] | None = None):
        self.parsers: Mapping[str, Parser | None] = (
            CONTENT_PARSERS if parsers is None else MappingProxyType(dict(parsers))
        )

    def parser_for(self, type: ContentType | str) -> Parser | None:
        """Look up the parser for a type tag, or ``None`` for pass-through."""
        tag = type.value if isinstance(type, ContentType) else str(type).lower()
        return self.parsers.get(tag)

    def parse(self, raw: bytes | str, type: ContentType | str) -> Any:
        """Parse raw content according to its declared type.

        Args:
            raw: Document bytes (or already-decoded text).
            type: Declared content type.

        Returns:
            Parsed content, or ``raw`` unchanged for ``plain`` and unknown
            tags.

        Raises:
            One of ``PARSE_ERRORS`` if the content is malformed.
            UnicodeDecodeError: if text formats receive non-UTF-8 bytes.
        """
        parser = self.parser_for(type)
        if parser is None:
            logger.debug("No parser for %r, passing content through", str(type))
            return raw
        logger.debug("Parsing %d bytes as %s", len(raw), type)
        return parser(raw)


DEFAULT_PARSER = ContentParser()


def content(file: Path | str, type: ContentType | str, parser: ContentParser | None = None) -> Any:
    """Read a file and parse it according to its declared type.

    Args:
        file: Path to the cached document.
        type: Declared content type.
        parser: Optional parser instance (defaults to ``DEFAULT_PARSER``).

    Returns:
        Parsed content (raw bytes for ``plain``).

    Raises:
        OSError: if the file cannot be read.
    """
    raw = Path(file).read_bytes()
    return (parser or DEFAULT_PARSER).parse(raw, type)
