"""Cache path construction for advisory sources.

Pure functions that turn a source URL and a declared content type into a
deterministic, filesystem-safe cache path.  No directories are created
here — callers own the cache layout on disk.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import SplitResult, parse_qsl, urlsplit

# Separators that end the resource token taken from a URL fragment.
FRAGMENT_SPLIT_RE = re.compile(r"[\\,/|?]")

# More query parameters than this collapse into one synthetic element.
MAX_QUERY_KEYS = 3


class ContentType(str, Enum):
    """Declared format of a retrieved document."""

    CSS = "css"
    CSV = "csv"
    HTML = "html"
    JSON = "json"
    PLAIN = "plain"
    XML = "xml"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceUrl:
    """A parsed source URL.

    Attributes:
        host: Host name as written in the URL (case kept, no port or
            userinfo), or ``None`` for host-less URLs.
        path: Path segments in order (may contain empty strings).
        fragment: Raw fragment without the leading ``#``, or ``None``.
        query: Read-only decoded query parameters in first-seen key order.
            Not part of the hash.
    """

    host: str | None = None
    path: tuple[str, ...] = ()
    fragment: str | None = None
    query: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))

    @classmethod
    def parse(cls, url: str) -> "SourceUrl":
        """Parse a URL string.

        Repeated query keys keep their first position and last value.

        Args:
            url: Absolute or relative URL.

        Returns:
            ``SourceUrl`` instance.
        """
        parts = urlsplit(url)
        return cls(
            host=_netloc_host(parts),
            path=tuple(parts.path.split("/")),
            fragment=parts.fragment if "#" in url else None,
            query=dict(parse_qsl(parts.query, keep_blank_values=True)),
        )


def _netloc_host(parts: SplitResult) -> str | None:
    """Return the host of a split URL without lower-casing it.

    IPv6 literals fall back to ``hostname`` (brackets stripped).
    """
    host = parts.netloc.rpartition("@")[2]
    if host.startswith("["):
        return parts.hostname
    return host.split(":")[0] or None


def as_source_url(url: Any) -> SourceUrl:
    """Coerce a string or ``urllib.parse`` result into a ``SourceUrl``."""
    if isinstance(url, SourceUrl):
        return url
    if isinstance(url, str):
        return SourceUrl.parse(url)
    if hasattr(url, "geturl"):
        return SourceUrl.parse(url.geturl())
    raise TypeError(f"Unsupported URL type: {type(url).__name__}")


def fragment_element(fragment: str | None) -> str | None:
    """Extract the resource token from a URL fragment.

    Takes the second ``&``-delimited token and keeps everything before the
    first ``\\``, ``,``, ``/``, ``|`` or ``?``.

    Args:
        fragment: Raw fragment (may be None).

    Returns:
        Token string, or None if the fragment has fewer than two tokens.
    """
    if fragment is None:
        return None
    tokens = fragment.split("&")
    if len(tokens) < 2:
        return None
    return FRAGMENT_SPLIT_RE.split(tokens[1])[0]


def path_elements(url: SourceUrl) -> list[str | None]:
    """Collect the ordered, unfiltered elements of a cache path stem."""
    elements: list[str | None] = [url.host, *url.path, fragment_element(url.fragment)]
    if len(url.query) > MAX_QUERY_KEYS:
        elements.append("_".join(list(url.query)[:MAX_QUERY_KEYS]))
    return elements


def file_path(
    url: Any,
    dir: str | Path | None = None,
    type: ContentType | str | None = None,
) -> Path:
    """Construct the cache file path for a source URL.

    The result depends only on the arguments: calling twice with the same
    inputs yields the same path.

    Args:
        url: ``SourceUrl``, URL string, or ``urllib.parse`` result.
        dir: Optional directory the stem is joined onto.
        type: Optional content type used as the file extension.

    Returns:
        Relative or absolute ``Path``.  A URL with no usable elements and
        no ``type`` gives an empty stem, so the result is ``Path(".")`` or
        ``dir`` itself; callers should skip such URLs before writing.

    Example::

        >>> file_path("https://example.com/a/b?x=1", type="json")
        PosixPath('example.com_a_b.json')
    """
    elements = path_elements(as_source_url(url))
    stem = "_".join(e for e in elements if e)

    if type:
        ext = f".{type}"
        if not stem.endswith(ext):
            stem += ext

    return Path(dir, stem) if dir is not None else Path(stem)
