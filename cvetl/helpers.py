"""Small text and record helpers shared by advisory scrapers."""

import hashlib
import re
import time
from typing import Any, Hashable, Iterable, Sequence


def grammarize(elements: Sequence[Any]) -> str:
    """Join elements into an English list (``"a, b and c"``).

    Args:
        elements: Items to join; each is converted with ``str()``.

    Returns:
        Empty string for no items, the single item, or a comma list with
        ``and`` before the last item.
    """
    if not elements:
        return ""
    if len(elements) == 1:
        return str(elements[0])
    head = ", ".join(str(e) for e in elements[:-1])
    return f"{head} and {elements[-1]}"


def init_hash(keys: Iterable[Hashable], value: Any = True) -> dict[Hashable, Any]:
    """Build a dict mapping every key to the same default value."""
    return {key: value for key in keys}


def normalize(s: str) -> str:
    """Normalize scraped text.

    Drops non-ASCII characters, strips, and collapses whitespace runs to a
    single space.  Case is preserved.
    """
    ascii_only = (s or "").encode("ascii", errors="ignore").decode("ascii")
    return re.sub(r"\s+", " ", ascii_only.strip())


def time_stamp(delay: float = 0) -> str:
    """Return the current Unix time in seconds, as a string.

    Args:
        delay: Seconds to sleep first (spaces out polite scrapes).
    """
    if delay:
        time.sleep(delay)
    return str(int(time.time()))


def vulncode(advisory_id: str) -> str:
    """Generate a temporary vulnerability code from an advisory ID."""
    return hashlib.sha256(advisory_id.encode("utf-8")).hexdigest()
