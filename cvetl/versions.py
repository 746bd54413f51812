"""Affected/fixed version range resolution.

Pure functions — no I/O.  Each affected version is attributed to the
lowest fix version strictly greater than it; versions at or above every
fix stay unattributed (still vulnerable).
"""

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from packaging.version import Version

VersionKey = Callable[[str], Any]


def semantic_key(version: str) -> Version:
    """Sort key for PEP 440 ordering (``1.10`` > ``1.9``).

    Raises:
        packaging.version.InvalidVersion: for unparseable versions.
    """
    return Version(version)


def lexicographic_key(version: str) -> str:
    """Sort key for plain string ordering (``1.10`` < ``1.9``)."""
    return version


VERSION_KEYS: Mapping[str, VersionKey] = MappingProxyType(
    {
        "semantic": semantic_key,
        "lexicographic": lexicographic_key,
    }
)


def version_key(scheme: str = "semantic") -> VersionKey:
    """Return the sort key for a version scheme name.

    Raises:
        KeyError: for unknown schemes.
    """
    return VERSION_KEYS[scheme]


def vuln_ranges(
    affected: Iterable[str],
    fixed: Iterable[str],
    key: VersionKey = semantic_key,
) -> tuple[dict[str, list[str]], list[str]]:
    """Map fix versions to the affected versions they remediate.

    Fixes are walked in ascending order; each claims the still-unclaimed
    affected versions strictly below it.  The first fix always gets an
    entry (possibly empty); later fixes only when they claim something.

    Args:
        affected: Affected version strings (duplicates collapse).
        fixed: Fix version strings (duplicates collapse).
        key: Sort key defining the version order.

    Returns:
        Tuple of (ranges, sorted_affected).  ``ranges`` is ordered by
        ascending fix version.

    Raises:
        packaging.version.InvalidVersion: if ``key`` is ``semantic_key``
            and a version cannot be parsed.

    Example::

        >>> vuln_ranges(["1.0", "1.2", "2.0", "2.5"], ["1.3", "2.1"])
        ({'1.3': ['1.0', '1.2'], '2.1': ['2.0']}, ['1.0', '1.2', '2.0', '2.5'])
    """
    sorted_affected = sorted(set(affected), key=key)
    fixes = sorted(set(fixed), key=key)
    if not sorted_affected and not fixes:
        return {}, sorted_affected

    ranges: dict[str, list[str]] = {}
    remaining = sorted_affected
    for fix in fixes:
        bound = key(fix)
        lower = [v for v in remaining if key(v) < bound]
        remaining = [v for v in remaining if not key(v) < bound]
        if not ranges or lower:
            ranges[fix] = lower

    return ranges, sorted_affected


def still_affected(affected: Iterable[str], fixed: Iterable[str], key: VersionKey = semantic_key) -> list[str]:
    """Return affected versions no fix remediates, in ascending order."""
    ranges, sorted_affected = vuln_ranges(affected, fixed, key=key)
    claimed = {v for lower in ranges.values() for v in lower}
    return [v for v in sorted_affected if v not in claimed]
