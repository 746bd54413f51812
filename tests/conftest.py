"""Shared fixtures for cvetl tests."""

from typing import Any

import pytest


@pytest.fixture
def advisory_url() -> str:
    """A vendor advisory page URL with a resource fragment."""
    return "https://security.example.com/advisories/2024/ESA-2024-17#tab&openssl/3.0?lang=en"


@pytest.fixture
def snapshot_data() -> dict[str, Any]:
    """A realistic advisory snapshot."""
    return {
        "advisory_id": "ESA-2024-17",
        "title": "Heap overflow in TLS record parser",
        "affected": ["3.0.0", "3.0.7", "3.1.2"],
        "fixed": ["3.0.8", "3.1.3"],
        "cvss": 8.1,
        "exploited": False,
        "references": [{"url": "https://example.com/ref", "tags": ["patch"]}],
        "notes": "Réécrit — non-ASCII survives",
        "withdrawn": None,
    }
