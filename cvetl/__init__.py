"""cvetl — Utility layer for the security-advisory ETL pipeline.

This package provides cache-path construction, content parsing, JSON
snapshot caching, and affected/fixed version range resolution for
advisory data pulled from web pages and structured files.
"""

__version__ = "0.1.0"
