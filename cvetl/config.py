"""Configuration models using Pydantic.

Settings for the snapshot cache and version ordering, loaded from a YAML
(preferred) or JSON file.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

VERSION_SCHEMES = ("semantic", "lexicographic")


class CacheConfig(BaseModel):
    """Snapshot cache settings.

    Attributes:
        dir: Directory cache files live in.  ``None`` keeps paths relative
            to the working directory.
        indent: Spaces per nesting level in dumped snapshots (0–8).
    """

    dir: Path | None = None
    indent: int = Field(default=2, ge=0, le=8)


class VersionsConfig(BaseModel):
    """Version ordering used by the range resolver.

    Attributes:
        scheme: ``semantic`` (PEP 440 aware) or ``lexicographic``.
    """

    scheme: str = "semantic"  # semantic | lexicographic

    @field_validator("scheme", mode="before")
    @classmethod
    def _normalize_scheme(cls, v: Any) -> str:
        """Lowercase the scheme name and reject unknown ones."""
        scheme = str(v or "").strip().lower()
        if scheme not in VERSION_SCHEMES:
            raise ValueError(f"scheme must be one of {', '.join(VERSION_SCHEMES)}; got {v!r}")
        return scheme


class EtlConfig(BaseModel):
    """Validated ETL utility configuration.

    Example YAML::

        cache:
          dir: .cache/advisories
          indent: 2
        versions:
          scheme: semantic
    """

    cache: CacheConfig = Field(default_factory=CacheConfig)
    versions: VersionsConfig = Field(default_factory=VersionsConfig)


def load_config(path: Path) -> EtlConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to the config file.

    Returns:
        Validated ``EtlConfig`` instance.

    Raises:
        FileNotFoundError: if the file doesn't exist.
        pydantic.ValidationError: if content fails validation.
    """
    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix in (".yaml", ".yml"):
        raw = yaml.safe_load(content) or {}
    elif suffix == ".json":
        raw = json.loads(content) if content.strip() else {}
    else:
        try:
            raw = yaml.safe_load(content) or {}
        except yaml.YAMLError:
            raw = json.loads(content)

    return EtlConfig.model_validate(raw)


def find_config() -> str:
    """Find the config file, preferring YAML over JSON.

    Only the working directory is searched: pipeline jobs run from the
    checkout that holds their ``cvetl.yaml``, and the cache directory in it
    is resolved relative to the same place.

    Returns:
        Filename of the first existing config file, or ``"cvetl.yaml"``
        as a default.
    """
    candidates = [f"cvetl{suffix}" for suffix in (".yaml", ".yml", ".json")]
    return next((name for name in candidates if Path(name).exists()), candidates[0])
