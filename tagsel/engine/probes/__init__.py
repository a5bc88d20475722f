"""Lookup backends over on-disk tag indexes."""
from .base import IndexProbe, TagEntry, TagProbe
from .ctags import CtagsProbe
from .etags import EtagsProbe
from .registry import (
    BACKENDS,
    backend_for_path,
    complete_identifiers,
    create_probe,
    short_name,
)

__all__ = [
    "BACKENDS",
    "CtagsProbe",
    "EtagsProbe",
    "IndexProbe",
    "TagEntry",
    "TagProbe",
    "backend_for_path",
    "complete_identifiers",
    "create_probe",
    "short_name",
]
