"""Backend registry: maps backend names to probe classes."""
from __future__ import annotations

import logging
import re
from pathlib import Path

from ..buffers import BufferRegistry
from ..errors import UnknownBackendError
from ..history import MarkStack
from .base import IndexProbe, TagProbe
from .ctags import CtagsProbe
from .etags import EtagsProbe

logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[IndexProbe]] = {
    "etags": EtagsProbe,
    "ctags": CtagsProbe,
}


def backend_for_path(index_path: Path | str) -> str:
    """Guess the backend from the index file name (``tags`` means ctags)."""
    return "ctags" if Path(index_path).name == "tags" else "etags"


def create_probe(
    backend: str,
    index_path: Path | str,
    registry: BufferRegistry,
    marks: MarkStack,
    case_fold: bool = False,
) -> IndexProbe:
    """Build the probe for ``backend`` ("auto", "etags" or "ctags")."""
    name = (backend or "auto").strip().lower()
    if name == "auto":
        name = backend_for_path(index_path)
    probe_cls = BACKENDS.get(name)
    if probe_cls is None:
        raise UnknownBackendError(backend, sorted(BACKENDS))
    logger.info("Using %s backend for %s", name, index_path)
    return probe_cls(index_path, registry, marks, case_fold=case_fold)


_QUALIFIER = re.compile(r"(?:::|\.|#)")


def short_name(tag_name: str) -> str:
    """Last component of a qualified name (``ns::Cls::meth`` -> ``meth``)."""
    parts = [part for part in _QUALIFIER.split(tag_name) if part]
    return parts[-1] if parts else tag_name


def complete_identifiers(
    probe: TagProbe,
    prefix: str,
    short_names: bool = False,
) -> list[str]:
    """Sorted unique tag names that start with ``prefix``."""
    names = probe.tag_names()
    if short_names:
        names = [short_name(name) for name in names]
    return sorted({name for name in names if name.startswith(prefix)})
