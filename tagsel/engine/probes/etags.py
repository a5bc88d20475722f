"""Emacs ``TAGS`` index backend."""
from __future__ import annotations

import logging
import re

from .base import IndexProbe, TagEntry

logger = logging.getLogger(__name__)

SECTION_MARK = "\x0c"
NAME_START = "\x7f"
NAME_END = "\x01"

# Characters etags treats as ending an implicit tag name.
_IMPLICIT_NAME = re.compile(r"([^\s(),;=]+)[\s(),;=]*$")


def implicit_tag_name(text: str) -> str | None:
    """Derive a tag name from the tag text when etags omitted it."""
    match = _IMPLICIT_NAME.search(text)
    if not match:
        return None
    name = match.group(1).rstrip(":")
    return name or None


def _parse_position(raw: str) -> int | None:
    line_part = raw.split(",", 1)[0].strip()
    if line_part.isdigit():
        return int(line_part)
    return None


class EtagsProbe(IndexProbe):
    """Classic backend reading Emacs ``etags`` output."""

    name = "etags"

    def parse(self, text: str) -> list[TagEntry]:
        entries: list[TagEntry] = []
        for section in text.split(SECTION_MARK):
            lines = section.strip("\n").split("\n")
            if not lines or not lines[0]:
                continue
            header = lines[0]
            source, _, size = header.rpartition(",")
            if not source:
                logger.debug("Skipping malformed TAGS section header %r", header)
                continue
            if size.strip() == "include":
                logger.debug("Skipping included TAGS file %s", source)
                continue
            path = self.resolve_source(source)
            for raw in lines[1:]:
                entry = self._parse_entry(raw, path)
                if entry is not None:
                    entries.append(entry)
        return entries

    @staticmethod
    def _parse_entry(raw: str, path) -> TagEntry | None:
        if NAME_START not in raw:
            return None
        pattern, _, rest = raw.partition(NAME_START)
        if NAME_END in rest:
            name, _, position = rest.partition(NAME_END)
        else:
            name, position = "", rest
        name = name or implicit_tag_name(pattern)
        if not name:
            return None
        return TagEntry(
            name=name,
            path=path,
            line=_parse_position(position),
            pattern=pattern or None,
        )
