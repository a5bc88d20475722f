"""ctags ``tags`` index backend."""
from __future__ import annotations

import logging

from .base import IndexProbe, TagEntry

logger = logging.getLogger(__name__)


def parse_search_pattern(address: str) -> str | None:
    """Turn a ``/^text$/`` or ``?^text$?`` address into its literal text."""
    address = address.strip()
    if len(address) < 2 or address[0] not in "/?" or address[-1] != address[0]:
        return None
    body = address[1:-1]
    if body.startswith("^"):
        body = body[1:]
    if body.endswith("$") and not body.endswith("\\$"):
        body = body[:-1]
    delimiter = address[0]
    return body.replace("\\" + delimiter, delimiter).replace("\\\\", "\\")


def split_address(field: str) -> tuple[str, str]:
    """Split an address field from the ``;"`` extension fields after it.

    Search patterns may themselves contain ``;"``, so the split happens
    after the closing delimiter.
    """
    if field[:1] in ("/", "?"):
        delimiter = field[0]
        i = 1
        while i < len(field):
            if field[i] == "\\":
                i += 2
                continue
            if field[i] == delimiter:
                break
            i += 1
        address, rest = field[: i + 1], field[i + 1:]
        return address, rest.partition(';"')[2]
    address, _, extension = field.partition(';"')
    return address, extension


class CtagsProbe(IndexProbe):
    """Alternate backend reading Exuberant/Universal ctags output."""

    name = "ctags"

    def parse(self, text: str) -> list[TagEntry]:
        entries: list[TagEntry] = []
        for raw in text.splitlines():
            if not raw or raw.startswith("!_TAG_"):
                continue
            parts = raw.split("\t")
            if len(parts) < 3:
                logger.debug("Skipping malformed tags line %r", raw)
                continue
            name, source = parts[0], parts[1]
            address, extension = split_address("\t".join(parts[2:]))

            line: int | None = None
            pattern: str | None = None
            if address.strip().isdigit():
                line = int(address.strip())
            else:
                pattern = parse_search_pattern(address)

            for field in extension.split("\t"):
                key, sep, value = field.partition(":")
                if sep and key == "line" and value.isdigit():
                    line = int(value)

            entries.append(
                TagEntry(
                    name=name,
                    path=self.resolve_source(source),
                    line=line,
                    pattern=pattern or None,
                )
            )
        return entries
