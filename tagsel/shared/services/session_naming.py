"""Unique names for selection sessions.

Names follow the editor buffer convention: the base name when it is free,
otherwise ``<base><2>``, ``<base><3>`` and so on.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def session_base_name(identifier: str) -> str:
    return f"*tags: {identifier}*"


class SessionNamer:
    """Hands out session names not used by any live session."""

    def __init__(self) -> None:
        self._live: set[str] = set()

    @property
    def live_names(self) -> frozenset[str]:
        return frozenset(self._live)

    def unique_name(self, identifier: str) -> str:
        """First free name for ``identifier``. Does not reserve it."""
        base = session_base_name(identifier)
        if base not in self._live:
            return base
        suffix = 2
        while f"{base}<{suffix}>" in self._live:
            suffix += 1
        return f"{base}<{suffix}>"

    def register(self, name: str) -> None:
        self._live.add(name)
        logger.debug("Session name registered: %s", name)

    def release(self, name: str) -> None:
        self._live.discard(name)
