from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import TYPE_CHECKING, Any

from watchfiles import Change, awatch

from theme_lens.core.paths import is_supported, normalize_location

if TYPE_CHECKING:
    from theme_lens.server import ThemeLanguageServer

logger = logging.getLogger(__name__)

FileEvents = set[tuple[Change, str]]

# Edits to files go through the editor; only structural changes are forwarded.
_FORWARDED_CHANGES: frozenset[Change] = frozenset({Change.added, Change.deleted})


def _is_supported_file(path: str) -> bool:
    return is_supported(normalize_location(path))


class WatchfilesWatcher:
    """Watch a theme directory for created and deleted theme files.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[FileEvents], Coroutine[Any, Any, None]],
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            events = {
                (Change(change), normalize_location(path))
                for change, path in changes
                if change in _FORWARDED_CHANGES and _is_supported_file(path)
            }
            if events:
                logger.info("Detected %d created or deleted file(s)", len(events))
                try:
                    await self._on_change(events)
                except Exception:
                    logger.exception("Error in watcher callback")


def forward_to_server(server: ThemeLanguageServer) -> Callable[[FileEvents], Coroutine[Any, Any, None]]:
    """Route watcher events to the server's file-operation handlers."""

    async def on_change(events: FileEvents) -> None:
        created = sorted(path for change, path in events if change == Change.added)
        deleted = sorted(path for change, path in events if change == Change.deleted)
        if created:
            server.did_create_files(created)
        if deleted:
            server.did_delete_files(deleted)

    return on_change
