"""Open editor buffers, plus whatever was backfilled from disk."""

import asyncio
import logging

from theme_lens.core.errors import ConfigurationError
from theme_lens.core.paths import is_supported, is_under, normalize_location
from theme_lens.core.ports.filesystem import FileSystem
from theme_lens.core.source import SourceUnit, to_source_unit
from theme_lens.fs.helpers import recursive_read_directory

logger = logging.getLogger(__name__)


class DocumentManager:
    def __init__(self, fs: FileSystem | None = None) -> None:
        self._units: dict[str, SourceUnit] = {}
        self._fs = fs

    def open(self, location: str, source: str, version: int | None) -> SourceUnit | None:
        return self._set(location, source, version)

    def change(self, location: str, source: str, version: int | None) -> SourceUnit | None:
        return self._set(location, source, version)

    def close(self, location: str) -> bool:
        return self._units.pop(normalize_location(location), None) is not None

    def get(self, location: str) -> SourceUnit | None:
        return self._units.get(normalize_location(location))

    def theme(self, root: str, include_backfilled: bool = False) -> list[SourceUnit]:
        """Units under ``root``; only open buffers unless ``include_backfilled``."""
        root = normalize_location(root)
        return [
            unit
            for location, unit in self._units.items()
            if is_under(location, root) and (include_backfilled or unit.version is not None)
        ]

    @property
    def open_documents(self) -> list[SourceUnit]:
        return list(self._units.values())

    async def ensure_full(self, root: str) -> None:
        """Backfill every supported file under ``root`` that is not tracked yet."""
        if self._fs is None:
            raise ConfigurationError("Cannot backfill documents without a filesystem")
        fs = self._fs
        known = {unit.location for unit in self.theme(root, include_backfilled=True)}
        missing = await recursive_read_directory(
            fs,
            normalize_location(root),
            lambda location: is_supported(location) and normalize_location(location) not in known,
        )
        sources = await asyncio.gather(*(self._read(fs, location) for location in missing))
        backfilled = 0
        for location, source in zip(missing, sources):
            # An editor may have opened the file while we were reading it.
            if source is not None and normalize_location(location) not in self._units:
                self._set(location, source, None)
                backfilled += 1
        logger.info("Backfilled %d file(s) under %s", backfilled, root)

    @staticmethod
    async def _read(fs: FileSystem, location: str) -> str | None:
        try:
            return await fs.read_file(location)
        except (OSError, UnicodeDecodeError) as error:
            logger.warning("Skipping unreadable file %s: %s", location, error)
            return None

    def _set(self, location: str, source: str, version: int | None) -> SourceUnit | None:
        location = normalize_location(location)
        if not is_supported(location):
            return None
        unit = to_source_unit(location, source, version)
        self._units[location] = unit
        return unit
