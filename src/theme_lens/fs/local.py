import asyncio
from pathlib import Path

from theme_lens.core.paths import normalize_location
from theme_lens.core.ports.filesystem import FileStat, FileType


class LocalFileSystem:
    """Disk-backed filesystem. Implements the ``FileSystem`` protocol.

    Locations are normalized ``/``-separated paths or ``file://`` URIs.
    """

    async def read_file(self, location: str) -> str:
        path = Path(normalize_location(location))
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def read_directory(self, location: str) -> list[tuple[str, FileType]]:
        path = Path(normalize_location(location))
        return await asyncio.to_thread(self._list, path)

    async def stat(self, location: str) -> FileStat:
        path = Path(normalize_location(location))
        result = await asyncio.to_thread(path.stat)
        kind = FileType.DIRECTORY if path.is_dir() else FileType.FILE
        return FileStat(type=kind, size=result.st_size)

    @staticmethod
    def _list(path: Path) -> list[tuple[str, FileType]]:
        return [
            (child.as_posix(), FileType.DIRECTORY if child.is_dir() else FileType.FILE)
            for child in sorted(path.iterdir())
        ]
