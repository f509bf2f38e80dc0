import asyncio
from collections.abc import Callable

from theme_lens.core.ports.filesystem import FileSystem, FileType


async def file_exists(fs: FileSystem, location: str) -> bool:
    try:
        await fs.stat(location)
    except FileNotFoundError:
        return False
    return True


async def file_size(fs: FileSystem, location: str) -> int | None:
    try:
        stat = await fs.stat(location)
    except FileNotFoundError:
        return None
    return stat.size if stat.type is FileType.FILE else None


async def recursive_read_directory(
    fs: FileSystem,
    location: str,
    predicate: Callable[[str], bool] = lambda _: True,
) -> list[str]:
    """Every file under ``location`` accepted by ``predicate``, in directory order."""
    entries = await fs.read_directory(location)
    files = [child for child, kind in entries if kind is FileType.FILE and predicate(child)]
    nested = await asyncio.gather(
        *(recursive_read_directory(fs, child, predicate) for child, kind in entries if kind is FileType.DIRECTORY)
    )
    for found in nested:
        files.extend(found)
    return files
