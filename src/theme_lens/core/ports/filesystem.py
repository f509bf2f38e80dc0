from enum import Enum
from typing import NamedTuple, Protocol


class FileType(Enum):
    FILE = 1
    DIRECTORY = 2


class FileStat(NamedTuple):
    type: FileType
    size: int


class FileSystem(Protocol):
    async def read_file(self, location: str) -> str: ...

    async def read_directory(self, location: str) -> list[tuple[str, FileType]]: ...

    async def stat(self, location: str) -> FileStat: ...
