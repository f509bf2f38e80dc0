from theme_lens.core.paths import is_under, normalize_location
from theme_lens.core.ports.filesystem import FileStat, FileType


class InMemoryFileSystem:
    """Filesystem over a ``{location: contents}`` mapping.

    Directories are implied by the locations of the files they contain.
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = {}
        for location, contents in (files or {}).items():
            self.write(location, contents)

    def write(self, location: str, contents: str) -> None:
        self.files[normalize_location(location)] = contents

    def remove(self, location: str) -> None:
        self.files.pop(normalize_location(location), None)

    async def read_file(self, location: str) -> str:
        location = normalize_location(location)
        if location not in self.files:
            raise FileNotFoundError(location)
        return self.files[location]

    async def read_directory(self, location: str) -> list[tuple[str, FileType]]:
        root = normalize_location(location).rstrip("/")
        entries: dict[str, FileType] = {}
        for path in self.files:
            if path == root or not is_under(path, root or "/"):
                continue
            rest = path[len(root) :].lstrip("/")
            head, sep, _ = rest.partition("/")
            child = f"{root}/{head}"
            entries[child] = FileType.DIRECTORY if sep else FileType.FILE
        if not entries and not self._is_directory(root):
            raise FileNotFoundError(location)
        return sorted(entries.items())

    async def stat(self, location: str) -> FileStat:
        location = normalize_location(location)
        if location in self.files:
            return FileStat(type=FileType.FILE, size=len(self.files[location].encode("utf-8")))
        if self._is_directory(location):
            return FileStat(type=FileType.DIRECTORY, size=0)
        raise FileNotFoundError(location)

    def _is_directory(self, location: str) -> bool:
        location = location.rstrip("/")
        return any(path != location and is_under(path, location or "/") for path in self.files)
