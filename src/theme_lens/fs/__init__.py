from theme_lens.fs.helpers import file_exists, file_size, recursive_read_directory
from theme_lens.fs.local import LocalFileSystem
from theme_lens.fs.memory import InMemoryFileSystem

__all__ = [
    "InMemoryFileSystem",
    "LocalFileSystem",
    "file_exists",
    "file_size",
    "recursive_read_directory",
]
