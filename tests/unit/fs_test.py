from pathlib import Path

import pytest

from theme_lens.core.ports.filesystem import FileType
from theme_lens.fs import InMemoryFileSystem, LocalFileSystem, file_exists, file_size, recursive_read_directory


class TestInMemoryFileSystem:
    @pytest.mark.asyncio
    async def test_read_file(self) -> None:
        fs = InMemoryFileSystem({"/theme/snippets/a.liquid": "hello"})
        assert await fs.read_file("file:///theme/snippets/a.liquid") == "hello"
        with pytest.raises(FileNotFoundError):
            await fs.read_file("/theme/snippets/missing.liquid")

    @pytest.mark.asyncio
    async def test_directories_are_implied(self) -> None:
        fs = InMemoryFileSystem({"/theme/snippets/a.liquid": "", "/theme/layout/theme.liquid": ""})
        assert await fs.read_directory("/theme") == [
            ("/theme/layout", FileType.DIRECTORY),
            ("/theme/snippets", FileType.DIRECTORY),
        ]
        assert (await fs.stat("/theme/snippets")).type is FileType.DIRECTORY
        with pytest.raises(FileNotFoundError):
            await fs.read_directory("/elsewhere")

    @pytest.mark.asyncio
    async def test_size_is_utf8_bytes(self) -> None:
        fs = InMemoryFileSystem({"/theme/assets/a.css": "é"})
        assert await file_size(fs, "/theme/assets/a.css") == 2

    @pytest.mark.asyncio
    async def test_write_and_remove(self) -> None:
        fs = InMemoryFileSystem()
        fs.write("/theme/assets/a.css", "body {}")
        assert await file_exists(fs, "/theme/assets/a.css") is True
        fs.remove("/theme/assets/a.css")
        assert await file_exists(fs, "/theme/assets/a.css") is False


class TestHelpers:
    @pytest.mark.asyncio
    async def test_file_size_of_directory(self) -> None:
        fs = InMemoryFileSystem({"/theme/assets/a.css": "x"})
        assert await file_size(fs, "/theme/assets") is None
        assert await file_size(fs, "/theme/assets/missing.css") is None

    @pytest.mark.asyncio
    async def test_recursive_read_directory(self) -> None:
        fs = InMemoryFileSystem(
            {
                "/theme/snippets/a.liquid": "",
                "/theme/sections/nested/b.liquid": "",
                "/theme/assets/c.css": "",
            }
        )
        found = await recursive_read_directory(fs, "/theme", lambda location: location.endswith(".liquid"))
        assert sorted(found) == ["/theme/sections/nested/b.liquid", "/theme/snippets/a.liquid"]


class TestLocalFileSystem:
    @pytest.mark.asyncio
    async def test_reads_from_disk(self, tmp_path: Path) -> None:
        (tmp_path / "snippets").mkdir()
        (tmp_path / "snippets" / "a.liquid").write_text("{{ x }}", encoding="utf-8")
        fs = LocalFileSystem()

        assert await fs.read_file((tmp_path / "snippets" / "a.liquid").as_uri()) == "{{ x }}"
        assert await fs.read_directory(tmp_path.as_posix()) == [((tmp_path / "snippets").as_posix(), FileType.DIRECTORY)]
        assert await file_size(fs, (tmp_path / "snippets" / "a.liquid").as_posix()) == 7
        assert await file_exists(fs, (tmp_path / "missing.liquid").as_posix()) is False
