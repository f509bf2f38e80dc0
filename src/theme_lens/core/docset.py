import asyncio
import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.models import FilterEntry, ObjectEntry, TagEntry


class DocsetData(BaseModel):
    filters: list[FilterEntry] = Field(default_factory=list)
    objects: list[ObjectEntry] = Field(default_factory=list)
    tags: list[TagEntry] = Field(default_factory=list)
    translations: dict[str, Any] = Field(default_factory=dict)


class StaticDocset:
    """Docset serving fixed entries. Implements the ``ThemeDocset`` protocol."""

    def __init__(self, data: DocsetData) -> None:
        self._data = data

    async def filters(self) -> list[FilterEntry]:
        return self._data.filters

    async def objects(self) -> list[ObjectEntry]:
        return self._data.objects

    async def tags(self) -> list[TagEntry]:
        return self._data.tags

    async def system_translations(self) -> dict[str, Any]:
        return self._data.translations


class FileDocset(StaticDocset):
    """Docset read from a local JSON file with ``filters``/``objects``/``tags`` keys."""

    def __init__(self, path: str | Path) -> None:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        super().__init__(DocsetData.model_validate(data))


class AugmentedDocset:
    """Caches the entries of a remote docset for the lifetime of a session."""

    def __init__(self, docset: ThemeDocset) -> None:
        self._docset = docset
        self._cache: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def _cached(self, key: str) -> Any:
        if key in self._cache:
            return self._cache[key]
        async with self._lock:
            if key not in self._cache:
                self._cache[key] = await getattr(self._docset, key)()
        return self._cache[key]

    async def filters(self) -> list[FilterEntry]:
        return await self._cached("filters")

    async def objects(self) -> list[ObjectEntry]:
        return await self._cached("objects")

    async def tags(self) -> list[TagEntry]:
        return await self._cached("tags")

    async def system_translations(self) -> dict[str, Any]:
        return await self._cached("system_translations")


def render(entry: FilterEntry | ObjectEntry | TagEntry, type_label: str | None = None) -> str:
    """Render a catalog entry as markdown documentation."""
    title = f"### {entry.name}"
    if type_label:
        title += f": {type_label}"
    parts = [title]
    if isinstance(entry, FilterEntry) and entry.syntax:
        parts.append(f"```liquid\n{entry.syntax}\n```")
    if entry.description:
        parts.append(entry.description)
    return "\n\n".join(parts)
