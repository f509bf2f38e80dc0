from typing import Any, Protocol

from theme_lens.models import FilterEntry, ObjectEntry, TagEntry


class ThemeDocset(Protocol):
    async def filters(self) -> list[FilterEntry]: ...

    async def objects(self) -> list[ObjectEntry]: ...

    async def tags(self) -> list[TagEntry]: ...

    async def system_translations(self) -> dict[str, Any]: ...
