from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import LiquidFilter, LiquidNode
from theme_lens.core.type_system import TypeSystem
from theme_lens.models import Hover


class LiquidFilterHoverProvider:
    def __init__(self, type_system: TypeSystem) -> None:
        self._type_system = type_system

    async def hover(self, node: LiquidNode, ancestors: list[LiquidNode]) -> Hover | None:
        if not isinstance(node, LiquidFilter) or not node.name:
            return None
        entry = (await self._type_system.catalog()).filters.get(node.name)
        if entry is None:
            return None
        return Hover(contents=render(entry))
