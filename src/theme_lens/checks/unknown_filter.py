from typing import Any

from theme_lens.core.check import CheckContext
from theme_lens.core.liquid_ast import Document, LiquidFilter, walk
from theme_lens.core.ports.check import CheckMeta
from theme_lens.models import Offense, Severity, SourceKind


class UnknownFilter:
    meta = CheckMeta(
        code="UnknownFilter",
        name="Prevent use of unknown filters",
        severity=Severity.ERROR,
        source_kinds=frozenset({SourceKind.LIQUID}),
    )

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        docset = context.dependencies.theme_docset
        if docset is None or not isinstance(node, Document):
            return []
        known = {entry.name for entry in await docset.filters()}
        if not known:
            return []
        return [
            context.offense(f"Unknown filter '{child.name}' used.", child.start, child.start + len(child.name))
            for child, _ in walk(node)
            if isinstance(child, LiquidFilter) and child.name and child.name not in known
        ]
