from typing import Any

from theme_lens.core.check import CheckContext
from theme_lens.core.errors import LiquidSyntaxError
from theme_lens.core.ports.check import CheckMeta
from theme_lens.models import Offense, Severity, SourceKind


class LiquidHTMLSyntaxError:
    meta = CheckMeta(
        code="LiquidHTMLSyntaxError",
        name="Prevent LiquidHTML syntax errors",
        severity=Severity.ERROR,
        source_kinds=frozenset({SourceKind.LIQUID}),
        accepts_parse_errors=True,
    )

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        if not isinstance(node, LiquidSyntaxError):
            return []
        return [context.offense(node.message, node.start, node.end)]
