from typing import Any

from theme_lens.core.check import CheckContext
from theme_lens.core.errors import JSONParseError
from theme_lens.core.ports.check import CheckMeta
from theme_lens.models import Offense, Severity, SourceKind


class JSONSyntaxError:
    meta = CheckMeta(
        code="JSONSyntaxError",
        name="Enforce valid JSON",
        severity=Severity.ERROR,
        source_kinds=frozenset({SourceKind.JSON}),
        docs="Reports the first syntax error of a JSON file.",
        accepts_parse_errors=True,
    )

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        if not isinstance(node, JSONParseError):
            return []
        return [context.offense(node.message, node.start, node.end)]
