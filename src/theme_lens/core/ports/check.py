from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from theme_lens.models import Offense, Severity, SourceKind

if TYPE_CHECKING:
    from theme_lens.core.check import CheckContext


class NoOptions(BaseModel):
    pass


class CheckMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    aliases: tuple[str, ...] = ()
    severity: Severity = Severity.WARNING
    source_kinds: frozenset[SourceKind] = Field(default_factory=lambda: frozenset(SourceKind))
    options_schema: type[BaseModel] = NoOptions
    docs: str | None = None
    # Syntax checks are the only ones that want to see units that failed to parse.
    accepts_parse_errors: bool = False


class CheckDefinition(Protocol):
    meta: CheckMeta

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]: ...
