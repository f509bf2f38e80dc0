from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Union

from theme_lens.core.errors import JSONParseError, LiquidSyntaxError
from theme_lens.core.json_ast import JSONValue, parse_json
from theme_lens.core.liquid_ast import Document
from theme_lens.core.liquid_parser import parse_liquid
from theme_lens.core.paths import normalize_location, source_kind_for
from theme_lens.models import Position, SourceKind

SourceAst = Union[Document, JSONValue, LiquidSyntaxError, JSONParseError]


@dataclass(frozen=True)
class SourceUnit:
    """One parsed theme file.

    ``version`` is set for open editor buffers and None for files read from disk.
    """

    location: str
    kind: SourceKind
    source: str
    ast: SourceAst
    version: int | None = None
    _line_starts: tuple[int, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0] + [i + 1 for i, ch in enumerate(self.source) if ch == "\n"]
        object.__setattr__(self, "_line_starts", tuple(starts))

    @property
    def parse_error(self) -> LiquidSyntaxError | JSONParseError | None:
        return self.ast if isinstance(self.ast, (LiquidSyntaxError, JSONParseError)) else None

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self.source)))
        row = bisect_right(self._line_starts, offset) - 1
        return Position(row=row, column=offset - self._line_starts[row])

    def offset_at(self, position: Position) -> int:
        if position.row >= len(self._line_starts):
            return len(self.source)
        line_start = self._line_starts[position.row]
        next_start = self._line_starts[position.row + 1] if position.row + 1 < len(self._line_starts) else None
        line_end = next_start - 1 if next_start is not None else len(self.source)
        return min(line_start + position.column, line_end)


def to_source_unit(location: str, source: str, version: int | None = None) -> SourceUnit:
    location = normalize_location(location)
    kind = source_kind_for(location)
    if kind is None:
        raise ValueError(f"Unsupported file type: {location}")
    ast: SourceAst
    try:
        ast = parse_liquid(source) if kind is SourceKind.LIQUID else parse_json(source)
    except (LiquidSyntaxError, JSONParseError) as error:
        ast = error
    return SourceUnit(location=location, kind=kind, source=source, ast=ast, version=version)
