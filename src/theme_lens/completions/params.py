from dataclasses import dataclass

from theme_lens.core.liquid_ast import Document, LiquidNode, find_node_at
from theme_lens.core.liquid_parser import parse_liquid
from theme_lens.core.source import SourceUnit
from theme_lens.models import Position


@dataclass
class CompletionParams:
    """The template cut at the cursor and the node being typed.

    ``ancestors`` are ordered root first, so ``ancestors[0]`` is the document
    holding every binding visible at the cursor.
    """

    unit: SourceUnit
    cursor: int
    text: str
    document: Document
    node: LiquidNode
    ancestors: list[LiquidNode]

    @property
    def scope(self) -> LiquidNode:
        return self.ancestors[0] if self.ancestors else self.document

    @property
    def parent(self) -> LiquidNode | None:
        return self.ancestors[-1] if self.ancestors else None


def create_completion_params(unit: SourceUnit, position: Position) -> CompletionParams:
    cursor = unit.offset_at(position)
    text = unit.source[:cursor]
    document = parse_liquid(text, tolerant=True)
    node, ancestors = find_node_at(document, cursor, inclusive_end=True)
    return CompletionParams(
        unit=unit,
        cursor=cursor,
        text=text,
        document=document,
        node=node,
        ancestors=ancestors,
    )
