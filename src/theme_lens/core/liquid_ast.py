"""Liquid template node tree.

Every node carries ``start``/``end`` character offsets (``end`` exclusive) into
the template source.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Union


@dataclass(kw_only=True)
class LiquidNode:
    start: int
    end: int


# -- expressions --


@dataclass(kw_only=True)
class String(LiquidNode):
    value: str
    single_quoted: bool = True


@dataclass(kw_only=True)
class Number(LiquidNode):
    value: str


@dataclass(kw_only=True)
class LiquidLiteral(LiquidNode):
    keyword: str


@dataclass(kw_only=True)
class Range(LiquidNode):
    first: "Expression"
    last: "Expression"


@dataclass(kw_only=True)
class VariableLookup(LiquidNode):
    """``product.images[0].src``; ``name`` is None for ``['key']`` roots."""

    name: str | None
    lookups: list["Expression"] = field(default_factory=list)


Expression = Union[String, Number, LiquidLiteral, Range, VariableLookup]


@dataclass(kw_only=True)
class NamedArgument(LiquidNode):
    name: str
    value: Expression


@dataclass(kw_only=True)
class LiquidFilter(LiquidNode):
    name: str
    args: list[Expression | NamedArgument] = field(default_factory=list)


@dataclass(kw_only=True)
class LiquidVariable(LiquidNode):
    expression: Expression
    filters: list[LiquidFilter] = field(default_factory=list)


# -- tag markups --


@dataclass(kw_only=True)
class AssignMarkup(LiquidNode):
    name: str
    value: LiquidVariable


@dataclass(kw_only=True)
class ForMarkup(LiquidNode):
    variable_name: str
    collection: Expression


Markup = Union[str, LiquidVariable, AssignMarkup, ForMarkup]


# -- document level --


@dataclass(kw_only=True)
class TextNode(LiquidNode):
    value: str


@dataclass(kw_only=True)
class LiquidVariableOutput(LiquidNode):
    markup: LiquidVariable | str


@dataclass(kw_only=True)
class LiquidTag(LiquidNode):
    """A ``{% tag %}``; block tags hold their body in ``children``.

    ``block_start``/``block_end`` delimit the body of block tags.
    """

    name: str
    markup: Markup
    children: list["DocumentChild"] | None = None
    block_start: int | None = None
    block_end: int | None = None


@dataclass(kw_only=True)
class LiquidRawTag(LiquidNode):
    """``{% schema %}``, ``{% raw %}`` and friends; the body is kept verbatim."""

    name: str
    body: str
    body_start: int
    body_end: int


DocumentChild = Union[TextNode, LiquidVariableOutput, LiquidTag, LiquidRawTag]


@dataclass(kw_only=True)
class Document(LiquidNode):
    source: str
    children: list[DocumentChild] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_children(node: LiquidNode) -> Iterator[LiquidNode]:
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, LiquidNode):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, LiquidNode):
                    yield item


def walk(node: LiquidNode) -> Iterator[tuple[LiquidNode, list[LiquidNode]]]:
    """Yield ``(node, ancestors)`` pairs depth-first, ancestors root first."""
    stack: list[tuple[LiquidNode, list[LiquidNode]]] = [(node, [])]
    while stack:
        current, ancestors = stack.pop()
        yield current, ancestors
        children = list(iter_children(current))
        for child in reversed(children):
            stack.append((child, [*ancestors, current]))


_LEAF_NODES = (VariableLookup, String, Number, LiquidLiteral)


def find_node_at(
    root: LiquidNode, offset: int, inclusive_end: bool = False
) -> tuple[LiquidNode, list[LiquidNode]]:
    """Return the deepest node spanning ``offset`` and its ancestors.

    Variable lookups are treated as leaves: their property chain is part of
    the reference, not a node of its own.
    """
    current = root
    ancestors: list[LiquidNode] = []
    while not isinstance(current, _LEAF_NODES):
        match = None
        for child in iter_children(current):
            hit = child.start <= offset <= child.end if inclusive_end else child.start <= offset < child.end
            if hit:
                match = child
        if match is None:
            break
        ancestors.append(current)
        current = match
    return current, ancestors
