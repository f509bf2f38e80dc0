"""Best-effort type inference for Liquid expressions.

Types come from three places: variable bindings in the template (``assign``,
``capture``, ``for``...), the object catalog, and the return types declared by
filters. Whenever information is missing the result is ``UNTYPED``, which
absorbs every further lookup or filter application.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from theme_lens.core.liquid_ast import (
    AssignMarkup,
    Expression,
    ForMarkup,
    LiquidFilter,
    LiquidLiteral,
    LiquidNode,
    LiquidTag,
    LiquidVariable,
    Number,
    Range,
    String,
    VariableLookup,
    walk,
)
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.models import FilterEntry, ObjectEntry, ReturnType

PRIMITIVE_TYPES = frozenset({"string", "number", "boolean"})


@dataclass(frozen=True)
class Primitive:
    name: str


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class ArrayType:
    element: "TypeDescriptor"


@dataclass(frozen=True)
class Untyped:
    pass


UNTYPED = Untyped()

TypeDescriptor = Union[Primitive, Named, ArrayType, Untyped]


def type_name(descriptor: TypeDescriptor) -> str:
    if isinstance(descriptor, ArrayType):
        return "array"
    if isinstance(descriptor, (Primitive, Named)):
        return descriptor.name
    return "untyped"


def type_label(descriptor: TypeDescriptor) -> str:
    if isinstance(descriptor, ArrayType):
        return f"array[{type_label(descriptor.element)}]"
    return type_name(descriptor)


def from_type_name(name: str | None) -> TypeDescriptor:
    if not name or name == "untyped":
        return UNTYPED
    if name in PRIMITIVE_TYPES:
        return Primitive(name)
    return Named(name)


def from_return_type(return_type: ReturnType) -> TypeDescriptor:
    if return_type.type == "array":
        return ArrayType(from_type_name(return_type.array_value))
    return from_type_name(return_type.type)


def filter_input_type(entry: FilterEntry) -> str | None:
    """``'string | split: string'`` -> ``'string'``."""
    if not entry.syntax:
        return None
    return entry.syntax.split("|", 1)[0].strip() or None


@dataclass(frozen=True)
class Catalog:
    objects: dict[str, ObjectEntry]
    filters: dict[str, FilterEntry]
    filter_entries: tuple[FilterEntry, ...]

    @classmethod
    def build(cls, objects: list[ObjectEntry], filters: list[FilterEntry]) -> "Catalog":
        return cls(
            objects={entry.name: entry for entry in objects},
            filters={entry.name: entry for entry in filters},
            filter_entries=tuple(filters),
        )


@dataclass(frozen=True)
class Binding:
    name: str
    start: int
    node: LiquidNode


class TypeSystem:
    def __init__(self, docset: ThemeDocset) -> None:
        self._docset = docset

    async def catalog(self) -> Catalog:
        return Catalog.build(await self._docset.objects(), await self._docset.filters())

    async def filters_for(self, descriptor: TypeDescriptor) -> list[str]:
        return rank_filters(descriptor, list((await self.catalog()).filter_entries))

    async def object_map(self) -> dict[str, ObjectEntry]:
        return (await self.catalog()).objects


# ---------------------------------------------------------------------------
# Inference
# ---------------------------------------------------------------------------


def infer_type(node: LiquidNode, scope: LiquidNode, catalog: Catalog) -> TypeDescriptor:
    """Infer the type of ``node`` given the bindings declared in ``scope``.

    ``scope`` is the outermost ancestor of ``node``, usually the document.
    """
    if isinstance(node, AssignMarkup):
        return infer_type(node.value, scope, catalog)
    if isinstance(node, LiquidVariable):
        current = _expression_type(node.expression, scope, catalog)
        for liquid_filter in node.filters:
            current = apply_filter(current, liquid_filter, catalog)
        return current
    if isinstance(node, (VariableLookup, String, Number, Range, LiquidLiteral)):
        return _expression_type(node, scope, catalog)
    return UNTYPED


def apply_filter(current: TypeDescriptor, liquid_filter: LiquidFilter, catalog: Catalog) -> TypeDescriptor:
    if isinstance(current, Untyped):
        return UNTYPED
    entry = catalog.filters.get(liquid_filter.name)
    if entry is None:
        return UNTYPED
    if not entry.return_type:
        return current
    return_type = entry.return_type[0]
    if return_type.type == "untyped":
        # first, last, find: an element of the input array
        if isinstance(current, ArrayType) and filter_input_type(entry) == "array":
            return current.element
        return UNTYPED
    return from_return_type(return_type)


def _expression_type(expression: Expression, scope: LiquidNode, catalog: Catalog) -> TypeDescriptor:
    if isinstance(expression, String):
        return Primitive("string")
    if isinstance(expression, Number):
        return Primitive("number")
    if isinstance(expression, Range):
        return ArrayType(Primitive("number"))
    if isinstance(expression, LiquidLiteral):
        return Primitive("boolean") if expression.keyword in ("true", "false") else UNTYPED
    if not expression.name:
        return UNTYPED

    current = _base_type(expression.name, expression.start, scope, catalog)
    for lookup in expression.lookups:
        current = _lookup_type(current, lookup, catalog)
        if isinstance(current, Untyped):
            break
    return current


def _base_type(name: str, position: int, scope: LiquidNode, catalog: Catalog) -> TypeDescriptor:
    binding = find_binding(name, position, scope)
    if binding is not None:
        return _binding_type(binding, scope, catalog)
    entry = catalog.objects.get(name)
    if entry is None:
        return UNTYPED
    if entry.return_type:
        return from_return_type(entry.return_type[0])
    return Named(entry.name)


def _binding_type(binding: Binding, scope: LiquidNode, catalog: Catalog) -> TypeDescriptor:
    node = binding.node
    if isinstance(node, AssignMarkup):
        return infer_type(node.value, scope, catalog)
    if isinstance(node, ForMarkup):
        collection = _expression_type(node.collection, scope, catalog)
        return collection.element if isinstance(collection, ArrayType) else UNTYPED
    if isinstance(node, LiquidTag) and node.name == "capture":
        return Primitive("string")
    if isinstance(node, LiquidTag) and node.name in ("increment", "decrement"):
        return Primitive("number")
    return UNTYPED


def _lookup_type(current: TypeDescriptor, lookup: Expression, catalog: Catalog) -> TypeDescriptor:
    prop = lookup.value if isinstance(lookup, String) else None
    if isinstance(current, ArrayType):
        if prop is None or prop in ("first", "last"):
            return current.element
        if prop == "size":
            return Primitive("number")
        return _lookup_type(current.element, lookup, catalog)
    if isinstance(current, Named) and prop is not None:
        entry = catalog.objects.get(current.name)
        if entry is None:
            return UNTYPED
        for property_entry in entry.properties:
            if property_entry.name == prop:
                return from_return_type(property_entry.return_type[0]) if property_entry.return_type else UNTYPED
        return UNTYPED
    if isinstance(current, Primitive) and current.name == "string" and prop == "size":
        return Primitive("number")
    return UNTYPED


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


def iter_bindings(scope: LiquidNode, position: int) -> Iterator[Binding]:
    """Yield the bindings visible at ``position``, in source order."""
    for node, _ in walk(scope):
        if not isinstance(node, LiquidTag):
            continue
        markup = node.markup
        if isinstance(markup, AssignMarkup) and node.end <= position:
            yield Binding(markup.name, node.start, markup)
        elif isinstance(markup, ForMarkup) and node.block_start is not None and node.block_end is not None:
            if node.block_start <= position < node.block_end:
                yield Binding(markup.variable_name, node.start, markup)
        elif node.name in ("capture", "increment", "decrement") and isinstance(markup, str) and node.end <= position:
            name = markup.strip("'\" ")
            if name:
                yield Binding(name, node.start, node)


def find_binding(name: str, position: int, scope: LiquidNode) -> Binding | None:
    found: Binding | None = None
    for binding in iter_bindings(scope, position):
        if binding.name == name and (found is None or binding.start >= found.start):
            found = binding
    return found


# ---------------------------------------------------------------------------
# Filter ranking
# ---------------------------------------------------------------------------


def rank_filters(descriptor: TypeDescriptor, filters: list[FilterEntry]) -> list[str]:
    """Filters applicable to ``descriptor``: the type's own filters, then the universal ones.

    Falls back to every filter, sorted, when the type is unknown or has no
    filters of its own.
    """
    all_names = sorted(entry.name for entry in filters)
    if isinstance(descriptor, Untyped):
        return all_names
    input_type = type_name(descriptor)
    specific = sorted(entry.name for entry in filters if filter_input_type(entry) == input_type)
    if not specific:
        return all_names
    universal = sorted(entry.name for entry in filters if filter_input_type(entry) == "variable")
    universal += [entry.name for entry in filters if not entry.syntax]
    return specific + universal
