from theme_lens.completions.params import CompletionParams
from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import VariableLookup
from theme_lens.core.type_system import TypeSystem, iter_bindings
from theme_lens.models import CompletionItem, CompletionItemKind


class ObjectCompletionProvider:
    """Completes the root name of a variable lookup: visible variables, then objects."""

    def __init__(self, type_system: TypeSystem) -> None:
        self._type_system = type_system

    async def completions(self, params: CompletionParams) -> list[CompletionItem]:
        node = params.node
        if not isinstance(node, VariableLookup) or node.name is None or node.lookups:
            return []
        if params.cursor != node.end:
            return []

        partial = node.name
        items: dict[str, CompletionItem] = {}
        for binding in iter_bindings(params.scope, node.start):
            if binding.name.startswith(partial) and binding.name not in items:
                items[binding.name] = CompletionItem(label=binding.name, kind=CompletionItemKind.VARIABLE)

        objects = await self._type_system.object_map()
        for name in sorted(objects):
            if name.startswith(partial) and name not in items:
                items[name] = CompletionItem(
                    label=name,
                    kind=CompletionItemKind.VARIABLE,
                    documentation=render(objects[name]),
                )
        return list(items.values())
