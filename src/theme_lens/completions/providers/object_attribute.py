from theme_lens.completions.params import CompletionParams
from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import String, VariableLookup
from theme_lens.core.type_system import ArrayType, Named, Primitive, TypeSystem, infer_type
from theme_lens.models import CompletionItem, CompletionItemKind

ARRAY_PROPERTIES = ("first", "last", "size")


class ObjectAttributeCompletionProvider:
    """Completes ``product.ti`` with the properties of the lookup's type."""

    def __init__(self, type_system: TypeSystem) -> None:
        self._type_system = type_system

    async def completions(self, params: CompletionParams) -> list[CompletionItem]:
        node = params.node
        if not isinstance(node, VariableLookup) or not node.name or not node.lookups:
            return []
        last = node.lookups[-1]
        if not isinstance(last, String) or params.cursor != last.end:
            return []

        parent = VariableLookup(name=node.name, lookups=node.lookups[:-1], start=node.start, end=last.start)
        catalog = await self._type_system.catalog()
        parent_type = infer_type(parent, params.scope, catalog)

        items: list[CompletionItem] = []
        if isinstance(parent_type, ArrayType):
            items = [CompletionItem(label=name, kind=CompletionItemKind.PROPERTY) for name in ARRAY_PROPERTIES]
        elif isinstance(parent_type, Primitive) and parent_type.name == "string":
            items = [CompletionItem(label="size", kind=CompletionItemKind.PROPERTY)]
        elif isinstance(parent_type, Named) and parent_type.name in catalog.objects:
            properties = sorted(catalog.objects[parent_type.name].properties, key=lambda entry: entry.name)
            items = [
                CompletionItem(label=entry.name, kind=CompletionItemKind.PROPERTY, documentation=render(entry))
                for entry in properties
            ]
        return [item for item in items if item.label.startswith(last.value)]
