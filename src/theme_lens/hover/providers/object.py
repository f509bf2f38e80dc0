import dataclasses

from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import AssignMarkup, LiquidNode, VariableLookup
from theme_lens.core.type_system import ArrayType, TypeSystem, Untyped, infer_type, type_label, type_name
from theme_lens.models import Hover, ObjectEntry


class LiquidObjectHoverProvider:
    def __init__(self, type_system: TypeSystem) -> None:
        self._type_system = type_system

    async def hover(self, node: LiquidNode, ancestors: list[LiquidNode]) -> Hover | None:
        if not isinstance(node, (VariableLookup, AssignMarkup)) or not node.name:
            return None
        name = node.name
        if isinstance(node, VariableLookup):
            # Hover documents the root reference, never the property chain.
            node = dataclasses.replace(node, lookups=[])

        catalog = await self._type_system.catalog()
        scope = ancestors[0] if ancestors else node
        descriptor = infer_type(node, scope, catalog)
        if isinstance(descriptor, Untyped):
            return None

        key = type_name(descriptor.element if isinstance(descriptor, ArrayType) else descriptor)
        entry = catalog.objects.get(key) or catalog.objects.get(name) or ObjectEntry(name=name)
        return Hover(contents=render(entry.model_copy(update={"name": name}), type_label(descriptor)))
