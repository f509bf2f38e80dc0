from theme_lens.completions.params import CompletionParams
from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import LiquidFilter, LiquidVariable
from theme_lens.core.type_system import TypeSystem, infer_type, rank_filters
from theme_lens.models import CompletionItem, CompletionItemKind, FilterEntry, InsertTextFormat


class FilterCompletionProvider:
    def __init__(self, type_system: TypeSystem) -> None:
        self._type_system = type_system

    async def completions(self, params: CompletionParams) -> list[CompletionItem]:
        node, parent = params.node, params.parent
        if not isinstance(node, LiquidFilter) or not isinstance(parent, LiquidVariable):
            return []
        if params.cursor != node.end:
            return []

        index = next(i for i, liquid_filter in enumerate(parent.filters) if liquid_filter is node)
        preceding = LiquidVariable(
            expression=parent.expression,
            filters=parent.filters[:index],
            start=parent.start,
            end=node.start,
        )
        catalog = await self._type_system.catalog()
        input_type = infer_type(preceding, params.scope, catalog)
        return [
            filter_completion_item(catalog.filters[name])
            for name in rank_filters(input_type, list(catalog.filter_entries))
            if name.startswith(node.name)
        ]


def filter_completion_item(entry: FilterEntry) -> CompletionItem:
    insert_text, insert_text_format = filter_insert_text(entry)
    return CompletionItem(
        label=entry.name,
        kind=CompletionItemKind.FUNCTION,
        insert_text=insert_text,
        insert_text_format=insert_text_format,
        documentation=render(entry),
    )


def filter_insert_text(entry: FilterEntry) -> tuple[str, InsertTextFormat]:
    """``highlight: '${1:highlighted_term}'`` for required positional parameters,
    ``preload_tag: as: '$1'`` for required named ones.
    """
    required = [param for param in entry.parameters if param.required]
    if not required:
        return entry.name, InsertTextFormat.PLAIN_TEXT

    ordered = [param for param in required if param.positional] + [param for param in required if not param.positional]
    parts = []
    for i, param in enumerate(ordered, start=1):
        if param.positional:
            parts.append(f"'${{{i}:{param.name}}}'")
        else:
            parts.append(f"{param.name}: '${i}'")
    return f"{entry.name}: {', '.join(parts)}", InsertTextFormat.SNIPPET
