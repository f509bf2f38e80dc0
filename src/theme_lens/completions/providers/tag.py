import re

from theme_lens.completions.params import CompletionParams
from theme_lens.core.docset import render
from theme_lens.core.liquid_ast import LiquidTag
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.models import CompletionItem, CompletionItemKind

_PARTIAL_TAG_RE = re.compile(r"\{%-?\s*\w*")


class LiquidTagsCompletionProvider:
    def __init__(self, docset: ThemeDocset) -> None:
        self._docset = docset

    async def completions(self, params: CompletionParams) -> list[CompletionItem]:
        node = params.node
        if not isinstance(node, LiquidTag) or node.markup != "" or node.children is not None:
            return []
        # Only while the cursor is still on the tag name.
        if not _PARTIAL_TAG_RE.fullmatch(params.text, node.start):
            return []

        tags = sorted(await self._docset.tags(), key=lambda entry: entry.name)
        return [
            CompletionItem(label=entry.name, kind=CompletionItemKind.KEYWORD, documentation=render(entry))
            for entry in tags
            if entry.name.startswith(node.name)
        ]
