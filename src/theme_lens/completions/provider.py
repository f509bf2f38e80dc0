import logging
from typing import Protocol

from theme_lens.completions.params import CompletionParams, create_completion_params
from theme_lens.completions.providers.filter import FilterCompletionProvider
from theme_lens.completions.providers.object import ObjectCompletionProvider
from theme_lens.completions.providers.object_attribute import ObjectAttributeCompletionProvider
from theme_lens.completions.providers.tag import LiquidTagsCompletionProvider
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.type_system import TypeSystem
from theme_lens.documents.manager import DocumentManager
from theme_lens.models import CompletionItem, Position, SourceKind

logger = logging.getLogger(__name__)


class Provider(Protocol):
    async def completions(self, params: CompletionParams) -> list[CompletionItem]: ...


class CompletionsProvider:
    def __init__(self, documents: DocumentManager, docset: ThemeDocset) -> None:
        self._documents = documents
        type_system = TypeSystem(docset)
        self._providers: list[Provider] = [
            LiquidTagsCompletionProvider(docset),
            ObjectCompletionProvider(type_system),
            ObjectAttributeCompletionProvider(type_system),
            FilterCompletionProvider(type_system),
        ]

    async def completions(self, location: str, position: Position) -> list[CompletionItem]:
        unit = self._documents.get(location)
        if unit is None or unit.kind is not SourceKind.LIQUID:
            return []
        params = create_completion_params(unit, position)
        items: list[CompletionItem] = []
        for provider in self._providers:
            try:
                items += await provider.completions(params)
            except Exception:
                logger.exception("%s failed at %s:%s", type(provider).__name__, location, params.cursor)
        return items
