import logging

from theme_lens.core.liquid_ast import Document, find_node_at
from theme_lens.core.liquid_parser import parse_liquid
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.type_system import TypeSystem
from theme_lens.documents.manager import DocumentManager
from theme_lens.hover.providers.filter import LiquidFilterHoverProvider
from theme_lens.hover.providers.object import LiquidObjectHoverProvider
from theme_lens.hover.providers.translation import GetTranslationsForLocation, TranslationHoverProvider
from theme_lens.models import Hover, Position, SourceKind

logger = logging.getLogger(__name__)


class HoverProvider:
    """Dispatches to the first hover provider with something to say."""

    def __init__(
        self,
        documents: DocumentManager,
        docset: ThemeDocset,
        get_translations_for_location: GetTranslationsForLocation,
    ) -> None:
        self._documents = documents
        type_system = TypeSystem(docset)
        self._object_hover = LiquidObjectHoverProvider(type_system)
        self._filter_hover = LiquidFilterHoverProvider(type_system)
        self._translation_hover = TranslationHoverProvider(get_translations_for_location)

    async def hover(self, location: str, position: Position) -> Hover | None:
        unit = self._documents.get(location)
        if unit is None or unit.kind is not SourceKind.LIQUID:
            return None
        document = unit.ast if isinstance(unit.ast, Document) else parse_liquid(unit.source, tolerant=True)
        node, ancestors = find_node_at(document, unit.offset_at(position), inclusive_end=True)
        try:
            return (
                await self._object_hover.hover(node, ancestors)
                or await self._filter_hover.hover(node, ancestors)
                or await self._translation_hover.hover(node, ancestors, unit.location)
            )
        except Exception:
            logger.exception("Hover failed at %s:%s", location, position)
            return None
