from collections.abc import Awaitable, Callable

from theme_lens.core.liquid_ast import LiquidNode, LiquidVariable, String
from theme_lens.core.translations import Translations, render_translation, translation_value
from theme_lens.models import Hover

GetTranslationsForLocation = Callable[[str], Awaitable[Translations]]


class TranslationHoverProvider:
    """Shows the default-locale text of ``{{ 'key' | t }}``."""

    def __init__(self, get_translations_for_location: GetTranslationsForLocation) -> None:
        self._get_translations_for_location = get_translations_for_location

    async def hover(self, node: LiquidNode, ancestors: list[LiquidNode], location: str) -> Hover | None:
        parent = ancestors[-1] if ancestors else None
        if not isinstance(node, String) or not isinstance(parent, LiquidVariable):
            return None
        if parent.expression is not node or not parent.filters or parent.filters[0].name not in ("t", "translate"):
            return None
        translations = await self._get_translations_for_location(location)
        translation = translation_value(node.value, translations)
        if translation is None:
            return None
        return Hover(contents=render_translation(translation))
