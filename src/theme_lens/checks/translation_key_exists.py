from typing import Any

from theme_lens.core.check import CheckContext
from theme_lens.core.liquid_ast import Document, LiquidVariable, String, walk
from theme_lens.core.ports.check import CheckMeta
from theme_lens.core.translations import translation_value
from theme_lens.models import Offense, Severity, SourceKind

TRANSLATION_FILTERS = ("t", "translate")


class TranslationKeyExists:
    meta = CheckMeta(
        code="TranslationKeyExists",
        name="Reports missing translation keys",
        severity=Severity.ERROR,
        source_kinds=frozenset({SourceKind.LIQUID}),
    )

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        if not isinstance(node, Document):
            return []
        keys = [
            child.expression
            for child, _ in walk(node)
            if isinstance(child, LiquidVariable)
            and isinstance(child.expression, String)
            and child.filters
            and child.filters[0].name in TRANSLATION_FILTERS
        ]
        if not keys:
            return []

        translations = await context.default_translations()
        system_translations: dict[str, Any] = {}
        if context.dependencies.theme_docset is not None:
            system_translations = await context.dependencies.theme_docset.system_translations()
        locale = await context.default_locale()

        offenses: list[Offense] = []
        for key in keys:
            if translation_value(key.value, translations) is not None:
                continue
            # system translations are keyed by their full dotted path
            if key.value in system_translations:
                continue
            message = f"'{key.value}' does not have a matching entry in 'locales/{locale}.default.json'"
            offenses.append(context.offense(message, key.start + 1, key.end - 1))
        return offenses
