import re
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from theme_lens.core.errors import JSONParseError
from theme_lens.core.json_ast import parse_json, to_value
from theme_lens.core.source import SourceUnit
from theme_lens.models import SourceKind

Translations = dict[str, Any]
GetTranslations = Callable[[], Awaitable[Translations]]
GetTranslationsFactory = Callable[[str], GetTranslations]

PLURALIZED_KEYS = ("zero", "one", "two", "few", "many", "other")

_DEFAULT_LOCALE_RE = re.compile(r"locales/.*default\.json$")


async def use_buffer_or_injected_translations(
    get_default_translations_factory: GetTranslationsFactory,
    theme: Iterable[SourceUnit],
    root: str,
) -> Translations:
    """Prefer the default locale file from ``theme``, else ask the injected source."""
    for unit in theme:
        if unit.kind is SourceKind.JSON and _DEFAULT_LOCALE_RE.search(unit.location):
            translations = parse_translations(unit.source)
            if translations is not None:
                return translations
            break
    return await get_default_translations_factory(root)()


def parse_translations(source: str) -> Translations | None:
    try:
        value = to_value(parse_json(source))
    except JSONParseError:
        return None
    return value if isinstance(value, dict) else None


def translation_value(key: str, translations: Translations) -> str | dict[str, str] | None:
    current: Any = translations
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    if isinstance(current, str) or (isinstance(current, dict) and is_pluralized(current)):
        return current
    return None


def is_pluralized(translation: dict[str, Any]) -> bool:
    return bool(translation) and all(key in PLURALIZED_KEYS for key in translation)


def render_translation(translation: str | dict[str, str]) -> str:
    if isinstance(translation, str):
        return translation
    sections = [f"`{key}:` {translation[key]}" for key in PLURALIZED_KEYS if translation.get(key)]
    return "\n\n---\n\n".join(sections)
