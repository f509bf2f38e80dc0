from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from theme_lens.core.config import Config
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.translations import GetTranslationsFactory

FindRoot = Callable[[str], Awaitable[str]]
LoadConfig = Callable[[str], Awaitable[Config]]


@dataclass
class ServerDependencies:
    """Everything the language server needs from its host."""

    find_root: FindRoot
    load_config: LoadConfig
    get_default_translations_factory: GetTranslationsFactory
    theme_docset: ThemeDocset
    get_default_locale_factory: Callable[[str], Callable[[], Awaitable[str]]] | None = None
    file_exists: Callable[[str], Awaitable[bool]] | None = None
    file_size: Callable[[str], Awaitable[int | None]] | None = None
