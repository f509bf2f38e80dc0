"""Wiring for a theme on the local disk."""

import asyncio
import re
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path

from theme_lens.config.loader import find_root, load_config
from theme_lens.core.check import DEFAULT_LOCALE, CheckDependencies, check, is_ignored
from theme_lens.core.config import Config
from theme_lens.core.paths import normalize_location
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.source import SourceUnit
from theme_lens.core.translations import (
    GetTranslations,
    Translations,
    parse_translations,
    use_buffer_or_injected_translations,
)
from theme_lens.dependencies import ServerDependencies
from theme_lens.documents.manager import DocumentManager
from theme_lens.fs import LocalFileSystem, file_exists, file_size
from theme_lens.models import Offense

_LOCALE_RE = re.compile(r"([^/]+)\.default\.json$")


def _default_locale_file(root: str) -> Path | None:
    candidates = sorted((Path(normalize_location(root)) / "locales").glob("*.default.json"))
    return candidates[0] if candidates else None


def default_translations_factory(root: str) -> GetTranslations:
    async def get_default_translations() -> Translations:
        path = await asyncio.to_thread(_default_locale_file, root)
        if path is None:
            return {}
        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return parse_translations(source) or {}

    return get_default_translations


def default_locale_factory(root: str) -> Callable[[], Awaitable[str]]:
    async def get_default_locale() -> str:
        path = await asyncio.to_thread(_default_locale_file, root)
        match = _LOCALE_RE.search(path.as_posix()) if path is not None else None
        return match.group(1) if match else DEFAULT_LOCALE

    return get_default_locale


def local_server_dependencies(docset: ThemeDocset) -> ServerDependencies:
    fs = LocalFileSystem()

    async def find_root_async(location: str) -> str:
        return await asyncio.to_thread(find_root, location)

    async def load_config_async(root: str) -> Config:
        return await asyncio.to_thread(load_config, root)

    return ServerDependencies(
        find_root=find_root_async,
        load_config=load_config_async,
        get_default_translations_factory=default_translations_factory,
        get_default_locale_factory=default_locale_factory,
        theme_docset=docset,
        file_exists=partial(file_exists, fs),
        file_size=partial(file_size, fs),
    )


async def check_theme(
    root: str,
    docset: ThemeDocset,
    config_path: str | None = None,
) -> tuple[list[SourceUnit], list[Offense]]:
    """Check every file of the theme at ``root``."""
    config = await asyncio.to_thread(load_config, root, config_path)
    fs = LocalFileSystem()
    documents = DocumentManager(fs)
    await documents.ensure_full(config.root)
    theme = [
        unit
        for unit in documents.theme(config.root, include_backfilled=True)
        if not is_ignored(unit.location, config.root, config.ignore)
    ]

    async def get_default_translations() -> Translations:
        return await use_buffer_or_injected_translations(default_translations_factory, theme, config.root)

    dependencies = CheckDependencies(
        file_exists=partial(file_exists, fs),
        file_size=partial(file_size, fs),
        theme_docset=docset,
        get_default_translations=get_default_translations,
        get_default_locale=default_locale_factory(config.root),
    )
    return theme, await check(theme, config, dependencies)
