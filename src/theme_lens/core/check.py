"""Runs the enabled checks of a ``Config`` over a theme."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatch

from pydantic import BaseModel

from theme_lens.core.config import Config, ResolvedCheckSettings
from theme_lens.core.paths import relative_to
from theme_lens.core.ports.check import CheckDefinition, CheckMeta
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.source import SourceUnit
from theme_lens.core.translations import Translations
from theme_lens.models import Offense, Severity

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


@dataclass
class CheckDependencies:
    """Capabilities injected into every check. Any of them may be missing."""

    file_exists: Callable[[str], Awaitable[bool]] | None = None
    file_size: Callable[[str], Awaitable[int | None]] | None = None
    theme_docset: ThemeDocset | None = None
    get_default_translations: Callable[[], Awaitable[Translations]] | None = None
    get_default_locale: Callable[[], Awaitable[str]] | None = None


@dataclass
class CheckContext:
    unit: SourceUnit
    meta: CheckMeta
    root: str
    dependencies: CheckDependencies = field(default_factory=CheckDependencies)
    settings: ResolvedCheckSettings | None = None

    @property
    def options(self) -> BaseModel:
        if self.settings is not None:
            return self.settings.options
        return self.meta.options_schema()

    @property
    def severity(self) -> Severity:
        if self.settings is not None and self.settings.severity is not None:
            return self.settings.severity
        return self.meta.severity

    def offense(self, message: str, start_index: int, end_index: int) -> Offense:
        return Offense(
            check=self.meta.code,
            message=message,
            location=self.unit.location,
            kind=self.unit.kind,
            severity=self.severity,
            start_index=start_index,
            end_index=end_index,
            start=self.unit.position_at(start_index),
            end=self.unit.position_at(end_index),
        )

    async def file_exists(self, location: str) -> bool | None:
        if self.dependencies.file_exists is None:
            return None
        try:
            return await self.dependencies.file_exists(location)
        except OSError:
            logger.debug("file_exists probe failed for %s", location, exc_info=True)
            return None

    async def file_size(self, location: str) -> int | None:
        if self.dependencies.file_size is None:
            return None
        try:
            return await self.dependencies.file_size(location)
        except OSError:
            logger.debug("file_size probe failed for %s", location, exc_info=True)
            return None

    async def default_translations(self) -> Translations:
        if self.dependencies.get_default_translations is None:
            return {}
        return await self.dependencies.get_default_translations()

    async def default_locale(self) -> str:
        if self.dependencies.get_default_locale is None:
            return DEFAULT_LOCALE
        return await self.dependencies.get_default_locale()


def is_ignored(location: str, root: str, patterns: Sequence[str]) -> bool:
    relative = relative_to(location, root)
    return any(fnmatch(relative, pattern) or fnmatch(location, pattern) for pattern in patterns)


async def check(theme: Sequence[SourceUnit], config: Config, dependencies: CheckDependencies) -> list[Offense]:
    """Run every enabled check on every applicable unit of ``theme``."""
    visits: list[Awaitable[list[Offense]]] = []
    for definition in config.checks:
        meta = definition.meta
        settings = config.settings.get(meta.code)
        patterns = [*config.ignore, *(settings.ignore if settings else [])]
        for unit in theme:
            if unit.kind not in meta.source_kinds:
                continue
            if unit.parse_error is not None and not meta.accepts_parse_errors:
                continue
            if is_ignored(unit.location, config.root, patterns):
                continue
            context = CheckContext(
                unit=unit,
                meta=meta,
                root=config.root,
                dependencies=dependencies,
                settings=settings,
            )
            visits.append(_visit(definition, context))

    results = await asyncio.gather(*visits)
    return [offense for offenses in results for offense in offenses]


async def _visit(definition: CheckDefinition, context: CheckContext) -> list[Offense]:
    try:
        return await definition.visit(context.unit.ast, context)
    except Exception:
        logger.exception("Check %s failed on %s", definition.meta.code, context.unit.location)
        return []
