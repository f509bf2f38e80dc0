"""Language-server facade: edit lifecycle, project events and queries.

The wire transport is left to the host; every handler here is a plain
coroutine or method taking locations and positions.
"""

import dataclasses
import logging
from collections.abc import Iterable

from theme_lens.commands import ExecuteCommandProvider
from theme_lens.completions.provider import CompletionsProvider
from theme_lens.core.docset import AugmentedDocset
from theme_lens.core.ports.filesystem import FileSystem
from theme_lens.core.translations import Translations, use_buffer_or_injected_translations
from theme_lens.dependencies import ServerDependencies
from theme_lens.diagnostics.manager import DiagnosticsManager, PublishCallback
from theme_lens.diagnostics.run_checks import make_run_checks
from theme_lens.diagnostics.scheduler import DEFAULT_DELAY, CheckScheduler
from theme_lens.documents.manager import DocumentManager
from theme_lens.hover.provider import HoverProvider
from theme_lens.models import CompletionItem, Hover, Offense, Position

logger = logging.getLogger(__name__)


class ThemeLanguageServer:
    def __init__(
        self,
        dependencies: ServerDependencies,
        fs: FileSystem | None = None,
        on_publish: PublishCallback | None = None,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        docset = AugmentedDocset(dependencies.theme_docset)
        self.dependencies = dependencies = dataclasses.replace(dependencies, theme_docset=docset)
        self.documents = DocumentManager(fs)
        self.diagnostics_manager = DiagnosticsManager(on_publish)
        self.scheduler = CheckScheduler(make_run_checks(self.documents, self.diagnostics_manager, dependencies), delay)
        self.completions_provider = CompletionsProvider(self.documents, docset)
        self.hover_provider = HoverProvider(self.documents, docset, self._translations_for_location)
        self.command_provider = ExecuteCommandProvider(self.documents, self.scheduler, dependencies.find_root)

    # -- edit lifecycle --

    def open(self, location: str, source: str, version: int) -> None:
        if self.documents.open(location, source, version) is not None:
            self.scheduler.schedule([location])

    def change(self, location: str, source: str, version: int) -> None:
        if self.documents.change(location, source, version) is not None:
            self.scheduler.schedule([location])

    def close(self, location: str) -> None:
        self.documents.close(location)
        self.diagnostics_manager.clear(location)

    # -- project events; structural changes skip the debounce window --

    def did_create_files(self, locations: Iterable[str]) -> None:
        self.scheduler.force(locations)

    def did_rename_files(self, renames: Iterable[tuple[str, str]]) -> None:
        self.scheduler.force(new for _, new in renames)

    def did_delete_files(self, locations: Iterable[str]) -> None:
        self.scheduler.force(locations)

    # -- queries --

    async def completions(self, location: str, position: Position) -> list[CompletionItem]:
        return await self.completions_provider.completions(location, position)

    async def hover(self, location: str, position: Position) -> Hover | None:
        return await self.hover_provider.hover(location, position)

    def diagnostics(self, location: str) -> list[Offense]:
        return self.diagnostics_manager.get(location)

    async def execute_command(self, name: str) -> bool:
        return await self.command_provider.execute(name)

    async def shutdown(self) -> None:
        await self.scheduler.close()
        logger.info("Language server shut down")

    async def _translations_for_location(self, location: str) -> Translations:
        root = await self.dependencies.find_root(location)
        theme = self.documents.theme(root)
        return await use_buffer_or_injected_translations(
            self.dependencies.get_default_translations_factory, theme, root
        )
