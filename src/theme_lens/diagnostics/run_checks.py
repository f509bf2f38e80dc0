import logging
from collections import defaultdict

from theme_lens.core.check import CheckDependencies, check
from theme_lens.core.source import SourceUnit
from theme_lens.core.translations import Translations, use_buffer_or_injected_translations
from theme_lens.dependencies import ServerDependencies
from theme_lens.diagnostics.manager import DiagnosticsManager
from theme_lens.diagnostics.scheduler import RunChecks
from theme_lens.documents.manager import DocumentManager
from theme_lens.models import Offense

logger = logging.getLogger(__name__)


def make_run_checks(
    documents: DocumentManager,
    diagnostics: DiagnosticsManager,
    dependencies: ServerDependencies,
) -> RunChecks:
    """Build the callable a ``CheckScheduler`` runs."""

    async def run_checks(trigger_locations: list[str], full: bool = False) -> None:
        pass_id = diagnostics.begin_pass()
        roots: list[str] = []
        for location in trigger_locations:
            root = await dependencies.find_root(location)
            if root not in roots:
                roots.append(root)
        for root in roots:
            await run_checks_for_root(root, pass_id, full)

    async def run_checks_for_root(root: str, pass_id: int, full: bool) -> None:
        config = await dependencies.load_config(root)
        theme = documents.theme(config.root, include_backfilled=full)

        async def get_default_translations() -> Translations:
            return await use_buffer_or_injected_translations(
                dependencies.get_default_translations_factory, theme, root
            )

        check_dependencies = CheckDependencies(
            file_exists=dependencies.file_exists,
            file_size=dependencies.file_size,
            theme_docset=dependencies.theme_docset,
            get_default_translations=get_default_translations,
            get_default_locale=(
                dependencies.get_default_locale_factory(root) if dependencies.get_default_locale_factory else None
            ),
        )
        offenses = await check(theme, config, check_dependencies)
        logger.info("Pass %d: %d offense(s) in %d file(s) under %s", pass_id, len(offenses), len(theme), root)
        publish(theme, offenses, pass_id)

    def publish(theme: list[SourceUnit], offenses: list[Offense], pass_id: int) -> None:
        by_location: dict[str, list[Offense]] = defaultdict(list)
        for offense in offenses:
            by_location[offense.location].append(offense)
        # Units without offenses still get an empty set to clear old results.
        for unit in theme:
            diagnostics.set(unit.location, pass_id, by_location.get(unit.location, []))

    return run_checks
