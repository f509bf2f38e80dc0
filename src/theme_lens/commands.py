import logging

from theme_lens.dependencies import FindRoot
from theme_lens.diagnostics.scheduler import CheckScheduler
from theme_lens.documents.manager import DocumentManager

logger = logging.getLogger(__name__)

RUN_CHECKS = "themeLens/runChecks"
COMMANDS = (RUN_CHECKS,)


class ExecuteCommandProvider:
    def __init__(self, documents: DocumentManager, scheduler: CheckScheduler, find_root: FindRoot) -> None:
        self._documents = documents
        self._scheduler = scheduler
        self._find_root = find_root

    async def execute(self, name: str) -> bool:
        if name == RUN_CHECKS:
            await self._run_checks()
            return True
        logger.warning("Unknown command %s", name)
        return False

    async def _run_checks(self) -> None:
        """Backfill every root with an open document, then check it all."""
        locations = [unit.location for unit in self._documents.open_documents]
        roots: list[str] = []
        for location in locations:
            root = await self._find_root(location)
            if root not in roots:
                roots.append(root)
        for root in roots:
            await self._documents.ensure_full(root)
        task = self._scheduler.force(locations, full=True)
        if task is not None:
            await task
