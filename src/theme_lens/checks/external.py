"""Checks that live outside this package.

A third-party module exposes a ``checks`` list of objects implementing the
``CheckDefinition`` protocol; plain async functions can be wrapped with
``check_from_function``.
"""

import importlib
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from theme_lens.core.check import CheckContext
from theme_lens.core.errors import ConfigurationError
from theme_lens.core.ports.check import CheckDefinition, CheckMeta
from theme_lens.models import Offense

logger = logging.getLogger(__name__)

VisitFunction = Callable[[Any, CheckContext], Awaitable[list[Offense]]]


class FunctionCheck:
    def __init__(self, meta: CheckMeta, visit: VisitFunction) -> None:
        self.meta = meta
        self._visit = visit

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        return list(await self._visit(node, context))


def check_from_function(meta: CheckMeta, visit: VisitFunction) -> FunctionCheck:
    return FunctionCheck(meta, visit)


def load_third_party_checks(modules: Iterable[str]) -> list[CheckDefinition]:
    checks: list[CheckDefinition] = []
    for name in modules:
        try:
            module = importlib.import_module(name)
        except ImportError as e:
            raise ConfigurationError(f"Could not load checks from '{name}': {e}") from e
        exported = getattr(module, "checks", None)
        if not isinstance(exported, (list, tuple)):
            raise ConfigurationError(f"Module '{name}' does not export a 'checks' list")
        for check in exported:
            if not isinstance(getattr(check, "meta", None), CheckMeta) or not callable(getattr(check, "visit", None)):
                raise ConfigurationError(f"Module '{name}' exports an invalid check: {check!r}")
        logger.info("Loaded %d check(s) from %s", len(exported), name)
        checks.extend(exported)
    return checks
