import logging
from collections.abc import Callable, Iterable

from theme_lens.core.paths import normalize_location
from theme_lens.models import Offense

logger = logging.getLogger(__name__)

PublishCallback = Callable[[str, list[Offense]], None]


class DiagnosticsManager:
    """Current diagnostics per location.

    Every check pass gets an increasing id from ``begin_pass``. A location only
    accepts results from a pass newer than the one that last wrote it, so a
    slow pass can never overwrite a faster, newer one.
    """

    def __init__(self, on_publish: PublishCallback | None = None) -> None:
        self._on_publish = on_publish
        self._offenses: dict[str, list[Offense]] = {}
        self._stamps: dict[str, int] = {}
        self._last_pass = 0

    def begin_pass(self) -> int:
        self._last_pass += 1
        return self._last_pass

    def set(self, location: str, pass_id: int, offenses: Iterable[Offense]) -> bool:
        location = normalize_location(location)
        if pass_id <= self._stamps.get(location, 0):
            logger.debug("Dropping stale diagnostics for %s from pass %d", location, pass_id)
            return False
        self._stamps[location] = pass_id
        self._offenses[location] = list(offenses)
        self._publish(location)
        return True

    def clear(self, location: str) -> None:
        location = normalize_location(location)
        self._stamps[location] = self._last_pass
        self._offenses.pop(location, None)
        self._publish(location)

    def get(self, location: str) -> list[Offense]:
        return list(self._offenses.get(normalize_location(location), []))

    @property
    def locations(self) -> list[str]:
        return list(self._offenses)

    def _publish(self, location: str) -> None:
        if self._on_publish is not None:
            self._on_publish(location, self.get(location))
