"""Turns a raw config description into a resolved ``Config``.

Rules can be renamed; their old codes stay valid as aliases. Raw settings are
always rewritten to the canonical code before anything looks them up.
"""

import logging
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from theme_lens.core.errors import ConfigurationError
from theme_lens.core.paths import normalize_location
from theme_lens.core.ports.check import CheckDefinition
from theme_lens.models import Severity

logger = logging.getLogger(__name__)


class CheckSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    enabled: bool = True
    severity: Severity | None = None
    ignore: list[str] = Field(default_factory=list)

    @field_validator("severity", mode="before")
    @classmethod
    def _severity_by_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return Severity[value.upper()]
            except KeyError:
                raise ValueError(f"unknown severity '{value}'") from None
        return value

    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ConfigDescription(BaseModel):
    root: str | None = None
    ignore: list[str] = Field(default_factory=list)
    require: list[str] = Field(default_factory=list)
    check_settings: dict[str, CheckSettings] = Field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedCheckSettings:
    enabled: bool
    severity: Severity | None
    ignore: list[str]
    options: BaseModel


@dataclass
class Config:
    root: str
    checks: list[CheckDefinition]
    settings: dict[str, ResolvedCheckSettings] = field(default_factory=dict)
    ignore: list[str] = field(default_factory=list)


class CheckRegistry:
    """Lookup table from any code a check answers to, to its canonical code."""

    def __init__(self, checks: Iterable[CheckDefinition]) -> None:
        self._checks: dict[str, CheckDefinition] = {}
        self._canonical: dict[str, str] = {}
        for check in checks:
            code = check.meta.code
            if code in self._checks:
                raise ConfigurationError(f"Duplicate check code '{code}'")
            self._checks[code] = check
            self._canonical[code] = code
        for check in self._checks.values():
            for alias in check.meta.aliases:
                self._canonical.setdefault(alias, check.meta.code)

    @property
    def checks(self) -> list[CheckDefinition]:
        return list(self._checks.values())

    def canonical_code(self, code: str) -> str | None:
        return self._canonical.get(code)

    def get(self, code: str) -> CheckDefinition | None:
        canonical = self.canonical_code(code)
        return self._checks.get(canonical) if canonical else None

    def unaliased_settings(self, raw: dict[str, CheckSettings], warn_unknown: bool = True) -> dict[str, CheckSettings]:
        """Rewrite raw settings keys to canonical codes.

        When several keys name the same check, the canonical code wins, then
        aliases in the order the check declares them. Unknown codes are dropped.
        """
        settings: dict[str, CheckSettings] = {}
        for code, check in self._checks.items():
            for key in (code, *check.meta.aliases):
                if key in raw:
                    settings[code] = raw[key]
                    break
        for key in raw:
            if warn_unknown and self.canonical_code(key) is None:
                logger.warning("Ignoring settings for unknown check '%s'", key)
        return settings


def resolve_config(
    description: ConfigDescription,
    root: str,
    checks: Sequence[CheckDefinition],
) -> Config:
    """Validate settings against each check's schema and keep the enabled checks."""
    registry = CheckRegistry(checks)
    raw_settings = registry.unaliased_settings(description.check_settings)

    settings: dict[str, ResolvedCheckSettings] = {}
    enabled: list[CheckDefinition] = []
    for check in registry.checks:
        code = check.meta.code
        check_settings = raw_settings.get(code)
        if check_settings is None:
            continue
        try:
            options = check.meta.options_schema.model_validate(check_settings.options())
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings for check '{code}': {e}") from e
        settings[code] = ResolvedCheckSettings(
            enabled=check_settings.enabled,
            severity=check_settings.severity,
            ignore=list(check_settings.ignore),
            options=options,
        )
        if check_settings.enabled:
            enabled.append(check)

    return Config(
        root=resolve_root(root, description.root),
        checks=enabled,
        settings=settings,
        ignore=list(description.ignore),
    )


def resolve_root(root: str, path_like: str | None) -> str:
    """Resolve the config's ``root`` property against the config directory."""
    root = normalize_location(root)
    if path_like is None:
        return root
    if posixpath.isabs(path_like.replace("\\", "/")) or (len(path_like) > 1 and path_like[1] == ":"):
        raise ConfigurationError('the "root" property can only be relative')
    return normalize_location(posixpath.join(root, path_like))
