""".theme-check.yml discovery and loading.

A config file looks like::

    root: ./dist
    extends: theme-check:recommended
    ignore:
      - node_modules/*
    require:
      - my_company.theme_checks
    AssetSizeAppBlockCSS:
      enabled: true
      threshold_in_bytes: 50000
"""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from theme_lens.checks import ALL_CHECKS
from theme_lens.checks.external import load_third_party_checks
from theme_lens.core.config import CheckRegistry, CheckSettings, Config, ConfigDescription, resolve_config
from theme_lens.core.errors import ConfigurationError
from theme_lens.core.paths import normalize_location
from theme_lens.core.ports.check import CheckDefinition

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".theme-check.yml"
RECOMMENDED = "theme-check:recommended"
ALL = "theme-check:all"
NOTHING = "theme-check:nothing"

_ROOT_MARKERS = (".git", "shopify.extension.toml")
_THEME_DIRECTORIES = ("layout", "locales", "sections", "snippets", "templates")


class ConfigFile(BaseModel):
    """Raw contents of a config file; unknown top-level keys are check settings."""

    model_config = ConfigDict(extra="allow")

    root: str | None = None
    extends: str | list[str] | None = RECOMMENDED
    ignore: list[str] = Field(default_factory=list)
    require: list[str] = Field(default_factory=list)

    def check_settings(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


def find_root(location: str) -> str:
    """Find the theme root of ``location``.

    The nearest directory with a config file wins. Failing that, the nearest
    one that is a repository or extension root, or that looks like a theme.
    """
    start = Path(normalize_location(location))
    directory = start if start.is_dir() else start.parent
    candidates = [directory, *directory.parents]
    for candidate in candidates:
        if (candidate / CONFIG_FILE_NAME).is_file():
            return candidate.as_posix()
    for candidate in candidates:
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate.as_posix()
        if any((candidate / name).is_dir() for name in _THEME_DIRECTORIES):
            return candidate.as_posix()
    return directory.as_posix()


def find_config_path(root: str) -> Path | None:
    directory = Path(normalize_location(root))
    for candidate in [directory, *directory.parents]:
        path = candidate / CONFIG_FILE_NAME
        if path.is_file():
            return path
    return None


def read_config_file(path: Path) -> ConfigFile:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    try:
        return ConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {path}: {e}") from e


def load_config_description(
    path: Path | None,
    checks: Sequence[CheckDefinition],
    warn_unknown: bool = True,
    _seen: frozenset[Path] = frozenset(),
) -> ConfigDescription:
    """Read ``path`` and everything it extends into one ``ConfigDescription``."""
    config_file = read_config_file(path) if path is not None else ConfigFile()
    registry = CheckRegistry(checks)

    settings: dict[str, CheckSettings] = {}
    require: list[str] = []
    ignore: list[str] = []
    for base in _as_list(config_file.extends):
        if base in (RECOMMENDED, ALL):
            for check in ALL_CHECKS:
                if registry.get(check.meta.code) is not None:
                    settings[check.meta.code] = CheckSettings(enabled=True)
        elif base == NOTHING:
            settings = {}
        else:
            if path is None:
                raise ConfigurationError(f"Cannot extend '{base}' without a config file")
            base_path = (path.parent / base).resolve()
            if base_path in _seen:
                raise ConfigurationError(f"Circular 'extends' through {base_path}")
            parent = load_config_description(base_path, checks, warn_unknown, _seen | {path.resolve()})
            settings = _merge(settings, parent.check_settings)
            require += parent.require
            ignore += parent.ignore

    try:
        own = {code: CheckSettings.model_validate(value or {}) for code, value in config_file.check_settings().items()}
    except ValidationError as e:
        raise ConfigurationError(f"Invalid check settings in {path}: {e}") from e

    return ConfigDescription(
        root=config_file.root,
        ignore=ignore + config_file.ignore,
        require=require + config_file.require,
        check_settings=_merge(settings, registry.unaliased_settings(own, warn_unknown)),
    )


def load_config(
    root: str,
    config_path: str | Path | None = None,
    checks: Sequence[CheckDefinition] | None = None,
) -> Config:
    """Load the config governing ``root`` and resolve it against the available checks."""
    path = Path(config_path) if config_path is not None else find_config_path(root)
    builtin = list(checks) if checks is not None else list(ALL_CHECKS)

    # Third-party checks must be known before their settings can be read.
    description = load_config_description(path, builtin, warn_unknown=False)
    if description.require:
        builtin += load_third_party_checks(description.require)
    description = load_config_description(path, builtin)

    config_root = path.parent.as_posix() if path is not None else root
    logger.debug("Loaded config %s for %s", path, root)
    return resolve_config(description, config_root, builtin)


def _as_list(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    return [value] if isinstance(value, str) else list(value)


def _merge(base: dict[str, CheckSettings], overrides: dict[str, CheckSettings]) -> dict[str, CheckSettings]:
    merged = dict(base)
    for code, settings in overrides.items():
        if code in merged:
            data = {**merged[code].model_dump(), **settings.model_dump(exclude_unset=True)}
            merged[code] = CheckSettings.model_validate(data)
        else:
            merged[code] = settings
    return merged
