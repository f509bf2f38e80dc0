"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from theme_lens.core.docset import DocsetData, StaticDocset
from theme_lens.core.source import SourceUnit, to_source_unit
from theme_lens.fs import InMemoryFileSystem
from theme_lens.models import FilterEntry, ObjectEntry, TagEntry

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Reference catalog used across completion, hover and inference tests
# ---------------------------------------------------------------------------

FILTERS: list[FilterEntry] = [
    FilterEntry.model_validate(entry)
    for entry in [
        {"name": "upcase", "syntax": "string | upcase", "return_type": [{"type": "string", "name": ""}]},
        {"name": "downcase", "syntax": "string | downcase", "return_type": [{"type": "string", "name": ""}]},
        {
            "name": "split",
            "syntax": "string | split: string",
            "return_type": [{"type": "array", "array_value": "string"}],
        },
        {"name": "first", "syntax": "array | first", "return_type": [{"type": "untyped", "name": ""}]},
        {
            "name": "map",
            "syntax": "array | map: string",
            "return_type": [{"type": "array", "array_value": "string"}],
        },
        {
            "name": "where",
            "syntax": "array | where: string, string",
            "return_type": [{"type": "array", "array_value": "string"}],
        },
        {
            "name": "metafield_tag",
            "syntax": "metafield | metafield_tag",
            "return_type": [{"type": "string", "name": ""}],
        },
        {
            "name": "default",
            "syntax": "variable | default: variable",
            "return_type": [{"type": "untyped", "name": ""}],
            "parameters": [
                {
                    "description": "Whether to use false values instead of the default.",
                    "name": "allow_false",
                    "positional": True,
                    "required": False,
                    "types": ["boolean"],
                }
            ],
        },
        {
            "name": "highlight",
            "syntax": "string | highlight: string",
            "parameters": [
                {
                    "description": "The string that you want to highlight.",
                    "name": "highlighted_term",
                    "positional": True,
                    "required": True,
                    "types": ["string"],
                }
            ],
        },
        {
            "name": "preload_tag",
            "syntax": "string | preload_tag: as: string",
            "parameters": [
                {
                    "description": "The type of element or resource to preload.",
                    "name": "as",
                    "positional": False,
                    "required": True,
                    "types": ["string"],
                }
            ],
        },
        {"name": "missing_syntax"},
    ]
]

OBJECTS: list[ObjectEntry] = [
    ObjectEntry.model_validate(entry)
    for entry in [
        {"name": "string", "return_type": [{"type": "string", "name": ""}]},
        {"name": "number", "return_type": [{"type": "number", "name": ""}]},
        {"name": "array", "return_type": [{"type": "array", "array_value": "string"}]},
        {"name": "metafield", "return_type": []},
        {
            "name": "product",
            "description": "A product in the store.",
            "return_type": [],
            "properties": [
                {"name": "title", "return_type": [{"type": "string", "name": ""}]},
                {"name": "images", "return_type": [{"type": "array", "array_value": "image"}]},
                {"name": "featured_image", "return_type": [{"type": "image", "name": ""}]},
            ],
        },
        {
            "name": "image",
            "description": "An image.",
            "return_type": [],
            "properties": [
                {"name": "src", "return_type": [{"type": "string", "name": ""}]},
                {"name": "width", "return_type": [{"type": "number", "name": ""}]},
            ],
        },
        {"name": "all_products", "return_type": [{"type": "array", "array_value": "product"}]},
    ]
]

TAGS: list[TagEntry] = [
    TagEntry(name="assign", description="Creates a new variable."),
    TagEntry(name="echo", description="Outputs an expression."),
    TagEntry(name="for", description="Renders an expression for every item in an array."),
    TagEntry(name="form", description="Generates an HTML form tag."),
    TagEntry(name="if", description="Renders an expression if a condition is true."),
]


def filter_names_of_input_type(input_type: str) -> list[str]:
    return sorted(f.name for f in FILTERS if f.syntax and f.syntax.startswith(input_type))


ANY_FILTERS = filter_names_of_input_type("variable") + [f.name for f in FILTERS if not f.syntax]
STRING_FILTERS = filter_names_of_input_type("string")
ARRAY_FILTERS = filter_names_of_input_type("array")
METAFIELD_FILTERS = filter_names_of_input_type("metafield")
ALL_FILTERS = sorted(f.name for f in FILTERS)


@pytest.fixture
def docset() -> StaticDocset:
    return StaticDocset(
        DocsetData(
            filters=FILTERS,
            objects=OBJECTS,
            tags=TAGS,
            translations={"shopify.checkout.general.cart": "Cart"},
        )
    )


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    return InMemoryFileSystem()


def make_unit(location: str, source: str, version: int | None = None) -> SourceUnit:
    return to_source_unit(location, source, version)
