import re

import pytest
from conftest import ALL_FILTERS, ANY_FILTERS, ARRAY_FILTERS, FILTERS, METAFIELD_FILTERS, STRING_FILTERS

from theme_lens.completions.provider import CompletionsProvider
from theme_lens.completions.providers.filter import filter_insert_text
from theme_lens.core.docset import StaticDocset
from theme_lens.documents.manager import DocumentManager
from theme_lens.models import CompletionItem, CompletionItemKind, FilterEntry, InsertTextFormat, Position

LOCATION = "/theme/snippets/a.liquid"


async def complete(docset: StaticDocset, source: str) -> list[CompletionItem]:
    """Completions with the cursor at the end of ``source``."""
    documents = DocumentManager()
    unit = documents.open(LOCATION, source, 1)
    assert unit is not None
    return await CompletionsProvider(documents, docset).completions(LOCATION, unit.position_at(len(source)))


async def labels(docset: StaticDocset, source: str) -> list[str]:
    return [item.label for item in await complete(docset, source)]


class TestFilterCompletions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("{{ string | ", STRING_FILTERS + ANY_FILTERS),
            ("{{ 'hello' | ", STRING_FILTERS + ANY_FILTERS),
            ("{{ array | ", ARRAY_FILTERS + ANY_FILTERS),
            ("{{ metafield | ", METAFIELD_FILTERS + ANY_FILTERS),
            ("{{ product | ", ALL_FILTERS),
            ("{{ undefined | ", ALL_FILTERS),
            ("{{ metafield | metafield_tag | ", STRING_FILTERS + ANY_FILTERS),
            ("{{ string | split: '' | ", ARRAY_FILTERS + ANY_FILTERS),
            ("{{ array | first | ", STRING_FILTERS + ANY_FILTERS),
            ("{% assign x = string | split: ',' %}{{ x | ", ARRAY_FILTERS + ANY_FILTERS),
            ("{% echo string | ", STRING_FILTERS + ANY_FILTERS),
        ],
    )
    async def test_filters_are_ranked_by_input_type(self, docset, source: str, expected: list[str]) -> None:
        assert await labels(docset, source) == expected

    @pytest.mark.asyncio
    async def test_partial_filter_name(self, docset) -> None:
        assert await labels(docset, "{{ string | up") == ["upcase"]

    @pytest.mark.asyncio
    async def test_required_positional_parameter_snippet(self, docset) -> None:
        [item] = await complete(docset, "{{ string | h")
        assert item.label == "highlight"
        assert item.kind is CompletionItemKind.FUNCTION
        assert item.insert_text == "highlight: '${1:highlighted_term}'"
        assert item.insert_text_format is InsertTextFormat.SNIPPET

    @pytest.mark.asyncio
    async def test_required_named_parameter_snippet(self, docset) -> None:
        [item] = await complete(docset, "{{ string | pre")
        assert item.insert_text == "preload_tag: as: '$1'"
        assert item.insert_text_format is InsertTextFormat.SNIPPET

    @pytest.mark.asyncio
    async def test_optional_parameters_insert_plain_name(self, docset) -> None:
        [item] = await complete(docset, "{{ string | defa")
        assert item.insert_text == "default"
        assert item.insert_text_format is InsertTextFormat.PLAIN_TEXT
        assert item.documentation is not None
        assert item.documentation.startswith("### default")


class TestObjectCompletions:
    @pytest.mark.asyncio
    async def test_objects_by_prefix(self, docset) -> None:
        items = await complete(docset, "{{ prod")
        assert [item.label for item in items] == ["product"]
        assert items[0].kind is CompletionItemKind.VARIABLE
        assert items[0].documentation == "### product\n\nA product in the store."

    @pytest.mark.asyncio
    async def test_variables_come_before_objects(self, docset) -> None:
        source = "{% assign abc = 1 %}{% for apple in array %}{{ a"
        assert await labels(docset, source) == ["abc", "apple", "all_products", "array"]

    @pytest.mark.asyncio
    async def test_assign_after_cursor_is_not_offered(self, docset) -> None:
        documents = DocumentManager()
        documents.open(LOCATION, "{{ ab }}{% assign abc = 1 %}", 1)
        items = await CompletionsProvider(documents, docset).completions(LOCATION, Position(row=0, column=5))
        assert items == []


class TestObjectAttributeCompletions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("{{ product.", ["featured_image", "images", "title"]),
            ("{{ product.ti", ["title"]),
            ("{{ product.images.", ["first", "last", "size"]),
            ("{{ product.images.first.", ["src", "width"]),
            ("{{ product.featured_image.w", ["width"]),
            ("{{ string.", ["size"]),
            ("{% for image in product.images %}{{ image.", ["src", "width"]),
            ("{{ undefined.", []),
        ],
    )
    async def test_properties(self, docset, source: str, expected: list[str]) -> None:
        assert await labels(docset, source) == expected

    @pytest.mark.asyncio
    async def test_property_kind(self, docset) -> None:
        [item] = await complete(docset, "{{ product.ti")
        assert item.kind is CompletionItemKind.PROPERTY


class TestTagCompletions:
    @pytest.mark.asyncio
    async def test_all_tags(self, docset) -> None:
        assert await labels(docset, "{% ") == ["assign", "echo", "for", "form", "if"]

    @pytest.mark.asyncio
    async def test_tags_by_prefix(self, docset) -> None:
        items = await complete(docset, "Hello {%- fo")
        assert [item.label for item in items] == ["for", "form"]
        assert all(item.kind is CompletionItemKind.KEYWORD for item in items)

    @pytest.mark.asyncio
    async def test_no_tags_once_markup_started(self, docset) -> None:
        assert await labels(docset, "{% if ") == []


class TestCompletionsProvider:
    @pytest.mark.asyncio
    async def test_untracked_location(self, docset) -> None:
        provider = CompletionsProvider(DocumentManager(), docset)
        assert await provider.completions(LOCATION, Position(row=0, column=0)) == []

    @pytest.mark.asyncio
    async def test_json_files_have_no_completions(self, docset) -> None:
        documents = DocumentManager()
        documents.open("/theme/templates/index.json", "{}", 1)
        provider = CompletionsProvider(documents, docset)
        assert await provider.completions("/theme/templates/index.json", Position(row=0, column=1)) == []

    @pytest.mark.asyncio
    async def test_multiline_cursor(self, docset) -> None:
        documents = DocumentManager()
        documents.open(LOCATION, "<p>\n  {{ prod }}\n</p>", 1)
        items = await CompletionsProvider(documents, docset).completions(LOCATION, Position(row=1, column=9))
        assert [item.label for item in items] == ["product"]


class TestFilterInsertText:
    @pytest.mark.parametrize("entry", FILTERS, ids=[entry.name for entry in FILTERS])
    def test_placeholders_match_required_parameters(self, entry: FilterEntry) -> None:
        text, text_format = filter_insert_text(entry)
        required = sum(1 for param in entry.parameters if param.required)
        if required == 0:
            assert (text, text_format) == (entry.name, InsertTextFormat.PLAIN_TEXT)
        else:
            assert text_format is InsertTextFormat.SNIPPET
            assert len(re.findall(r"\$\{?\d", text)) == required

    def test_positional_parameters_come_first(self) -> None:
        entry = FilterEntry.model_validate(
            {
                "name": "image_tag",
                "parameters": [
                    {"name": "width", "positional": False, "required": True},
                    {"name": "alt", "positional": True, "required": True},
                ],
            }
        )
        assert filter_insert_text(entry) == ("image_tag: '${1:alt}', width: '$2'", InsertTextFormat.SNIPPET)
