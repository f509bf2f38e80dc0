from functools import partial

import pytest

from theme_lens.checks import ALL_CHECKS
from theme_lens.commands import RUN_CHECKS
from theme_lens.core.config import CheckSettings, Config, ConfigDescription, resolve_config
from theme_lens.core.docset import StaticDocset
from theme_lens.core.translations import GetTranslations, Translations
from theme_lens.dependencies import ServerDependencies
from theme_lens.fs import InMemoryFileSystem, file_exists, file_size
from theme_lens.models import Offense, Position
from theme_lens.server import ThemeLanguageServer

ROOT = "/theme"
BROKEN_JSON = '{\n  "key1": "value1",\n  "key2": "value2",,\n}'


def make_server(docset: StaticDocset, fs: InMemoryFileSystem) -> tuple[ThemeLanguageServer, list[tuple[str, list[Offense]]]]:
    published: list[tuple[str, list[Offense]]] = []

    async def find_root(location: str) -> str:
        return ROOT

    async def load_config(root: str) -> Config:
        description = ConfigDescription(check_settings={c.meta.code: CheckSettings() for c in ALL_CHECKS})
        return resolve_config(description, root, ALL_CHECKS)

    def translations_factory(root: str) -> GetTranslations:
        async def get_translations() -> Translations:
            return {"general": {"greeting": "Hello from disk"}}

        return get_translations

    dependencies = ServerDependencies(
        find_root=find_root,
        load_config=load_config,
        get_default_translations_factory=translations_factory,
        theme_docset=docset,
        file_exists=partial(file_exists, fs),
        file_size=partial(file_size, fs),
    )
    server = ThemeLanguageServer(
        dependencies,
        fs=fs,
        on_publish=lambda location, offenses: published.append((location, offenses)),
        delay=0.01,
    )
    return server, published


class TestDiagnostics:
    @pytest.mark.asyncio
    async def test_open_runs_checks_after_debounce(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/templates/index.json", BROKEN_JSON, 1)

        assert server.diagnostics("/theme/templates/index.json") == []
        await server.scheduler.wait_idle()

        assert [o.message for o in server.diagnostics("/theme/templates/index.json")] == ["Unexpected token <,>"]

    @pytest.mark.asyncio
    async def test_change_replaces_diagnostics(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/templates/index.json", BROKEN_JSON, 1)
        await server.scheduler.wait_idle()

        server.change("/theme/templates/index.json", "{}", 2)
        await server.scheduler.wait_idle()

        assert server.diagnostics("/theme/templates/index.json") == []

    @pytest.mark.asyncio
    async def test_close_clears_diagnostics(self, docset, in_memory_fs) -> None:
        server, published = make_server(docset, in_memory_fs)
        server.open("/theme/templates/index.json", BROKEN_JSON, 1)
        await server.scheduler.wait_idle()
        assert server.diagnostics("/theme/templates/index.json")

        server.close("/theme/templates/index.json")

        assert server.diagnostics("/theme/templates/index.json") == []
        assert published[-1] == ("/theme/templates/index.json", [])

    @pytest.mark.asyncio
    async def test_close_before_debounce_fires(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/templates/index.json", BROKEN_JSON, 1)
        server.close("/theme/templates/index.json")
        await server.scheduler.wait_idle()

        assert server.diagnostics("/theme/templates/index.json") == []

    @pytest.mark.asyncio
    async def test_unsupported_files_are_ignored(self, docset, in_memory_fs) -> None:
        server, published = make_server(docset, in_memory_fs)
        server.open("/theme/assets/theme.css", "body {", 1)
        await server.scheduler.wait_idle()
        assert published == []

    @pytest.mark.asyncio
    async def test_translations_from_open_buffer_win(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/locales/en.default.json", '{"general": {"bye": "Bye"}}', 1)
        server.open("/theme/snippets/a.liquid", "{{ 'general.bye' | t }}{{ 'general.greeting' | t }}", 1)
        await server.scheduler.wait_idle()

        offenses = server.diagnostics("/theme/snippets/a.liquid")
        assert [o.message for o in offenses if o.check == "TranslationKeyExists"] == [
            "'general.greeting' does not have a matching entry in 'locales/en.default.json'"
        ]


class TestFileEvents:
    @pytest.mark.asyncio
    async def test_created_files_are_checked_without_debounce(self, docset, in_memory_fs) -> None:
        server, published = make_server(docset, in_memory_fs)
        server.scheduler._delay = 60
        server.open("/theme/blocks/app.liquid", '{% schema %}{"stylesheet": "app.css"}{% endschema %}', 1)
        in_memory_fs.write("/theme/assets/app.css", "body {}")

        server.did_create_files(["/theme/assets/app.css"])
        await server.scheduler.wait_idle()

        assert published == [("/theme/blocks/app.liquid", [])]

    @pytest.mark.asyncio
    async def test_deleted_asset_is_reported(self, docset, in_memory_fs) -> None:
        in_memory_fs.write("/theme/assets/app.css", "body {}")
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/blocks/app.liquid", '{% schema %}{"stylesheet": "app.css"}{% endschema %}', 1)
        await server.scheduler.wait_idle()
        assert server.diagnostics("/theme/blocks/app.liquid") == []

        in_memory_fs.remove("/theme/assets/app.css")
        server.did_delete_files(["/theme/assets/app.css"])
        await server.scheduler.wait_idle()

        assert [o.message for o in server.diagnostics("/theme/blocks/app.liquid")] == ["'app.css' does not exist."]

    @pytest.mark.asyncio
    async def test_renamed_files(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/blocks/app.liquid", '{% schema %}{"stylesheet": "new.css"}{% endschema %}', 1)
        await server.scheduler.wait_idle()
        assert server.diagnostics("/theme/blocks/app.liquid")

        in_memory_fs.write("/theme/assets/new.css", "body {}")
        server.did_rename_files([("/theme/assets/old.css", "/theme/assets/new.css")])
        await server.scheduler.wait_idle()

        assert server.diagnostics("/theme/blocks/app.liquid") == []


class TestRunChecksCommand:
    @pytest.mark.asyncio
    async def test_backfills_and_checks_the_whole_theme(self, docset, in_memory_fs) -> None:
        in_memory_fs.write("/theme/templates/index.json", BROKEN_JSON)
        in_memory_fs.write("/theme/snippets/b.liquid", "{% if x %}")
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/snippets/a.liquid", "{{ 'x' | upcase }}", 1)

        assert await server.execute_command(RUN_CHECKS) is True

        assert server.diagnostics("/theme/templates/index.json")
        assert [o.check for o in server.diagnostics("/theme/snippets/b.liquid")] == ["LiquidHTMLSyntaxError"]
        assert server.diagnostics("/theme/snippets/a.liquid") == []

    @pytest.mark.asyncio
    async def test_unknown_command(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        assert await server.execute_command("themeLens/nope") is False


class TestQueries:
    @pytest.mark.asyncio
    async def test_completions_and_hover(self, docset, in_memory_fs) -> None:
        server, _ = make_server(docset, in_memory_fs)
        server.open("/theme/snippets/a.liquid", "{{ 'general.greeting' | t }}{{ prod", 1)

        items = await server.completions("/theme/snippets/a.liquid", Position(row=0, column=35))
        assert [item.label for item in items] == ["product"]

        hover = await server.hover("/theme/snippets/a.liquid", Position(row=0, column=5))
        assert hover is not None
        assert hover.contents == "Hello from disk"

        await server.shutdown()
