"""FastMCP server exposing theme-lens tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from theme_lens.checks import ALL_CHECKS
from theme_lens.commands import RUN_CHECKS
from theme_lens.core.ports.docset import ThemeDocset
from theme_lens.core.ports.filesystem import FileSystem
from theme_lens.fs import LocalFileSystem
from theme_lens.local import check_theme
from theme_lens.models import Position
from theme_lens.server import ThemeLanguageServer


def create_mcp_server(
    server: ThemeLanguageServer,
    docset: ThemeDocset,
    fs: FileSystem | None = None,
) -> FastMCP:
    """Create a FastMCP server wired to the given language server."""

    mcp = FastMCP("theme-lens", instructions="Check Liquid themes and query completions and hover docs.")
    fs = fs or LocalFileSystem()
    versions: dict[str, int] = {}

    async def sync_document(path: str, source: str | None) -> None:
        if source is None:
            if server.documents.get(path) is not None:
                return
            source = await fs.read_file(path)
        versions[path] = versions.get(path, 0) + 1
        server.change(path, source, versions[path])

    @mcp.tool()
    async def check(root: str, config_path: str | None = None) -> list[dict[str, Any]]:
        """Run every enabled check over the theme at ``root``."""
        _, offenses = await check_theme(root, docset, config_path)
        return [offense.model_dump(mode="json") for offense in offenses]

    @mcp.tool()
    async def list_checks() -> list[dict[str, Any]]:
        """List the built-in checks."""
        return [
            {"code": c.meta.code, "name": c.meta.name, "aliases": list(c.meta.aliases), "severity": c.meta.severity.name}
            for c in ALL_CHECKS
        ]

    @mcp.tool()
    async def complete(path: str, row: int, column: int, source: str | None = None) -> list[dict[str, Any]]:
        """Completions at a zero-based row/column of a Liquid file."""
        await sync_document(path, source)
        items = await server.completions(path, Position(row=row, column=column))
        return [item.model_dump(mode="json", exclude_none=True) for item in items]

    @mcp.tool()
    async def hover(path: str, row: int, column: int, source: str | None = None) -> str | None:
        """Markdown documentation for the node at a zero-based row/column."""
        await sync_document(path, source)
        result = await server.hover(path, Position(row=row, column=column))
        return result.contents if result else None

    @mcp.tool()
    async def diagnostics(path: str, source: str | None = None) -> list[dict[str, Any]]:
        """Current offenses of a file, once pending checks settle."""
        await sync_document(path, source)
        await server.scheduler.wait_idle()
        return [offense.model_dump(mode="json") for offense in server.diagnostics(path)]

    @mcp.tool()
    async def run_checks() -> str:
        """Backfill the roots of every open file and check them in full."""
        await server.execute_command(RUN_CHECKS)
        return f"Checked {len(server.documents.open_documents)} file(s)"

    return mcp
