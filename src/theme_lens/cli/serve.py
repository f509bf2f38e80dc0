import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from theme_lens.cli.common import load_docset

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    docs: Annotated[Path | None, typer.Option(help="JSON file with filter, object and tag docs.")] = None,
    watch: Annotated[Path | None, typer.Option(help="Theme directory to watch for created and deleted files.")] = None,
) -> None:
    """Start the MCP server."""
    from theme_lens.fs import LocalFileSystem
    from theme_lens.local import local_server_dependencies
    from theme_lens.mcp.server import create_mcp_server
    from theme_lens.server import ThemeLanguageServer
    from theme_lens.watcher.watchfiles_adapter import WatchfilesWatcher, forward_to_server

    docset = load_docset(docs)
    fs = LocalFileSystem()
    language_server = ThemeLanguageServer(local_server_dependencies(docset), fs=fs)
    server = create_mcp_server(language_server, docset, fs)
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")

    if watch is None:
        server.run(transport=transport)  # type: ignore[arg-type]
        return

    async def _run() -> None:
        watcher = WatchfilesWatcher(watch, forward_to_server(language_server))
        await watcher.start()
        try:
            await server.run_async(transport=transport)  # type: ignore[arg-type]
        finally:
            await watcher.stop()
            await language_server.shutdown()

    asyncio.run(_run())
