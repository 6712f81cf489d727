"""
Bookmark CLI commands
"""
import typer
from pathlib import Path
from typing import Optional

from rich.table import Table

from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import BookmarkValidationError, PersistenceError
from ...core.logging import get_stdout_console, get_stderr_console
from ...domain.bookmarks import Bookmark
from ...infrastructure.state import BookmarkStore, migrate_legacy
from ..config.settings import AppSettings

stdout_console = get_stdout_console()
stderr_console = get_stderr_console()


def register_bookmark_app(app: typer.Typer) -> None:
    """Register bookmark subcommand app"""
    bookmark_app = typer.Typer(
        name="bookmark",
        help="Manage saved connection bookmarks",
        add_completion=False,
        no_args_is_help=True,
    )
    
    bookmark_app.command(name="list")(bookmark_list)
    bookmark_app.command(name="save")(bookmark_save)
    bookmark_app.command(name="delete")(bookmark_delete)
    bookmark_app.command(name="migrate")(bookmark_migrate)
    
    app.add_typer(bookmark_app, name="bookmark")


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()


def _store(ctx: typer.Context) -> BookmarkStore:
    return BookmarkStore(_settings(ctx).bookmarks_path)


def render_bookmarks(bookmarks: list) -> Table:
    """Build a table of bookmarks"""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Address")
    table.add_column("Auth")
    table.add_column("Key")
    for b in bookmarks:
        table.add_row(
            b.name,
            f"{b.username}@{b.host}:{b.port}",
            "key" if b.use_ssh_key else "password",
            b.key_path or "",
        )
    return table


def bookmark_list(ctx: typer.Context):
    """
    List saved bookmarks
    """
    store = _store(ctx)
    bookmarks = store.load()
    if not bookmarks:
        stdout_console.print(f"No bookmarks in {store.path}")
        return
    stdout_console.print(render_bookmarks(bookmarks))


def bookmark_save(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Bookmark name (an existing bookmark with this name is replaced)"),
    host: str = typer.Option(..., "--host", "-H", help="Remote host"),
    user: str = typer.Option(..., "--user", "-u", help="Username"),
    port: str = typer.Option(str(DEFAULT_SSH_PORT), "--port", "-p", help="SSH port"),
    key_file: Optional[str] = typer.Option(
        None, "--key", "-i", help="Private key path (enables key authentication)"
    ),
):
    """
    Save or replace a bookmark
    
    Passwords are never stored; password bookmarks prompt when opened.
    
    Examples:
        kat-ftp bookmark save web --host web.example.com --user deploy
        kat-ftp bookmark save build --host 10.0.0.5 --user ci --key ~/.ssh/id_ed25519
    """
    bookmark = Bookmark(
        name=name,
        host=host,
        username=user,
        port=port,
        use_ssh_key=key_file is not None,
        key_path=key_file,
    )
    if bookmark.key_path and not Path(bookmark.key_path).expanduser().exists():
        stderr_console.print(f"[yellow]Warning:[/yellow] key file {bookmark.key_path} does not exist yet")
    
    try:
        _store(ctx).upsert(bookmark)
    except (BookmarkValidationError, PersistenceError) as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    stdout_console.print(f"[green]✓[/green] Bookmark saved: {name}")


def bookmark_delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Bookmark name"),
):
    """
    Delete a bookmark
    """
    store = _store(ctx)
    if store.get(name) is None:
        stdout_console.print(f"No bookmark named {name}")
        return
    
    try:
        store.delete(name)
    except PersistenceError as e:
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    
    stdout_console.print(f"[green]✓[/green] Bookmark deleted: {name}")


def bookmark_migrate(
    ctx: typer.Context,
    legacy_file: Optional[Path] = typer.Option(
        None, "--from", help="Legacy bookmark file (default: ~/.sftp-client-bookmarks.json)"
    ),
):
    """
    Copy bookmarks from the legacy location (never overwrites, never deletes)
    """
    settings = _settings(ctx)
    source = legacy_file or settings.legacy_bookmarks_path
    if migrate_legacy(source, settings.bookmarks_path):
        stdout_console.print(f"[green]✓[/green] Migrated bookmarks from {source} to {settings.bookmarks_path}")
    else:
        stdout_console.print("Nothing to migrate")
