"""
CLI entry points for the interactive shell
"""
import shlex

import typer

from ....core.logging import get_logger, get_stderr_console
from ...config.settings import AppSettings
from .context import ShellContext
from .shell import KatShell

logger = get_logger(__name__)
stderr_console = get_stderr_console()


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()


def shell_run(ctx: typer.Context) -> None:
    """
    Start the interactive SFTP shell.
    
    Type 'help' inside the shell for the list of commands.
    
    Examples:
        kat-ftp shell
        kat-ftp --insecure-accept-host-key shell
    """
    shell = KatShell(ShellContext.create(_settings(ctx)))
    try:
        shell.run()
    except Exception as e:
        logger.exception("Shell error")
        stderr_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def open_run(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Bookmark name"),
) -> None:
    """
    Connect using a saved bookmark, then start the shell.
    
    Password bookmarks prompt for the password.
    
    Examples:
        kat-ftp open prod
    """
    shell = KatShell(ShellContext.create(_settings(ctx)))
    # Connect errors are printed by the shell itself
    if shell.execute_line(f"open {shlex.quote(name)}") != 0:
        shell.close()
        raise typer.Exit(1)
    shell.run()


def register_shell_commands(app: typer.Typer) -> None:
    """
    Register shell commands to main app.
    
    Args:
        app: Typer app instance
    """
    app.command(name="shell")(shell_run)
    app.command(name="open")(open_run)
