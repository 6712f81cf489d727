"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.exceptions import ConfigError
from ...core.logging import setup_logging, get_logger, get_stderr_console
from ...infrastructure.state import migrate_legacy
from ..config.settings import load_settings
from .bookmarks import register_bookmark_app
from .shell import register_shell_commands

logger = get_logger(__name__)
stderr_console = get_stderr_console()

# Create main app
app = typer.Typer(
    name="kat-ftp",
    add_completion=False,
    help="SFTP remote file manager",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_shell_commands(app)
register_bookmark_app(app)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: ~/.config/KAT-ftp/config.toml)",
    ),
    insecure_accept_host_key: bool = typer.Option(
        False,
        "--insecure-accept-host-key",
        help="Accept unknown host keys without verification (insecure)",
    ),
):
    """
    KAT-ftp - SFTP remote file manager
    
    Use subcommands to perform different operations:
    - shell: Interactive SFTP shell
    - open: Connect with a bookmark and start the shell
    - bookmark: Manage saved connections
    """
    overrides = {
        "log_level": log_level,
        "log_file": str(log_file) if log_file else None,
        "accept_unknown_hosts": True if insecure_accept_host_key else None,
    }
    try:
        settings = load_settings(config_file=config_file, cli_overrides=overrides)
    except ConfigError as e:
        stderr_console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1)
    
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    logger.debug("Settings: %s", settings.to_dict())
    
    migrate_legacy(settings.legacy_bookmarks_path, settings.bookmarks_path)
    ctx.obj = settings


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
