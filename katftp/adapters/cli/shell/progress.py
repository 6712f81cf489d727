"""
Transfer progress display
"""
from contextlib import contextmanager
from typing import Callable, Iterator

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from ....domain.transfer import TransferTask


@contextmanager
def transfer_progress(console: Console, task: TransferTask) -> Iterator[Callable[[int], None]]:
    """
    Show a progress bar for one transfer.
    
    Yields:
        Progress callback for TransferEngine (safe to call from the worker thread)
    """
    show_progress = console.is_terminal
    
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
        disable=not show_progress,
        transient=True,
    ) as progress:
        bar = progress.add_task(f"{task.direction.value.capitalize()} {escape(task.source)}", total=None)
        
        def on_progress(transferred: int) -> None:
            progress.update(bar, total=task.total_bytes, completed=transferred)
        
        yield on_progress
