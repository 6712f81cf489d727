"""
Collaborators shared by the shell commands
"""
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from ....core.events import EventBus, get_event_bus
from ....core.interfaces import BookmarkRepository, PromptProvider
from ....core.logging import get_stdout_console
from ....domain.filesystem import DirectoryLister, LocalDirectoryLister, RemoteFileOperations
from ....domain.session import ConnectionManager, SessionWorker
from ....domain.transfer import TransferEngine
from ....infrastructure.state import BookmarkStore
from ...config.settings import AppSettings
from ..prompts import RichPromptProvider


@dataclass
class ShellContext:
    """Everything the shell talks to"""
    manager: ConnectionManager
    lister: DirectoryLister
    local_lister: LocalDirectoryLister
    operations: RemoteFileOperations
    engine: TransferEngine
    bookmarks: BookmarkRepository
    worker: SessionWorker
    prompts: PromptProvider
    console: Console
    events: EventBus
    # Key file of the current session, kept for bookmark-save
    key_path: Optional[str] = field(default=None)
    
    @classmethod
    def create(cls, settings: Optional[AppSettings] = None, console: Optional[Console] = None) -> "ShellContext":
        """Build a context from settings"""
        settings = settings or AppSettings()
        console = console or get_stdout_console()
        events = get_event_bus()
        return cls(
            manager=ConnectionManager(
                timeout=settings.connect_timeout,
                accept_unknown_hosts=settings.accept_unknown_hosts,
                known_hosts_file=settings.known_hosts_file,
                event_bus=events,
            ),
            lister=DirectoryLister(),
            local_lister=LocalDirectoryLister(),
            operations=RemoteFileOperations(),
            engine=TransferEngine(settings.transfer, event_bus=events),
            bookmarks=BookmarkStore(settings.bookmarks_path),
            worker=SessionWorker(),
            prompts=RichPromptProvider(console),
            console=console,
            events=events,
        )
    
    def close(self) -> None:
        """Disconnect and stop the worker"""
        self.manager.disconnect()
        self.worker.shutdown(wait=False)
