"""
Core infrastructure layer
"""
from .client import RemoteClient, ClientConfig
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import BookmarkRepository, PromptProvider
from .events import Event, EventBus, get_event_bus
from .utils import (
    resolve_local_path,
    parse_port,
    format_size,
)

__all__ = [
    "RemoteClient",
    "ClientConfig",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "BookmarkRepository",
    "PromptProvider",
    "Event",
    "EventBus",
    "get_event_bus",
    "resolve_local_path",
    "parse_port",
    "format_size",
]
