"""
KAT-ftp - SFTP remote file manager

Provides an interactive client for one remote server at a time, supporting:
- Password and private key authentication (Ed25519, ECDSA, RSA)
- Remote and local directory listings
- Streaming single-file upload and download with progress and cancellation
- Remote delete, mkdir and rmdir
- Named connection bookmarks
"""

__version__ = "0.1.0"

# Export core components
from .core import (
    RemoteClient,
    ClientConfig,
    EventBus,
    get_event_bus,
)

# Export domain components
from .domain.auth import AuthKind, PasswordAuth, KeyAuth
from .domain.session import ConnectionManager, ConnectionState, Session
from .domain.filesystem import (
    FileEntry,
    DirectoryLister,
    LocalDirectoryLister,
    RemoteFileOperations,
)
from .domain.transfer import (
    CancelToken,
    TransferConfig,
    TransferEngine,
    TransferTask,
)
from .domain.bookmarks import Bookmark
from .infrastructure.state import BookmarkStore

__all__ = [
    # Version
    "__version__",
    # Client
    "RemoteClient",
    "ClientConfig",
    # Events
    "EventBus",
    "get_event_bus",
    # Authentication
    "AuthKind",
    "PasswordAuth",
    "KeyAuth",
    # Connection
    "ConnectionManager",
    "ConnectionState",
    "Session",
    # Listing and file operations
    "FileEntry",
    "DirectoryLister",
    "LocalDirectoryLister",
    "RemoteFileOperations",
    # Transfers
    "CancelToken",
    "TransferConfig",
    "TransferEngine",
    "TransferTask",
    # Bookmarks
    "Bookmark",
    "BookmarkStore",
]
