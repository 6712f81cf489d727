"""
Directory enumeration for both ends of a session
"""
import os
from pathlib import Path
from typing import List, Optional, Union

import paramiko

from ...core.constants import DEFAULT_REMOTE_PATH
from ...core.exceptions import LocalIOError, RemoteIOError
from ...core.logging import get_logger
from ...core.utils import resolve_local_path
from ..session import Session, require_session
from .models import FileEntry

logger = get_logger(__name__)


class DirectoryLister:
    """Lists remote directories over an open session"""
    
    def list(self, session: Optional[Session], path: str = DEFAULT_REMOTE_PATH) -> List[FileEntry]:
        """
        List a remote directory.
        
        Entries come back in the order the server sends them. Symlinks are
        classified by the attributes the server reports for the link itself.
        
        Args:
            session: Open session
            path: Remote directory
        
        Returns:
            FileEntry list
        
        Raises:
            NotConnectedError: Session is None or closed (no I/O is attempted)
            RemoteIOError: Listing failed
        """
        sftp = require_session(session)
        try:
            attrs = sftp.listdir_attr(path)
        except (OSError, paramiko.SSHException, EOFError) as e:
            raise RemoteIOError(f"Failed to list directory {path}: {e}") from e
        
        logger.debug("Listed %d entries in %s", len(attrs), path)
        return [FileEntry.from_sftp_attributes(attr) for attr in attrs]
    
    def get_working_directory(self, session: Optional[Session]) -> str:
        """
        Remote working directory.
        
        Raises:
            NotConnectedError: Session is None or closed
            RemoteIOError: Server could not resolve the path
        """
        sftp = require_session(session)
        try:
            # getcwd() is None until chdir() has been called
            return sftp.getcwd() or sftp.normalize(".")
        except (OSError, paramiko.SSHException, EOFError) as e:
            raise RemoteIOError(f"Failed to get working directory: {e}") from e


class LocalDirectoryLister:
    """Lists local directories with the same contract as DirectoryLister"""
    
    def list(self, path: Union[str, Path] = ".") -> List[FileEntry]:
        """
        List a local directory.
        
        Raises:
            LocalIOError: Directory missing or unreadable
        """
        target = resolve_local_path(path)
        entries = []
        try:
            with os.scandir(target) as it:
                for entry in it:
                    try:
                        entries.append(FileEntry.from_dir_entry(entry))
                    except OSError as e:
                        # Entry removed mid-listing
                        logger.debug("Skipping %s: %s", entry.path, e)
        except OSError as e:
            raise LocalIOError(f"Failed to list directory {target}: {e}") from e
        return entries
    
    def get_working_directory(self) -> str:
        """
        Local working directory.
        
        Raises:
            LocalIOError: Working directory no longer exists
        """
        try:
            return os.getcwd()
        except OSError as e:
            raise LocalIOError(f"Failed to get working directory: {e}") from e
