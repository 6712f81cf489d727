"""
Remote file and directory operations
"""
from typing import Optional

import paramiko

from ...core.exceptions import RemoteIOError
from ...core.logging import get_logger
from ..session import Session, require_session

logger = get_logger(__name__)


class RemoteFileOperations:
    """Delete files and create / remove directories on the remote side"""
    
    def remove(self, session: Optional[Session], path: str) -> None:
        """Delete a remote file"""
        sftp = require_session(session)
        try:
            sftp.remove(path)
        except (OSError, paramiko.SSHException, EOFError) as e:
            raise RemoteIOError(f"Failed to delete file {path}: {e}") from e
        logger.info("Deleted %s", path)
    
    def make_directory(self, session: Optional[Session], path: str) -> None:
        """Create a remote directory (parent must exist)"""
        sftp = require_session(session)
        try:
            sftp.mkdir(path)
        except (OSError, paramiko.SSHException, EOFError) as e:
            raise RemoteIOError(f"Failed to create directory {path}: {e}") from e
        logger.info("Created directory %s", path)
    
    def remove_directory(self, session: Optional[Session], path: str) -> None:
        """Remove an empty remote directory"""
        sftp = require_session(session)
        try:
            sftp.rmdir(path)
        except (OSError, paramiko.SSHException, EOFError) as e:
            raise RemoteIOError(f"Failed to remove directory {path}: {e}") from e
        logger.info("Removed directory %s", path)
