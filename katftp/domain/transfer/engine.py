"""
Streamed upload / download engine

Copies one file per call in fixed-size chunks over the session's SFTP
channel. Failed transfers leave the partially written destination where it
is; re-running a transfer rewrites the destination from byte zero.
"""
import os
from typing import Any, Callable, Optional, Type

import paramiko

from ...core.events import TRANSFER_FINISHED, EventBus, get_event_bus
from ...core.exceptions import (
    KatError,
    LocalIOError,
    RemoteIOError,
    TransferCancelledError,
)
from ...core.logging import get_logger
from ...core.utils import resolve_local_path
from ..session import Session, require_session
from .models import CancelToken, TaskStatus, TransferConfig, TransferDirection, TransferTask

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]

_REMOTE_ERRORS = (OSError, paramiko.SSHException, EOFError)


class TransferEngine:
    """Single-file transfer engine"""
    
    def __init__(
        self,
        config: Optional[TransferConfig] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize transfer engine.
        
        Args:
            config: Chunk size and progress granularity
            event_bus: Where finished tasks are published
        """
        self.config = config or TransferConfig()
        self._events = event_bus or get_event_bus()
    
    def upload(
        self,
        session: Optional[Session],
        local_path: str,
        remote_path: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> TransferTask:
        """
        Upload a local file, creating or truncating the remote file.
        
        Raises:
            NotConnectedError: Session is None or closed
            LocalIOError: Local file could not be opened or read
            RemoteIOError: Remote file could not be created or written
            TransferCancelledError: cancel_token was cancelled
        """
        task = TransferTask.upload(local_path, remote_path)
        return self.execute(task, session, on_progress, cancel_token)
    
    def download(
        self,
        session: Optional[Session],
        remote_path: str,
        local_path: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> TransferTask:
        """
        Download a remote file, creating or truncating the local file.
        
        Raises:
            NotConnectedError: Session is None or closed
            RemoteIOError: Remote file could not be opened or read
            LocalIOError: Local file could not be created or written
            TransferCancelledError: cancel_token was cancelled
        """
        task = TransferTask.download(remote_path, local_path)
        return self.execute(task, session, on_progress, cancel_token)
    
    def execute(
        self,
        task: TransferTask,
        session: Optional[Session],
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> TransferTask:
        """
        Run a task to a terminal state.
        
        The task is updated in place; on failure its status is FAILED or
        CANCELLED and the error is raised.
        
        Args:
            task: Task to run
            session: Open session
            on_progress: Called with the running byte count, never decreasing
            cancel_token: Checked before every chunk
        
        Returns:
            The succeeded task
        """
        try:
            sftp = require_session(session)
            logger.info("Starting %s %s -> %s", task.direction.value, task.source, task.destination)
            if task.direction == TransferDirection.UPLOAD:
                self._run_upload(task, sftp, on_progress, cancel_token)
            else:
                self._run_download(task, sftp, on_progress, cancel_token)
        except TransferCancelledError as e:
            self._finish(task, TaskStatus.CANCELLED, str(e))
            raise
        except KatError as e:
            self._finish(task, TaskStatus.FAILED, str(e))
            raise
        except BaseException as e:
            # Progress callback failure or Ctrl-C on the calling thread
            self._finish(task, TaskStatus.FAILED, str(e) or type(e).__name__)
            raise
        
        session.add_transferred_bytes(task.bytes_transferred)
        self._finish(task, TaskStatus.SUCCEEDED)
        return task
    
    # --------------------
    # Directions
    # --------------------
    def _run_upload(
        self,
        task: TransferTask,
        sftp: paramiko.SFTPClient,
        on_progress: Optional[ProgressCallback],
        cancel_token: Optional[CancelToken],
    ) -> None:
        local = resolve_local_path(task.source)
        try:
            src = open(local, "rb")
        except OSError as e:
            raise LocalIOError(f"Failed to open local file {local}: {e}") from e
        
        try:
            total = os.fstat(src.fileno()).st_size
            try:
                dst = sftp.open(task.destination, "wb")
            except _REMOTE_ERRORS as e:
                raise RemoteIOError(f"Failed to create remote file {task.destination}: {e}") from e
            
            task.start(total)
            self._copy_and_close(task, src, dst, LocalIOError, RemoteIOError, on_progress, cancel_token)
        finally:
            _close_quietly(src, task.source)
    
    def _run_download(
        self,
        task: TransferTask,
        sftp: paramiko.SFTPClient,
        on_progress: Optional[ProgressCallback],
        cancel_token: Optional[CancelToken],
    ) -> None:
        try:
            total = sftp.stat(task.source).st_size
            src = sftp.open(task.source, "rb")
        except _REMOTE_ERRORS as e:
            raise RemoteIOError(f"Failed to open remote file {task.source}: {e}") from e
        
        try:
            local = resolve_local_path(task.destination)
            try:
                dst = open(local, "wb")
            except OSError as e:
                raise LocalIOError(f"Failed to create local file {local}: {e}") from e
            
            task.start(total)
            self._copy_and_close(task, src, dst, RemoteIOError, LocalIOError, on_progress, cancel_token)
        finally:
            _close_quietly(src, task.source)
    
    # --------------------
    # Copy loop
    # --------------------
    def _copy_and_close(
        self,
        task: TransferTask,
        src: Any,
        dst: Any,
        read_error: Type[KatError],
        write_error: Type[KatError],
        on_progress: Optional[ProgressCallback],
        cancel_token: Optional[CancelToken],
    ) -> None:
        """Copy src into dst, then close dst; closing flushes buffered writes"""
        try:
            self._copy(task, src, dst, read_error, write_error, on_progress, cancel_token)
        except BaseException:
            _close_quietly(dst, task.destination)
            logger.warning(
                "Partial file left at %s (%d bytes written)",
                task.destination, task.bytes_transferred,
            )
            raise
        
        try:
            dst.close()
        except _REMOTE_ERRORS as e:
            raise write_error(f"Failed to finish writing {task.destination}: {e}") from e
    
    def _copy(
        self,
        task: TransferTask,
        src: Any,
        dst: Any,
        read_error: Type[KatError],
        write_error: Type[KatError],
        on_progress: Optional[ProgressCallback],
        cancel_token: Optional[CancelToken],
    ) -> None:
        chunk_size = self.config.chunk_size
        interval = self.config.progress_interval
        reported = 0
        
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                raise TransferCancelledError(
                    f"Transfer of {task.source} cancelled after {task.bytes_transferred} bytes"
                )
            
            try:
                data = src.read(chunk_size)
            except _REMOTE_ERRORS as e:
                raise read_error(f"Failed to read {task.source}: {e}") from e
            if not data:
                break
            
            try:
                dst.write(data)
            except _REMOTE_ERRORS as e:
                raise write_error(f"Failed to write {task.destination}: {e}") from e
            
            task.advance(len(data))
            if on_progress is not None and task.bytes_transferred - reported >= interval:
                reported = task.bytes_transferred
                on_progress(reported)
        
        if on_progress is not None:
            on_progress(task.bytes_transferred)
    
    def _finish(self, task: TransferTask, status: TaskStatus, error: Optional[str] = None) -> None:
        task.finish(status, error)
        if status == TaskStatus.SUCCEEDED:
            logger.info(
                "Finished %s %s -> %s (%d bytes in %.2fs)",
                task.direction.value, task.source, task.destination,
                task.bytes_transferred, task.elapsed,
            )
        else:
            logger.warning("%s %s: %s", task.direction.value.capitalize(), status.value, error)
        self._events.publish(TRANSFER_FINISHED, task=task)


def _close_quietly(handle: Any, name: str) -> None:
    try:
        handle.close()
    except Exception as e:
        logger.debug("Error closing %s: %s", name, e)
