"""
Transfer data models
"""
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ...core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_PROGRESS_INTERVAL


class TaskStatus(str, Enum):
    """Transfer task state"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    
    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELLED)


class TransferDirection(str, Enum):
    """Transfer direction"""
    DOWNLOAD = "download"  # remote → local
    UPLOAD = "upload"      # local → remote


@dataclass
class TransferConfig:
    """Transfer configuration"""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    
    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.progress_interval < 0:
            raise ValueError(f"progress_interval must not be negative, got {self.progress_interval}")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "chunk_size": self.chunk_size,
            "progress_interval": self.progress_interval,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferConfig":
        """Create from dictionary"""
        valid_fields = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**valid_fields)


class CancelToken:
    """Thread-safe cancellation flag checked between chunks"""
    
    def __init__(self):
        self._event = threading.Event()
    
    def cancel(self) -> None:
        self._event.set()
    
    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class TransferTask:
    """One copy operation between the local and remote filesystems"""
    direction: TransferDirection
    source: str
    destination: str
    bytes_transferred: int = 0
    total_bytes: Optional[int] = None
    status: TaskStatus = TaskStatus.PENDING
    error: Optional[str] = None
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    
    @classmethod
    def upload(cls, local_path: str, remote_path: str) -> "TransferTask":
        return cls(TransferDirection.UPLOAD, str(local_path), remote_path)
    
    @classmethod
    def download(cls, remote_path: str, local_path: str) -> "TransferTask":
        return cls(TransferDirection.DOWNLOAD, remote_path, str(local_path))
    
    def start(self, total_bytes: Optional[int]) -> None:
        self.status = TaskStatus.RUNNING
        self.total_bytes = total_bytes
        self.bytes_transferred = 0
        self.error = None
        self.started_at = time.time()
        self.finished_at = None
    
    def advance(self, count: int) -> None:
        self.bytes_transferred += count
    
    def finish(self, status: TaskStatus, error: Optional[str] = None) -> None:
        self.status = status
        self.error = error
        self.finished_at = time.time()
    
    @property
    def elapsed(self) -> float:
        """Seconds spent so far (or in total once finished)"""
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else time.time()
        return end - self.started_at
    
    @property
    def progress(self) -> float:
        """Progress percentage (0-100), 0 when the size is unknown"""
        if not self.total_bytes:
            return 100.0 if self.status == TaskStatus.SUCCEEDED else 0.0
        return min(self.bytes_transferred / self.total_bytes * 100, 100.0)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "direction": self.direction.value,
            "source": self.source,
            "destination": self.destination,
            "bytes_transferred": self.bytes_transferred,
            "total_bytes": self.total_bytes,
            "status": self.status.value,
            "error": self.error,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }
