"""
Transfer domain module
"""
from .models import (
    CancelToken,
    TaskStatus,
    TransferConfig,
    TransferDirection,
    TransferTask,
)
from .engine import TransferEngine

__all__ = [
    "CancelToken",
    "TaskStatus",
    "TransferConfig",
    "TransferDirection",
    "TransferTask",
    "TransferEngine",
]
