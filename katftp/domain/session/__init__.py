"""
Session domain module
"""
from .models import ConnectionState, Session, require_session
from .manager import ConnectionManager
from .presentation import PresentationState, project
from .worker import SessionWorker

__all__ = [
    "ConnectionState",
    "Session",
    "require_session",
    "ConnectionManager",
    "PresentationState",
    "project",
    "SessionWorker",
]
