"""
Projection of connection state onto what the presentation layer shows
"""
from dataclasses import dataclass
from typing import Optional

from .models import ConnectionState, Session


@dataclass(frozen=True)
class PresentationState:
    """Which actions are available and what the status line says"""
    connected: bool
    can_connect: bool
    can_disconnect: bool
    can_browse: bool
    can_transfer: bool
    status_text: str


def project(state: ConnectionState, session: Optional[Session] = None) -> PresentationState:
    """
    Map a connection state to a presentation state.
    
    Args:
        state: Current connection state
        session: Open session when state is CONNECTED
    
    Returns:
        PresentationState for that state
    """
    if state == ConnectionState.CONNECTED and session is not None:
        return PresentationState(
            connected=True,
            can_connect=True,
            can_disconnect=True,
            can_browse=True,
            can_transfer=True,
            status_text=f"Connected to {session.address} ({session.auth_kind.value})",
        )
    
    if state == ConnectionState.CONNECTING:
        return PresentationState(
            connected=False,
            can_connect=False,
            can_disconnect=False,
            can_browse=False,
            can_transfer=False,
            status_text="Connecting...",
        )
    
    return PresentationState(
        connected=False,
        can_connect=True,
        can_disconnect=False,
        can_browse=False,
        can_transfer=False,
        status_text="Not connected",
    )
