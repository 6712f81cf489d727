"""
Session domain models
"""
import threading
import time
from enum import Enum
from typing import Any, Dict, Optional

import paramiko

from ...core.exceptions import NotConnectedError
from ...core.logging import get_logger
from ..auth import AuthKind

logger = get_logger(__name__)


class ConnectionState(str, Enum):
    """Connection lifecycle state"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class Session:
    """
    One open SSH transport plus its SFTP channel.
    
    Not safe for concurrent use: callers issue one operation at a time
    (see SessionWorker).
    """
    
    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        auth_kind: AuthKind,
        client: Any,
        sftp: paramiko.SFTPClient,
    ):
        self.host = host
        self.port = port
        self.username = username
        self._auth_kind = AuthKind(auth_kind)
        self._client = client
        self._sftp: Optional[paramiko.SFTPClient] = sftp
        self._connected = True
        self.opened_at = time.time()
        self.bytes_transferred = 0
        self._counter_lock = threading.Lock()
    
    @property
    def auth_kind(self) -> AuthKind:
        """Authentication method used to open the session"""
        return self._auth_kind
    
    @property
    def connected(self) -> bool:
        return self._connected
    
    @property
    def address(self) -> str:
        return f"{self.username}@{self.host}:{self.port}"
    
    @property
    def sftp(self) -> paramiko.SFTPClient:
        """SFTP channel; raises NotConnectedError once the session is closed"""
        if not self._connected or self._sftp is None:
            raise NotConnectedError()
        return self._sftp
    
    def add_transferred_bytes(self, bytes_count: int) -> None:
        """Add to transferred bytes counter"""
        with self._counter_lock:
            self.bytes_transferred += bytes_count
    
    def close(self) -> None:
        """
        Close the SFTP channel, then the transport.
        
        Both closes are best-effort; failures are logged and never raised.
        Calling close() on a closed session does nothing.
        """
        if not self._connected:
            return
        self._connected = False
        
        sftp, self._sftp = self._sftp, None
        if sftp is not None:
            try:
                sftp.close()
            except Exception as e:
                logger.warning("Error closing SFTP channel to %s: %s", self.host, e)
        
        try:
            self._client.close()
        except Exception as e:
            logger.warning("Error closing SSH transport to %s: %s", self.host, e)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "auth_kind": self._auth_kind.value,
            "connected": self._connected,
            "opened_at": self.opened_at,
            "bytes_transferred": self.bytes_transferred,
        }
    
    def __repr__(self) -> str:
        state = "connected" if self._connected else "closed"
        return f"<Session {self.address} {self._auth_kind.value} {state}>"


def require_session(session: Optional[Session]) -> paramiko.SFTPClient:
    """
    Return the SFTP channel of an open session.
    
    Raises:
        NotConnectedError: If session is None or closed
    """
    if session is None:
        raise NotConnectedError()
    return session.sftp
