"""
Connection lifecycle management
"""
from typing import Callable, Optional

from ...core.client import RemoteClient
from ...core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from ...core.events import CONNECTION_STATE, EventBus, get_event_bus
from ...core.exceptions import KatError
from ...core.logging import get_logger
from ..auth import AuthStrategy, KeyAuth, PasswordAuth
from .models import ConnectionState, Session

logger = get_logger(__name__)

ClientFactory = Callable[..., RemoteClient]


class ConnectionManager:
    """
    Owns at most one Session.
    
    State machine: DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED.
    CONNECTING only exists for the duration of a connect call. A dropped link
    is not detected here; the next failing operation reports it and the caller
    connects again.
    """
    
    def __init__(
        self,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        accept_unknown_hosts: bool = False,
        known_hosts_file: Optional[str] = None,
        client_factory: ClientFactory = RemoteClient,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize connection manager.
        
        Args:
            timeout: Dial / banner / auth timeout in seconds
            accept_unknown_hosts: Skip host key verification (insecure, opt-in)
            known_hosts_file: Extra known_hosts file loaded next to the system one
            client_factory: Builds the SSH client (RemoteClient signature)
            event_bus: Where state transitions are published
        """
        self.timeout = timeout
        self.accept_unknown_hosts = accept_unknown_hosts
        self.known_hosts_file = known_hosts_file
        self._client_factory = client_factory
        self._events = event_bus or get_event_bus()
        self._session: Optional[Session] = None
        self._state = ConnectionState.DISCONNECTED
    
    # --------------------
    # State
    # --------------------
    @property
    def state(self) -> ConnectionState:
        return self._state
    
    @property
    def session(self) -> Optional[Session]:
        """Current session, or None when disconnected"""
        return self._session
    
    def is_connected(self) -> bool:
        """Pure state query, no I/O"""
        return self._session is not None and self._session.connected
    
    def _set_state(self, state: ConnectionState) -> None:
        if state == self._state:
            return
        previous, self._state = self._state, state
        logger.debug("Connection state %s -> %s", previous.value, state.value)
        self._events.publish(
            CONNECTION_STATE,
            state=state,
            previous=previous,
            session=self._session,
        )
    
    # --------------------
    # Connect / disconnect
    # --------------------
    def connect(
        self,
        host: str,
        username: str,
        password: str,
        port: int = DEFAULT_SSH_PORT,
    ) -> Session:
        """
        Connect with password authentication.
        
        Raises:
            DialError: Network, host key or SFTP failure
            AuthError: Password rejected
        """
        return self.open(host, username, PasswordAuth(password), port)
    
    def connect_with_key(
        self,
        host: str,
        username: str,
        key_path: str,
        port: int = DEFAULT_SSH_PORT,
        passphrase: Optional[str] = None,
    ) -> Session:
        """
        Connect with private key authentication.
        
        The key is read and parsed before dialing.
        
        Raises:
            KeyReadError: Key file missing or unreadable
            KeyParseError: Key file malformed or encrypted without passphrase
            DialError: Network, host key or SFTP failure
            AuthError: Key rejected
        """
        return self.open(host, username, KeyAuth(key_path, passphrase), port)
    
    def open(
        self,
        host: str,
        username: str,
        auth: AuthStrategy,
        port: int = DEFAULT_SSH_PORT,
    ) -> Session:
        """
        Connect with any authentication strategy.
        
        An existing session is closed first, but only after the credentials
        have been prepared, so a bad key file leaves it untouched.
        
        Args:
            host: Remote host
            username: Remote user
            auth: Credentials
            port: SSH port
        
        Returns:
            The new connected Session
        """
        credentials = auth.prepare()
        
        if self._session is not None:
            logger.info("Closing session to %s before opening a new one", self._session.host)
            self.disconnect()
        
        self._set_state(ConnectionState.CONNECTING)
        logger.info("Connecting to %s@%s:%d (%s)", username, host, port, auth.kind.value)
        
        client: Optional[RemoteClient] = None
        try:
            client = self._client_factory(
                host=host,
                user=username,
                port=port,
                timeout=self.timeout,
                accept_unknown_hosts=self.accept_unknown_hosts,
                known_hosts_file=self.known_hosts_file,
            )
            client.connect(credentials)
            sftp = client.open_sftp()
        except KatError:
            self._abort(client)
            raise
        except Exception:
            logger.exception("Unexpected error connecting to %s", host)
            self._abort(client)
            raise
        except BaseException:
            # Ctrl-C while dialing
            logger.info("Connect to %s interrupted", host)
            self._abort(client)
            raise
        
        self._session = Session(
            host=host,
            port=port,
            username=username,
            auth_kind=auth.kind,
            client=client,
            sftp=sftp,
        )
        self._set_state(ConnectionState.CONNECTED)
        logger.info("Connected to %s", self._session.address)
        return self._session
    
    def _abort(self, client: Optional[RemoteClient]) -> None:
        """Release a half-open client and return to DISCONNECTED"""
        if client is not None:
            try:
                client.close()
            except Exception as e:
                logger.debug("Error closing failed connection: %s", e)
        self._set_state(ConnectionState.DISCONNECTED)
    
    def disconnect(self) -> None:
        """Close the current session. Never raises; no-op when disconnected."""
        session, self._session = self._session, None
        if session is None:
            return
        
        session.close()
        logger.info("Disconnected from %s", session.host)
        self._set_state(ConnectionState.DISCONNECTED)
    
    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> "ConnectionManager":
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()
