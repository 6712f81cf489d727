from __future__ import annotations
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import paramiko

from .constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from .exceptions import AuthError, DialError, HostKeyError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class ClientConfig:
    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    timeout: float = DEFAULT_CONNECT_TIMEOUT
    accept_unknown_hosts: bool = False
    known_hosts_file: Optional[str] = None


class RejectUnknownHostPolicy(paramiko.MissingHostKeyPolicy):
    """Refuse hosts that are not present in any loaded known_hosts file"""

    def missing_host_key(self, client, hostname, key):
        raise HostKeyError(
            f"Host key for {hostname} ({key.get_name()}) is not in known_hosts; "
            "add it with ssh-keyscan or enable accept_unknown_hosts"
        )


class RemoteClient:
    """
    Thin wrapper around paramiko.SSHClient:
    - keeps host / user / port explicitly (paramiko does not expose them)
    - verifies host keys unless accept_unknown_hosts is set
    - translates paramiko and socket failures into DialError / AuthError
    - authenticates only with the credentials it is given (no agent, no key discovery)
    """
    def __init__(
        self,
        host: str,
        user: str,
        port: int = DEFAULT_SSH_PORT,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        accept_unknown_hosts: bool = False,
        known_hosts_file: Optional[str] = None,
    ) -> None:
        self.config = ClientConfig(
            host=host,
            user=user,
            port=port,
            timeout=timeout,
            accept_unknown_hosts=accept_unknown_hosts,
            known_hosts_file=known_hosts_file,
        )

        self.client = paramiko.SSHClient()
        self._configure_host_keys()

    # --------------------
    # Host key policy
    # --------------------
    def _configure_host_keys(self) -> None:
        cfg = self.config

        if cfg.accept_unknown_hosts:
            self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            return

        # Missing ~/.ssh/known_hosts is ignored by paramiko
        self.client.load_system_host_keys()
        if cfg.known_hosts_file:
            path = Path(cfg.known_hosts_file).expanduser()
            if path.exists():
                self.client.load_host_keys(str(path))
            else:
                logger.warning("known_hosts file %s does not exist", path)
        self.client.set_missing_host_key_policy(RejectUnknownHostPolicy())

    # --------------------
    # Connection management
    # --------------------
    def connect(self, credentials: Dict[str, Any]) -> None:
        """
        Dial and authenticate.

        Args:
            credentials: paramiko auth keyword arguments (password= or pkey=)

        Raises:
            HostKeyError: Host key unknown or mismatched
            AuthError: Credentials rejected
            DialError: Any other transport failure
        """
        cfg = self.config

        if cfg.accept_unknown_hosts:
            logger.warning(
                "Host key verification is disabled for %s:%d; the server identity is not checked",
                cfg.host, cfg.port,
            )

        try:
            self.client.connect(
                hostname=cfg.host,
                port=cfg.port,
                username=cfg.user,
                timeout=cfg.timeout,
                banner_timeout=cfg.timeout,
                auth_timeout=cfg.timeout,
                allow_agent=False,
                look_for_keys=False,
                **credentials,
            )
        except HostKeyError:
            raise
        except paramiko.BadHostKeyException as e:
            raise HostKeyError(f"Host key mismatch for {cfg.host}: {e}") from e
        except paramiko.AuthenticationException as e:
            raise AuthError(f"Authentication failed for {cfg.user}@{cfg.host}: {e}") from e
        except (paramiko.SSHException, socket.error, EOFError) as e:
            raise DialError(f"Failed to connect to SSH server {cfg.host}:{cfg.port}: {e}") from e

    def open_sftp(self) -> paramiko.SFTPClient:
        """Open the SFTP channel over the authenticated transport"""
        try:
            return self.client.open_sftp()
        except (paramiko.SSHException, socket.error, EOFError) as e:
            raise DialError(f"Failed to create SFTP client: {e}") from e

    def close(self) -> None:
        """Close the SSH transport"""
        self.client.close()

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> RemoteClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
