"""
Credential strategies

An AuthStrategy turns a password or a private key file into the keyword
arguments paramiko.SSHClient.connect expects. Key strategies do all file I/O
and parsing in prepare(), so a bad key fails before any network activity.
"""
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import paramiko

from ...core.exceptions import KeyParseError, KeyReadError
from ...core.logging import get_logger

logger = get_logger(__name__)

# Tried in order; DSA support was removed from paramiko
_KEY_CLASSES = (paramiko.Ed25519Key, paramiko.ECDSAKey, paramiko.RSAKey)


class AuthKind(str, Enum):
    """Authentication method"""
    PASSWORD = "password"
    KEY = "key"


class AuthStrategy(ABC):
    """One set of credentials"""
    
    kind: AuthKind
    
    @abstractmethod
    def prepare(self) -> Dict[str, Any]:
        """
        Build transport-level credentials.
        
        Returns:
            Keyword arguments for paramiko.SSHClient.connect
        """
        pass


@dataclass
class PasswordAuth(AuthStrategy):
    """Password authentication"""
    password: str = field(repr=False)
    kind: AuthKind = field(default=AuthKind.PASSWORD, init=False)
    
    def prepare(self) -> Dict[str, Any]:
        return {"password": self.password}


@dataclass
class KeyAuth(AuthStrategy):
    """Private key authentication"""
    key_path: str
    passphrase: Optional[str] = field(default=None, repr=False)
    kind: AuthKind = field(default=AuthKind.KEY, init=False)
    
    def prepare(self) -> Dict[str, Any]:
        return {"pkey": load_private_key(self.key_path, self.passphrase)}


def load_private_key(path: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Read and parse a private key, trying Ed25519, ECDSA and RSA.
    
    Args:
        path: Key file path (~ is expanded)
        passphrase: Passphrase for encrypted keys
    
    Returns:
        Parsed paramiko key
    
    Raises:
        KeyReadError: File missing or unreadable
        KeyParseError: Content is not a supported private key
    """
    p = Path(path).expanduser()
    
    try:
        data = p.read_bytes()
    except OSError as e:
        raise KeyReadError(f"Unable to read private key {p}: {e}") from e
    
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise KeyParseError(f"Unable to parse private key {p}: not a text key file") from e
    
    last_error: Optional[Exception] = None
    for key_class in _KEY_CLASSES:
        try:
            key = key_class.from_private_key(io.StringIO(text), password=passphrase)
        except paramiko.PasswordRequiredException as e:
            raise KeyParseError(f"Private key {p} is encrypted; a passphrase is required") from e
        except (paramiko.SSHException, ValueError, TypeError) as e:
            last_error = e
            continue
        logger.debug("Loaded %s key from %s", key.get_name(), p)
        return key
    
    raise KeyParseError(f"Unable to parse private key {p}: {last_error}") from last_error
