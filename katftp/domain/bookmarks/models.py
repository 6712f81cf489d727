"""
Bookmark domain model
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import BookmarkValidationError
from ...core.utils import parse_port
from ..auth import AuthStrategy, KeyAuth, PasswordAuth


@dataclass
class Bookmark:
    """Named, persisted connection profile (passwords are never stored)"""
    name: str
    host: str
    username: str
    port: str = str(DEFAULT_SSH_PORT)
    use_ssh_key: bool = False
    key_path: Optional[str] = None
    
    def __post_init__(self):
        self.port = str(self.port).strip() if self.port is not None else ""
        if not self.port:
            self.port = str(DEFAULT_SSH_PORT)
        if not self.use_ssh_key:
            self.key_path = None
        elif self.key_path is not None:
            self.key_path = str(self.key_path).strip() or None
    
    @property
    def port_number(self) -> int:
        """Port as an integer"""
        try:
            return parse_port(self.port)
        except ValueError as e:
            raise BookmarkValidationError(f"Bookmark '{self.name}': {e}") from e
    
    def validate(self) -> None:
        """
        Check required fields.
        
        Key file existence is not checked: a bookmark may refer
        to a key that has not been deployed yet. connect_with_key checks it.
        
        Raises:
            BookmarkValidationError: If a required field is missing or invalid
        """
        if not self.name or not self.name.strip():
            raise BookmarkValidationError("Bookmark name is required")
        if not self.host or not self.host.strip():
            raise BookmarkValidationError(f"Bookmark '{self.name}': host is required")
        if not self.username or not self.username.strip():
            raise BookmarkValidationError(f"Bookmark '{self.name}': username is required")
        if self.use_ssh_key and not self.key_path:
            raise BookmarkValidationError(f"Bookmark '{self.name}': key path is required for key authentication")
        try:
            parse_port(self.port)
        except ValueError as e:
            raise BookmarkValidationError(f"Bookmark '{self.name}': {e}") from e
    
    def to_auth_strategy(
        self,
        password: Optional[str] = None,
        passphrase: Optional[str] = None,
    ) -> AuthStrategy:
        """
        Build the credentials this bookmark describes.
        
        Args:
            password: Password for password bookmarks (prompted by the caller)
            passphrase: Passphrase for encrypted keys
        """
        if self.use_ssh_key:
            return KeyAuth(self.key_path, passphrase)
        if password is None:
            raise BookmarkValidationError(f"Bookmark '{self.name}' needs a password to connect")
        return PasswordAuth(password)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk JSON shape"""
        data: Dict[str, Any] = {
            "name": self.name,
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "use_ssh_key": self.use_ssh_key,
        }
        if self.key_path:
            data["key_path"] = self.key_path
        return data
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        """
        Create from the on-disk JSON shape.
        
        Raises:
            BookmarkValidationError: If data is not a bookmark object
        """
        if not isinstance(data, dict):
            raise BookmarkValidationError(f"Expected a bookmark object, got {type(data).__name__}")
        try:
            return cls(
                name=str(data["name"]),
                host=str(data["host"]),
                username=str(data["username"]),
                port=str(data.get("port", "")),
                use_ssh_key=bool(data.get("use_ssh_key", False)),
                key_path=data.get("key_path") or None,
            )
        except KeyError as e:
            raise BookmarkValidationError(f"Bookmark is missing field {e}") from e
