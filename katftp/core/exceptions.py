"""
Unified exception definitions
"""


class KatError(Exception):
    """Base exception class"""
    pass


class ConfigError(KatError):
    """Configuration error"""
    pass


class DialError(KatError):
    """Network or transport failure while connecting"""
    pass


class HostKeyError(DialError):
    """Remote host key is unknown or does not match"""
    pass


class AuthError(KatError):
    """Credentials rejected by the server"""
    pass


class KeyReadError(KatError):
    """Private key file could not be read"""
    pass


class KeyParseError(KatError):
    """Private key file could not be parsed"""
    pass


class NotConnectedError(KatError):
    """Operation attempted without an open session"""

    def __init__(self, message: str = "not connected"):
        super().__init__(message)


class RemoteIOError(KatError):
    """Remote filesystem failure"""
    pass


class LocalIOError(KatError):
    """Local filesystem failure"""
    pass


class TransferCancelledError(KatError):
    """Transfer stopped through its cancel token"""
    pass


class PersistenceError(KatError):
    """Bookmark file could not be written"""
    pass


class BookmarkValidationError(KatError):
    """Bookmark is missing a required field"""
    pass
