"""
Authentication domain module
"""
from .strategy import AuthKind, AuthStrategy, PasswordAuth, KeyAuth, load_private_key

__all__ = [
    "AuthKind",
    "AuthStrategy",
    "PasswordAuth",
    "KeyAuth",
    "load_private_key",
]
