"""
Core utility functions
"""
from pathlib import Path
from typing import Optional, Union

from .constants import DEFAULT_SSH_PORT


# ============================================================
# Path Resolution Utilities
# ============================================================

def resolve_local_path(path: Union[str, Path]) -> Path:
    """Resolve local path, expand ~ and other symbols"""
    return Path(path).expanduser()


# ============================================================
# Parsing Utilities
# ============================================================

def parse_port(value: Optional[Union[str, int]]) -> int:
    """
    Parse an SSH port.
    
    Args:
        value: Port as string or int; empty or None means the default port
    
    Returns:
        Port number
    
    Raises:
        ValueError: If value is not a number in 1..65535
    """
    if value is None:
        return DEFAULT_SSH_PORT
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return DEFAULT_SSH_PORT
        if not value.isdigit():
            raise ValueError(f"Invalid port number: {value}")
    port = int(value)
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")
    return port


def format_size(size_bytes: int) -> str:
    """
    Format bytes to human-readable size string.
    
    Args:
        size_bytes: Size in bytes
        
    Returns:
        Formatted string like "100 B", "1.5 MB"
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
