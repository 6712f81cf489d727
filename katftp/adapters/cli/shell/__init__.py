"""
Interactive SFTP shell
"""
from .context import ShellContext
from .shell import KatShell
from .main import register_shell_commands

__all__ = [
    "ShellContext",
    "KatShell",
    "register_shell_commands",
]
