"""
Shell command line parsing
"""
import shlex
from dataclasses import dataclass, field
from typing import List, Optional

from ....core.utils import parse_port


class UsageError(ValueError):
    """Command arguments are malformed; the core is not called"""
    pass


@dataclass
class ParsedCommand:
    """Parsed command structure"""
    name: str
    args: List[str] = field(default_factory=list)


def parse_command_line(line: str) -> Optional[ParsedCommand]:
    """
    Split a command line into name and arguments.
    
    Arguments follow POSIX shell quoting, so paths with spaces can be quoted.
    
    Returns:
        ParsedCommand, or None for a blank line
    
    Raises:
        UsageError: Unbalanced quotes
    """
    try:
        parts = shlex.split(line)
    except ValueError as e:
        raise UsageError(f"Cannot parse command: {e}") from e
    
    if not parts:
        return None
    return ParsedCommand(name=parts[0].lower(), args=parts[1:])


def port_argument(args: List[str], index: int) -> int:
    """
    Port from args[index], or the default port when absent.
    
    Raises:
        UsageError: Value is not a valid port number
    """
    if len(args) <= index:
        return parse_port(None)
    try:
        return parse_port(args[index])
    except ValueError as e:
        raise UsageError(str(e)) from e
