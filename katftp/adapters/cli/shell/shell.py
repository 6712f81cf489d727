"""
Interactive SFTP shell

Single read-eval loop; transfers run on the session worker so Ctrl-C can
cancel them.
"""
from typing import List, Optional

from rich.markup import escape

from ....core.events import CONNECTION_STATE, Event
from ....core.exceptions import KatError, LocalIOError, RemoteIOError
from ....core.logging import get_logger
from ....core.utils import format_size
from ....domain.session import PresentationState, project
from .command_parser import UsageError, parse_command_line
from .commands import create_command_handlers
from .context import ShellContext

logger = get_logger(__name__)


class KatShell:
    """Interactive shell over one ShellContext"""
    
    def __init__(self, context: ShellContext):
        """
        Initialize shell.
        
        Args:
            context: Shell context
        """
        self.context = context
        self.console = context.console
        self.history: List[str] = []
        self.commands = create_command_handlers(context)
        self.view: PresentationState = project(context.manager.state, context.manager.session)
        self._remote_cwd: Optional[str] = None
        self._unsubscribe = context.events.subscribe(self._on_connection_state, name=CONNECTION_STATE)
    
    def run(self) -> None:
        """Run interactive shell"""
        self._print_welcome()
        
        try:
            while True:
                try:
                    line = self.console.input(escape(self._generate_prompt()))
                except EOFError:
                    self.console.print()
                    break
                except KeyboardInterrupt:
                    self.console.print("\nUse 'quit' to exit")
                    continue
                
                if self.execute_line(line) == -1:
                    break
        finally:
            self._print_goodbye()
            self.close()
    
    def execute_line(self, line: str) -> int:
        """
        Parse and run one command line.
        
        Returns:
            Exit code (-1 for exit signal)
        """
        line = line.strip()
        if not line:
            return 0
        self.history.append(line)
        
        try:
            parsed = parse_command_line(line)
            if parsed is None:
                return 0
            
            handler = self.commands.get(parsed.name)
            if handler is None:
                self.console.print(f"Unknown command: {escape(parsed.name)}")
                self.console.print("Type 'help' for available commands")
                return 1
            
            return handler(parsed.args)
        except UsageError as e:
            self.console.print(escape(str(e)))
            return 1
        except (RemoteIOError, LocalIOError) as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            return 1
        except KatError as e:
            self.console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
            return 1
        except KeyboardInterrupt:
            self.console.print("\nInterrupted")
            return 1
    
    def close(self) -> None:
        """Disconnect and release the worker"""
        self._unsubscribe()
        self.context.close()
    
    def _on_connection_state(self, event: Event) -> None:
        self.view = project(event.metadata["state"], event.metadata.get("session"))
        self._remote_cwd = None
    
    def _generate_prompt(self) -> str:
        """Generate shell prompt"""
        if not self.view.connected:
            return "sftp> "
        
        if self._remote_cwd is None:
            try:
                self._remote_cwd = self.context.lister.get_working_directory(self.context.manager.session)
            except KatError as e:
                logger.debug("Could not resolve remote working directory: %s", e)
                return "sftp> "
        return f"sftp:{self._remote_cwd}> "
    
    def _print_welcome(self) -> None:
        """Print welcome message"""
        self.console.print("KAT-ftp interactive shell")
        self.console.print(escape(self.view.status_text))
        self.console.print("Type 'help' for commands, 'quit' to exit.\n")
    
    def _print_goodbye(self) -> None:
        """Print goodbye message"""
        session = self.context.manager.session
        if session is not None:
            self.console.print(f"\nGoodbye! Transferred: {format_size(session.bytes_transferred)}")
        else:
            self.console.print("\nGoodbye!")
