"""
Builtin commands for the interactive shell

Every handler takes the argument list and returns an exit code
(0 success, 1 failure, -1 leave the shell). Core errors are not caught here;
the shell reports them.
"""
import time
from concurrent.futures import Future, TimeoutError as FutureTimeout
from typing import Callable, Dict, List

from rich.markup import escape
from rich.table import Table

from ....core.exceptions import NotConnectedError
from ....core.utils import format_size
from ....domain.bookmarks import Bookmark
from ....domain.filesystem import FileEntry
from ....domain.session import project
from ....domain.transfer import CancelToken, TransferTask
from .command_parser import UsageError, port_argument
from .context import ShellContext
from .progress import transfer_progress


USAGE = {
    'connect': "connect <host> <username> [password] [port]",
    'connectkey': "connectkey <host> <username> <keypath> [port]",
    'ls': "ls [path]",
    'lls': "lls [path]",
    'upload': "upload <local_file> <remote_file>",
    'download': "download <remote_file> <local_file>",
    'delete': "delete <remote_file>",
    'mkdir': "mkdir <remote_directory>",
    'rmdir': "rmdir <remote_directory>",
    'open': "open <bookmark>",
    'bookmark-save': "bookmark-save <name>",
    'bookmark-delete': "bookmark-delete <name>",
}


class BuiltinCommands:
    """Builtin command handlers"""
    
    def __init__(self, context: ShellContext):
        self.context = context
        self.console = context.console
    
    # --------------------
    # Connection
    # --------------------
    def connect(self, args: List[str]) -> int:
        """Connect using password authentication"""
        if len(args) < 2:
            return self._usage('connect')
        host, username = args[0], args[1]
        port = port_argument(args, 3)
        password = args[2] if len(args) > 2 else self.context.prompts.prompt(
            f"Password for {username}@{host}", password=True
        )
        
        self.context.manager.connect(host, username, password, port)
        self.context.key_path = None
        self.console.print(f"Connected to {escape(host)}:{port}")
        return 0
    
    def connectkey(self, args: List[str]) -> int:
        """Connect using private key authentication"""
        if len(args) < 3:
            return self._usage('connectkey')
        host, username, key_path = args[0], args[1], args[2]
        port = port_argument(args, 3)
        
        self.context.manager.connect_with_key(host, username, key_path, port)
        self.context.key_path = key_path
        self.console.print(f"Connected to {escape(host)}:{port} using key authentication")
        return 0
    
    def disconnect(self, args: List[str]) -> int:
        """Disconnect from server"""
        if not self.context.manager.is_connected():
            self.console.print("Not connected to server")
            return 0
        self.context.manager.disconnect()
        self.context.key_path = None
        self.console.print("Disconnected from server")
        return 0
    
    def status(self, args: List[str]) -> int:
        """Show session status"""
        manager = self.context.manager
        session = manager.session
        view = project(manager.state, session)
        self.console.print(escape(view.status_text))
        if session is not None:
            uptime = time.time() - session.opened_at
            self.console.print(f"  Uptime: {int(uptime // 60)}m {int(uptime % 60)}s")
            self.console.print(f"  Bytes transferred: {format_size(session.bytes_transferred)}")
        return 0
    
    # --------------------
    # Browsing
    # --------------------
    def ls(self, args: List[str]) -> int:
        """List remote directory"""
        path = args[0] if args else "."
        entries = self.context.lister.list(self.context.manager.session, path)
        self._print_listing(path, entries)
        return 0
    
    def pwd(self, args: List[str]) -> int:
        """Print remote working directory"""
        self.console.print(escape(self.context.lister.get_working_directory(self.context.manager.session)))
        return 0
    
    def lls(self, args: List[str]) -> int:
        """List local directory"""
        path = args[0] if args else "."
        entries = self.context.local_lister.list(path)
        self._print_listing(path, entries)
        return 0
    
    def lpwd(self, args: List[str]) -> int:
        """Print local working directory"""
        self.console.print(escape(self.context.local_lister.get_working_directory()))
        return 0
    
    def _print_listing(self, path: str, entries: List[FileEntry]) -> None:
        table = Table(title=f"Listing directory: {escape(path)}", show_header=True, header_style="bold")
        table.add_column("Type")
        table.add_column("Size", justify="right")
        table.add_column("Modified")
        table.add_column("Name")
        for entry in sorted(entries, key=lambda e: (not e.is_directory, e.name.lower())):
            table.add_row(
                "DIR" if entry.is_directory else "FILE",
                "" if entry.is_directory else str(entry.size_bytes),
                entry.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
                escape(entry.name),
            )
        self.console.print(table)
    
    # --------------------
    # Transfers
    # --------------------
    def upload(self, args: List[str]) -> int:
        """Upload file to server"""
        if len(args) < 2:
            return self._usage('upload')
        task = self._run_transfer(TransferTask.upload(args[0], args[1]))
        self.console.print(
            f"Successfully uploaded {escape(task.source)} to {escape(task.destination)} "
            f"({format_size(task.bytes_transferred)})"
        )
        return 0
    
    def download(self, args: List[str]) -> int:
        """Download file from server"""
        if len(args) < 2:
            return self._usage('download')
        task = self._run_transfer(TransferTask.download(args[0], args[1]))
        self.console.print(
            f"Successfully downloaded {escape(task.source)} to {escape(task.destination)} "
            f"({format_size(task.bytes_transferred)})"
        )
        return 0
    
    def _run_transfer(self, task: TransferTask) -> TransferTask:
        """Run a transfer on the worker thread; Ctrl-C cancels it"""
        session = self.context.manager.session
        if session is None:
            raise NotConnectedError("Not connected to server")
        
        token = CancelToken()
        with transfer_progress(self.console, task) as on_progress:
            future = self.context.worker.submit(
                self.context.engine.execute, task, session, on_progress, token
            )
            return _wait(future, token, self.console)
    
    # --------------------
    # Remote file operations
    # --------------------
    def delete(self, args: List[str]) -> int:
        """Delete file on server"""
        if not args:
            return self._usage('delete')
        self.context.operations.remove(self.context.manager.session, args[0])
        self.console.print(f"Successfully deleted {escape(args[0])}")
        return 0
    
    def mkdir(self, args: List[str]) -> int:
        """Create directory on server"""
        if not args:
            return self._usage('mkdir')
        self.context.operations.make_directory(self.context.manager.session, args[0])
        self.console.print(f"Successfully created directory {escape(args[0])}")
        return 0
    
    def rmdir(self, args: List[str]) -> int:
        """Remove directory on server"""
        if not args:
            return self._usage('rmdir')
        self.context.operations.remove_directory(self.context.manager.session, args[0])
        self.console.print(f"Successfully removed directory {escape(args[0])}")
        return 0
    
    # --------------------
    # Bookmarks
    # --------------------
    def bookmarks(self, args: List[str]) -> int:
        """List bookmarks"""
        items = self.context.bookmarks.load()
        if not items:
            self.console.print("No bookmarks saved")
            return 0
        for b in items:
            auth = f"key {b.key_path}" if b.use_ssh_key else "password"
            self.console.print(f"  {escape(b.name)}: {escape(b.username)}@{escape(b.host)}:{b.port} ({escape(auth)})")
        return 0
    
    def open(self, args: List[str]) -> int:
        """Connect using a saved bookmark"""
        if not args:
            return self._usage('open')
        bookmark = next((b for b in self.context.bookmarks.load() if b.name == args[0]), None)
        if bookmark is None:
            self.console.print(f"No bookmark named {escape(args[0])}")
            return 1
        
        bookmark.validate()
        port = bookmark.port_number
        if bookmark.use_ssh_key:
            self.context.manager.connect_with_key(bookmark.host, bookmark.username, bookmark.key_path, port)
            self.context.key_path = bookmark.key_path
        else:
            password = self.context.prompts.prompt(
                f"Password for {bookmark.username}@{bookmark.host}", password=True
            )
            self.context.manager.open(bookmark.host, bookmark.username, bookmark.to_auth_strategy(password), port)
            self.context.key_path = None
        self.console.print(f"Connected to {escape(bookmark.host)}:{port} ({escape(bookmark.name)})")
        return 0
    
    def bookmark_save(self, args: List[str]) -> int:
        """Save the current connection as a bookmark"""
        if not args:
            return self._usage('bookmark-save')
        session = self.context.manager.session
        if session is None:
            raise NotConnectedError("Connect first, then save the connection as a bookmark")
        
        bookmark = Bookmark(
            name=args[0],
            host=session.host,
            username=session.username,
            port=str(session.port),
            use_ssh_key=self.context.key_path is not None,
            key_path=self.context.key_path,
        )
        self.context.bookmarks.upsert(bookmark)
        self.console.print(f"Bookmark saved: {escape(bookmark.name)}")
        return 0
    
    def bookmark_delete(self, args: List[str]) -> int:
        """Delete a bookmark"""
        if not args:
            return self._usage('bookmark-delete')
        self.context.bookmarks.delete(args[0])
        self.console.print(f"Bookmark deleted: {escape(args[0])}")
        return 0
    
    # --------------------
    # Misc
    # --------------------
    def help(self, args: List[str]) -> int:
        """Show help"""
        if args:
            text = HELP_TEXT.get(args[0])
            if text is None:
                self.console.print(f"Unknown command: {escape(args[0])}")
                return 1
            self.console.print(escape(text))
            return 0
        
        self.console.print("\nAvailable commands:")
        for name, text in HELP_TEXT.items():
            self.console.print(f"  {escape(text.splitlines()[0])}")
        return 0
    
    def exit(self, args: List[str]) -> int:
        """Exit session"""
        return -1
    
    def _usage(self, name: str) -> int:
        raise UsageError(f"Usage: {USAGE[name]}")


def _wait(future: Future, token: CancelToken, console) -> TransferTask:
    """Wait for a transfer future, cancelling it on Ctrl-C"""
    while True:
        try:
            return future.result(timeout=0.2)
        except FutureTimeout:
            continue
        except KeyboardInterrupt:
            console.print("Cancelling transfer...")
            token.cancel()
            # Raises TransferCancelledError once the copy loop notices
            return future.result()


def create_command_handlers(context: ShellContext) -> Dict[str, Callable[[List[str]], int]]:
    """
    Create command handlers for a shell context.
    
    Returns:
        Dictionary mapping command names to handler functions
    """
    handlers = BuiltinCommands(context)
    
    return {
        'connect': handlers.connect,
        'connectkey': handlers.connectkey,
        'disconnect': handlers.disconnect,
        'status': handlers.status,
        'ls': handlers.ls,
        'pwd': handlers.pwd,
        'lls': handlers.lls,
        'lpwd': handlers.lpwd,
        'upload': handlers.upload,
        'download': handlers.download,
        'delete': handlers.delete,
        'mkdir': handlers.mkdir,
        'rmdir': handlers.rmdir,
        'bookmarks': handlers.bookmarks,
        'open': handlers.open,
        'bookmark-save': handlers.bookmark_save,
        'bookmark-delete': handlers.bookmark_delete,
        'help': handlers.help,
        'quit': handlers.exit,
        'exit': handlers.exit,  # Alias
    }


HELP_TEXT = {
    'connect': "connect <host> <username> [password] [port] - Connect using password authentication\n"
               "  The password is prompted when omitted. Port defaults to 22.",
    'connectkey': "connectkey <host> <username> <keypath> [port] - Connect using SSH key authentication\n"
                  "  Ed25519, ECDSA and RSA keys are supported.",
    'disconnect': "disconnect - Disconnect from server",
    'status': "status - Show connection status and bytes transferred",
    'ls': "ls [path] - List remote directory contents",
    'pwd': "pwd - Print remote working directory",
    'lls': "lls [path] - List local directory contents",
    'lpwd': "lpwd - Print local working directory",
    'upload': "upload <local_file> <remote_file> - Upload file to server\n"
              "  The remote file is replaced. Ctrl-C cancels; a partial file stays on the server.",
    'download': "download <remote_file> <local_file> - Download file from server\n"
                "  The local file is replaced. Ctrl-C cancels; a partial file stays on disk.",
    'delete': "delete <remote_file> - Delete file on server",
    'mkdir': "mkdir <remote_directory> - Create directory on server",
    'rmdir': "rmdir <remote_directory> - Remove directory on server",
    'bookmarks': "bookmarks - List saved bookmarks",
    'open': "open <bookmark> - Connect using a saved bookmark",
    'bookmark-save': "bookmark-save <name> - Save the current connection as a bookmark",
    'bookmark-delete': "bookmark-delete <name> - Delete a bookmark",
    'help': "help [command] - Show help",
    'quit': "quit - Exit the application",
}
