"""
Shared fixtures: an in-memory SSH client and an SFTP channel backed by a
temporary directory
"""
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import paramiko
import pytest

from katftp.core.events import EventBus
from katftp.domain.session import ConnectionManager


class FlakyFile:
    """File handle that fails once a byte limit has been read or written"""
    
    def __init__(self, handle, limit: Optional[int] = None):
        self._handle = handle
        self.limit = limit
        self.count = 0
        self.closed = False
    
    def _spend(self, size: int) -> None:
        if self.limit is not None and self.count + size > self.limit:
            raise OSError("connection reset")
        self.count += size
    
    def read(self, size: int = -1) -> bytes:
        if self.limit is not None and self.count >= self.limit:
            raise OSError("connection reset")
        data = self._handle.read(size)
        self.count += len(data)
        return data
    
    def write(self, data: bytes) -> int:
        self._spend(len(data))
        return self._handle.write(data)
    
    def fileno(self) -> int:
        return self._handle.fileno()
    
    def close(self) -> None:
        self.closed = True
        self._handle.close()


class LocalFiles:
    """Replacement for open() in the transfer engine; wraps local handles"""
    
    def __init__(self):
        self.limit: Optional[int] = None
        self.handles: List[FlakyFile] = []
    
    def __call__(self, path, mode: str = "r"):
        handle = FlakyFile(open(path, mode), self.limit)
        self.handles.append(handle)
        return handle


class FakeSFTP:
    """Subset of paramiko.SFTPClient working on a local directory"""
    
    def __init__(self, root: Path, calls: Optional[List[str]] = None):
        self.root = root
        self.calls = calls if calls is not None else []
        self.fail: Dict[str, Exception] = {}
        # Byte limit after which opened handles fail mid-stream
        self.fail_after: Optional[int] = None
        self.handles: List[FlakyFile] = []
        self.closed = False
    
    def _path(self, path: str) -> Path:
        return self.root / path.lstrip("/")
    
    def _check(self, name: str) -> None:
        if name in self.fail:
            raise self.fail[name]
    
    def open(self, path: str, mode: str = "r"):
        self._check("open")
        handle = FlakyFile(open(self._path(path), mode), self.fail_after)
        self.handles.append(handle)
        return handle
    
    def stat(self, path: str) -> paramiko.SFTPAttributes:
        self._check("stat")
        return paramiko.SFTPAttributes.from_stat(os.stat(self._path(path)))
    
    def listdir_attr(self, path: str = ".") -> List[paramiko.SFTPAttributes]:
        self._check("listdir_attr")
        target = self._path(path)
        return [
            paramiko.SFTPAttributes.from_stat(os.stat(target / name), filename=name)
            for name in sorted(os.listdir(target))
        ]
    
    def getcwd(self) -> Optional[str]:
        return None
    
    def normalize(self, path: str) -> str:
        self._check("normalize")
        return "/home/user"
    
    def remove(self, path: str) -> None:
        self._check("remove")
        os.remove(self._path(path))
    
    def mkdir(self, path: str, mode: int = 0o777) -> None:
        self._check("mkdir")
        os.mkdir(self._path(path), mode)
    
    def rmdir(self, path: str) -> None:
        self._check("rmdir")
        os.rmdir(self._path(path))
    
    def close(self) -> None:
        self.calls.append("sftp.close")
        self._check("close")
        self.closed = True


class FakeClient:
    """Stands in for RemoteClient; records the order of lifecycle calls"""
    
    def __init__(self, sftp: FakeSFTP, calls: List[str], **config: Any):
        self.config = config
        self.sftp = sftp
        self.calls = calls
        self.credentials: Optional[Dict[str, Any]] = None
        self.connect_error: Optional[BaseException] = None
        self.sftp_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None
    
    def connect(self, credentials: Dict[str, Any]) -> None:
        self.calls.append("client.connect")
        self.credentials = credentials
        if self.connect_error is not None:
            raise self.connect_error
    
    def open_sftp(self) -> FakeSFTP:
        self.calls.append("client.open_sftp")
        if self.sftp_error is not None:
            raise self.sftp_error
        return self.sftp
    
    def close(self) -> None:
        self.calls.append("client.close")
        if self.close_error is not None:
            raise self.close_error


class ClientFactory:
    """client_factory for ConnectionManager; remembers every client it built"""
    
    def __init__(self, root: Path):
        self.root = root
        self.calls: List[str] = []
        self.clients: List[FakeClient] = []
        self.factory_error: Optional[Exception] = None
        self.connect_error: Optional[BaseException] = None
        self.sftp_error: Optional[Exception] = None
    
    def __call__(self, **config: Any) -> FakeClient:
        if self.factory_error is not None:
            raise self.factory_error
        client = FakeClient(FakeSFTP(self.root, self.calls), self.calls, **config)
        client.connect_error = self.connect_error
        client.sftp_error = self.sftp_error
        self.clients.append(client)
        return client


@pytest.fixture
def local_files(monkeypatch):
    """Track (and optionally break) the local handles the transfer engine opens"""
    files = LocalFiles()
    monkeypatch.setattr("katftp.domain.transfer.engine.open", files, raising=False)
    return files


@pytest.fixture
def remote_root(tmp_path):
    root = tmp_path / "remote"
    root.mkdir()
    return root


@pytest.fixture
def local_root(tmp_path):
    root = tmp_path / "local"
    root.mkdir()
    return root


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def client_factory(remote_root):
    return ClientFactory(remote_root)


@pytest.fixture
def manager(client_factory, event_bus):
    return ConnectionManager(client_factory=client_factory, event_bus=event_bus)


@pytest.fixture
def session(manager):
    """Open password session on the fake server"""
    return manager.connect("example.com", "alice", "secret")
