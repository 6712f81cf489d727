"""
Tests for directory listings and remote file operations
"""
import os

import pytest

from katftp.core.exceptions import LocalIOError, NotConnectedError, RemoteIOError
from katftp.domain.filesystem import (
    DirectoryLister,
    FileEntry,
    LocalDirectoryLister,
    RemoteFileOperations,
)


def _by_name(entries):
    return {e.name: e for e in entries}


class TestDirectoryLister:
    """Remote listings"""
    
    def test_lists_files_and_directories(self, session, remote_root):
        (remote_root / "notes.txt").write_bytes(b"x" * 42)
        (remote_root / "photos").mkdir()
        
        entries = _by_name(DirectoryLister().list(session, "."))
        
        assert set(entries) == {"notes.txt", "photos"}
        assert entries["notes.txt"].size_bytes == 42
        assert not entries["notes.txt"].is_directory
        assert entries["photos"].is_directory
    
    def test_empty_directory(self, session):
        assert DirectoryLister().list(session) == []
    
    def test_missing_directory(self, session):
        with pytest.raises(RemoteIOError):
            DirectoryLister().list(session, "does-not-exist")
    
    def test_requires_session(self):
        with pytest.raises(NotConnectedError):
            DirectoryLister().list(None)
    
    def test_closed_session(self, manager, session):
        manager.disconnect()
        with pytest.raises(NotConnectedError):
            DirectoryLister().list(session)
    
    def test_working_directory(self, session):
        assert DirectoryLister().get_working_directory(session) == "/home/user"
    
    def test_working_directory_failure(self, session):
        session.sftp.fail["normalize"] = OSError("gone")
        with pytest.raises(RemoteIOError):
            DirectoryLister().get_working_directory(session)


class TestLocalDirectoryLister:
    """Local listings share the FileEntry contract"""
    
    def test_lists_files_and_directories(self, local_root):
        (local_root / "a.bin").write_bytes(b"abc")
        (local_root / "sub").mkdir()
        
        entries = _by_name(LocalDirectoryLister().list(local_root))
        
        assert entries["a.bin"].size_bytes == 3
        assert entries["sub"].is_directory
    
    def test_lists_dangling_symlink(self, local_root):
        (local_root / "real.txt").write_text("ok")
        os.symlink(local_root / "gone", local_root / "dangling")
        
        entries = {e.name: e for e in LocalDirectoryLister().list(local_root)}
        
        assert sorted(entries) == ["dangling", "real.txt"]
        assert not entries["dangling"].is_directory
    
    def test_missing_directory(self, tmp_path):
        with pytest.raises(LocalIOError):
            LocalDirectoryLister().list(tmp_path / "missing")
    
    def test_working_directory(self, local_root, monkeypatch):
        monkeypatch.chdir(local_root)
        assert LocalDirectoryLister().get_working_directory() == os.path.realpath(local_root)


class TestFileEntry:
    """Entry snapshots"""
    
    def test_to_dict(self, local_root):
        (local_root / "f").write_text("hello")
        entry = LocalDirectoryLister().list(local_root)[0]
        
        data = entry.to_dict()
        
        assert data["name"] == "f"
        assert data["size_bytes"] == 5
        assert data["is_directory"] is False
    
    def test_is_frozen(self, local_root):
        (local_root / "f").write_text("hello")
        entry: FileEntry = LocalDirectoryLister().list(local_root)[0]
        with pytest.raises(AttributeError):
            entry.name = "g"


class TestRemoteFileOperations:
    """Delete / mkdir / rmdir"""
    
    def test_remove(self, session, remote_root):
        (remote_root / "old.log").write_text("bye")
        RemoteFileOperations().remove(session, "old.log")
        assert not (remote_root / "old.log").exists()
    
    def test_remove_missing(self, session):
        with pytest.raises(RemoteIOError):
            RemoteFileOperations().remove(session, "missing.log")
    
    def test_make_and_remove_directory(self, session, remote_root):
        ops = RemoteFileOperations()
        
        ops.make_directory(session, "new")
        assert (remote_root / "new").is_dir()
        
        ops.remove_directory(session, "new")
        assert not (remote_root / "new").exists()
    
    def test_make_existing_directory(self, session, remote_root):
        (remote_root / "dup").mkdir()
        with pytest.raises(RemoteIOError):
            RemoteFileOperations().make_directory(session, "dup")
    
    def test_remove_non_empty_directory(self, session, remote_root):
        (remote_root / "full").mkdir()
        (remote_root / "full" / "file").write_text("x")
        with pytest.raises(RemoteIOError):
            RemoteFileOperations().remove_directory(session, "full")
    
    def test_requires_session(self):
        with pytest.raises(NotConnectedError):
            RemoteFileOperations().make_directory(None, "x")
