"""
Directory listing models
"""
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

import paramiko


@dataclass(frozen=True)
class FileEntry:
    """One directory entry snapshot"""
    name: str
    is_directory: bool
    size_bytes: int
    modified_at: datetime
    
    @classmethod
    def from_sftp_attributes(cls, attr: paramiko.SFTPAttributes) -> "FileEntry":
        """Build from an entry returned by SFTPClient.listdir_attr"""
        return cls(
            name=attr.filename,
            is_directory=stat.S_ISDIR(attr.st_mode or 0),
            size_bytes=max(attr.st_size or 0, 0),
            modified_at=datetime.fromtimestamp(attr.st_mtime or 0),
        )
    
    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry) -> "FileEntry":
        """Build from an os.scandir entry; a dangling symlink describes the link itself"""
        try:
            st = entry.stat()
        except FileNotFoundError:
            st = entry.stat(follow_symlinks=False)
        return cls(
            name=entry.name,
            is_directory=entry.is_dir(),
            size_bytes=st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "name": self.name,
            "is_directory": self.is_directory,
            "size_bytes": self.size_bytes,
            "modified_at": self.modified_at.isoformat(),
        }
