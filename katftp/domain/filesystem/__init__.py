"""
Filesystem domain module
"""
from .models import FileEntry
from .lister import DirectoryLister, LocalDirectoryLister
from .operations import RemoteFileOperations

__all__ = [
    "FileEntry",
    "DirectoryLister",
    "LocalDirectoryLister",
    "RemoteFileOperations",
]
