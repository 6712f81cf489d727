"""
File-based bookmark storage

Bookmarks live in one pretty-printed JSON array. Every mutation rewrites the
whole file through a temporary file and an atomic rename, so readers see
either the old or the new set, never a truncated file.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from ...core.constants import (
    BOOKMARK_FILE_MODE,
    BOOKMARKS_FILENAME,
    CONFIG_DIR_MODE,
    DEFAULT_CONFIG_DIR,
)
from ...core.exceptions import BookmarkValidationError, PersistenceError
from ...core.interfaces import BookmarkRepository
from ...core.logging import get_logger
from ...domain.bookmarks import Bookmark

logger = get_logger(__name__)


class BookmarkStore(BookmarkRepository):
    """
    JSON bookmark store.
    
    Not guarded against concurrent writers: the last save wins.
    """
    
    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize bookmark store.
        
        Args:
            path: Bookmark file (defaults to ~/.config/KAT-ftp/bookmarks.json)
        """
        if path is None:
            path = Path(DEFAULT_CONFIG_DIR) / BOOKMARKS_FILENAME
        self.path = Path(path).expanduser()
    
    def load(self) -> List[Bookmark]:
        """
        Load all bookmarks.
        
        Never raises: a missing file gives an empty list, an unreadable or
        unparsable file gives an empty list and a warning, and malformed
        entries are skipped.
        """
        if not self.path.exists():
            return []
        
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning("Error loading bookmarks from %s: %s", self.path, e)
            return []
        
        if not isinstance(data, list):
            logger.warning("Error loading bookmarks from %s: expected a JSON array", self.path)
            return []
        
        bookmarks: List[Bookmark] = []
        for index, item in enumerate(data):
            try:
                bookmarks.append(Bookmark.from_dict(item))
            except BookmarkValidationError as e:
                logger.warning("Skipping bookmark #%d in %s: %s", index, self.path, e)
        return bookmarks
    
    def save(self, bookmarks: List[Bookmark]) -> None:
        """
        Replace the stored set.
        
        Raises:
            PersistenceError: If the file cannot be written
        """
        payload = json.dumps([b.to_dict() for b in bookmarks], indent=2)
        try:
            _atomic_write(self.path, payload.encode('utf-8'))
        except OSError as e:
            raise PersistenceError(f"Error writing bookmarks file {self.path}: {e}") from e
        logger.debug("Saved %d bookmarks to %s", len(bookmarks), self.path)
    
    def upsert(self, bookmark: Bookmark) -> List[Bookmark]:
        """
        Replace the bookmark with the same name in place, or append it.
        
        Returns:
            The updated set
        
        Raises:
            BookmarkValidationError: If the bookmark is incomplete
            PersistenceError: If the file cannot be written
        """
        bookmark.validate()
        bookmarks = self.load()
        for i, existing in enumerate(bookmarks):
            if existing.name == bookmark.name:
                bookmarks[i] = bookmark
                break
        else:
            bookmarks.append(bookmark)
        
        self.save(bookmarks)
        logger.info("Bookmark saved: %s", bookmark.name)
        return bookmarks
    
    def delete(self, name: str) -> List[Bookmark]:
        """
        Remove the bookmark with this name; no-op if absent.
        
        Returns:
            The updated set
        """
        bookmarks = self.load()
        remaining = [b for b in bookmarks if b.name != name]
        if len(remaining) == len(bookmarks):
            return bookmarks
        
        self.save(remaining)
        logger.info("Bookmark deleted: %s", name)
        return remaining
    
    def get(self, name: str) -> Optional[Bookmark]:
        """Get a bookmark by name"""
        for bookmark in self.load():
            if bookmark.name == name:
                return bookmark
        return None
    
    def names(self) -> List[str]:
        """Bookmark names in stored order"""
        return [b.name for b in self.load()]

    def migrate_from(self, legacy_path: Union[str, Path]) -> bool:
        """Copy a legacy bookmark file into this store's location once"""
        return migrate_legacy(legacy_path, self.path)


def migrate_legacy(old_path: Union[str, Path], new_path: Union[str, Path]) -> bool:
    """
    Copy a legacy bookmark file to the current location once.
    
    Runs only when old_path exists and new_path does not. The new file is
    never overwritten and the old file is never removed.
    
    Returns:
        True if a copy was made
    """
    old = Path(old_path).expanduser()
    new = Path(new_path).expanduser()
    
    if not old.exists() or new.exists():
        return False
    
    try:
        _atomic_write(new, old.read_bytes())
    except OSError as e:
        logger.warning("Could not migrate bookmarks from %s to %s: %s", old, new, e)
        return False
    
    logger.info("Migrated bookmarks from %s to %s", old, new)
    return True


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data to path via a same-directory temp file with owner-only permissions"""
    path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'wb') as f:
            os.fchmod(f.fileno(), BOOKMARK_FILE_MODE)
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
