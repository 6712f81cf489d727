"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.bookmarks.models import Bookmark


class BookmarkRepository(ABC):
    """Bookmark storage interface"""
    
    @abstractmethod
    def load(self) -> List["Bookmark"]:
        """Load all bookmarks (never raises)"""
        pass
    
    @abstractmethod
    def save(self, bookmarks: List["Bookmark"]) -> None:
        """Replace the stored set with bookmarks"""
        pass
    
    @abstractmethod
    def upsert(self, bookmark: "Bookmark") -> List["Bookmark"]:
        """Insert or replace a bookmark by name"""
        pass
    
    @abstractmethod
    def delete(self, name: str) -> List["Bookmark"]:
        """Delete a bookmark by name"""
        pass


class PromptProvider(ABC):
    """User prompt interface"""
    
    @abstractmethod
    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input"""
        pass
    
    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt user for confirmation"""
        pass
