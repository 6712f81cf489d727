"""
Bookmark domain module
"""
from .models import Bookmark

__all__ = ["Bookmark"]
