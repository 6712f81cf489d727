"""
Configuration adapters
"""
from .loader import ConfigLoader
from .settings import AppSettings, load_settings

__all__ = ["ConfigLoader", "AppSettings", "load_settings"]
