"""
Application settings
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ...core.constants import (
    BOOKMARKS_FILENAME,
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONNECT_TIMEOUT,
    ENV_PREFIX,
    LEGACY_BOOKMARKS_PATH,
)
from ...core.exceptions import ConfigError
from ...domain.transfer import TransferConfig
from .loader import ConfigLoader


@dataclass
class AppSettings:
    """Resolved application settings"""
    config_dir: str = DEFAULT_CONFIG_DIR
    bookmarks_file: Optional[str] = None
    legacy_bookmarks_file: str = LEGACY_BOOKMARKS_PATH
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    accept_unknown_hosts: bool = False
    known_hosts_file: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    transfer: TransferConfig = field(default_factory=TransferConfig)
    
    @property
    def bookmarks_path(self) -> Path:
        """Bookmark file location (inside config_dir unless set explicitly)"""
        if self.bookmarks_file:
            return Path(self.bookmarks_file).expanduser()
        return Path(self.config_dir).expanduser() / BOOKMARKS_FILENAME
    
    @property
    def legacy_bookmarks_path(self) -> Path:
        return Path(self.legacy_bookmarks_file).expanduser()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "config_dir": self.config_dir,
            "bookmarks_file": str(self.bookmarks_path),
            "legacy_bookmarks_file": self.legacy_bookmarks_file,
            "connect_timeout": self.connect_timeout,
            "accept_unknown_hosts": self.accept_unknown_hosts,
            "known_hosts_file": self.known_hosts_file,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "transfer": self.transfer.to_dict(),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        """
        Create from a merged configuration dictionary.
        
        Raises:
            ConfigError: If a value has the wrong type
        """
        data = dict(data)
        transfer_data = data.pop("transfer", {}) or {}
        valid_fields = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        
        try:
            settings = cls(**valid_fields, transfer=TransferConfig.from_dict(transfer_data))
            settings.connect_timeout = float(settings.connect_timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        
        if settings.connect_timeout <= 0:
            raise ConfigError(f"connect_timeout must be positive, got {settings.connect_timeout}")
        if not isinstance(settings.accept_unknown_hosts, bool):
            raise ConfigError("accept_unknown_hosts must be true or false")
        return settings


def load_settings(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True,
) -> AppSettings:
    """
    Load settings from config.toml, KATFTP_* variables and CLI overrides.
    
    Args:
        config_file: Explicit config file (must exist); defaults to
            config.toml in the config directory (optional)
        cli_overrides: Values from command-line options
        use_env: Whether to read environment variables
    """
    loader = ConfigLoader()
    required = config_file is not None
    if config_file is None:
        config_file = Path(_config_dir(cli_overrides, use_env)).expanduser() / CONFIG_FILENAME
    
    merged = loader.load(
        toml_path=config_file,
        cli_overrides=cli_overrides,
        use_env=use_env,
        required=required,
    )
    return AppSettings.from_dict(merged)


def _config_dir(cli_overrides: Optional[Dict[str, Any]], use_env: bool) -> str:
    """Directory holding config.toml: CLI > KATFTP_CONFIG_DIR > default"""
    if cli_overrides and cli_overrides.get("config_dir"):
        return cli_overrides["config_dir"]
    if use_env and os.getenv(ENV_PREFIX + "CONFIG_DIR"):
        return os.getenv(ENV_PREFIX + "CONFIG_DIR")
    return DEFAULT_CONFIG_DIR
