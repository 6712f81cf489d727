"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import ENV_PREFIX
from ...core.exceptions import ConfigError


class ConfigLoader:
    """Configuration loader with priority support"""
    
    # Environment variable -> settings key
    ENV_MAPPINGS = {
        "CONFIG_DIR": "config_dir",
        "BOOKMARKS_FILE": "bookmarks_file",
        "CONNECT_TIMEOUT": "connect_timeout",
        "CHUNK_SIZE": "transfer.chunk_size",
        "PROGRESS_INTERVAL": "transfer.progress_interval",
        "ACCEPT_UNKNOWN_HOSTS": "accept_unknown_hosts",
        "KNOWN_HOSTS_FILE": "known_hosts_file",
        "LOG_LEVEL": "log_level",
        "LOG_FILE": "log_file",
    }
    
    # Settings that only take true/false
    BOOL_KEYS = {"accept_unknown_hosts"}
    
    _BOOL_STRINGS = {
        "true": True, "yes": True, "on": True, "1": True,
        "false": False, "no": False, "off": False, "0": False,
    }
    
    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix
    
    def load_toml(self, path: Path) -> Dict[str, Any]:
        """
        Load TOML configuration file.
        
        Raises:
            ConfigError: If the file is missing or not valid TOML
        """
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        
        try:
            return tomllib.loads(path.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e
    
    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}
        
        for suffix, config_key in self.ENV_MAPPINGS.items():
            value = os.getenv(self._env_prefix + suffix)
            if value:
                # Handle nested keys
                if "." in config_key:
                    section, key = config_key.split(".", 1)
                    config.setdefault(section, {})[key] = self._convert_value(value, config_key)
                else:
                    config[config_key] = self._convert_value(value, config_key)
        
        return config
    
    def _convert_value(self, value: str, config_key: Optional[str] = None) -> Any:
        """Convert string value to appropriate type"""
        if config_key in self.BOOL_KEYS:
            # Unrecognised strings pass through and fail settings validation
            return self._BOOL_STRINGS.get(value.lower(), value)
        
        # Try integer first so "1" stays a number
        try:
            return int(value)
        except ValueError:
            pass
        
        return self._BOOL_STRINGS.get(value.lower(), value)
    
    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones.
        """
        result: Dict[str, Any] = {}
        
        for config in configs:
            result = self._deep_merge(result, config)
        
        return result
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""
        result = base.copy()
        
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
        required: bool = False,
    ) -> Dict[str, Any]:
        """
        Load configuration with priority: CLI > env > TOML > defaults
        
        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides (None values are ignored)
            use_env: Whether to load from environment variables
            required: Fail if toml_path does not exist
        
        Returns:
            Merged configuration dictionary
        """
        configs = []
        
        if toml_path:
            toml_path = Path(toml_path).expanduser()
            if required or toml_path.exists():
                configs.append(self.load_toml(toml_path))
        
        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)
        
        if cli_overrides:
            configs.append({k: v for k, v in cli_overrides.items() if v is not None})
        
        return self.merge_configs(*configs)
