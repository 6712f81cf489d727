"""
Project constants definitions
"""

# ============================================================
# Connection Defaults
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_CONNECT_TIMEOUT = 30
DEFAULT_REMOTE_PATH = "."

# ============================================================
# Transfer Defaults
# ============================================================

DEFAULT_CHUNK_SIZE = 32 * 1024
DEFAULT_PROGRESS_INTERVAL = 256 * 1024

# ============================================================
# Configuration Storage
# ============================================================

DEFAULT_CONFIG_DIR = "~/.config/KAT-ftp"
CONFIG_FILENAME = "config.toml"
CONFIG_DIR_MODE = 0o755

# ============================================================
# Bookmarks
# ============================================================

BOOKMARKS_FILENAME = "bookmarks.json"
LEGACY_BOOKMARKS_PATH = "~/.sftp-client-bookmarks.json"
BOOKMARK_FILE_MODE = 0o600

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "KATFTP_"
