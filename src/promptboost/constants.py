"""Application-level constants for promptboost.

This module keeps only cross-cutting app/file/path constants.
"""

# ============================================================================
# Application identity
# ============================================================================

APP_NAME = "promptboost"

# Settings section holding every promptboost key
CONFIG_SECTION = "boostPrompt"

# ============================================================================
# File names and extensions
# ============================================================================

INSTRUCTION_FILE_NAME = "boost.prompt.md"
SETTINGS_FILE_NAME = "settings.json"
LOG_FILE_EXTENSION = ".log"

# ============================================================================
# Default directories and paths
# ============================================================================

# User data directory (the "global storage" path)
USER_DATA_DIR = f"~/.{APP_NAME}"

DEFAULT_SETTINGS_PATH = f"{USER_DATA_DIR}/{SETTINGS_FILE_NAME}"
DEFAULT_LOGS_DIR = f"{USER_DATA_DIR}/logs"

DATETIME_FORMAT_FILENAME = "%Y-%m-%d_%H-%M-%S"

# ============================================================================
# Setting defaults
# ============================================================================

DEFAULT_FILE_PATTERNS = ["*.prompt.md"]
DEFAULT_VENDOR = "openai"

# Whole-boost guard rails (0 disables either one)
DEFAULT_RESPONSE_TIMEOUT_SEC = 300
DEFAULT_MAX_RESPONSE_CHARS = 200_000

# Endpoint id the model runtime uses for its own routing pseudo-model
AUTO_MODEL_ID = "auto"

# Shown when a vendor does not report a family label
DISPLAY_UNKNOWN = "unknown"
