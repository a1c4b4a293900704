"""Shared constants for plugcli."""

__all__ = [
    "CONFIG_DIR_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "DEFAULT_DESC_PADDING",
    "DEFAULT_HELP_WIDTH",
    "DEFAULT_LEFT_PADDING",
    "ENTRY_POINT_GROUP",
    "HELP_FLAGS",
    "MIN_NAME_COLUMN",
    "NAME_COLUMN_STEP",
    "SUPPORTED_SHELLS",
    "UNCATEGORIZED",
    "UNKNOWN_VERSION",
]

# Category given to commands registered without one.
# Must sort after every real category name, it is always listed last.
UNCATEGORIZED = "zz_Other"

# Tokens triggering help, whatever the command's own option schema says
HELP_FLAGS = frozenset({"-h", "--help"})

# Help rendering defaults
DEFAULT_HELP_WIDTH = 100
DEFAULT_LEFT_PADDING = 4
DEFAULT_DESC_PADDING = 2

# Command listing: names are padded to at least this width, longer names are
# rounded up to the next multiple of NAME_COLUMN_STEP
MIN_NAME_COLUMN = 16
NAME_COLUMN_STEP = 4

# Plugins
ENTRY_POINT_GROUP = "plugcli.plugins"
UNKNOWN_VERSION = "unknown"

# Config file location: PLUGCLI_CONFIG wins, then XDG_CONFIG_HOME with fallback to ~/.config
CONFIG_ENV_VAR = "PLUGCLI_CONFIG"
CONFIG_DIR_NAME = "plugcli"
CONFIG_FILE_NAME = "config.toml"

# Shells handled by shtab
SUPPORTED_SHELLS = ("bash", "zsh", "tcsh")
