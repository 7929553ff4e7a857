LOGGER_NAME = 'adfwriter'
"""Application logger name identifier."""

LOG_FILE_FILE_NAME = 'adfwriter.log'
"""Default log file name."""

CONFIG_FILE_FILE_NAME = 'config.yaml'
"""Default configuration file name."""

ADF_VERSION = 1
"""The version of the Atlassian Document Format emitted in the `doc` node."""

TAB_INDENT_WIDTH = 2
"""Number of indentation columns a tab counts for when nesting list items."""

TABLE_LAYOUT = 'default'
"""The layout attribute set on every table node."""

WARNING_SNIPPET_LENGTH = 50
"""Maximum number of characters of the offending line quoted in a warning."""

PAYLOAD_TYPES = ('doc', 'comment', 'description')
"""The kinds of JSON output the CLI can produce."""

MAX_BLOCKQUOTE_DEPTH = 32
"""Deepest blockquote nesting converted; further `>` markers are kept as literal text."""
