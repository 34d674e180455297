"""
Configuration for the relation engine.
Module-level defaults; Relation arguments and per-call arguments override them.
"""

# ============================================================================
# Index Configuration
# ============================================================================

# Primary key index used by new relations: 'none', 'tree' or 'hash'
DEFAULT_INDEX_KIND = 'tree'

# What insert does with a key that is already indexed:
# 'overwrite' replaces the index entry and warns, 'reject' refuses the tuple
DUPLICATE_KEY_POLICY = 'overwrite'

# ============================================================================
# Join Configuration
# ============================================================================

# Equi/natural join algorithm: 'nested_loop', 'hash' or 'index'
DEFAULT_JOIN_ALGORITHM = 'hash'

# Appended to right-side attribute names that collide with left-side ones
JOIN_SUFFIX = '2'

# ============================================================================
# Persistence Configuration
# ============================================================================

# Version written into every serialized relation record
SERIALIZATION_VERSION = 1

# Directory and file extension used by save/load
STORE_DIR = 'store'
STORE_EXT = '.dbf'

# ============================================================================
# Display and Logging
# ============================================================================

# Column width for fixed-width table output
DISPLAY_COLUMN_WIDTH = 15

# Level passed to logging.basicConfig by the workbench app
LOG_LEVEL = 'INFO'
