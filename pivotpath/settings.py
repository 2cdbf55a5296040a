"""
pivotpath - Settings
"""

# =============================================================================
# BASE PATH
# =============================================================================

# Base directory used when a binder is created without one.
# Made absolute at creation time.
DEFAULT_BASE_PATH = "."

# =============================================================================
# MODULE LOCATION
# =============================================================================

# Tried after the exact path when it does not exist ("handlers/main" -> "handlers/main.py")
SOURCE_SUFFIX = ".py"

# A directory is loadable when it contains this file
PACKAGE_INIT = "__init__.py"

# =============================================================================
# EXPORTS
# =============================================================================

# Module-level name holding the value a module exports.
# Modules without it export the module object itself.
EXPORT_NAME = "exports"

# =============================================================================
# MODULE NAMING
# =============================================================================

# Loaded modules are registered in sys.modules as <prefix><hash of source path>
MODULE_NAME_PREFIX = "_pivotpath_"
MODULE_NAME_HASH_LENGTH = 12
