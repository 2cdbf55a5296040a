"""
Error types raised by pivotpath.

Missing modules raise the builtin ModuleNotFoundError (with ``name`` and
``path`` set), so callers can keep catching ImportError as usual.
"""
from typing import Any


class PivotPathError(Exception):
    """Base class for pivotpath errors."""


class ModuleLoadError(PivotPathError, ImportError):
    """The module body raised while executing. The original error is the __cause__."""

    def __init__(self, path: str, name: str = None):
        super().__init__(f"Error while loading module: {path}", name=name, path=path)


class NotCallableError(PivotPathError, TypeError):
    """The value exported by a module cannot be called."""

    def __init__(self, path: str, value: Any):
        self.path = path
        self.value = value
        super().__init__(
            f"Module export is not callable: {path} ({type(value).__name__})"
        )
