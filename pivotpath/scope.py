"""
Call scope for invoked module exports.

Python functions have no implicit receiver, so the scope passed to
PathBinder.invoke() / bind() is installed in a context variable for the
duration of the call. The called function reads it back with
current_scope():

    from pivotpath import current_scope

    def exports(req, res):
        app = current_scope()
        ...
"""
from contextvars import ContextVar
from typing import Any, Callable, Optional

_current_scope: ContextVar = ContextVar("pivotpath_scope", default=None)


def current_scope() -> Any:
    """Return the scope of the innermost active invocation, or None."""
    return _current_scope.get()


def call_with_scope(
    func: Callable,
    scope: Any = None,
    args: tuple = (),
    kwargs: Optional[dict] = None,
) -> Any:
    """Call func(*args, **kwargs) with scope as the current scope."""
    token = _current_scope.set(scope)
    try:
        return func(*args, **(kwargs or {}))
    finally:
        _current_scope.reset(token)
