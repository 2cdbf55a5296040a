"""
PathBinder

Resolves sub-paths against a base directory and loads, calls, or binds the
modules found there.

Usage:
    binder = PathBinder.create("/srv/app")

    binder.resolve("/controllers/main.py")      # "/srv/app/controllers/main.py"
    controller = binder.load("/controllers/main.py")
    data = binder.invoke("/functions/total.py", scope, [1, 2, 3])

    app.add_route("/", binder.bind("/controllers/main.py"))
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from pivotpath import settings
from pivotpath.errors import NotCallableError
from pivotpath.loader import ModuleRegistry, get_default_registry
from pivotpath.scope import call_with_scope

logger = logging.getLogger(__name__)

_SEPARATORS = "".join({"/", os.sep, os.altsep or ""})


def _exported(module) -> Any:
    """The value a module exports: its EXPORT_NAME attribute, else the module."""
    return getattr(module, settings.EXPORT_NAME, module)


class PathBinder:
    """Resolves and loads modules relative to a mutable base path."""

    def __init__(self, base_path, registry: Optional[ModuleRegistry] = None):
        self.base_path = os.fspath(base_path)
        self.registry = registry if registry is not None else get_default_registry()

    @classmethod
    def create(cls, base_path=None, registry: Optional[ModuleRegistry] = None) -> "PathBinder":
        """
        Create a binder.

        Args:
            base_path: Directory all sub-paths start from. Defaults to the
                current working directory, made absolute now.
            registry: Module cache to load through (default: process-wide)
        """
        if base_path is None:
            base_path = os.path.abspath(settings.DEFAULT_BASE_PATH)
        return cls(base_path, registry=registry)

    def set_base(self, base_path) -> "PathBinder":
        """Replace the base path (stored as given). Returns self for chaining."""
        self.base_path = os.fspath(base_path)
        return self

    def resolve(self, sub_path=None) -> str:
        """Join sub_path, minus its leading separators, onto the current base path."""
        sub_path = os.fspath(sub_path) if sub_path is not None else ""
        return os.path.abspath(os.path.join(self.base_path, sub_path.lstrip(_SEPARATORS)))

    def load(self, sub_path) -> Any:
        """
        Load the module at sub_path and return its exported value.

        Cached: a second load of the same module returns the same value
        without running the module again.

        Raises:
            ModuleNotFoundError: Nothing loadable at the resolved path
            ModuleLoadError: The module raised while executing
        """
        return self._load(self.resolve(sub_path))

    def load_fresh(self, sub_path) -> Any:
        """
        Like load(), but always re-runs the module from its current source.

        The cache entry is dropped for every user of the registry, together
        with any submodules a package imported.
        """
        return self._load(self.resolve(sub_path), fresh=True)

    def _load(self, path: str, fresh: bool = False) -> Any:
        if fresh:
            self.registry.evict(path)
        return _exported(self.registry.get_or_load(path))

    def invoke(
        self,
        sub_path,
        scope: Any = None,
        args: Iterable = (),
        kwargs: Optional[dict] = None,
    ) -> Any:
        """
        Load the module at sub_path and call its exported function.

        Args:
            sub_path: Module path relative to the base path
            scope: Value returned by current_scope() during the call
            args: Positional arguments, in order
            kwargs: Keyword arguments

        Returns:
            Whatever the function returns

        Raises:
            NotCallableError: The module does not export a callable
        """
        path = self.resolve(sub_path)
        return self._call(path, self._load(path), scope, args, kwargs)

    def invoke_fresh(
        self,
        sub_path,
        scope: Any = None,
        args: Iterable = (),
        kwargs: Optional[dict] = None,
    ) -> Any:
        """Like invoke(), reloading the module first."""
        path = self.resolve(sub_path)
        return self._call(path, self._load(path, fresh=True), scope, args, kwargs)

    def bind(
        self,
        sub_path,
        scope: Any = None,
        args: Iterable = (),
        kwargs: Optional[dict] = None,
    ) -> "BoundCall":
        """
        Return a callable that loads and invokes sub_path when called.

        The path is resolved on every call, so set_base() changes where the
        callable loads from. Arguments given here are passed before the ones
        given at call time. Loads are cached, so later edits to the module
        source are not seen; use bind_fresh() for that.
        """
        return BoundCall(self, os.fspath(sub_path), scope, tuple(args), dict(kwargs or {}))

    def bind_fresh(
        self,
        sub_path,
        scope: Any = None,
        args: Iterable = (),
        kwargs: Optional[dict] = None,
    ) -> "BoundCall":
        """Like bind(), reloading the module on every call."""
        return BoundCall(self, os.fspath(sub_path), scope, tuple(args), dict(kwargs or {}), fresh=True)

    @staticmethod
    def _call(path: str, target: Any, scope: Any, args: Iterable, kwargs: Optional[dict]) -> Any:
        if not callable(target):
            raise NotCallableError(path, target)
        logger.debug("Invoking %s", path)
        return call_with_scope(target, scope, tuple(args), kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.base_path!r})"


@dataclass(frozen=True, eq=False)
class BoundCall:
    """
    Deferred load-and-invoke of a module, created by PathBinder.bind().

    Attributes:
        binder: Binder the sub-path is resolved against at call time
        sub_path: Module path relative to the binder's base path
        scope: Scope installed during the call
        args: Positional arguments passed before the call-time ones
        kwargs: Keyword arguments, overridden by call-time ones
        fresh: Reload the module on every call
    """
    binder: PathBinder
    sub_path: str
    scope: Any = None
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    fresh: bool = False

    def __call__(self, *args, **kwargs) -> Any:
        invoke = self.binder.invoke_fresh if self.fresh else self.binder.invoke
        return invoke(self.sub_path, self.scope, self.args + args, {**self.kwargs, **kwargs})
