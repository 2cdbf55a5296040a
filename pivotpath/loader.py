"""
Module registry: loads Python modules by file path and caches them.

Modules are loaded straight from their source file, bypassing the normal
import search. Each loaded module is cached under the absolute path of its
source file, so loading the same path twice returns the same module object
without executing its body again. Evicting a path drops that entry for every
user of the registry.

Usage:
    from pivotpath.loader import get_default_registry

    registry = get_default_registry()
    handlers = registry.get_or_load("/srv/app/handlers/main.py")
    registry.evict("/srv/app/handlers/main.py")
"""

import hashlib
import importlib.machinery
import importlib.util
import logging
import os
import sys
import threading
from pathlib import Path
from types import ModuleType
from typing import Optional

from pivotpath import settings
from pivotpath.errors import ModuleLoadError

logger = logging.getLogger(__name__)


class _SourceLoader(importlib.machinery.SourceFileLoader):
    """Source loader that always compiles from the file on disk.

    Bytecode caches are neither read nor written, so a reload sees the
    current source even when it changed within the same mtime tick.
    """

    def get_code(self, fullname):
        source = self.get_data(self.path)
        return self.source_to_code(source, self.path)


def locate(path) -> Optional[str]:
    """
    Find the source file for a module path.

    Tried in order:
        <path> if it is a file
        <path>/__init__.py if <path> is a directory
        <path>.py

    Args:
        path: Absolute module path

    Returns:
        Absolute path of the source file, or None if nothing is loadable there
    """
    path = Path(os.path.abspath(path))

    if path.is_file():
        return str(path)

    if path.is_dir():
        init_path = path / settings.PACKAGE_INIT
        return str(init_path) if init_path.is_file() else None

    candidate = path.with_name(path.name + settings.SOURCE_SUFFIX)
    if candidate.is_file():
        return str(candidate)

    return None


def module_name_for(source_path: str) -> str:
    """Unique, stable sys.modules name for a source file."""
    digest = hashlib.sha1(source_path.encode("utf-8")).hexdigest()
    return settings.MODULE_NAME_PREFIX + digest[:settings.MODULE_NAME_HASH_LENGTH]


class ModuleRegistry:
    """Load-once cache of modules keyed by source file path."""

    def __init__(self):
        self._modules: dict[str, ModuleType] = {}
        self._lock = threading.RLock()

    def __contains__(self, path) -> bool:
        return self._cache_key(path) in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def _cache_key(self, path) -> str:
        # Deleted files still need to be evictable, so fall back to the plain path
        return locate(path) or str(Path(os.path.abspath(path)))

    def get(self, path) -> Optional[ModuleType]:
        """Return the cached module for path without loading it."""
        with self._lock:
            return self._modules.get(self._cache_key(path))

    def get_or_load(self, path) -> ModuleType:
        """
        Return the cached module for path, loading it on first use.

        Args:
            path: Absolute module path (file, package directory, or path without .py)

        Returns:
            The loaded module

        Raises:
            ModuleNotFoundError: Nothing loadable exists at path
            ModuleLoadError: The module body raised while executing
        """
        with self._lock:
            source_path = locate(path)
            if source_path is None:
                raise ModuleNotFoundError(
                    f"Module not found: {os.fspath(path)}", path=os.fspath(path)
                )

            module = self._modules.get(source_path)
            if module is not None:
                logger.debug("Module cache hit: %s", source_path)
                return module

            return self._load(source_path)

    def _load(self, source_path: str) -> ModuleType:
        name = module_name_for(source_path)
        search_locations = None
        if Path(source_path).name == settings.PACKAGE_INIT:
            search_locations = [str(Path(source_path).parent)]

        loader = _SourceLoader(name, source_path)
        spec = importlib.util.spec_from_file_location(
            name,
            source_path,
            loader=loader,
            submodule_search_locations=search_locations,
        )
        if spec is None or spec.loader is None:
            raise ModuleNotFoundError(f"Cannot load module from {source_path}", name=name, path=source_path)

        module = importlib.util.module_from_spec(spec)
        # Cached before the body runs; a cyclic load gets the partial module
        sys.modules[name] = module
        self._modules[source_path] = module
        logger.debug("Loading module %s from %s", name, source_path)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            self._modules.pop(source_path, None)
            sys.modules.pop(name, None)
            raise ModuleLoadError(source_path, name=name) from exc

        return module

    def evict(self, path) -> bool:
        """
        Drop the cached module for path.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            key = self._cache_key(path)
            module = self._modules.pop(key, None)
            if module is None:
                return False

            name = module.__name__
            if sys.modules.get(name) is module:
                del sys.modules[name]
            # Package submodules go too
            for sub_name in [n for n in sys.modules if n.startswith(name + ".")]:
                del sys.modules[sub_name]
            logger.debug("Evicted module %s (%s)", name, key)
            return True

    def clear(self) -> None:
        """Drop every cached module."""
        with self._lock:
            for key in list(self._modules):
                self.evict(key)


_default_registry = ModuleRegistry()


def get_default_registry() -> ModuleRegistry:
    """Get the process-wide module registry."""
    return _default_registry
