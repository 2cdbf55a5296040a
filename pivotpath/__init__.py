"""
pivotpath - Composed paths for loading and calling modules

Resolve sub-paths against a base directory, load the modules found there,
call them, or build callables that do so later:

    import pivotpath

    pivot = pivotpath.generate("/srv/app")
    pivot.resolve("/controllers/main.py")
    pivot.load("/controllers/main.py")
    pivot.invoke("/functions/total.py", scope, [1, 2, 3])
    app.add_route("/", pivot.bind("/controllers/main.py"))
"""
import logging

from pivotpath.binder import PathBinder, BoundCall
from pivotpath.errors import PivotPathError, ModuleLoadError, NotCallableError
from pivotpath.loader import ModuleRegistry, get_default_registry, locate
from pivotpath.scope import current_scope, call_with_scope

__version__ = "1.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

generate = PathBinder.create

__all__ = [
    # binder
    "PathBinder",
    "BoundCall",
    "generate",
    # loader
    "ModuleRegistry",
    "get_default_registry",
    "locate",
    # scope
    "current_scope",
    "call_with_scope",
    # errors
    "PivotPathError",
    "ModuleLoadError",
    "NotCallableError",
]
