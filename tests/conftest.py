"""
Test Configuration and Fixtures

Provides shared fixtures for all tests.
"""
import pytest
import tempfile
import textwrap
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pivotpath.loader import ModuleRegistry


CONTROLLER_CODE = '''
from pivotpath import current_scope

def exports(*args):
    return {"scope": current_scope(), "args": list(args), "data": "Yeah"}
'''

MIDDLEWARE_CODE = '''
from pivotpath import current_scope

def exports(req=None, res=None, next=None):
    return {"scope": current_scope(), "args": [req, res, next], "data": "YeahYeah"}
'''

# Adds up the factory args, then multiplies by the call args
FACTORY_CODE = '''
def exports(*factory_args):
    def compute(*function_args):
        result = sum(factory_args)
        for value in function_args:
            result *= value
        return result
    return compute
'''


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def registry():
    """Isolated module registry, emptied after the test."""
    reg = ModuleRegistry()
    yield reg
    reg.clear()


@pytest.fixture
def write_module(temp_dir):
    """Write a module under temp_dir and return its path."""
    def _write(sub_path: str, code: str) -> Path:
        path = temp_dir / sub_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(code), encoding='utf-8')
        return path
    return _write


@pytest.fixture
def app_dir(temp_dir, write_module):
    """Base folder with a controller, a middleware and a factory module."""
    base = temp_dir / "my" / "folder" / "with" / "subpaths"
    write_module("my/folder/with/subpaths/controllers/myController.py", CONTROLLER_CODE)
    write_module("my/folder/with/subpaths/middlewares/myMiddleware.py", MIDDLEWARE_CODE)
    write_module("my/folder/with/subpaths/factories/myFactory.py", FACTORY_CODE)
    return base
