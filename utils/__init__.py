"""Lightweight utils package namespace.

Lazily import submodules so `import utils` stays cheap for the CLI.
"""

from importlib import import_module
from types import ModuleType
from typing import Dict

__all__ = [
    "lookups",
    "maths_funcs",
    "runlog",
    "text_matching",
]

_MODULE_MAP: Dict[str, str] = {name: f".{name}" for name in __all__}


def __getattr__(name: str) -> ModuleType:
    if name not in _MODULE_MAP:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_MODULE_MAP[name], __name__)
    globals()[name] = module
    return module


def __dir__() -> list[str]:
    return sorted(list(__all__) + list(globals().keys()))
