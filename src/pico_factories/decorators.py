# pico_factories/decorators.py
from __future__ import annotations
from typing import Any, Optional

from .constants import PICO_CONSTRUCTOR


def _unwrap(fn: Any) -> Any:
    if isinstance(fn, (classmethod, staticmethod)):
        return fn.__func__
    return fn


def constructor(fn: Any = None, *, public: Optional[bool] = None):
    """Mark a function declared on a class as one of its constructors.

    ``__init__`` is always a constructor; marking it only changes its
    visibility. Any other marked classmethod or staticmethod is an alternate
    constructor that must return the new instance. When *public* is omitted,
    a leading underscore in the name makes the constructor non-public.
    """
    def dec(f):
        setattr(_unwrap(f), PICO_CONSTRUCTOR, {"public": public})
        return f
    return dec(fn) if fn is not None else dec


def constructor_meta(fn: Any) -> Optional[dict]:
    return getattr(_unwrap(fn), PICO_CONSTRUCTOR, None)
