"""Loader contexts and the explicit type registry.

A :class:`LoaderContext` is the discovery scope used as the cache key for
factory maps. It enumerates the registration sources visible to it and turns
implementation names back into classes. Name-to-class resolution goes through
a :class:`TypeRegistry` first, falling back to importing dotted names.
"""

import importlib
import logging
import os
import sys
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .constants import DEFAULT_RESOURCE_LOCATION, ENV_RESOURCE_LOCATION
from .exceptions import TypeRegistrationError, TypeResolutionError
from .sources import FileSource, RegistrationSource

_logger = logging.getLogger(__name__)

KeyT = Union[str, type]


def dotted_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class TypeRegistry:
    """Explicit name-to-class table.

    Implementations register themselves next to their definition, so that
    names read from registration sources resolve without ad hoc imports.

    Example:
        >>> types = TypeRegistry()
        >>> @types.register(name="shapes.Circle")
        ... class Circle: ...
        >>> types.resolve("shapes.Circle") is Circle
        True
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, type] = {}
        self._names: Dict[type, str] = {}
        self._lock = threading.Lock()

    def register(self, cls: Optional[type] = None, *, name: Optional[str] = None) -> Any:
        """Register a class under *name* (defaults to its dotted name).

        Usable as ``@types.register``, ``@types.register(name=...)`` or as a
        plain call ``types.register(cls)``.

        Raises:
            TypeRegistrationError: If *name* is already bound to another class.
        """
        def dec(c: type) -> type:
            key = name or dotted_name(c)
            with self._lock:
                existing = self._by_name.get(key)
                if existing is not None and existing is not c:
                    raise TypeRegistrationError(
                        f"Name '{key}' is already registered to {dotted_name(existing)}"
                    )
                self._by_name[key] = c
                self._names.setdefault(c, key)
            return c
        return dec(cls) if cls is not None else dec

    def resolve(self, name: str) -> Optional[type]:
        return self._by_name.get(name)

    def name_of(self, cls: type) -> Optional[str]:
        return self._names.get(cls)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


DEFAULT_TYPES = TypeRegistry()
"""Process-wide type registry used by contexts created without one."""

register = DEFAULT_TYPES.register


def _walk(obj: Any, attr_path: Sequence[str]) -> Any:
    for attr in attr_path:
        obj = getattr(obj, attr)
    return obj


def import_by_name(name: str) -> Any:
    """Import the object named by ``pkg.mod.Attr`` or ``pkg.mod:Outer.Inner``.

    Raises:
        TypeResolutionError: If no module prefix of *name* yields the object.
    """
    if ":" in name:
        module_name, _, attr_path = name.partition(":")
        try:
            return _walk(importlib.import_module(module_name), attr_path.split("."))
        except (ImportError, AttributeError) as e:
            raise TypeResolutionError(name, e) from e

    parts = name.split(".")
    last_error: Optional[BaseException] = None
    for i in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:i])
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            last_error = e
            continue
        try:
            return _walk(module, parts[i:])
        except AttributeError as e:
            last_error = e
    if last_error is None:
        raise TypeResolutionError(name, reason="not a dotted name")
    raise TypeResolutionError(name, last_error) from last_error


class LoaderContext:
    """Base class for discovery scopes.

    Contexts are compared and hashed by identity, which makes them usable as
    cache keys. Subclasses must implement :meth:`enumerate_sources`.

    Args:
        types: Type registry consulted before importing names; defaults to
            :data:`DEFAULT_TYPES`.
    """

    def __init__(self, types: Optional[TypeRegistry] = None) -> None:
        self.types = types if types is not None else DEFAULT_TYPES

    def enumerate_sources(self) -> Iterable[RegistrationSource]:
        """Return the registration sources of this scope, in discovery order.

        Raises:
            NotImplementedError: Always (must be overridden by subclasses).
        """
        raise NotImplementedError

    def resolve_type(self, name: str) -> type:
        """Resolve an implementation name to a class.

        Raises:
            TypeResolutionError: If *name* is unknown or does not name a class.
        """
        cls = self.types.resolve(name)
        if cls is None:
            cls = import_by_name(name)
        if not isinstance(cls, type):
            raise TypeResolutionError(name, reason=f"resolved to non-class object {cls!r}")
        return cls

    def name_of(self, key: KeyT) -> str:
        """Return the registration name for a factory type (strings pass through)."""
        if isinstance(key, str):
            return key
        return self.types.name_of(key) or dotted_name(key)


class StaticLoaderContext(LoaderContext):
    """Context over a fixed, ordered list of sources.

    Args:
        sources: The registration sources, in discovery order.
        types: Optional type registry.
    """

    def __init__(self, sources: Iterable[RegistrationSource], types: Optional[TypeRegistry] = None) -> None:
        super().__init__(types)
        self._sources = tuple(sources)

    def enumerate_sources(self) -> Iterable[RegistrationSource]:
        return self._sources

    def __repr__(self) -> str:
        return f"StaticLoaderContext({[s.name for s in self._sources]!r})"


class SearchPathContext(LoaderContext):
    """Context that looks for a registration resource on every search path entry.

    Args:
        paths: Directories to search, in order. Defaults to ``sys.path``,
            read each time sources are enumerated.
        resource_location: Relative path of the resource inside each directory.
            Defaults to ``$PICO_FACTORIES_RESOURCE`` or
            :data:`~pico_factories.constants.DEFAULT_RESOURCE_LOCATION`.
        environ: Environment mapping used for the lookup above
            (defaults to ``os.environ``).
        types: Optional type registry.
    """

    def __init__(
        self,
        paths: Optional[Iterable[str]] = None,
        *,
        resource_location: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        types: Optional[TypeRegistry] = None,
    ) -> None:
        super().__init__(types)
        self._paths: Optional[List[str]] = [os.fspath(p) for p in paths] if paths is not None else None
        self._resource_location = resource_location
        self._environ = environ

    @property
    def resource_location(self) -> str:
        if self._resource_location:
            return self._resource_location
        env = self._environ if self._environ is not None else os.environ
        return env.get(ENV_RESOURCE_LOCATION) or DEFAULT_RESOURCE_LOCATION

    def search_paths(self) -> List[str]:
        return list(self._paths) if self._paths is not None else list(sys.path)

    def enumerate_sources(self) -> Iterable[RegistrationSource]:
        location = self.resource_location
        found: List[RegistrationSource] = []
        seen = set()
        for entry in self.search_paths():
            base = os.path.abspath(entry or os.curdir)
            if base in seen or not os.path.isdir(base):
                continue
            seen.add(base)
            candidate = os.path.join(base, location)
            if os.path.isfile(candidate):
                found.append(FileSource(candidate))
        _logger.debug("Found %d '%s' resources on search path", len(found), location)
        return found

    def __repr__(self) -> str:
        return f"SearchPathContext(resource_location={self.resource_location!r})"


DEFAULT_CONTEXT = SearchPathContext()
"""Context used when callers pass ``None``."""


def context_or_default(context: Optional[LoaderContext]) -> LoaderContext:
    return context if context is not None else DEFAULT_CONTEXT
