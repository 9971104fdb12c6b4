# pico_factories/__init__.py
from ._version import __version__

from .api import FactoriesLoader, default_loader, load_factories, load_factory_names, reset
from .cache import OnceCache
from .context import (
    DEFAULT_CONTEXT, DEFAULT_TYPES,
    LoaderContext, SearchPathContext, StaticLoaderContext, TypeRegistry,
    register,
)
from .decorators import constructor
from .exceptions import (
    FactoriesError, ConfigurationError, MalformedRegistrationError,
    TypeRegistrationError, TypeResolutionError, NoSuitableConstructorError,
    InstantiationError, FactoryInstantiationError, FactoryTypeMismatchError,
    InvalidFactoryTypeError,
)
from .instantiator import FactoryInstantiator
from .resolver import ArgumentResolver
from .sources import FileSource, RegistrationSource, StringSource, YamlSource

__all__ = [
    "__version__",
    "FactoriesLoader",
    "default_loader",
    "load_factories",
    "load_factory_names",
    "reset",
    "OnceCache",
    "DEFAULT_CONTEXT",
    "DEFAULT_TYPES",
    "LoaderContext",
    "SearchPathContext",
    "StaticLoaderContext",
    "TypeRegistry",
    "register",
    "constructor",
    "FactoriesError",
    "ConfigurationError",
    "MalformedRegistrationError",
    "TypeRegistrationError",
    "TypeResolutionError",
    "NoSuitableConstructorError",
    "InstantiationError",
    "FactoryInstantiationError",
    "FactoryTypeMismatchError",
    "InvalidFactoryTypeError",
    "FactoryInstantiator",
    "ArgumentResolver",
    "FileSource",
    "RegistrationSource",
    "StringSource",
    "YamlSource",
]
