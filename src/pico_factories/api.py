import logging
from typing import Any, List, Optional, Type, TypeVar, Union

from .cache import OnceCache
from .context import LoaderContext, context_or_default
from .exceptions import FactoryInstantiationError, FactoryTypeMismatchError, InvalidFactoryTypeError
from .instantiator import FactoryInstantiator
from .registry import FactoryMap, load_factory_map
from .resolver import ArgumentResolver

T = TypeVar("T")
KeyT = Union[str, type]

_logger = logging.getLogger(__name__)


class FactoriesLoader:
    """Discovers and instantiates the implementations registered for a factory type.

    Owns two caches: factory maps per loader context, and constructor
    selections per implementation type. Both may be injected, e.g. to share
    them between loaders or to isolate tests.

    Args:
        cache: Cache of factory maps keyed by loader context.
        instantiators: Cache of :class:`FactoryInstantiator` keyed by class.
    """

    def __init__(
        self,
        cache: Optional[OnceCache[LoaderContext, FactoryMap]] = None,
        instantiators: Optional[OnceCache[type, FactoryInstantiator]] = None,
    ) -> None:
        self.cache: OnceCache[LoaderContext, FactoryMap] = cache if cache is not None else OnceCache()
        self.instantiators: OnceCache[type, FactoryInstantiator] = (
            instantiators if instantiators is not None else OnceCache()
        )

    def factory_map(self, context: Optional[LoaderContext] = None) -> FactoryMap:
        return self.cache.get_or_compute(context_or_default(context), load_factory_map)

    def load_factory_names(self, factory_type: KeyT, context: Optional[LoaderContext] = None) -> List[str]:
        """Return the implementation names registered for *factory_type*, in discovery order.

        Args:
            factory_type: The factory type, or its registration name.
            context: The loader context; ``None`` selects the default one.

        Returns:
            A new list, empty when nothing is registered.
        """
        ctx = context_or_default(context)
        name = ctx.name_of(factory_type)
        names = list(self.factory_map(ctx).get(name, ()))
        _logger.debug("Loaded [%s] names: %s", name, names)
        return names

    def load_factories(
        self,
        factory_type: Type[T],
        context: Optional[LoaderContext] = None,
        resolver: Optional[ArgumentResolver] = None,
    ) -> List[T]:
        """Instantiate every implementation registered for *factory_type*.

        Args:
            factory_type: The type every instance must satisfy.
            context: The loader context; ``None`` selects the default one.
            resolver: Supplies constructor arguments; defaults to
                :meth:`ArgumentResolver.none`.

        Returns:
            The instances, in the order of :meth:`load_factory_names`.

        Raises:
            FactoryInstantiationError: If a name cannot be resolved, has no
                suitable constructor, or its constructor fails.
            InvalidFactoryTypeError: If *factory_type* is not usable with
                ``isinstance`` (a string name, a non-runtime-checkable
                ``Protocol``); raised before anything is instantiated.
            FactoryTypeMismatchError: If an instance does not satisfy
                *factory_type*.
        """
        _check_factory_type(factory_type)
        ctx = context_or_default(context)
        resolver = resolver if resolver is not None else ArgumentResolver.none()
        result: List[T] = []
        for name in self.load_factory_names(factory_type, ctx):
            result.append(self._instantiate(name, factory_type, ctx, resolver))
        return result

    def _instantiate(self, name: str, factory_type: Type[T], ctx: LoaderContext, resolver: ArgumentResolver) -> T:
        try:
            implementation = ctx.resolve_type(name)
            instantiator = self.instantiators.get_or_compute(implementation, FactoryInstantiator.for_class)
            instance: Any = instantiator.instantiate(resolver)
        except Exception as e:
            raise FactoryInstantiationError(name, factory_type, e) from e
        if not isinstance(instance, factory_type):
            raise FactoryTypeMismatchError(name, factory_type)
        return instance

    def reset(self) -> None:
        """Drop every cached factory map and constructor selection."""
        self.cache.clear()
        self.instantiators.clear()


def _check_factory_type(factory_type: Any) -> None:
    try:
        isinstance(None, factory_type)
    except TypeError as e:
        raise InvalidFactoryTypeError(factory_type, e) from e


_default_loader = FactoriesLoader()


def default_loader() -> FactoriesLoader:
    return _default_loader


def load_factory_names(factory_type: KeyT, context: Optional[LoaderContext] = None) -> List[str]:
    return _default_loader.load_factory_names(factory_type, context)


def load_factories(
    factory_type: Type[T],
    context: Optional[LoaderContext] = None,
    resolver: Optional[ArgumentResolver] = None,
) -> List[T]:
    return _default_loader.load_factories(factory_type, context, resolver)


def reset() -> None:
    _default_loader.reset()
