"""Constructor invocation with resolved arguments."""

import inspect
from typing import Any, Dict, List, Optional, Tuple

from .analysis import ConstructorDescriptor, select_constructor
from .exceptions import InstantiationError
from .resolver import ArgumentResolver


class FactoryInstantiator:
    """Creates instances of one implementation type through its selected constructor.

    Build with :meth:`for_class`; the constructor is chosen once, up front,
    and reused by every :meth:`instantiate` call.
    """

    __slots__ = ("_descriptor",)

    def __init__(self, descriptor: ConstructorDescriptor) -> None:
        self._descriptor = descriptor

    @classmethod
    def for_class(cls, implementation: type) -> "FactoryInstantiator":
        """Select the constructor of *implementation* eagerly.

        Raises:
            NoSuitableConstructorError: If no unique constructor qualifies.
        """
        return cls(select_constructor(implementation))

    @property
    def descriptor(self) -> ConstructorDescriptor:
        return self._descriptor

    def instantiate(self, resolver: Optional[ArgumentResolver] = None) -> Any:
        """Create an instance, injecting arguments from *resolver*.

        Unresolved parameters receive their declared default, or ``None``.

        Raises:
            InstantiationError: If resolving arguments or running the
                constructor fails.
        """
        resolver = resolver if resolver is not None else ArgumentResolver.none()
        try:
            args, kwargs = self._resolve_args(resolver)
            return self._descriptor.target()(*args, **kwargs)
        except Exception as e:
            raise InstantiationError(self._descriptor.owner, e) from e

    def _resolve_args(self, resolver: ArgumentResolver) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for param in self._descriptor.parameters:
            value = resolver.resolve(param.key)
            if value is None and param.has_default:
                value = param.default
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[param.parameter_name] = value
        return args, kwargs

    def __repr__(self) -> str:
        return f"FactoryInstantiator({self._descriptor.owner.__qualname__}.{self._descriptor.name})"
