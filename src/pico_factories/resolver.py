"""Composable argument resolution for constructor injection.

An :class:`ArgumentResolver` maps a requested key (a type, or a parameter name
for unannotated parameters) to a value, or to ``None`` when it has nothing to
offer. Resolvers combine left to right: the leftmost resolver that produces a
value wins.
"""

from typing import Any, Callable, Optional, Union

KeyT = Union[str, type]


class ArgumentResolver:
    """Strategy that resolves constructor arguments by requested key.

    Keys match exactly: ``ArgumentResolver.of(Sequence, "x")`` resolves
    ``Sequence`` but not ``str``.

    Example:
        >>> r = ArgumentResolver.of(str, "name").and_(int, 42)
        >>> r.resolve(str), r.resolve(int), r.resolve(float)
        ('name', 42, None)
    """

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[KeyT], Any]):
        self._fn = fn

    def resolve(self, key: KeyT) -> Optional[Any]:
        """Return the value for *key*, or ``None`` when this resolver has none."""
        return self._fn(key)

    @classmethod
    def none(cls) -> "ArgumentResolver":
        """A resolver that never produces a value."""
        return _NONE

    @classmethod
    def of(cls, key: KeyT, value: Any) -> "ArgumentResolver":
        """Resolve exactly *key* to *value*."""
        return cls.of_supplied(key, lambda: value)

    @classmethod
    def of_supplied(cls, key: KeyT, supplier: Callable[[], Any]) -> "ArgumentResolver":
        """Resolve exactly *key* by calling *supplier* on every resolution."""
        return cls(lambda requested: supplier() if _same_key(requested, key) else None)

    @classmethod
    def from_function(cls, fn: Callable[[KeyT], Any]) -> "ArgumentResolver":
        """Adapt a ``key -> value or None`` function."""
        return cls(fn)

    def and_(self, key_or_resolver: Union[KeyT, "ArgumentResolver"], *value: Any) -> "ArgumentResolver":
        """Fall back to another resolver, or to a single ``key -> value`` binding.

        Call as ``and_(other_resolver)`` or ``and_(key, value)``. Keys already
        resolved by ``self`` keep their value.
        """
        if isinstance(key_or_resolver, ArgumentResolver):
            if value:
                raise TypeError("and_() takes a resolver or a (key, value) pair, not both")
            return self._then(key_or_resolver)
        if len(value) != 1:
            raise TypeError("and_() requires exactly one value for a key binding")
        return self._then(ArgumentResolver.of(key_or_resolver, value[0]))

    def and_supplied(self, key: KeyT, supplier: Callable[[], Any]) -> "ArgumentResolver":
        """Fall back to resolving *key* from *supplier*."""
        return self._then(ArgumentResolver.of_supplied(key, supplier))

    def _then(self, other: "ArgumentResolver") -> "ArgumentResolver":
        first = self

        def resolve(key: KeyT) -> Any:
            resolved = first.resolve(key)
            return resolved if resolved is not None else other.resolve(key)

        return ArgumentResolver(resolve)


def _same_key(requested: Any, key: Any) -> bool:
    if isinstance(key, type) or isinstance(requested, type):
        return requested is key
    return requested == key


_NONE = ArgumentResolver(lambda key: None)
