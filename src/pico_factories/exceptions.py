"""Exception hierarchy for pico-factories.

All framework-specific exceptions inherit from :class:`FactoriesError`, making
it easy to catch any pico-factories error with a single ``except FactoriesError``
clause.
"""

from typing import Any, Optional


def _type_name(obj: Any) -> str:
    if isinstance(obj, str):
        return obj
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if qualname is None:
        return str(obj)
    return f"{module}.{qualname}" if module else qualname


class FactoriesError(Exception):
    """Base exception for all pico-factories errors."""

    pass


class ConfigurationError(FactoriesError):
    """Raised for configuration problems (missing optional dependency, bad settings)."""

    def __init__(self, msg: str):
        super().__init__(msg)


class MalformedRegistrationError(FactoriesError):
    """Raised when a registration source cannot be parsed.

    Attributes:
        source: Identity of the offending source.
        line_no: 1-based line number of the bad entry, if known.
        line: The raw text of the bad entry, if known.
    """

    def __init__(self, source: str, line_no: Optional[int] = None, line: Optional[str] = None, reason: str = "expected 'key=value'"):
        where = f"{source}:{line_no}" if line_no is not None else source
        detail = f": {line!r}" if line is not None else ""
        super().__init__(f"Malformed registration in [{where}] ({reason}){detail}")
        self.source = source
        self.line_no = line_no
        self.line = line


class TypeRegistrationError(FactoriesError):
    """Raised when a type registry receives conflicting registrations."""

    def __init__(self, msg: str):
        super().__init__(msg)


class TypeResolutionError(FactoriesError):
    """Raised when an implementation name cannot be resolved to a class.

    Attributes:
        name: The name that failed to resolve.
        cause: The underlying exception, if any.
    """

    def __init__(self, name: str, cause: Optional[BaseException] = None, reason: Optional[str] = None):
        msg = f"Unable to resolve type [{name}]"
        if reason:
            msg += f": {reason}"
        elif cause is not None:
            msg += f"; cause: {cause.__class__.__name__}: {cause}"
        super().__init__(msg)
        self.name = name
        self.cause = cause


class NoSuitableConstructorError(FactoriesError):
    """Raised when an implementation type has no unique eligible constructor.

    Attributes:
        cls: The implementation type (or object) that was inspected.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None):
        msg = f"Class [{_type_name(cls)}] has no suitable constructor"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.cls = cls


class InstantiationError(FactoriesError):
    """Raised when the selected constructor fails while creating an instance.

    Attributes:
        cls: The implementation type being instantiated.
        cause: The original exception raised by the constructor.
    """

    def __init__(self, cls: Any, cause: BaseException):
        super().__init__(f"Failed to instantiate [{_type_name(cls)}]; cause: {cause.__class__.__name__}: {cause}")
        self.cls = cls
        self.cause = cause


class FactoryInstantiationError(FactoriesError):
    """Raised by ``load_factories`` when an implementation cannot be produced.

    Attributes:
        implementation_name: The registered implementation name.
        factory_type: The requested factory type.
        cause: The original exception, if any.
    """

    def __init__(self, implementation_name: str, factory_type: Any, cause: Optional[BaseException] = None, detail: Optional[str] = None):
        msg = f"Unable to instantiate factory class [{implementation_name}] for factory type [{_type_name(factory_type)}]"
        if detail:
            msg += f": {detail}"
        elif cause is not None:
            msg += f"; cause: {cause.__class__.__name__}: {cause}"
        super().__init__(msg)
        self.implementation_name = implementation_name
        self.factory_type = factory_type
        self.cause = cause


class FactoryTypeMismatchError(FactoryInstantiationError):
    """Raised when an instantiated object does not satisfy the requested factory type."""

    def __init__(self, implementation_name: str, factory_type: Any):
        super().__init__(
            implementation_name,
            factory_type,
            detail=f"class [{implementation_name}] is not assignable to factory type [{_type_name(factory_type)}]",
        )


class InvalidFactoryTypeError(FactoriesError):
    """Raised when a factory type cannot be used to check instances.

    Attributes:
        factory_type: The rejected factory type.
        cause: The underlying exception, if any.
    """

    def __init__(self, factory_type: Any, cause: Optional[BaseException] = None):
        msg = f"Factory type [{_type_name(factory_type)}] cannot be used for instance checks"
        if cause is not None:
            msg += f"; cause: {cause.__class__.__name__}: {cause}"
        super().__init__(msg)
        self.factory_type = factory_type
        self.cause = cause
