import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Union, get_args, get_origin, get_type_hints, Annotated

from .decorators import constructor_meta
from .exceptions import NoSuitableConstructorError

INIT = "__init__"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterRequest:
    parameter_name: str
    key: Any
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty


@dataclass(frozen=True)
class ConstructorCandidate:
    name: str
    public: bool


@dataclass(frozen=True)
class ConstructorDescriptor:
    """The constructor selected for an implementation type.

    Attributes:
        owner: The implementation type.
        name: ``"__init__"`` or the attribute name of an alternate constructor.
        public: Whether the constructor is public.
        parameters: The injectable parameters, in declaration order.
    """
    owner: type
    name: str
    public: bool
    parameters: Tuple[ParameterRequest, ...] = ()

    def target(self) -> Callable[..., Any]:
        if self.name == INIT:
            return self.owner
        return getattr(self.owner, self.name)


def _strip_annotated(ann: Any) -> Any:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        return args[0] if args else Any
    return ann


def _check_optional(ann: Any) -> Any:
    if get_origin(ann) is Union:
        args = [a for a in get_args(ann) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return ann


def _safe_hints(fn: Any) -> Dict[str, Any]:
    try:
        return get_type_hints(fn, include_extras=True)
    except Exception:
        return {}


def _is_public(name: str, meta: Dict[str, Any]) -> bool:
    explicit = meta.get("public")
    if explicit is not None:
        return bool(explicit)
    return name == INIT or not name.startswith("_")


def find_constructors(cls: type) -> List[ConstructorCandidate]:
    found = [ConstructorCandidate(INIT, _is_public(INIT, constructor_meta(cls.__init__) or {}))]
    for name, attr in vars(cls).items():
        if name == INIT:
            continue
        meta = constructor_meta(attr)
        if meta is not None:
            found.append(ConstructorCandidate(name, _is_public(name, meta)))
    return found


def _init_callable(cls: type) -> Any:
    if cls.__init__ is not object.__init__:
        return cls.__init__
    if cls.__new__ is not object.__new__:
        return cls.__new__
    return None


def analyze_parameters(cls: type, name: str) -> Tuple[ParameterRequest, ...]:
    if name == INIT:
        fn = _init_callable(cls)
        if fn is None:
            return ()
        skip = 1
    else:
        target = getattr(cls, name)
        fn = getattr(target, "__func__", target)
        skip = 1 if inspect.ismethod(target) else 0
    hints = _safe_hints(fn)
    try:
        sig = inspect.signature(fn)
    except (ValueError, TypeError):
        return ()

    plan: List[ParameterRequest] = []
    for pname, param in list(sig.parameters.items())[skip:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        ann = hints.get(pname, param.annotation)
        if ann is inspect.Parameter.empty:
            key: Any = pname
        else:
            key = _strip_annotated(_check_optional(_strip_annotated(ann)))
        plan.append(ParameterRequest(pname, key, param.kind, param.default))
    return tuple(plan)


def select_constructor(cls: Any) -> ConstructorDescriptor:
    """Pick the single eligible constructor of *cls*.

    The sole public constructor wins; otherwise a class with exactly one
    constructor of any visibility uses it.

    Raises:
        NoSuitableConstructorError: If *cls* is not a class, or no unique
            constructor qualifies.
    """
    if not isinstance(cls, type):
        raise NoSuitableConstructorError(cls, "not a class")
    candidates = find_constructors(cls)
    public = [c for c in candidates if c.public]
    if len(public) == 1:
        chosen = public[0]
    elif len(candidates) == 1:
        chosen = candidates[0]
    else:
        raise NoSuitableConstructorError(
            cls, f"{len(public)} public among {len(candidates)} constructors: {', '.join(c.name for c in candidates)}"
        )
    _logger.debug("Selected constructor '%s' of %s", chosen.name, cls.__qualname__)
    return ConstructorDescriptor(cls, chosen.name, chosen.public, analyze_parameters(cls, chosen.name))
