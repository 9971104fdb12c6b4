"""Registration sources.

Provides the :class:`RegistrationSource` base class and its concrete
implementations: :class:`StringSource`, :class:`FileSource`, and
:class:`YamlSource`. A source yields raw ``(factory_type_name,
implementation_name)`` pairs in the order they appear; merging and
deduplication happen in :mod:`pico_factories.registry`.
"""

from typing import Any, Iterable, Iterator, List, Tuple

from .exceptions import ConfigurationError, MalformedRegistrationError

Registration = Tuple[str, str]

_COMMENT_PREFIXES = ("#", "!")


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    pending: List[str] = []
    start = 0
    for line_no, raw in enumerate(text.splitlines(), 1):
        stripped = raw.strip()
        if not pending:
            if not stripped or stripped.startswith(_COMMENT_PREFIXES):
                continue
            start = line_no
        if stripped.endswith("\\"):
            pending.append(stripped[:-1])
            continue
        pending.append(stripped)
        yield start, "".join(pending)
        pending = []
    if pending:
        yield start, "".join(pending)


def _split_entry(line: str) -> Tuple[str, str] | None:
    sep = line.find("=")
    if sep < 0:
        sep = line.find(":")
    if sep < 0:
        return None
    return line[:sep].strip(), line[sep + 1:]


def split_names(value: str) -> List[str]:
    """Split a comma-separated value into trimmed, non-empty names."""
    return [v.strip() for v in value.split(",") if v.strip()]


def parse_registrations(text: str, source: str) -> List[Registration]:
    """Parse properties-style registration text.

    Blank lines and lines starting with ``#`` or ``!`` are ignored, ``=``
    separates the key from its comma-separated values (``:`` only when the
    entry has no ``=``, so keys may use the ``pkg.mod:Outer.Inner`` form),
    and a trailing backslash continues the entry on the next line.

    Args:
        text: The raw resource contents.
        source: Identity of the source, used in error messages.

    Returns:
        The ``(key, value)`` pairs in resource order.

    Raises:
        MalformedRegistrationError: If an entry has no separator or an empty key.
    """
    result: List[Registration] = []
    for line_no, line in _logical_lines(text):
        parts = _split_entry(line)
        if parts is None:
            raise MalformedRegistrationError(source, line_no, line)
        key, value = parts
        if not key:
            raise MalformedRegistrationError(source, line_no, line, reason="empty factory type name")
        result.extend((key, name) for name in split_names(value))
    return result


class RegistrationSource:
    """Base class for registration sources.

    Subclasses must implement :meth:`registrations`.
    """

    name: str = "<unknown>"

    def registrations(self) -> Iterable[Registration]:
        """Return the ``(factory_type_name, implementation_name)`` pairs of this source.

        Raises:
            NotImplementedError: Always (must be overridden by subclasses).
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StringSource(RegistrationSource):
    """Registration source backed by in-memory text.

    Args:
        text: Properties-style registration text.
        name: Identity reported in error messages.

    Example:
        >>> src = StringSource("app.Shape=app.Circle, app.Square")
        >>> list(src.registrations())
        [('app.Shape', 'app.Circle'), ('app.Shape', 'app.Square')]
    """

    def __init__(self, text: str, name: str = "<string>"):
        self._text = text
        self.name = name

    def registrations(self) -> Iterable[Registration]:
        return parse_registrations(self._text, self.name)


class FileSource(RegistrationSource):
    """Registration source that reads a UTF-8 properties file.

    Args:
        path: Filesystem path to the resource.

    Raises:
        MalformedRegistrationError: If the file cannot be read or parsed.
    """

    def __init__(self, path: str):
        self._path = str(path)
        self.name = self._path

    def registrations(self) -> Iterable[Registration]:
        try:
            with open(self._path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedRegistrationError(self.name, reason=f"unreadable: {e}") from e
        return parse_registrations(text, self.name)


class YamlSource(RegistrationSource):
    """Registration source that reads a YAML mapping.

    Each key is a factory type name; each value is either a list of
    implementation names or a comma-separated string. Requires ``PyYAML``
    (``pip install pico-factories[yaml]``).

    Args:
        path: Filesystem path to the YAML file.

    Raises:
        ConfigurationError: If PyYAML is not installed.
        MalformedRegistrationError: If the file cannot be loaded or does not
            have the expected shape.
    """

    def __init__(self, path: str):
        self._path = str(path)
        self.name = self._path

    def registrations(self) -> Iterable[Registration]:
        try:
            import yaml
        except ImportError as e:
            raise ConfigurationError("PyYAML not installed") from e
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise MalformedRegistrationError(self.name, reason=f"failed to load YAML: {e}") from e
        if not isinstance(data, dict):
            raise MalformedRegistrationError(self.name, reason="top level must be a mapping")

        result: List[Registration] = []
        for key, value in data.items():
            if not isinstance(key, str) or not key.strip():
                raise MalformedRegistrationError(self.name, reason=f"invalid factory type name {key!r}")
            result.extend((key.strip(), name) for name in self._names(key, value))
        return result

    def _names(self, key: str, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return split_names(value)
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return [v.strip() for v in value if v.strip()]
        raise MalformedRegistrationError(self.name, reason=f"values of {key!r} must be a string or a list of strings")
