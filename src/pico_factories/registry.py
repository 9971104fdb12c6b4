"""Factory map aggregation.

Merges the registrations of every source visible to a loader context into a
single ordered, deduplicated ``factory type name -> implementation names``
map.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Tuple

from .context import LoaderContext
from .sources import Registration, RegistrationSource

_logger = logging.getLogger(__name__)

FactoryMap = Mapping[str, Tuple[str, ...]]


def merge_registrations(registrations: Iterable[Registration]) -> Dict[str, Tuple[str, ...]]:
    """Merge ``(key, value)`` pairs; the first occurrence of a value keeps its position."""
    merged: Dict[str, List[str]] = {}
    for key, value in registrations:
        names = merged.setdefault(key, [])
        if value not in names:
            names.append(value)
    return {key: tuple(names) for key, names in merged.items()}


def _iter_registrations(sources: Iterable[RegistrationSource]) -> Iterable[Registration]:
    for source in sources:
        yield from source.registrations()


def load_factory_map(context: LoaderContext) -> FactoryMap:
    """Scan every source of *context* and build its factory map.

    Raises:
        MalformedRegistrationError: If any source fails to parse; the whole
            aggregation is abandoned.
    """
    sources = list(context.enumerate_sources())
    result = merge_registrations(_iter_registrations(sources))
    _logger.debug(
        "Loaded factory map for %r: %d factory types from %d sources",
        context,
        len(result),
        len(sources),
    )
    return result
