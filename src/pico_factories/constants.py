"""Constants used throughout pico-factories.

This module defines the framework logger, the attribute name stamped onto
constructor functions by :func:`~pico_factories.decorators.constructor`, and
the default location of registration resources.
"""

import logging

LOGGER_NAME: str = "pico_factories"
"""Default logger name for pico-factories."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for pico-factories internal diagnostics."""

PICO_CONSTRUCTOR: str = "_pico_constructor"
"""Attribute name storing constructor metadata (a dict with a ``public`` entry)."""

DEFAULT_RESOURCE_LOCATION: str = "META-INF/pico.factories"
"""Relative path of the registration resource looked up on every search path entry."""

ENV_RESOURCE_LOCATION: str = "PICO_FACTORIES_RESOURCE"
"""Environment variable overriding :data:`DEFAULT_RESOURCE_LOCATION`."""
