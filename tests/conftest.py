import logging

import pytest

from pico_factories import StaticLoaderContext, StringSource, reset

log_capture: list[str] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(self.format(record))


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture(autouse=True)
def reset_default_loader():
    reset()
    yield
    reset()


@pytest.fixture
def pico_logs():
    handler = ListLogHandler()
    logger = logging.getLogger("pico_factories")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


class CountingSource(StringSource):
    """StringSource that records how often it is read."""

    def __init__(self, text: str, name: str = "<counting>"):
        super().__init__(text, name)
        self.reads = 0

    def registrations(self):
        self.reads += 1
        return super().registrations()


@pytest.fixture
def make_context():
    def build(*texts: str, types=None) -> StaticLoaderContext:
        sources = [CountingSource(t, name=f"source-{i}") for i, t in enumerate(texts)]
        return StaticLoaderContext(sources, types=types)
    return build
