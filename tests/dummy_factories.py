"""Factory types and implementations registered by the loader tests."""

from pico_factories import constructor


class DummyFactory:
    def get_string(self) -> str:
        raise NotImplementedError


class MyDummyFactory1(DummyFactory):
    def get_string(self) -> str:
        return "Foo"


class MyDummyFactory2(DummyFactory):
    def get_string(self) -> str:
        return "Bar"


class DummyPackagePrivateFactory:
    pass


class _HiddenDummyFactory(DummyPackagePrivateFactory):
    pass


class ConstructorArgsDummyFactory(DummyFactory):
    def __init__(self, string: str):
        self._string = string

    def get_string(self) -> str:
        return self._string


class MultipleConstructorArgsDummyFactory(DummyFactory):
    @constructor(public=False)
    def __init__(self, string: str, number: int = 0):
        self._string = string
        self._number = number

    @constructor
    @classmethod
    def _from_string(cls, string: str) -> "MultipleConstructorArgsDummyFactory":
        return cls(string)

    def get_string(self) -> str:
        return self._string


class FailingDummyFactory(DummyFactory):
    def __init__(self):
        raise RuntimeError("boom")
