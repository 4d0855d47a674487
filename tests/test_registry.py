from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

import pytest

from beanstalk.domain import BeanDefinition
from beanstalk.errors import DependencyError, DuplicateNameError
from beanstalk.markers import Inject, bean_name
from beanstalk.registry import BeanRegistry, capabilities_of, is_capability


class Printer(ABC):
    @abstractmethod
    def print(self, line: str):
        pass


class Marker(ABC):
    pass


class Greeter(Protocol):
    def greet(self) -> str:
        ...


@runtime_checkable
class Closeable(Protocol):
    def close(self):
        ...


class ConsolePrinter(Printer):
    def print(self, line: str):
        pass


class FancyPrinter(ConsolePrinter, Marker):
    pass


@Inject("mock")
class MockPrinter(Printer):
    def print(self, line: str):
        pass


class EnglishGreeter(Greeter):
    def greet(self) -> str:
        return "hello"

    def close(self):
        pass


def register(registry: BeanRegistry, cls: type, name: str = None):
    instance = cls()
    registry.put(BeanDefinition(name or bean_name(cls), cls, instance))
    return instance


@pytest.fixture
def registry():
    return BeanRegistry()


def test_put_rejects_duplicate_names(registry):
    register(registry, ConsolePrinter, "svc")

    with pytest.raises(DuplicateNameError, match="Duplicate bean name 'svc'") as raised:
        register(registry, MockPrinter, "svc")

    assert raised.value.name == "svc"
    assert len(registry) == 1


def test_get_by_name(registry):
    printer = register(registry, MockPrinter)

    assert registry.get_by_name("mock") is printer
    assert registry.get_by_name("missing") is None
    assert "mock" in registry


def test_bean_name_is_qualified_type_name_by_default():
    assert bean_name(ConsolePrinter) == f"{ConsolePrinter.__module__}.ConsolePrinter"
    assert bean_name(MockPrinter) == "mock"
    assert bean_name(ConsolePrinter) == bean_name(ConsolePrinter)


def test_bean_name_is_not_inherited():
    class SubPrinter(MockPrinter):
        pass

    assert bean_name(SubPrinter).endswith("SubPrinter")


def test_capability_lookup_returns_first_registered_match(registry):
    console = register(registry, ConsolePrinter)
    register(registry, MockPrinter)

    assert registry.get_by_type(Printer) is console


def test_concrete_lookup_uses_bean_name(registry):
    register(registry, ConsolePrinter)
    mock = register(registry, MockPrinter)

    assert registry.get_by_type(MockPrinter) is mock


def test_concrete_lookup_does_not_match_subtypes(registry):
    register(registry, FancyPrinter)

    assert registry.get_by_type(ConsolePrinter) is None
    assert registry.get_by_type(Marker) is not None


def test_concrete_lookup_falls_back_to_exact_runtime_type(registry):
    mock = register(registry, MockPrinter)
    registry.swap("mock", BeanDefinition("mock", ConsolePrinter, ConsolePrinter()))

    replacement = registry.get_by_type(ConsolePrinter)
    assert isinstance(replacement, ConsolePrinter)
    assert registry.get_by_type(MockPrinter) is replacement
    assert replacement is not mock


def test_protocol_lookup(registry):
    greeter = register(registry, EnglishGreeter)

    assert registry.get_by_type(Greeter) is greeter
    assert registry.get_by_type(Closeable) is greeter


def test_lookup_of_unknown_type_returns_none(registry):
    register(registry, ConsolePrinter)

    assert registry.get_by_type(EnglishGreeter) is None
    assert registry.get_by_type(Greeter) is None


def test_lookup_of_non_class_returns_none(registry):
    register(registry, ConsolePrinter)

    assert registry.get_by_type("ConsolePrinter") is None
    assert registry.get_by_type(Optional[Printer]) is None


def test_is_capability():
    assert is_capability(Printer)
    assert is_capability(Marker)
    assert is_capability(Greeter)
    assert not is_capability(ConsolePrinter)
    assert not is_capability(EnglishGreeter)
    assert not is_capability(object)


def test_capabilities_of_follows_mro():
    assert capabilities_of(FancyPrinter) == [Printer, Marker]
    assert capabilities_of(EnglishGreeter) == [Greeter]


def test_swap_returns_previous_definition(registry):
    console = register(registry, ConsolePrinter, "printer")
    replacement = BeanDefinition("printer", MockPrinter, MockPrinter())

    previous = registry.swap("printer", replacement)

    assert previous.instance is console
    assert registry.get_by_name("printer") is replacement.instance
    assert registry.definitions() == [replacement]


def test_swap_requires_existing_name(registry):
    with pytest.raises(DependencyError, match="No bean named 'printer'"):
        registry.swap("printer", BeanDefinition("printer", MockPrinter, MockPrinter()))


def test_lock_for_is_per_entry(registry):
    register(registry, ConsolePrinter, "a")
    register(registry, MockPrinter, "b")

    assert registry.lock_for("a") is registry.lock_for("a")
    assert registry.lock_for("a") is not registry.lock_for("b")
