"""Registry of live beans and its lookup rules."""

import inspect
import threading
from abc import ABC
from typing import Any, Generic, Optional, Protocol

from beanstalk.domain import BeanDefinition
from beanstalk.errors import DependencyError, DuplicateNameError
from beanstalk.markers import bean_name

__all__ = ["BeanRegistry", "is_capability", "satisfies", "capabilities_of"]


def is_capability(target: Any) -> bool:
    """Check whether a type is an abstract capability rather than a concrete bean type.

    Capabilities are abstract classes, classes deriving directly from
    :class:`abc.ABC`, and ``typing.Protocol`` classes.

    Example:
        >>> class Printer(ABC): ...
        >>> class ConsolePrinter(Printer): ...
        >>> is_capability(Printer)          # True
        >>> is_capability(ConsolePrinter)   # False
    """
    if not inspect.isclass(target) or target in (object, ABC, Protocol, Generic):
        return False
    return (
        inspect.isabstract(target)
        or ABC in target.__bases__
        or bool(getattr(target, "_is_protocol", False))
    )


def satisfies(instance: Any, capability: type) -> bool:
    try:
        return isinstance(instance, capability)
    except TypeError:
        # protocols that are not runtime checkable only match nominally
        return capability in type(instance).__mro__


def capabilities_of(target: type) -> list[type]:
    """Capabilities among the ancestors of ``target``, in MRO order."""
    return [base for base in target.__mro__[1:] if is_capability(base)]


class BeanRegistry:
    """Singleton table of beans keyed by unique name.

    Iteration follows insertion order. Lookups never block; ``swap`` is a
    single item assignment so a reader observes either the old or the new
    definition for a name.
    """

    def __init__(self):
        self._definitions: dict[str, BeanDefinition] = {}
        self._locks: dict[str, threading.RLock] = {}

    def put(self, definition: BeanDefinition):
        """Register a bean.

        Args:
            definition: The bean to register.

        Raises:
            DuplicateNameError: If a bean with the same name is already registered.
        """
        if definition.name in self._definitions:
            raise DuplicateNameError(definition.name)
        self._locks[definition.name] = threading.RLock()
        self._definitions[definition.name] = definition

    def get_by_name(self, name: str) -> Optional[Any]:
        definition = self._definitions.get(name)
        return definition.instance if definition else None

    def get_by_type(self, target: type) -> Optional[Any]:
        """Look up a bean by type.

        For a capability, the first bean in insertion order that satisfies it
        is returned; several satisfying beans are not detected. For a concrete
        type, the bean registered under the type's bean name is returned, or
        failing that the first bean whose runtime type is exactly ``target``.

        Args:
            target: The capability or concrete type to look up.

        Returns:
            The bean instance, or None if no bean matches or
            ``target`` is not a class.
        """
        if not inspect.isclass(target):
            return None

        definitions = list(self._definitions.values())
        if is_capability(target):
            return next((d.instance for d in definitions if satisfies(d.instance, target)), None)

        instance = self.get_by_name(bean_name(target))
        if instance is not None:
            return instance
        return next((d.instance for d in definitions if type(d.instance) is target), None)

    def find_name_satisfying(self, capability: type) -> Optional[str]:
        return next(
            (d.name for d in list(self._definitions.values()) if satisfies(d.instance, capability)),
            None,
        )

    def swap(self, name: str, definition: BeanDefinition) -> BeanDefinition:
        """Replace the bean registered under ``name``.

        Returns:
            The predecessor definition.

        Raises:
            DependencyError: If no bean is registered under ``name``.
        """
        previous = self._definitions.get(name)
        if previous is None:
            raise DependencyError(f"No bean named '{name}' to replace")
        self._definitions[name] = definition
        return previous

    def lock_for(self, name: str) -> threading.RLock:
        return self._locks[name]

    def definitions(self) -> list[BeanDefinition]:
        return list(self._definitions.values())

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
