"""Domain models used throughout the container."""

from dataclasses import dataclass
from typing import Any

__all__ = ["BeanDefinition", "FieldSpec"]


@dataclass(frozen=True)
class BeanDefinition:
    """A bean registered in the container.

    Attributes:
        name: The unique bean name.
        declared_type: The class the bean was constructed from.
        instance: The live instance.
    """

    name: str
    declared_type: type
    instance: Any


@dataclass(frozen=True)
class FieldSpec:
    """A marked field declared on a bean type.

    Attributes:
        owner: The class that declares the field.
        name: The attribute name.
        declared_type: The annotated type with ``Annotated`` metadata stripped.
        marker: The marker found in the annotation (a ``Config`` or ``Inject``).
    """

    owner: type
    name: str
    declared_type: Any
    marker: Any
