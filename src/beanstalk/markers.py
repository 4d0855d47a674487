"""Markers that declare beans, injection points, configuration fields and hooks.

Beans are declared by decorating a class with an :class:`Inject` instance.
Fields are declared through ``Annotated`` metadata on class-level annotations:

    >>> @Inject("greeter")
    ... class Greeter:
    ...     greeting: Annotated[str, Config("app.greeting")]
    ...     printer: Annotated[Printer, Inject()]
    ...
    ...     @post_construct
    ...     def start(self):
    ...         self.printer.print(self.greeting)
"""

import inspect
from dataclasses import dataclass
from typing import Callable, Optional

from beanstalk.errors import DependencyError

__all__ = [
    "Inject",
    "Config",
    "post_construct",
    "bean_name",
    "qualified_name",
    "INJECT_ATTR",
    "POST_CONSTRUCT_ATTR",
]

INJECT_ATTR = "__inject__"
POST_CONSTRUCT_ATTR = "__post_construct__"


@dataclass(frozen=True)
class Inject:
    """Declares a bean when applied to a class, or an injection point when used
    as ``Annotated`` metadata on a field.

    Attributes:
        name: Optional bean name. Ignored on fields.
    """

    name: Optional[str] = None

    def __call__(self, cls: type) -> type:
        if not inspect.isclass(cls):
            raise DependencyError(f"{cls} is not a class")
        setattr(cls, INJECT_ATTR, self)
        return cls


@dataclass(frozen=True)
class Config:
    """Declares a configuration field bound from the property source.

    Attributes:
        key: Property key. Empty means the field name.
    """

    key: str = ""


def post_construct(func: Callable) -> Callable:
    """Mark a zero-argument method to be invoked once the bean is wired."""
    setattr(func, POST_CONSTRUCT_ATTR, True)
    return func


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def bean_name(cls: type) -> str:
    """Compute the registry name of a bean type.

    Args:
        cls: The bean class.

    Returns:
        The name given to the class's own ``Inject`` marker, or the fully
        qualified class name when the marker is absent or unnamed.

    Example:
        >>> bean_name(Greeter)          # "greeter"
        >>> bean_name(PlainService)     # "app.services.PlainService"
    """
    marker = vars(cls).get(INJECT_ATTR)
    if isinstance(marker, Inject) and marker.name:
        return marker.name
    return qualified_name(cls)
