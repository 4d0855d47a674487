"""Resolution of injection points against the bean registry."""

import threading
import types
from typing import Any, Union, get_args, get_origin

from beanstalk.domain import FieldSpec
from beanstalk.introspection import TypeIntrospector
from beanstalk.markers import Inject
from beanstalk.registry import BeanRegistry

__all__ = ["Injector"]


class Injector:
    """Assign ``Inject``-annotated fields from a :class:`BeanRegistry`.

    An injection point with no matching bean is set to None. Dependencies are
    therefore optional; beans that require one should check it in a
    post-construct hook.
    """

    def __init__(self, registry: BeanRegistry, introspector: TypeIntrospector):
        self._registry = registry
        self._introspector = introspector
        self._fields_by_type: dict[type, list[FieldSpec]] = {}
        self._cache_lock = threading.Lock()

    def inject(self, instance: Any):
        for field in self.inject_fields(type(instance)):
            resolved = self._registry.get_by_type(_unwrap_optional(field.declared_type))
            self._introspector.set_field(instance, field.name, resolved)

    def inject_fields(self, cls: type) -> list[FieldSpec]:
        """Injection points of ``cls``, introspected on first use and cached."""
        fields = self._fields_by_type.get(cls)
        if fields is None:
            fields = self._introspector.fields_with_marker(cls, Inject)
            with self._cache_lock:
                self._fields_by_type[cls] = fields
        return fields

    def invalidate(self, cls: type):
        with self._cache_lock:
            self._fields_by_type.pop(cls, None)

    def is_cached(self, cls: type) -> bool:
        return cls in self._fields_by_type


def _unwrap_optional(declared_type: Any) -> Any:
    if get_origin(declared_type) in (Union, types.UnionType):
        members = [arg for arg in get_args(declared_type) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return declared_type
