"""Binding of configuration fields from a property source."""

from typing import Any, Callable

from beanstalk.converter import convert
from beanstalk.errors import MissingConfigError
from beanstalk.introspection import TypeIntrospector
from beanstalk.markers import Config
from beanstalk.properties import PropertySource

__all__ = ["ConfigBinder"]


class ConfigBinder:
    """Populate ``Config``-annotated fields of a bean from a :class:`PropertySource`."""

    def __init__(
        self,
        properties: PropertySource,
        introspector: TypeIntrospector,
        converter: Callable[[str, Any], Any] = convert,
    ):
        self._properties = properties
        self._introspector = introspector
        self._converter = converter

    def bind(self, instance: Any):
        """Assign every configuration field of ``instance``.

        Fields are bound in declaration order in a single pass; fields bound
        before a failure keep their new values.

        Args:
            instance: The bean to configure.

        Raises:
            MissingConfigError: If a field's key is absent or its value is empty.
            MalformedValueError: If a value cannot be converted to the field's type.
            UnsupportedTargetTypeError: If a field's type has no conversion.
        """
        for field in self._introspector.fields_with_marker(type(instance), Config):
            key = field.marker.key or field.name
            value = self._properties.get(key)
            if not value:
                raise MissingConfigError(key, field.owner)

            self._introspector.set_field(
                instance, field.name, self._converter(value, field.declared_type)
            )
