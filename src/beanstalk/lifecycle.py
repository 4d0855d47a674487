"""Invocation of post-construct hooks."""

from typing import Any

from beanstalk.errors import PostConstructError
from beanstalk.introspection import TypeIntrospector
from beanstalk.markers import POST_CONSTRUCT_ATTR

__all__ = ["LifecycleRunner"]


class LifecycleRunner:
    def __init__(self, introspector: TypeIntrospector):
        self._introspector = introspector

    def post_construct(self, instance: Any):
        """Invoke each public ``@post_construct`` method of ``instance`` once.

        Hooks of one bean run in method name order; callers should not rely on it.

        Raises:
            PostConstructError: If a hook raises, chained from the original exception.
        """
        bean_type = type(instance)
        for method_name in self._introspector.methods_with_marker(bean_type, POST_CONSTRUCT_ATTR):
            try:
                self._introspector.invoke(instance, method_name)
            except Exception as exc:
                raise PostConstructError(bean_type, method_name) from exc
