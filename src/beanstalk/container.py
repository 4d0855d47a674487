"""The container: discovery, instantiation, wiring and hot replacement of beans.

Initialization runs in phases. Every bean is constructed and registered before
any is configured, and every bean is configured and injected before any
post-construct hook runs, so a hook may rely on the fields of the beans it
references being populated. There is no ordering between hooks of different
beans.

Example:
    >>> container = Container()
    >>> container.initialize("app.properties")
    >>> greeter = container.get_bean(Greeter)
"""

import inspect
from collections.abc import Iterable
from enum import Enum
from os import PathLike
from typing import Any, Optional, TypeVar, Union

import structlog

from beanstalk.config_binder import ConfigBinder
from beanstalk.domain import BeanDefinition
from beanstalk.errors import ConstructionError, ContainerStateError
from beanstalk.injector import Injector
from beanstalk.introspection import TypeIntrospector
from beanstalk.lifecycle import LifecycleRunner
from beanstalk.markers import Inject, bean_name
from beanstalk.properties import PropertySource
from beanstalk.registry import BeanRegistry, capabilities_of

__all__ = ["Container", "ContainerState", "default_container", "DEFAULT_SCAN_PACKAGES", "SCAN_PACKAGES_KEY"]

logger = structlog.get_logger()
T = TypeVar("T")

SCAN_PACKAGES_KEY = "scan.packages"
DEFAULT_SCAN_PACKAGES = ("app",)


class ContainerState(Enum):
    UNINITIALIZED = "uninitialized"
    SCANNING = "scanning"
    INSTANTIATING = "instantiating"
    BINDING_CONFIG = "binding_config"
    INJECTING_REFS = "injecting_refs"
    POST_CONSTRUCTING = "post_constructing"
    READY = "ready"
    FAILED = "failed"


class Container:
    """Dependency-injection container holding one instance per bean name.

    Args:
        default_scan_packages: Packages scanned when the property source has
            no ``scan.packages`` entry.
        introspector: Strategy used to discover bean types and their members.
    """

    def __init__(
        self,
        default_scan_packages: Iterable[str] = DEFAULT_SCAN_PACKAGES,
        introspector: Optional[TypeIntrospector] = None,
    ):
        self._default_scan_packages = list(default_scan_packages)
        self._introspector = introspector or TypeIntrospector()
        self._registry = BeanRegistry()
        self._injector = Injector(self._registry, self._introspector)
        self._lifecycle = LifecycleRunner(self._introspector)
        self._binder: Optional[ConfigBinder] = None
        self._properties: Optional[PropertySource] = None
        self._state = ContainerState.UNINITIALIZED

    @property
    def state(self) -> ContainerState:
        return self._state

    @property
    def properties(self) -> Optional[PropertySource]:
        return self._properties

    def initialize(self, resource_name: Union[str, PathLike]):
        """Load properties from ``resource_name`` and build every discovered bean.

        Args:
            resource_name: Path of the ``.properties`` file.

        Raises:
            ContainerStateError: If the container has already been initialized.
            ConfigLoadError: If the properties cannot be read.
            ScanError: If a scanned module fails to import.
            ConstructionError: If a bean type cannot be instantiated.
            DuplicateNameError: If two beans have the same name.
            MissingConfigError, MalformedValueError, UnsupportedTargetTypeError:
                If a configuration field cannot be bound.
            PostConstructError: If a post-construct hook raises.
        """
        if self._state is not ContainerState.UNINITIALIZED:
            raise ContainerStateError(self._state, "initialize")

        logger.info("container.initializing", resource=str(resource_name))
        try:
            self._initialize(resource_name)
        except Exception:
            self._state = ContainerState.FAILED
            raise

        self._state = ContainerState.READY
        logger.info("container.ready", bean_count=len(self._registry))

    def _initialize(self, resource_name: Union[str, PathLike]):
        self._properties = PropertySource.load(resource_name)
        self._binder = ConfigBinder(self._properties, self._introspector)

        self._state = ContainerState.SCANNING
        packages = self.scan_packages()
        logger.info("container.scan", packages=packages)
        bean_types = self._introspector.types_with_marker(packages, Inject)

        self._state = ContainerState.INSTANTIATING
        instances = [(bean_type, _construct(bean_type)) for bean_type in bean_types]
        for bean_type, instance in instances:
            definition = BeanDefinition(bean_name(bean_type), bean_type, instance)
            self._registry.put(definition)
            logger.debug("container.bean_registered", name=definition.name)

        self._state = ContainerState.BINDING_CONFIG
        for definition in self._registry.definitions():
            self._binder.bind(definition.instance)

        self._state = ContainerState.INJECTING_REFS
        for definition in self._registry.definitions():
            self._injector.inject(definition.instance)

        self._state = ContainerState.POST_CONSTRUCTING
        for definition in self._registry.definitions():
            self._lifecycle.post_construct(definition.instance)

    def scan_packages(self) -> list[str]:
        """Packages to scan: ``scan.packages`` when set, else the defaults."""
        configured = (self._properties or {}).get(SCAN_PACKAGES_KEY) or ""
        packages = [package.strip() for package in configured.split(",") if package.strip()]
        return packages or list(self._default_scan_packages)

    def get_bean(self, target: type[T]) -> Optional[T]:
        """Look up a bean by capability or concrete type.

        A concrete type resolves through its bean name. After ``replace`` that
        name may hold an instance of the replacement class, so the result is
        not necessarily an instance of ``target``:

            >>> container.replace(CachingBackend)
            >>> container.get_bean(DefaultBackend)   # the CachingBackend

        Returns:
            The bean, or None if there is none, ``target`` is not a class, or
            the container is not ready.
        """
        if self._state is not ContainerState.READY or not inspect.isclass(target):
            return None
        return self._registry.get_by_type(target)

    def get_bean_by_name(self, name: str) -> Optional[Any]:
        if self._state is not ContainerState.READY:
            return None
        return self._registry.get_by_name(name)

    def beans(self) -> dict[str, Any]:
        """Snapshot of bean names to instances; empty unless the container is ready."""
        if self._state is not ContainerState.READY:
            return {}
        return {definition.name: definition.instance for definition in self._registry.definitions()}

    def replace(self, target: type[T]) -> Optional[T]:
        """Replace a running bean with a fresh instance of ``target``.

        The bean replaced is the first registered bean that satisfies one of
        the capabilities ``target`` derives from. The new instance is
        configured, injected and post-constructed before it is swapped in;
        beans that already hold a reference to the old instance keep it.

        Replacement is best effort: any failure is logged and leaves the
        container unchanged.

        Args:
            target: Concrete class to instantiate.

        Returns:
            The new bean, or None if nothing was replaced.
        """
        if self._state is not ContainerState.READY or not inspect.isclass(target):
            return None

        try:
            name = self._name_to_replace(target)
            if name is None:
                logger.warning("container.replace_no_candidate", type=target.__qualname__)
                return None

            with self._registry.lock_for(name):
                instance = _construct(target)
                self._binder.bind(instance)
                self._injector.inject(instance)
                self._lifecycle.post_construct(instance)

                previous = self._registry.swap(name, BeanDefinition(name, target, instance))
                self._injector.invalidate(type(previous.instance))
        except Exception as exc:
            logger.warning("container.replace_failed", type=target.__qualname__, error=str(exc))
            return None

        logger.info("container.replaced", name=name, type=target.__qualname__)
        return instance

    def _name_to_replace(self, target: type) -> Optional[str]:
        for capability in capabilities_of(target):
            name = self._registry.find_name_satisfying(capability)
            if name is not None:
                return name
        return None


def _construct(bean_type: type) -> Any:
    try:
        return bean_type()
    except Exception as exc:
        raise ConstructionError(bean_type) from exc


_default: Optional[Container] = None


def default_container() -> Container:
    """Return the process-wide container, creating it on first use."""
    global _default
    if _default is None:
        _default = Container()
    return _default
