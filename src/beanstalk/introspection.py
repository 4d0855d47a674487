"""Discovery of bean types and enumeration of their marked members."""

import importlib
import inspect
import pkgutil
from collections.abc import Iterable
from types import ModuleType
from typing import Annotated, Any, get_args, get_origin, get_type_hints

import structlog

from beanstalk.domain import FieldSpec
from beanstalk.errors import ScanError
from beanstalk.markers import INJECT_ATTR

__all__ = ["TypeIntrospector"]

logger = structlog.get_logger()


class TypeIntrospector:
    """Scan packages for marked classes and enumerate marked fields and methods."""

    def types_with_marker(self, packages: Iterable[str], marker_type: type) -> list[type]:
        """Find classes under ``packages`` whose own namespace holds a marker.

        Each package root is imported and its sub-modules are walked
        recursively. Only classes defined in a scanned module are considered,
        so a class re-exported by another module is found once.

        Args:
            packages: Package (or module) names to scan.
            marker_type: The marker class to look for, e.g. ``Inject``.

        Returns:
            The marked classes in root order, then module name order, then
            definition order.

        Raises:
            ScanError: If a module under a root fails to import.
        """
        found: dict[type, None] = {}
        for module in self._modules_under(packages):
            for candidate in vars(module).values():
                if (
                    inspect.isclass(candidate)
                    and candidate.__module__ == module.__name__
                    and _own_marker(candidate, marker_type) is not None
                ):
                    found.setdefault(candidate)
        return list(found)

    def fields_with_marker(self, cls: type, marker_type: type) -> list[FieldSpec]:
        """Enumerate annotated fields of ``cls`` carrying ``marker_type`` metadata.

        Annotations are collected across the class hierarchy in declaration order.

        Example:
            >>> class Service:
            ...     retries: Annotated[int, Config("service.retries")]
            ...     printer: Annotated[Printer, Inject()]
            >>> introspector.fields_with_marker(Service, Config)
            [FieldSpec(Service, "retries", int, Config("service.retries"))]
        """
        fields = []
        for name, annotation in get_type_hints(cls, include_extras=True).items():
            base_type, marker = _split_annotation(annotation, marker_type)
            if marker is not None:
                fields.append(FieldSpec(cls, name, base_type, marker))
        return fields

    def methods_with_marker(self, cls: type, attribute: str) -> list[str]:
        return [
            name
            for name, member in inspect.getmembers(cls, inspect.isfunction)
            if not name.startswith("_") and getattr(member, attribute, False)
        ]

    def set_field(self, instance: Any, name: str, value: Any):
        object.__setattr__(instance, name, value)

    def invoke(self, instance: Any, method_name: str) -> Any:
        return getattr(instance, method_name)()

    def _modules_under(self, packages: Iterable[str]) -> Iterable[ModuleType]:
        for package_name in packages:
            try:
                root = importlib.import_module(package_name)
            except ModuleNotFoundError as exc:
                if exc.name == package_name or package_name.startswith(f"{exc.name}."):
                    logger.warning("scan.package_not_found", package=package_name)
                    continue
                raise ScanError(package_name) from exc
            except Exception as exc:
                raise ScanError(package_name) from exc

            yield root
            if not hasattr(root, "__path__"):
                continue

            try:
                module_infos = sorted(
                    pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}.", onerror=_raise_scan_error),
                    key=lambda info: info.name,
                )
            except ScanError:
                raise
            except Exception as exc:
                raise ScanError(root.__name__) from exc

            for module_info in module_infos:
                yield _import(module_info.name)


def _import(module_name: str) -> ModuleType:
    try:
        return importlib.import_module(module_name)
    except Exception as exc:
        raise ScanError(module_name) from exc


def _raise_scan_error(module_name: str):
    raise ScanError(module_name)


def _own_marker(cls: type, marker_type: type) -> Any:
    # class markers are not inherited
    marker = vars(cls).get(INJECT_ATTR)
    return marker if isinstance(marker, marker_type) else None


def _split_annotation(annotation: Any, marker_type: type) -> tuple[Any, Any]:
    if get_origin(annotation) is not Annotated:
        return annotation, None
    base_type, *metadata = get_args(annotation)
    for item in metadata:
        if isinstance(item, marker_type):
            return base_type, item
        if item is marker_type:
            return base_type, marker_type()
    return base_type, None
