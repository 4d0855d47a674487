__all__ = [
    "DependencyError",
    "ConfigLoadError",
    "DuplicateNameError",
    "ConstructionError",
    "MissingConfigError",
    "MalformedValueError",
    "UnsupportedTargetTypeError",
    "PostConstructError",
    "ScanError",
    "ContainerStateError",
]


class DependencyError(Exception):
    """Raised when a component cannot be discovered, configured or wired."""

    pass


class ConfigLoadError(DependencyError):
    """The named property resource cannot be read."""

    def __init__(self, resource_name: str):
        super().__init__(f"Unable to load properties from '{resource_name}'")
        self.resource_name = resource_name


class DuplicateNameError(DependencyError):
    def __init__(self, name: str):
        super().__init__(f"Duplicate bean name '{name}'")
        self.name = name


class ConstructionError(DependencyError):
    """A discovered type cannot be instantiated without arguments."""

    def __init__(self, bean_type: type):
        super().__init__(f"Unable to construct {bean_type.__qualname__} with no arguments")
        self.bean_type = bean_type


class MissingConfigError(DependencyError):
    """A configuration field's property key is absent or empty."""

    def __init__(self, key: str, owner: type):
        super().__init__(f"Property '{key}' required by {owner.__qualname__} is missing or empty")
        self.key = key
        self.owner = owner


class MalformedValueError(DependencyError):
    def __init__(self, value: str, target_type: type, reason: str = ""):
        message = f"Cannot convert {value!r} to {_type_name(target_type)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.value = value
        self.target_type = target_type


class UnsupportedTargetTypeError(DependencyError):
    def __init__(self, target_type: type):
        super().__init__(f"No conversion available to {_type_name(target_type)}")
        self.target_type = target_type


class PostConstructError(DependencyError):
    """A post-construct hook raised; the original exception is the ``__cause__``."""

    def __init__(self, bean_type: type, method_name: str):
        super().__init__(f"Post-construct hook {bean_type.__qualname__}.{method_name} failed")
        self.bean_type = bean_type
        self.method_name = method_name


class ScanError(DependencyError):
    def __init__(self, module_name: str):
        super().__init__(f"Failed to import module '{module_name}' while scanning")
        self.module_name = module_name


class ContainerStateError(DependencyError):
    def __init__(self, state, operation: str):
        super().__init__(f"Cannot {operation} while container is {state.name}")
        self.state = state


def _type_name(target_type) -> str:
    return getattr(target_type, "__qualname__", None) or getattr(target_type, "__name__", None) or str(target_type)
