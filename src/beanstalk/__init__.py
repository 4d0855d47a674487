"""Beanstalk dependency injection container.

Beanstalk discovers bean classes in a set of packages, instantiates each once,
binds their configuration fields from a ``.properties`` file, injects
references between them and runs their post-construct hooks. A running bean can
be swapped for a new implementation of the same capability.

Key Features:
    - Declarative beans and injection points using ``Annotated`` type hints
    - Typed configuration binding with fixed-width integer checks
    - Package scanning configured by the ``scan.packages`` property
    - Post-construct hooks run after the whole graph is wired
    - Best-effort hot replacement of beans

Basic Usage:
    >>> from typing import Annotated
    >>> from beanstalk.container import Container
    >>> from beanstalk.markers import Config, Inject, post_construct
    >>>
    >>> @Inject()
    ... class Greeter:
    ...     greeting: Annotated[str, Config()]
    ...     printer: Annotated[Printer, Inject()]
    >>>
    >>> container = Container()
    >>> container.initialize("app.properties")
    >>> greeter = container.get_bean(Greeter)

The package consists of several modules:
    - container: Initialization lifecycle, lookup and replacement
    - registry: Bean table and lookup rules
    - config_binder: Configuration field binding
    - converter: String to typed value coercion
    - injector: Injection point resolution
    - lifecycle: Post-construct hooks
    - introspection: Package scanning and member enumeration
    - properties: ``.properties`` loading
    - markers: Inject, Config and post_construct markers
    - errors: Framework-specific exceptions
"""
