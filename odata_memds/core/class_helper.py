"""Discovery of classes inside a package and its submodules."""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Callable

from odata_memds.errors import ODataRuntimeError

logger = logging.getLogger(__name__)

ClassValidator = Callable[[type], bool]


def _import_package_modules(package_name: str) -> list:
    try:
        package = importlib.import_module(package_name)
    except ImportError as e:
        raise ODataRuntimeError(f"Unable to import package '{package_name}' for scanning.") from e

    modules = [package]
    # Plain modules have no __path__ and nothing to walk
    search_path = getattr(package, "__path__", None)
    if search_path is None:
        return modules

    for module_info in pkgutil.walk_packages(search_path, prefix=f"{package.__name__}."):
        try:
            modules.append(importlib.import_module(module_info.name))
        except ImportError as e:
            raise ODataRuntimeError(
                f"Unable to import module '{module_info.name}' while scanning '{package_name}'."
            ) from e
    return modules


def load_classes(package_name: str, validator: ClassValidator) -> list[type]:
    """
    Import `package_name` with all of its submodules and collect the classes
    defined there for which `validator` returns True.

    Classes re-exported by several modules are returned once, in the order
    they were first found.
    """
    found: list[type] = []
    seen: set[type] = set()
    for module in _import_package_modules(package_name):
        for _, obj in inspect.getmembers(module, inspect.isclass):
            # Only classes defined in the scanned package, not imported ones
            if obj.__module__ != package_name and not obj.__module__.startswith(f"{package_name}."):
                continue
            if obj in seen or not validator(obj):
                continue
            seen.add(obj)
            found.append(obj)

    logger.debug("Scanned package %s: %d matching classes", package_name, len(found))
    return found
