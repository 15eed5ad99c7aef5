"""Queries against the interpreter's set of loaded modules.

Nothing here imports modules: an extension counts as available only once
something else has imported it. Tests substitute their own
:class:`ModuleSystem` to simulate extensions loading and unloading.
"""

from __future__ import annotations

import sys
from types import ModuleType
from typing import Protocol, runtime_checkable

__all__ = [
    "ImportedModuleSystem",
    "ModuleSystem",
    "extension_module_name",
    "module_name_of",
]


@runtime_checkable
class ModuleSystem(Protocol):
    """Capability for locating loaded extensions and their members."""

    def get_extension(self, parent: ModuleType | str, extension: str) -> object | None:
        """Return the loaded extension of ``parent`` named ``extension``, or None."""
        ...

    def get_member(self, extension: object, name: str) -> object | None:
        """Return the attribute ``name`` of a loaded extension, or None."""
        ...


def module_name_of(parent: ModuleType | str) -> str:
    """Return the dotted name of ``parent``."""
    return parent if isinstance(parent, str) else parent.__name__


def extension_module_name(parent: ModuleType | str, extension: str) -> str:
    """Resolve ``extension`` to an absolute module name.

    A bare or dot-prefixed name is a submodule of ``parent``; a dotted name
    without a leading dot is already absolute.

    Examples
    --------
    >>> extension_module_name("mypkg", "MyPkgFancyExt")
    'mypkg.MyPkgFancyExt'
    >>> extension_module_name("mypkg", ".ext.fancy")
    'mypkg.ext.fancy'
    >>> extension_module_name("mypkg", "mypkg_fancy.ext")
    'mypkg_fancy.ext'
    """
    parent_name = module_name_of(parent)
    if extension.startswith("."):
        return f"{parent_name}{extension}"
    if "." in extension:
        return extension
    return f"{parent_name}.{extension}"


class ImportedModuleSystem:
    """Module system backed by :data:`sys.modules`."""

    def get_extension(self, parent: ModuleType | str, extension: str) -> ModuleType | None:
        """Return the extension module if it has been imported."""
        return sys.modules.get(extension_module_name(parent, extension))

    def get_member(self, extension: object, name: str) -> object | None:
        """Return ``getattr(extension, name)``, or None when absent."""
        return getattr(extension, name, None)
