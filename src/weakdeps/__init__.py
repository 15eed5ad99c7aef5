"""Declare functions and types whose implementations live in optional extensions.

A library registers placeholders at import time. Using one before its
extension is loaded fails with a message naming the packages to import.
"""

from __future__ import annotations

from weakdeps.dispatch import ERROR_HINTS, GenericFunction, register_error_hint
from weakdeps.errors import (
    ErrorCode,
    GenerationUsageError,
    MissingDependencyError,
    NoMethodError,
    SettingsError,
    WeakDepsError,
)
from weakdeps.hints import method_error_hint, register_weakdep_cache
from weakdeps.modules import ImportedModuleSystem, ModuleSystem
from weakdeps.registry import DependencyRegistry, DependencySet
from weakdeps.settings import WeakDepsSettings, load_settings
from weakdeps.stubs import declare_method_in_extension, declare_struct_in_extension

__all__ = [
    "ERROR_HINTS",
    "DependencyRegistry",
    "DependencySet",
    "ErrorCode",
    "GenerationUsageError",
    "GenericFunction",
    "ImportedModuleSystem",
    "MissingDependencyError",
    "ModuleSystem",
    "NoMethodError",
    "SettingsError",
    "WeakDepsError",
    "WeakDepsSettings",
    "declare_method_in_extension",
    "declare_struct_in_extension",
    "load_settings",
    "method_error_hint",
    "register_error_hint",
    "register_weakdep_cache",
]
