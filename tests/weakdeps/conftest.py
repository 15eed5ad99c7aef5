"""Shared fixtures for weakdeps tests.

- an in-memory module system that loads and unloads extensions on demand
- isolation of the process-wide error hint table
- a fresh dependency registry per test
"""

from __future__ import annotations

from types import ModuleType, SimpleNamespace
from typing import TYPE_CHECKING

import pytest

from weakdeps.dispatch import ERROR_HINTS
from weakdeps.modules import module_name_of
from weakdeps.registry import DependencyRegistry
from weakdeps.settings import WeakDepsSettings

if TYPE_CHECKING:
    from collections.abc import Iterator


class FakeModuleSystem:
    """Module system whose extensions are toggled explicitly by tests."""

    def __init__(self) -> None:
        self.loaded: dict[tuple[str, str], SimpleNamespace] = {}
        self.queries = 0

    def load(self, parent: ModuleType | str, extension: str, **members: object) -> None:
        self.loaded[module_name_of(parent), extension] = SimpleNamespace(**members)

    def unload(self, parent: ModuleType | str, extension: str) -> None:
        self.loaded.pop((module_name_of(parent), extension), None)

    def get_extension(self, parent: ModuleType | str, extension: str) -> object | None:
        self.queries += 1
        return self.loaded.get((module_name_of(parent), extension))

    def get_member(self, extension: object, name: str) -> object | None:
        return getattr(extension, name, None)


@pytest.fixture
def module_system() -> FakeModuleSystem:
    return FakeModuleSystem()


@pytest.fixture
def registry() -> DependencyRegistry:
    return DependencyRegistry()


@pytest.fixture
def settings() -> WeakDepsSettings:
    return WeakDepsSettings(hints_enabled=True, hint_prefix="HINT: ")


@pytest.fixture(autouse=True)
def isolated_error_hints() -> Iterator[None]:
    """Start and finish every test with an empty process-wide hint table."""
    ERROR_HINTS.clear()
    yield
    ERROR_HINTS.clear()
