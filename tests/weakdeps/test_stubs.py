"""Tests for weakdeps.stubs forwarding and unimplemented declarations."""

from __future__ import annotations

import sys
from types import ModuleType
from typing import TYPE_CHECKING

import pytest

from weakdeps.dispatch import GenericFunction
from weakdeps.errors import GenerationUsageError, MissingDependencyError, NoMethodError
from weakdeps.stubs import declare_method_in_extension, declare_struct_in_extension

if TYPE_CHECKING:
    from tests.weakdeps.conftest import FakeModuleSystem
    from weakdeps.registry import DependencyRegistry


class FancyType:
    def __init__(self, *values: object, label: str = "fancy") -> None:
        self.values = values
        self.label = label


class TestDeclareStructInExtension:
    """Tests for forwarding constructors (declare_struct_in_extension)."""

    def test_missing_extension_raises(self, module_system: FakeModuleSystem) -> None:
        """Calling before the extension loads raises MissingDependencyError."""
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        with pytest.raises(MissingDependencyError) as exc_info:
            stub()
        err = exc_info.value
        assert err.name == "FancyType"
        assert err.deps == ("FancyDep",)

    def test_deps_keep_declared_order(self, module_system: FakeModuleSystem) -> None:
        """The error carries exactly the declared dependency set."""
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ["Zeta", "Alpha"], module_system=module_system
        )
        with pytest.raises(MissingDependencyError) as exc_info:
            stub(1)
        assert exc_info.value.deps == ("Zeta", "Alpha")

    def test_delegates_once_loaded(self, module_system: FakeModuleSystem) -> None:
        """The same stub forwards arguments after the extension loads."""
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        with pytest.raises(MissingDependencyError):
            stub(1, 2)

        module_system.load("MyPkg", "MyPkgFancyExt", FancyType=FancyType)
        result = stub(1, 2, label="loaded")

        assert isinstance(result, FancyType)
        assert result.values == (1, 2)
        assert result.label == "loaded"

    def test_absence_is_not_cached(self, module_system: FakeModuleSystem) -> None:
        """Every call queries the module system again."""
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        for _ in range(3):
            with pytest.raises(MissingDependencyError):
                stub()
        assert module_system.queries == 3

        module_system.load("MyPkg", "MyPkgFancyExt", FancyType=FancyType)
        stub()
        module_system.unload("MyPkg", "MyPkgFancyExt")
        with pytest.raises(MissingDependencyError):
            stub()
        assert module_system.queries == 5

    def test_result_is_returned_unchanged(self, module_system: FakeModuleSystem) -> None:
        """Whatever the member returns is returned as is."""
        sentinel = object()
        module_system.load("MyPkg", "MyPkgFancyExt", FancyType=lambda: sentinel)
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        assert stub() is sentinel

    def test_delegate_errors_propagate_unwrapped(self, module_system: FakeModuleSystem) -> None:
        """Errors raised by the extension are not wrapped."""

        def broken(*args: object) -> None:
            msg = "bad shape"
            raise ValueError(msg)

        module_system.load("MyPkg", "MyPkgFancyExt", FancyType=broken)
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        with pytest.raises(ValueError, match="bad shape") as exc_info:
            stub(1)
        assert exc_info.value.__cause__ is None

    def test_loaded_extension_without_member(self, module_system: FakeModuleSystem) -> None:
        """A loaded extension lacking the member raises AttributeError."""
        module_system.load("MyPkg", "MyPkgFancyExt")
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        with pytest.raises(AttributeError, match="does not define 'FancyType'"):
            stub()

    def test_metadata_and_doc(self, module_system: FakeModuleSystem) -> None:
        """The stub is named after the forwarded callable and carries the doc."""
        stub = declare_struct_in_extension(
            "MyPkg",
            "FancyType",
            "MyPkgFancyExt",
            ("FancyDep",),
            "A container backed by FancyDep.",
            module_system=module_system,
        )
        assert stub.__name__ == "FancyType"
        assert stub.__qualname__ == "FancyType"
        assert stub.__module__ == "MyPkg"
        assert stub.__doc__ == "A container backed by FancyDep."
        assert stub.deps == ("FancyDep",)  # type: ignore[attr-defined]
        assert stub.extension == "MyPkgFancyExt"  # type: ignore[attr-defined]

    def test_without_doc(self, module_system: FakeModuleSystem) -> None:
        """No doc leaves __doc__ empty."""
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        assert stub.__doc__ is None

    def test_parent_module_object(self, module_system: FakeModuleSystem) -> None:
        """The parent may be passed as a module object."""
        parent = ModuleType("MyPkg")
        module_system.load("MyPkg", "MyPkgFancyExt", FancyType=FancyType)
        stub = declare_struct_in_extension(
            parent, "FancyType", "MyPkgFancyExt", ("FancyDep",), module_system=module_system
        )
        assert isinstance(stub(), FancyType)
        assert stub.__module__ == "MyPkg"

    def test_default_module_system_reads_sys_modules(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without an injected module system, sys.modules decides availability."""
        stub = declare_struct_in_extension(
            "weakdeps_demo", "FancyType", "ext_fancy", ("FancyDep",)
        )
        monkeypatch.delitem(sys.modules, "weakdeps_demo.ext_fancy", raising=False)
        with pytest.raises(MissingDependencyError):
            stub()

        extension = ModuleType("weakdeps_demo.ext_fancy")
        extension.FancyType = FancyType  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "weakdeps_demo.ext_fancy", extension)
        assert isinstance(stub("x"), FancyType)

    @pytest.mark.parametrize(
        "name",
        ["", "1abc", "Fancy.Type", "Fancy Type", "class", None, 42, ("FancyType",)],
    )
    def test_rejects_non_identifier_names(self, name: object) -> None:
        """Malformed names fail at declaration time."""
        with pytest.raises(GenerationUsageError, match="Usage: declare_struct_in_extension"):
            declare_struct_in_extension("MyPkg", name, "MyPkgFancyExt", ("FancyDep",))  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "extension", ["", "bad-name", "a..b", "..MyPkgFancyExt", "ext.class", None]
    )
    def test_rejects_malformed_extension(self, extension: object) -> None:
        """Malformed extension names fail at declaration time."""
        with pytest.raises(GenerationUsageError):
            declare_struct_in_extension("MyPkg", "FancyType", extension, ("FancyDep",))  # type: ignore[arg-type]

    def test_accepts_relative_extension(self, module_system: FakeModuleSystem) -> None:
        """A single leading dot names a submodule of the parent."""
        module_system.load("MyPkg", ".ext.fancy", FancyType=FancyType)
        stub = declare_struct_in_extension(
            "MyPkg", "FancyType", ".ext.fancy", ("FancyDep",), module_system=module_system
        )
        assert isinstance(stub(), FancyType)

    @pytest.mark.parametrize("parent", [42, None, "", "my-pkg", "MyPkg.", "MyPkg.class"])
    def test_rejects_malformed_parent(self, parent: object) -> None:
        """Parents that are neither modules nor module names fail at declaration time."""
        with pytest.raises(GenerationUsageError, match="Usage: declare_struct_in_extension"):
            declare_struct_in_extension(parent, "FancyType", "MyPkgFancyExt", ("FancyDep",))  # type: ignore[arg-type]

    @pytest.mark.parametrize("deps", [(), [], None, 3])
    def test_rejects_malformed_deps(self, deps: object) -> None:
        """An empty or non-iterable dependency set fails at declaration time."""
        with pytest.raises(GenerationUsageError):
            declare_struct_in_extension("MyPkg", "FancyType", "MyPkgFancyExt", deps)  # type: ignore[arg-type]

    def test_rejects_non_string_doc(self) -> None:
        """The doc must be a string."""
        with pytest.raises(GenerationUsageError):
            declare_struct_in_extension("MyPkg", "FancyType", "MyPkgFancyExt", ("FancyDep",), 1)  # type: ignore[arg-type]


class TestDeclareMethodInExtension:
    """Tests for unimplemented, registered declarations (declare_method_in_extension)."""

    def test_declares_unimplemented_function(self, registry: DependencyRegistry) -> None:
        """The declared function has no implementations and fails when called."""
        fancy_function = declare_method_in_extension(registry, "fancy_function", ("FancyDep",))
        assert isinstance(fancy_function, GenericFunction)
        assert fancy_function.registry == {}
        with pytest.raises(NoMethodError):
            fancy_function(1, 2)

    def test_registers_dependencies(self, registry: DependencyRegistry) -> None:
        """The function is recorded in the registry with its dependencies."""
        fancy_function = declare_method_in_extension(
            registry, "fancy_function", ("FancyDep", "OtherDep")
        )
        assert registry.lookup(fancy_function) == ("FancyDep", "OtherDep")

    def test_metadata_and_doc(self, registry: DependencyRegistry) -> None:
        """Name, module and doc are attached."""
        fancy_function = declare_method_in_extension(
            registry, "fancy_function", ("FancyDep",), "Compute fancily.", module="MyPkg"
        )
        assert fancy_function.__name__ == "fancy_function"
        assert fancy_function.__module__ == "MyPkg"
        assert fancy_function.__doc__ == "Compute fancily."

    def test_extension_can_implement(self, registry: DependencyRegistry) -> None:
        """Extensions bind implementations on the declared function."""
        fancy_function = declare_method_in_extension(registry, "fancy_function", ("FancyDep",))

        @fancy_function.register(int)
        def _fancy_int(a: int, b: int) -> int:
            return a * b

        assert fancy_function(3, 4) == 12

    def test_redeclaration_overwrites_registry(self, registry: DependencyRegistry) -> None:
        """Re-running the declaration reuses the function and replaces its entry."""
        first = declare_method_in_extension(
            registry, "fancy_function", ("FancyDep",), module="MyPkg"
        )

        @first.register(int)
        def _fancy_int(a: int, b: int) -> int:
            return a - b

        second = declare_method_in_extension(
            registry, "fancy_function", ("OtherDep",), "Redeclared.", module="MyPkg"
        )
        assert second is first
        assert len(registry) == 1
        assert registry.lookup(first) == ("OtherDep",)
        assert second.__doc__ == "Redeclared."
        assert second(5, 2) == 3

    def test_same_name_in_other_module_is_distinct(self, registry: DependencyRegistry) -> None:
        """Declarations are identified by module and name together."""
        first = declare_method_in_extension(registry, "fancy_function", ("FancyDep",), module="A")
        second = declare_method_in_extension(registry, "fancy_function", ("OtherDep",), module="B")
        assert first is not second
        assert len(registry) == 2
        assert registry.lookup(first) == ("FancyDep",)

    @pytest.mark.parametrize("name", ["", "2fast", "pkg.func", "lambda", 7])
    def test_rejects_non_identifier_names(
        self, registry: DependencyRegistry, name: object
    ) -> None:
        """Malformed names fail at declaration time and register nothing."""
        with pytest.raises(GenerationUsageError, match="Usage: declare_method_in_extension"):
            declare_method_in_extension(registry, name, ("FancyDep",))  # type: ignore[arg-type]
        assert len(registry) == 0

    def test_rejects_empty_deps(self, registry: DependencyRegistry) -> None:
        """An empty dependency set fails at declaration time."""
        with pytest.raises(GenerationUsageError):
            declare_method_in_extension(registry, "fancy_function", ())
        assert len(registry) == 0

    def test_rejects_non_registry(self) -> None:
        """The registry argument must be a DependencyRegistry."""
        with pytest.raises(GenerationUsageError):
            declare_method_in_extension({}, "fancy_function", ("FancyDep",))  # type: ignore[arg-type]
