"""Declarations for callables implemented in optional extension modules.

Both builders run at import time of the consuming library and reject malformed
input immediately with :class:`~weakdeps.errors.GenerationUsageError`.

:func:`declare_struct_in_extension`
    Forwarding constructor. Each call looks the extension up again, delegates
    to the extension's member of the same name when loaded, and raises
    :class:`~weakdeps.errors.MissingDependencyError` otherwise.

:func:`declare_method_in_extension`
    Generic function with no implementations, registered in a
    :class:`~weakdeps.registry.DependencyRegistry` so that failed calls carry a
    hint naming the packages to import.

Examples
--------
In ``mypkg/__init__.py``::

    from weakdeps import (
        DependencyRegistry,
        declare_method_in_extension,
        declare_struct_in_extension,
        register_weakdep_cache,
    )

    WEAKDEPS = DependencyRegistry()
    register_weakdep_cache(WEAKDEPS)

    FancyType = declare_struct_in_extension(
        __name__, "FancyType", "MyPkgFancyExt", ("FancyDep",), "A FancyDep-backed container."
    )
    fancy_function = declare_method_in_extension(
        WEAKDEPS, "fancy_function", ("FancyDep",), module=__name__
    )
"""

from __future__ import annotations

import keyword
from collections.abc import Callable, Iterable
from types import ModuleType

from weakdeps.dispatch import GenericFunction
from weakdeps.errors import GenerationUsageError, MissingDependencyError
from weakdeps.logging import get_logger
from weakdeps.modules import ImportedModuleSystem, ModuleSystem, module_name_of
from weakdeps.registry import DependencyRegistry, normalize_deps

__all__ = [
    "declare_method_in_extension",
    "declare_struct_in_extension",
]

logger = get_logger(__name__)

_STRUCT_USAGE = "Usage: declare_struct_in_extension(parent, name, extension, deps[, doc])"
_METHOD_USAGE = "Usage: declare_method_in_extension(registry, name, deps[, doc])"


def _extract_identifier(name: object, *, argument: str, usage: str) -> str:
    if isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name):
        return name
    msg = f"`{argument}` must be a single Python identifier, got {name!r}. {usage}"
    raise GenerationUsageError(msg, context={argument: repr(name)})


def _is_module_path(path: object) -> bool:
    return isinstance(path, str) and all(
        part.isidentifier() and not keyword.iskeyword(part) for part in path.split(".")
    )


def _find_declared(
    registry: DependencyRegistry, function: GenericFunction
) -> GenericFunction | None:
    for declared in registry:
        if (
            isinstance(declared, GenericFunction)
            and declared.__module__ == function.__module__
            and declared.__qualname__ == function.__qualname__
        ):
            return declared
    return None


def _normalize_deps(deps: object, usage: str) -> tuple[str, ...]:
    if not isinstance(deps, (str, Iterable)):
        msg = f"`deps` must be a sequence of package names, got {deps!r}. {usage}"
        raise GenerationUsageError(msg, context={"deps": repr(deps)})
    return normalize_deps(deps)


def _check_doc(doc: object, usage: str) -> str | None:
    if doc is None or isinstance(doc, str):
        return doc
    msg = f"`doc` must be a string, got {type(doc).__name__}. {usage}"
    raise GenerationUsageError(msg)


def declare_struct_in_extension(
    parent: ModuleType | str,
    name: str,
    extension: str,
    deps: Iterable[str] | str,
    doc: str | None = None,
    *,
    module_system: ModuleSystem | None = None,
) -> Callable[..., object]:
    """Build a forwarding constructor for a type defined in an extension.

    Parameters
    ----------
    parent : ModuleType | str
        Module the extension belongs to; also the stub's ``__module__``.
    name : str
        Name of the forwarded callable, looked up on the extension.
    extension : str
        Extension module name (see
        :func:`~weakdeps.modules.extension_module_name`).
    deps : Iterable[str] | str
        Packages whose import activates the extension, in display order.
    doc : str | None, optional
        Docstring for the stub. Defaults to None.
    module_system : ModuleSystem | None, optional
        Where to look for loaded extensions. Defaults to
        :class:`~weakdeps.modules.ImportedModuleSystem`.

    Returns
    -------
    Callable[..., object]
        Function forwarding ``*args``/``**kwargs`` to the extension's member.

    Raises
    ------
    GenerationUsageError
        If ``parent`` is not a module or module name, ``name`` or
        ``extension`` is not an identifier, or ``deps`` is empty.

    Notes
    -----
    Calling the stub raises :class:`~weakdeps.errors.MissingDependencyError`
    while the extension is not loaded, and :class:`AttributeError` if the
    loaded extension does not define ``name``. Errors raised by the member
    itself propagate unchanged.
    """
    if not isinstance(parent, ModuleType) and not _is_module_path(parent):
        msg = f"`parent` must be a module or module name, got {parent!r}. {_STRUCT_USAGE}"
        raise GenerationUsageError(msg, context={"parent": repr(parent)})
    struct_name = _extract_identifier(name, argument="name", usage=_STRUCT_USAGE)
    # one leading dot marks a submodule of parent
    if not isinstance(extension, str) or not _is_module_path(extension.removeprefix(".")):
        msg = f"`extension` must be a module name, got {extension!r}. {_STRUCT_USAGE}"
        raise GenerationUsageError(msg, context={"extension": repr(extension)})
    dep_names = _normalize_deps(deps, _STRUCT_USAGE)
    docstring = _check_doc(doc, _STRUCT_USAGE)
    modules = module_system if module_system is not None else ImportedModuleSystem()
    parent_name = module_name_of(parent)

    def forward(*args: object, **kwargs: object) -> object:
        ext = modules.get_extension(parent, extension)
        if ext is None:
            logger.debug(
                "Extension not loaded",
                extra={
                    "operation": "forward_to_extension",
                    "status": "missing",
                    "callable": struct_name,
                    "extension": extension,
                },
            )
            raise MissingDependencyError(struct_name, dep_names)
        member = modules.get_member(ext, struct_name)
        if member is None:
            msg = f"extension {extension!r} of {parent_name!r} does not define {struct_name!r}"
            raise AttributeError(msg)
        return member(*args, **kwargs)  # type: ignore[operator]  # member is an extension callable

    forward.__name__ = struct_name
    forward.__qualname__ = struct_name
    forward.__module__ = parent_name
    forward.__doc__ = docstring
    forward.parent = parent_name  # type: ignore[attr-defined]
    forward.extension = extension  # type: ignore[attr-defined]
    forward.deps = dep_names  # type: ignore[attr-defined]
    return forward


def declare_method_in_extension(
    registry: DependencyRegistry,
    name: str,
    deps: Iterable[str] | str,
    doc: str | None = None,
    *,
    module: str | None = None,
) -> GenericFunction:
    """Declare a generic function whose implementations come from extensions.

    Parameters
    ----------
    registry : DependencyRegistry
        Registry the function is recorded in.
    name : str
        Function name.
    deps : Iterable[str] | str
        Packages whose import activates the implementing extension.
    doc : str | None, optional
        Docstring for the function. Defaults to None.
    module : str | None, optional
        Value for ``__module__``, normally the caller's ``__name__``.

    Returns
    -------
    GenericFunction
        Function registered in ``registry``. Declaring the same module and
        name again returns the function already registered, with its
        implementations kept and its dependencies replaced.

    Raises
    ------
    GenerationUsageError
        If ``registry`` is not a DependencyRegistry, ``name`` is not an
        identifier, or ``deps`` is empty.
    """
    if not isinstance(registry, DependencyRegistry):
        msg = (
            f"`registry` must be a DependencyRegistry, got {type(registry).__name__}. "
            f"{_METHOD_USAGE}"
        )
        raise GenerationUsageError(msg)
    fn_name = _extract_identifier(name, argument="name", usage=_METHOD_USAGE)
    dep_names = _normalize_deps(deps, _METHOD_USAGE)
    docstring = _check_doc(doc, _METHOD_USAGE)

    function = GenericFunction(fn_name, module=module, doc=docstring)
    declared = _find_declared(registry, function)
    if declared is not None:
        # re-declaration keeps the function and its bound implementations
        if docstring is not None:
            declared.__doc__ = docstring
        function = declared
    return registry.register(function, dep_names)
