"""Registry of callables whose implementations live in extension modules.

A consuming library creates one :class:`DependencyRegistry` at import time,
fills it through :func:`weakdeps.stubs.declare_method_in_extension`, and passes
it to :func:`weakdeps.hints.register_weakdep_cache` so failed calls can name
the packages to import.

Examples
--------
>>> from weakdeps.registry import DependencyRegistry
>>> registry = DependencyRegistry()
>>> def fancy_function(*args): ...
>>> _ = registry.register(fancy_function, ("FancyDep",))
>>> registry.lookup(fancy_function)
('FancyDep',)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TypeAlias, TypeVar

from weakdeps.errors import GenerationUsageError
from weakdeps.logging import get_logger

__all__ = [
    "DependencyRegistry",
    "DependencySet",
    "normalize_deps",
]

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., object])

DependencySet: TypeAlias = tuple[str, ...]
"""Ordered, non-empty package names that activate an extension."""


def normalize_deps(deps: Iterable[str] | str) -> DependencySet:
    """Return ``deps`` as a validated tuple.

    A bare string is a single dependency, not a sequence of characters.

    Raises
    ------
    GenerationUsageError
        If ``deps`` is empty or contains anything but non-empty strings.
    """
    normalized = (deps,) if isinstance(deps, str) else tuple(deps)
    if not normalized:
        msg = "`deps` must name at least one package"
        raise GenerationUsageError(msg)
    invalid = [dep for dep in normalized if not isinstance(dep, str) or not dep]
    if invalid:
        msg = f"`deps` entries must be non-empty package names, got {invalid!r}"
        raise GenerationUsageError(msg, context={"deps": [repr(dep) for dep in normalized]})
    return normalized


class DependencyRegistry(Mapping[Callable[..., object], DependencySet]):
    """Map each deferred callable to the packages its extension needs.

    Writes are expected only while the owning library is being imported;
    afterwards the registry is read-only and safe to read from any thread.
    Re-registering a callable overwrites its entry.
    """

    def __init__(self) -> None:
        self._entries: dict[Callable[..., object], DependencySet] = {}

    def register(self, func: F, deps: Iterable[str] | str) -> F:
        """Record that ``func`` needs ``deps``; return ``func`` unchanged.

        Parameters
        ----------
        func : Callable
            Callable identity used as the key.
        deps : Iterable[str] | str
            Packages that activate the extension, in display order.

        Returns
        -------
        Callable
            ``func``, so the call can wrap a declaration inline.

        Raises
        ------
        GenerationUsageError
            If ``deps`` is empty or malformed.
        """
        normalized = normalize_deps(deps)
        previous = self._entries.get(func)
        if previous is not None and previous != normalized:
            logger.debug(
                "Overwriting dependency registration",
                extra={
                    "operation": "register_dependencies",
                    "callable": getattr(func, "__name__", repr(func)),
                    "previous": list(previous),
                    "deps": list(normalized),
                },
            )
        self._entries[func] = normalized
        return func

    def lookup(self, func: object) -> DependencySet | None:
        """Return the packages registered for ``func``, or None."""
        try:
            return self._entries.get(func)  # type: ignore[call-overload]  # any object may be probed
        except TypeError:
            # unhashable
            return None

    def __getitem__(self, func: Callable[..., object]) -> DependencySet:
        return self._entries[func]

    def __iter__(self) -> Iterator[Callable[..., object]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        names = ", ".join(
            f"{getattr(func, '__name__', repr(func))}={list(deps)!r}"
            for func, deps in self._entries.items()
        )
        return f"{type(self).__name__}({names})"
