"""Generic functions whose implementations are bound later, plus error hints.

A :class:`GenericFunction` starts with no implementations. Extension modules
bind implementations per argument type with :meth:`GenericFunction.register`.
A call nothing matches raises :class:`~weakdeps.errors.NoMethodError` through
:func:`raise_no_method`, which first runs every hint registered for that error
type in the process-wide :data:`ERROR_HINTS` table and attaches their output
to the exception as notes.

Examples
--------
>>> from weakdeps.dispatch import GenericFunction
>>> area = GenericFunction("area")
>>> @area.register(int)
... def _(side):
...     return side * side
>>> area(3)
9
"""

from __future__ import annotations

import functools
import io
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn, TextIO, TypeAlias, TypeVar

from weakdeps.errors import NoMethodError
from weakdeps.logging import get_logger

if TYPE_CHECKING:
    from weakdeps.errors import WeakDepsError

__all__ = [
    "ERROR_HINTS",
    "ErrorHint",
    "ErrorHintTable",
    "GenericFunction",
    "raise_no_method",
    "register_error_hint",
]

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., object])

ErrorHint: TypeAlias = "Callable[[TextIO, NoMethodError], None]"
"""Callback writing supplementary text for a failed call to the given stream."""


class ErrorHintTable:
    """Process-wide list of hint callbacks keyed by exception type."""

    def __init__(self) -> None:
        self._hints: list[tuple[type[BaseException], ErrorHint]] = []

    def register_error_hint(self, exc_type: type[BaseException], hint: ErrorHint) -> None:
        """Run ``hint`` whenever an instance of ``exc_type`` is raised by this package."""
        self._hints.append((exc_type, hint))

    def hints_for(self, exc: BaseException) -> list[ErrorHint]:
        """Return the hints applicable to ``exc`` in registration order."""
        return [hint for exc_type, hint in self._hints if isinstance(exc, exc_type)]

    def render(self, exc: WeakDepsError) -> list[str]:
        """Run each applicable hint into its own buffer and collect the text.

        A hint that raises is logged and skipped so ``exc`` can still be raised.
        """
        notes: list[str] = []
        for hint in self.hints_for(exc):
            buffer = io.StringIO()
            try:
                hint(buffer, exc)  # type: ignore[arg-type]  # table is keyed by type
            except Exception:
                logger.warning(
                    "Error hint failed",
                    exc_info=True,
                    extra={
                        "operation": "render_error_hint",
                        "hint": getattr(hint, "__name__", repr(hint)),
                    },
                )
                continue
            text = buffer.getvalue().strip()
            if text:
                notes.append(text)
        return notes

    def clear(self) -> None:
        """Remove every registered hint."""
        self._hints.clear()

    def __len__(self) -> int:
        return len(self._hints)


ERROR_HINTS = ErrorHintTable()


def register_error_hint(exc_type: type[BaseException], hint: ErrorHint) -> None:
    """Register ``hint`` in :data:`ERROR_HINTS`."""
    ERROR_HINTS.register_error_hint(exc_type, hint)


def raise_no_method(
    function: object,
    args: tuple[object, ...],
    kwargs: Mapping[str, object],
    *,
    hints: ErrorHintTable | None = None,
) -> NoReturn:
    """Raise :class:`NoMethodError` for a call with hint notes attached.

    Parameters
    ----------
    function : object
        The generic function that failed to match.
    args : tuple[object, ...]
        Positional arguments of the call.
    kwargs : Mapping[str, object]
        Keyword arguments of the call.
    hints : ErrorHintTable | None, optional
        Table to consult. Defaults to :data:`ERROR_HINTS`.

    Raises
    ------
    NoMethodError
        Always.
    """
    exc = NoMethodError(function, args, kwargs)
    table = ERROR_HINTS if hints is None else hints
    for note in table.render(exc):
        exc.add_note(note)
    raise exc


class GenericFunction:
    """Callable that dispatches on the type of its first positional argument.

    Declared with zero implementations; extension modules bind them with
    :meth:`register`. Binding ``object`` provides a catch-all. Calls without
    positional arguments dispatch on ``object``.

    Parameters
    ----------
    name : str
        Function name reported in errors and hints.
    module : str | None, optional
        Value for ``__module__``. Defaults to None.
    doc : str | None, optional
        Docstring. Defaults to None.
    hints : ErrorHintTable | None, optional
        Hint table consulted on failure. Defaults to :data:`ERROR_HINTS`.
    """

    def __init__(
        self,
        name: str,
        *,
        module: str | None = None,
        doc: str | None = None,
        hints: ErrorHintTable | None = None,
    ) -> None:
        self.__name__ = name
        self.__qualname__ = name
        self.__module__ = module if module is not None else __name__
        self.__doc__ = doc
        self._hints = hints

        def no_method(*args: object, **kwargs: object) -> NoReturn:
            raise_no_method(self, args, kwargs, hints=self._hints)

        self._fallback = no_method
        self._dispatcher = functools.singledispatch(no_method)

    def register(self, cls: type, func: F | None = None) -> F | Callable[[F], F]:
        """Bind ``func`` for arguments of type ``cls``; usable as a decorator."""
        if func is None:
            return self._dispatcher.register(cls)
        return self._dispatcher.register(cls, func)

    def dispatch(self, cls: type) -> Callable[..., object]:
        """Return the implementation chosen for ``cls`` (the fallback if none)."""
        return self._dispatcher.dispatch(cls)

    def has_implementation(self, cls: type = object) -> bool:
        """Return whether a call with a ``cls`` first argument would succeed."""
        return self.dispatch(cls) is not self._fallback

    @property
    def registry(self) -> Mapping[type, Callable[..., object]]:
        """Read-only view of bound implementations, excluding the fallback."""
        return MappingProxyType(
            {
                cls: impl
                for cls, impl in self._dispatcher.registry.items()
                if impl is not self._fallback
            }
        )

    def __call__(self, *args: object, **kwargs: object) -> object:
        cls = args[0].__class__ if args else object
        return self._dispatcher.dispatch(cls)(*args, **kwargs)

    def __repr__(self) -> str:
        count = len(self.registry)
        return (
            f"<generic function {self.__module__}.{self.__qualname__} "
            f"with {count} implementation(s)>"
        )
