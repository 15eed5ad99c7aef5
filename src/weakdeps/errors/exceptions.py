"""Typed exception hierarchy with Problem Details support.

All weakdeps exceptions inherit from WeakDepsError, which provides structured
fields and RFC 9457 Problem Details mapping.

Examples
--------
>>> from weakdeps.errors import ErrorCode, MissingDependencyError
>>> try:
...     raise MissingDependencyError("FancyType", ("FancyDep",))
... except MissingDependencyError as e:
...     assert e.code == ErrorCode.MISSING_DEPENDENCY
...     assert e.deps == ("FancyDep",)
...     details = e.to_problem_details()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, cast

from weakdeps.errors.codes import ErrorCode, get_type_uri
from weakdeps.formatting import (
    format_import_statement,
    format_missing_dependency,
    highlight,
)
from weakdeps.logging import get_correlation_id
from weakdeps.problem_details import build_problem_details

if TYPE_CHECKING:
    from weakdeps.problem_details import JsonValue, ProblemDetails

__all__ = [
    "GenerationUsageError",
    "MissingDependencyError",
    "NoMethodError",
    "SettingsError",
    "WeakDepsError",
]


class WeakDepsError(Exception):
    """Base exception for all weakdeps errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Stable error code. Defaults to ``ErrorCode.RUNTIME_ERROR``.
    http_status : int, optional
        Status used in Problem Details payloads. Defaults to 500.
    log_level : int, optional
        Level callers should log this error at. Defaults to ``logging.ERROR``.
    cause : Exception | None, optional
        Underlying exception, stored as ``__cause__``. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional structured fields. Defaults to None.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    http_status : int
        Status code for Problem Details responses.
    log_level : int
        Logging level for error logging.
    context : dict[str, object]
        Additional context dictionary for error details.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.RUNTIME_ERROR,
        http_status: int = 500,
        log_level: int = logging.ERROR,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.log_level = log_level
        self.context = dict(context) if context else {}
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            self.context.setdefault("correlation_id", correlation_id)
        if cause is not None:
            self.__cause__ = cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert to RFC 9457 Problem Details JSON.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the specific occurrence. Defaults to
            ``"urn:weakdeps:error"``.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Problem Details object with type, title, status, detail, code,
            instance, and optional extensions fields.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.http_status,
            detail=self.message,
            instance=instance or "urn:weakdeps:error",
            code=self.code.value,
            extensions=cast(
                "Mapping[str, JsonValue] | None", self.context if self.context else None
            ),
        )

    def __str__(self) -> str:
        """Return formatted error string.

        Returns
        -------
        str
            Formatted error string (e.g., "NoMethodError[no-method]: ...").
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class MissingDependencyError(WeakDepsError):
    """Raised when an extension-provided callable is used before its packages are imported.

    Parameters
    ----------
    name : str
        Display name of the unavailable callable.
    deps : Sequence[str]
        Packages that activate the extension, in declaration order.

    Attributes
    ----------
    name : str
        Display name of the unavailable callable.
    deps : tuple[str, ...]
        Packages that activate the extension.

    Examples
    --------
    >>> err = MissingDependencyError("FancyType", ("FancyDep",))
    >>> "import FancyDep" in err.message
    True
    """

    def __init__(self, name: str, deps: Sequence[str]) -> None:
        self.name = name
        self.deps = tuple(deps)
        message = format_missing_dependency(
            name,
            self.deps,
            remedy=f"an {highlight(format_import_statement(self.deps))}",
        )
        super().__init__(
            message,
            code=ErrorCode.MISSING_DEPENDENCY,
            http_status=424,
            log_level=logging.INFO,
            context={"callable": name, "dependencies": list(self.deps)},
        )

    def __reduce__(
        self,
    ) -> tuple[type[MissingDependencyError], tuple[str, tuple[str, ...]], dict[str, object]]:
        """Support pickling with the constructor arguments and the recorded state."""
        return (type(self), (self.name, self.deps), dict(self.__dict__))


class GenerationUsageError(WeakDepsError):
    """Raised when a stub builder receives malformed input at declaration time.

    Parameters
    ----------
    message : str
        Description of the malformed input, including the expected usage.
    context : Mapping[str, object] | None, optional
        Offending values. Defaults to None.
    """

    def __init__(self, message: str, context: Mapping[str, object] | None = None) -> None:
        super().__init__(
            message,
            code=ErrorCode.GENERATION_USAGE,
            http_status=500,
            context=context,
        )


class NoMethodError(WeakDepsError, NotImplementedError):
    """Raised when a generic function has no implementation matching a call.

    Extension hints registered for this type are attached as exception notes
    by :func:`weakdeps.dispatch.raise_no_method`.

    Parameters
    ----------
    function : object
        The generic function that was called.
    args : tuple[object, ...]
        Positional arguments of the failing call.
    kwargs : Mapping[str, object]
        Keyword arguments of the failing call.

    Attributes
    ----------
    function : object
        The generic function that was called.
    call_args : tuple[object, ...]
        Positional arguments of the failing call.
    call_kwargs : dict[str, object]
        Keyword arguments of the failing call.
    argtypes : tuple[type, ...]
        Types of the positional arguments.
    """

    def __init__(
        self,
        function: object,
        args: tuple[object, ...] = (),
        kwargs: Mapping[str, object] | None = None,
    ) -> None:
        self.function = function
        self.call_args = args
        self.call_kwargs = dict(kwargs or {})
        self.argtypes = tuple(type(arg) for arg in args)
        name = getattr(function, "__name__", repr(function))
        signature = ", ".join(t.__qualname__ for t in self.argtypes)
        message = f"no implementation of {highlight(name)} matches arguments of type ({signature})"
        if self.call_kwargs:
            message += f" with keywords {', '.join(sorted(self.call_kwargs))}"
        super().__init__(
            message,
            code=ErrorCode.NO_METHOD,
            http_status=501,
            context={"function": name, "argtypes": [t.__qualname__ for t in self.argtypes]},
        )


class SettingsError(WeakDepsError):
    """Raised when settings validation fails.

    Parameters
    ----------
    message : str
        Human-readable error message.
    cause : Exception | None, optional
        Underlying validation error. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.CONFIGURATION_ERROR,
            http_status=500,
            cause=cause,
            context=context,
        )
