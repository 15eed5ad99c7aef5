"""Missing-extension hints for generic functions that have no implementation yet.

Call :func:`register_weakdep_cache` once while the consuming library is being
imported. From then on a :class:`~weakdeps.errors.NoMethodError` raised for any
function in the registry carries a note such as::

    HINT: `fancy_function` depends on the package(s) `FancyDep` but you have not
    installed or imported them yet. Immediately after importing them,
    `fancy_function` will be available.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, TextIO

from weakdeps import dispatch
from weakdeps.errors import NoMethodError
from weakdeps.formatting import format_missing_dependency
from weakdeps.logging import get_logger
from weakdeps.settings import load_settings

if TYPE_CHECKING:
    from weakdeps.registry import DependencyRegistry
    from weakdeps.settings import WeakDepsSettings

__all__ = [
    "DEFAULT_HINT_PREFIX",
    "method_error_hint",
    "register_weakdep_cache",
]

logger = get_logger(__name__)

DEFAULT_HINT_PREFIX = "HINT: "


def method_error_hint(
    registry: DependencyRegistry,
    stream: TextIO,
    exc: NoMethodError,
    *,
    prefix: str = DEFAULT_HINT_PREFIX,
) -> None:
    """Write a hint for ``exc`` to ``stream`` if its function is in ``registry``.

    Never raises: the hint runs while another error is being reported, and a
    formatting failure writes nothing.

    Parameters
    ----------
    registry : DependencyRegistry
        Registry of deferred functions.
    stream : TextIO
        Sink receiving the hint in a single write.
    exc : NoMethodError
        The failure being reported.
    prefix : str, optional
        Text written before the hint. Defaults to ``"HINT: "``.
    """
    try:
        function = exc.function
        deps = registry.lookup(function)
        if deps is None:
            return
        name = getattr(function, "__name__", None) or repr(function)
        text = f"{prefix}{format_missing_dependency(name, deps)}"
    except Exception:
        logger.debug(
            "Missing-extension hint could not be formatted",
            exc_info=True,
            extra={"operation": "method_error_hint", "status": "skipped"},
        )
        return
    try:
        stream.write(text)
    except Exception:
        logger.debug(
            "Missing-extension hint could not be written",
            exc_info=True,
            extra={"operation": "method_error_hint", "status": "skipped"},
        )


def register_weakdep_cache(
    registry: DependencyRegistry,
    *,
    host: object | None = None,
    settings: WeakDepsSettings | None = None,
) -> bool:
    """Install the missing-extension hint for ``registry`` in the host hint table.

    Call once per registry. Repeated calls install duplicate hints.

    Parameters
    ----------
    registry : DependencyRegistry
        Registry consulted on every failed call.
    host : object | None, optional
        Object exposing ``register_error_hint(exc_type, hint)``. Defaults to
        :mod:`weakdeps.dispatch`.
    settings : WeakDepsSettings | None, optional
        Settings controlling installation and the hint prefix. Defaults to
        :func:`~weakdeps.settings.load_settings`.

    Returns
    -------
    bool
        True when the hint was installed; False when hints are disabled or the
        host has no hint table.
    """
    if settings is None:
        settings = load_settings()
    if not settings.hints_enabled:
        logger.debug(
            "Missing-extension hints disabled",
            extra={"operation": "register_weakdep_cache", "status": "skipped"},
        )
        return False

    if host is None:
        host = dispatch
    register = getattr(host, "register_error_hint", None)
    if register is None:
        logger.debug(
            "Host has no error hint table",
            extra={
                "operation": "register_weakdep_cache",
                "status": "skipped",
                "host": getattr(host, "__name__", type(host).__name__),
            },
        )
        return False

    register(
        NoMethodError,
        functools.partial(method_error_hint, registry, prefix=settings.hint_prefix),
    )
    logger.debug(
        "Missing-extension hint installed",
        extra={"operation": "register_weakdep_cache", "entries": len(registry)},
    )
    return True
