"""Plain-text rendering of weak-dependency diagnostics.

Identifiers and import suggestions are quoted with backticks so they stand out
in a terminal traceback without depending on colour support.
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "format_import_statement",
    "format_missing_dependency",
    "highlight",
]


def highlight(text: str) -> str:
    """Quote ``text`` as inline code."""
    return f"`{text}`"


def format_import_statement(deps: Sequence[str]) -> str:
    """Return the ``import`` statement that activates ``deps``.

    Examples
    --------
    >>> format_import_statement(("numpy", "pandas"))
    'import numpy, pandas'
    """
    return f"import {', '.join(deps)}"


def format_missing_dependency(name: str, deps: Sequence[str], *, remedy: str | None = None) -> str:
    """Describe a callable that is unavailable until ``deps`` are imported.

    Parameters
    ----------
    name : str
        Display name of the callable.
    deps : Sequence[str]
        Packages the callable depends on, in declaration order.
    remedy : str | None, optional
        Phrase that completes "Immediately after ...". Defaults to
        "importing them".

    Returns
    -------
    str
        One-paragraph description naming every dependency once.

    Examples
    --------
    >>> format_missing_dependency("fancy_function", ("FancyDep",))  # doctest: +NORMALIZE_WHITESPACE
    '`fancy_function` depends on the package(s) `FancyDep` but you have not installed or
    imported them yet. Immediately after importing them, `fancy_function` will be available.'
    """
    hl_name = highlight(name)
    hl_deps = highlight(", ".join(deps))
    phrase = remedy if remedy is not None else "importing them"
    return (
        f"{hl_name} depends on the package(s) {hl_deps} but you have not installed or "
        f"imported them yet. Immediately after {phrase}, {hl_name} will be available."
    )
