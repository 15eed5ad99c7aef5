"""Error code registry and type URIs for Problem Details.

Codes and URIs are stable identifiers: they appear in Problem Details payloads
and must not change between releases.

Examples
--------
>>> from weakdeps.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.MISSING_DEPENDENCY)
'https://weakdeps.dev/problems/missing-dependency'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]


BASE_TYPE_URI: Final[str] = "https://weakdeps.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for weakdeps exceptions.

    Attributes
    ----------
    MISSING_DEPENDENCY
        An extension-provided callable was used before its packages were imported.
    NO_METHOD
        A generic function has no implementation matching the call.
    GENERATION_USAGE
        A stub builder received malformed input at declaration time.
    CONFIGURATION_ERROR
        Settings failed validation.
    RUNTIME_ERROR
        Unclassified runtime failure.

    Examples
    --------
    >>> code = ErrorCode.NO_METHOD
    >>> assert code == "no-method"
    """

    MISSING_DEPENDENCY = "missing-dependency"
    NO_METHOD = "no-method"
    GENERATION_USAGE = "generation-usage"
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"

    def __str__(self) -> str:
        """Return the code value as a string.

        Returns
        -------
        str
            The error code value (e.g., "missing-dependency").
        """
        return self.value


def get_type_uri(code: ErrorCode) -> str:
    """Get the RFC 9457 type URI for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI (e.g., "https://weakdeps.dev/problems/no-method").
    """
    return f"{BASE_TYPE_URI}/{code.value}"
