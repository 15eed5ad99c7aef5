"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from weakdeps.errors import ErrorCode, GenerationUsageError
>>> try:
...     raise GenerationUsageError("`name` must be an identifier")
... except GenerationUsageError as e:
...     details = e.to_problem_details(instance="urn:weakdeps:stubs")
...     assert details["type"] == "https://weakdeps.dev/problems/generation-usage"
"""

from __future__ import annotations

from weakdeps.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from weakdeps.errors.exceptions import (
    GenerationUsageError,
    MissingDependencyError,
    NoMethodError,
    SettingsError,
    WeakDepsError,
)

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "GenerationUsageError",
    "MissingDependencyError",
    "NoMethodError",
    "SettingsError",
    "WeakDepsError",
    "get_type_uri",
]
