"""RFC 9457 Problem Details helpers with schema validation.

Payloads are validated against the JSON Schema 2020-12 document bundled at
``weakdeps/schema/problem_details.json``.

Examples
--------
>>> from weakdeps.problem_details import build_problem_details, render_problem
>>> problem = build_problem_details(
...     problem_type="https://weakdeps.dev/problems/missing-dependency",
...     title="MissingDependencyError",
...     status=424,
...     detail="`FancyType` depends on the package(s) `FancyDep`",
...     instance="urn:weakdeps:error",
...     extensions={"dependencies": ["FancyDep"]},
... )
>>> assert "missing-dependency" in render_problem(problem)
"""

from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING, TypeAlias, TypedDict, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "JsonValue",
    "ProblemDetails",
    "ProblemDetailsValidationError",
    "build_problem_details",
    "render_problem",
    "validate_problem_details",
]

JsonPrimitive: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = "JsonPrimitive | dict[str, JsonValue] | list[JsonValue]"

# JSON Schema type for cached schema objects
JsonSchema = dict[str, object]


class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str  # NotRequired via total=False
    extensions: dict[str, JsonValue]  # NotRequired via total=False


class ProblemDetailsValidationError(Exception):
    """Raised when a Problem Details payload fails schema validation.

    Parameters
    ----------
    message : str
        Human-readable error message describing the validation failure.
    validation_errors : list[str] | None, optional
        Specific messages from the schema validator. Defaults to None.

    Attributes
    ----------
    validation_errors : list[str]
        Validation error messages (empty list if not provided).
    """

    def __init__(self, message: str, validation_errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.validation_errors = validation_errors or []


@cache
def _load_schema() -> JsonSchema:
    """Load, check and cache the bundled Problem Details schema.

    Returns
    -------
    JsonSchema
        Parsed schema dictionary conforming to JSON Schema 2020-12.

    Raises
    ------
    ProblemDetailsValidationError
        If the schema file is missing, invalid JSON, or fails meta-schema
        validation.
    """
    schema_file = resources.files("weakdeps").joinpath("schema/problem_details.json")
    try:
        schema_obj: dict[str, object] = json.loads(schema_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Failed to load Problem Details schema: {exc}"
        raise ProblemDetailsValidationError(msg) from exc

    try:
        Draft202012Validator.check_schema(schema_obj)
    except SchemaError as exc:
        msg = f"Invalid Problem Details schema: {exc}"
        raise ProblemDetailsValidationError(msg) from exc

    return schema_obj


def validate_problem_details(payload: Mapping[str, JsonValue]) -> None:
    """Validate a Problem Details payload against the bundled schema.

    Parameters
    ----------
    payload : Mapping[str, JsonValue]
        Problem Details payload with required fields type, title, status,
        detail and instance.

    Raises
    ------
    ProblemDetailsValidationError
        If the payload fails schema validation. ``validation_errors`` carries
        the violated constraint and its JSON path.
    """
    validator = Draft202012Validator(_load_schema())
    try:
        validator.validate(payload)
    except ValidationError as exc:
        errors = [exc.message]
        if exc.absolute_path:
            path_str = ".".join(str(p) for p in exc.absolute_path)
            errors.append(f"at path: {path_str}")
        msg = f"Problem Details validation failed: {'; '.join(errors)}"
        raise ProblemDetailsValidationError(msg, validation_errors=errors) from exc


def build_problem_details(
    problem_type: str,
    title: str,
    status: int,
    detail: str,
    instance: str,
    *,
    code: str | None = None,
    extensions: Mapping[str, JsonValue] | None = None,
) -> ProblemDetails:
    """Build and validate an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem class.
    title : str
        Short human-readable summary.
    status : int
        HTTP-style status code.
    detail : str
        Human-readable explanation of this occurrence.
    instance : str
        URI identifying this occurrence.
    code : str | None, optional
        Stable machine-readable error code. Defaults to None.
    extensions : Mapping[str, JsonValue] | None, optional
        Additional structured members. Defaults to None.

    Returns
    -------
    ProblemDetails
        Validated payload.
    """
    payload: dict[str, object] = {
        "type": problem_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if code is not None:
        payload["code"] = code
    if extensions:
        payload["extensions"] = dict(extensions)

    validate_problem_details(cast("Mapping[str, JsonValue]", payload))
    return cast("ProblemDetails", payload)


def render_problem(problem: ProblemDetails | dict[str, object]) -> str:
    """Render Problem Details as a minified JSON string.

    Parameters
    ----------
    problem : ProblemDetails | dict[str, object]
        Problem Details payload to serialize.

    Returns
    -------
    str
        JSON-encoded payload without a trailing newline.
    """
    return json.dumps(problem, default=str, ensure_ascii=False)
