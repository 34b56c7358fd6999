"""
I/O helpers for schemas and error reporting.

PURPOSE: Central place for JSON schema validation and error formatting used by the
         pipeline, router and Lambda handler.
CONTEXT: Schemas ship inside the package (proposal_engine/schemas/) so validation
         works regardless of the current working directory.
CREDITS: Original work — no external code reuse.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft7Validator, ValidationError

SCHEMA_DIR = pathlib.Path(__file__).resolve().parent / "schemas"


class MissingFieldError(ValueError):
    """A required questionnaire section is absent. Never retried."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class OutputSchemaError(RuntimeError):
    """The engine's own response failed the output schema. A server-side defect, not bad input."""

    def __init__(self, err: ValidationError):
        self.error = err
        super().__init__(f"Proposal output failed schema: {error_to_string(err)}")


# -------------------- Schema loading utilities -------------------- #

@lru_cache(maxsize=64)
def _load_schema_cached(abs_path: str) -> Dict[str, Any]:
    p = pathlib.Path(abs_path)
    return json.loads(p.read_text(encoding="utf-8"))


def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a JSON schema by file name from the packaged schemas directory.

    parameters:
    - name: str – e.g. "questionnaire.schema.json". Absolute or relative paths
      that exist on disk are also accepted.

    raises:
    - FileNotFoundError – if the schema cannot be located.
    - json.JSONDecodeError – if the file is not valid JSON.
    """
    p = SCHEMA_DIR / name
    if not p.exists():
        p = pathlib.Path(name)
        if not p.exists():
            raise FileNotFoundError(f"Schema not found at: {name}")
    return _load_schema_cached(str(p.resolve()))


# -------------------- Validation helpers -------------------- #

def validate_with_schema(instance: Dict[str, Any], schema: Dict[str, Any]) -> None:
    """
    Validate an instance against a schema.

    raises:
    - ValidationError – if the instance does not satisfy the schema.
    """
    Draft7Validator(schema).validate(instance)


def validate_questionnaire(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, load_schema("questionnaire.schema.json"))


def validate_allocation_request(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, load_schema("allocation_request.schema.json"))


def validate_proposal_output(out: Dict[str, Any]) -> None:
    """
    raises:
    - OutputSchemaError – the assembled response does not match proposal_output.schema.json.
    """
    try:
        validate_with_schema(out, load_schema("proposal_output.schema.json"))
    except ValidationError as e:
        raise OutputSchemaError(e) from e


def error_to_string(err: Exception) -> str:
    """
    Convert an exception into a readable message.

    notes:
    - ValidationError messages include a JSON path pointer (e.g. $.riskTolerance.maxAcceptableLoss).
    - MissingFieldError keeps its own "Missing required field: X" text.
    """
    if isinstance(err, ValidationError):
        path = "$" + "".join(f"[{p!r}]" if isinstance(p, int) else f".{p}" for p in err.path)
        return f"{err.message} at {path}"
    if isinstance(err, MissingFieldError):
        return str(err)
    return f"{type(err).__name__}: {err}"


__all__ = [
    "MissingFieldError",
    "OutputSchemaError",
    "load_schema",
    "validate_with_schema",
    "validate_questionnaire",
    "validate_allocation_request",
    "validate_proposal_output",
    "error_to_string",
]
