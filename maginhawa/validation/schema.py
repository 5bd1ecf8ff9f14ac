"""Schema validation for individual place records.

Every rule runs on every record; a record's errors are collected in one pass
and never cut short at the first failure.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from maginhawa.models.place import Place, parse_timestamp
from maginhawa.models.validation import ROOT_PATH, FieldError, ValidationResult

logger = logging.getLogger(__name__)


def _error_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or ROOT_PATH


def _chronology_errors(data: dict[str, Any]) -> list[FieldError]:
    """Check that a record was not updated before it was created."""
    created = parse_timestamp(data.get("createdAt"))
    updated = parse_timestamp(data.get("updatedAt"))
    if created is None or updated is None or updated >= created:
        return []
    return [
        FieldError(
            path="updatedAt",
            message="updatedAt must not be earlier than createdAt",
            code="timestamp_order",
        )
    ]


def check_place(data: Any, file: str = "<input>") -> tuple[Place | None, ValidationResult]:
    """Validate parsed record data.

    Args:
        data: The decoded record
        file: File identifier reported with the result

    Returns:
        The parsed Place (None when invalid) and the validation result
    """
    if not isinstance(data, dict):
        error = FieldError(
            path=ROOT_PATH,
            message=f"Record must be a JSON object, got {type(data).__name__}",
            code="model_type",
        )
        return None, ValidationResult(file=file, errors=[error])

    place = None
    errors: list[FieldError] = []
    try:
        place = Place.model_validate(data)
    except ValidationError as e:
        errors.extend(
            FieldError(path=_error_path(err["loc"]), message=err["msg"], code=err["type"])
            for err in e.errors(include_url=False)
        )

    errors.extend(_chronology_errors(data))
    if errors:
        place = None
    return place, ValidationResult(file=file, errors=errors)


def validate_place(data: Any, file: str = "<input>") -> ValidationResult:
    """Validate one decoded record against the place schema."""
    return check_place(data, file)[1]


def _parse_error(file: str, message: str, code: str = "parse_error") -> ValidationResult:
    return ValidationResult(
        file=file, errors=[FieldError(path=ROOT_PATH, message=message, code=code)]
    )


def check_place_json(text: str, file: str = "<input>") -> tuple[Place | None, ValidationResult]:
    """Decode and validate one record given as JSON text."""
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return None, _parse_error(file, f"JSON parse error: {e}")
    return check_place(data, file)


def validate_place_json(text: str, file: str = "<input>") -> ValidationResult:
    """Validate one record given as raw JSON text."""
    return check_place_json(text, file)[1]


def check_place_file(path: Path) -> tuple[Place | None, ValidationResult]:
    """Read, decode and validate one record file."""
    file = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        return None, _parse_error(file, f"File is not valid UTF-8: {e}")
    except OSError as e:
        return None, _parse_error(file, f"Could not read file: {e}", code="read_error")

    place, result = check_place_json(text, file)
    if not result.valid:
        logger.debug(f"{file}: {len(result.errors)} validation error(s)")
    return place, result


def validate_place_file(path: Path) -> ValidationResult:
    """Validate a single place file."""
    return check_place_file(path)[1]
