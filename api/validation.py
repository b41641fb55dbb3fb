"""Request validation: raw request body -> GenerationRequest."""

import json
from typing import Any, List, Union

from pydantic import ValidationError

from contracts import GenerationRequest
from errors import RequestValidationError


def format_issues(error: ValidationError) -> List[str]:
    """One ``"<field path>: <message>"`` string per violated constraint."""
    issues = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "body"
        issues.append(f"{location}: {item.get('msg', 'invalid value')}")
    return issues


def validate_request(raw: Union[bytes, bytearray, str, Any]) -> GenerationRequest:
    """Parse and validate an inbound request.

    Args:
        raw: The request body as bytes/str, or already-decoded JSON data.

    Returns:
        The normalized GenerationRequest.

    Raises:
        RequestValidationError: kind ``malformed_json`` if the body is not JSON,
            kind ``schema`` (with every violation listed) if it is JSON of the
            wrong shape.
    """
    if isinstance(raw, (bytes, bytearray, str)):
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            raise RequestValidationError(RequestValidationError.MALFORMED_JSON)
    else:
        data = raw

    try:
        return GenerationRequest.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(RequestValidationError.SCHEMA, format_issues(e))
