"""
Structured decoding of provider text.

Provider output is never trusted structurally: text is decoded as JSON
(directly, or from the first well-formed JSON value of the expected shape
embedded in surrounding prose) and then validated against a pydantic
schema. The result is tagged success or failure instead of raising.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from pydantic import TypeAdapter, ValidationError

from src.core.request_executor import AIServiceError, ErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

Shape = Literal["array", "object"]

_OPENERS: dict[str, str] = {"array": "[", "object": "{"}
_TYPES: dict[str, type] = {"array": list, "object": dict}

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Tagged outcome of decoding provider text."""

    value: T | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> "DecodeResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "DecodeResult[T]":
        return cls(error_kind=kind, error=error)

    def unwrap(self) -> T:
        """Return the value or raise the failure as an AIServiceError."""
        if self.error_kind is not None:
            raise AIServiceError(self.error or "Decoding failed", self.error_kind)
        return self.value


def extract_json(text: str, shape: Shape) -> Any:
    """
    Find JSON of the requested shape in text.

    Tries the whole (trimmed) text first, then every opening bracket in
    order and returns the first one that decodes to the requested shape.

    Raises:
        ValueError: No decodable value of that shape exists
    """
    cleaned = text.strip()
    expected = _TYPES[shape]

    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    else:
        if isinstance(value, expected):
            return value

    opener = _OPENERS[shape]
    start = cleaned.find(opener)
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(cleaned, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, expected):
                return value
        start = cleaned.find(opener, start + 1)

    raise ValueError(f"No JSON {shape} found in response")


def decode(text: str, schema: Any, shape: Shape) -> DecodeResult:
    """
    Decode and validate provider text.

    Args:
        text: Raw provider output
        schema: Type understood by pydantic's TypeAdapter
        shape: Top-level JSON shape to look for

    Returns:
        DecodeResult holding the validated value, or PARSE_ERROR when no
        JSON could be found, or INVALID_RESPONSE when validation failed
    """
    try:
        raw = extract_json(text, shape)
    except ValueError as e:
        logger.warning(f"Failed to parse provider response: {e}")
        return DecodeResult.failure(ErrorKind.PARSE_ERROR, f"Failed to parse AI response as JSON: {e}")

    try:
        value = TypeAdapter(schema).validate_python(raw)
    except ValidationError as e:
        logger.warning(f"Provider response failed validation: {e.error_count()} error(s)")
        return DecodeResult.failure(ErrorKind.INVALID_RESPONSE, f"AI returned an invalid structure: {e}")

    return DecodeResult.success(value)
