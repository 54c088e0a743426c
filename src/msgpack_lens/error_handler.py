"""Error handling implementation for the MessagePack Lens."""

import logging
from typing import Optional

from .codec.reader import decode_msgpack
from .parser import JSONParser
from .types import (
    DEFAULT_MAX_DEPTH,
    ConversionError,
    DecodeError,
    ErrorResponse,
    ErrorType,
    ParseError,
    ValidationError,
    ValidationResult,
)


class ErrorHandler:
    """
    Validation and error reporting for conversion operations.

    Turns typed conversion failures into results and suggestions that a
    caller can show to a user instead of a traceback.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            max_depth: Maximum container nesting accepted while validating
            logger: Optional logger instance for error reporting
        """
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def validate_json_text(self, json_string: str) -> ValidationResult:
        """
        Validate JSON text without converting it.

        Args:
            json_string: JSON text to validate

        Returns:
            ValidationResult with validation details
        """
        warnings = []
        try:
            JSONParser(self.max_depth, self.logger).parse(json_string)
        except ParseError as e:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.PARSE,
                    message=e.reason,
                    location=self._describe_location(e)
                )],
                warnings=warnings
            )

        if json_string != json_string.strip():
            warnings.append("Leading or trailing whitespace is ignored")
        return ValidationResult(is_valid=True, errors=[], warnings=warnings)

    def validate_msgpack_bytes(self, data: bytes) -> ValidationResult:
        """
        Validate MessagePack bytes without rendering them.

        Args:
            data: Encoded bytes to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            decode_msgpack(bytes(data), self.max_depth)
        except DecodeError as e:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.DECODE,
                    message=e.reason,
                    location=self._describe_location(e)
                )],
                warnings=[]
            )
        return ValidationResult(is_valid=True, errors=[], warnings=[])

    def handle_conversion_error(self, error: ConversionError) -> ErrorResponse:
        """
        Describe a conversion failure and what the user can do about it.

        Args:
            error: ConversionError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Conversion error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.PARSE:
            return self._handle_parse_error(error)
        elif error.error_type == ErrorType.DECODE:
            return self._handle_decode_error(error)
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Internal encoding failure. Please report the input "
                                 "that produced it.",
                location=self._describe_location(error)
            )

    def _handle_parse_error(self, error: ConversionError) -> ErrorResponse:
        """Handle malformed JSON text."""
        expected = getattr(error, "expected", None)
        hint = f" Expected {expected}." if expected else ""
        return ErrorResponse(
            can_recover=True,
            suggested_action=f"Failed to convert JSON to MessagePack: fix the JSON text "
                             f"and retry.{hint}",
            location=self._describe_location(error)
        )

    def _handle_decode_error(self, error: ConversionError) -> ErrorResponse:
        """Handle malformed or truncated MessagePack bytes."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Failed to convert MessagePack to JSON: check that the "
                             "bytes are complete and were not altered.",
            location=self._describe_location(error)
        )

    @staticmethod
    def _describe_location(error: ConversionError) -> Optional[str]:
        if isinstance(error, ParseError) and error.line is not None:
            return f"line {error.line}, column {error.column}"
        if isinstance(error, DecodeError):
            location = f"byte {error.offset}"
            if error.marker is not None:
                location += f" (marker 0x{error.marker:02x})"
            return location
        if error.offset is not None:
            return f"offset {error.offset}"
        return None
