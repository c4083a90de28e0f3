"""Validation module - semantic checks over parsed documents."""

from wirescript.validation.lib import (
    KNOWN_PROP_NAMES,
    ValidationResult,
    Validator,
    is_valid,
    validate,
)

__all__ = ["KNOWN_PROP_NAMES", "ValidationResult", "Validator", "is_valid", "validate"]
