"""
JSON Schema validation for app rule bundles.

Bundles must conform to schemas/app-rules.schema.json.

In dev mode, validation failures raise exceptions (fail-fast).
In prod mode, validation failures log warnings and the caller decides.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from flowinsight.config import config

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).parent / "schemas"
APP_RULES_SCHEMA = SCHEMAS_DIR / "app-rules.schema.json"


@dataclass
class ValidationResult:
    """Result of schema validation."""

    valid: bool
    errors: list[str]

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(valid=True, errors=[])

    @classmethod
    def failure(cls, errors: list[str]) -> ValidationResult:
        return cls(valid=False, errors=errors)


class SchemaValidator:
    """Validates JSON data against cached schemas."""

    _schemas: dict[str, dict] = {}
    _validators: dict[str, Any] = {}

    _dev_mode: bool = config.DEV_MODE

    @classmethod
    def set_dev_mode(cls, enabled: bool) -> None:
        """Enable or disable dev mode (fail-fast on validation errors)."""
        cls._dev_mode = enabled

    @classmethod
    def load_schema(cls, schema_path: Path | str) -> dict:
        """Load a JSON schema from file. Schemas ship with the package, so a missing one is an error."""
        schema_path = Path(schema_path)
        cache_key = str(schema_path)

        if cache_key not in cls._schemas:
            with open(schema_path) as f:
                cls._schemas[cache_key] = json.load(f)
        return cls._schemas[cache_key]

    @classmethod
    def _get_validator(cls, schema_path: Path | str) -> Draft202012Validator:
        cache_key = str(Path(schema_path))
        if cache_key not in cls._validators:
            cls._validators[cache_key] = Draft202012Validator(cls.load_schema(schema_path))
        return cls._validators[cache_key]

    @classmethod
    def validate(
        cls,
        data: Any,
        schema_path: Path | str,
        context: str = "",
    ) -> ValidationResult:
        """
        Validate data against a JSON schema.

        Args:
            data: The data to validate
            schema_path: Path to the JSON schema file
            context: Optional context string for error messages (e.g., bundle file name)

        Returns:
            ValidationResult with valid=True if valid, or valid=False with error messages

        Raises:
            ValueError: In dev mode, if validation fails
        """
        validator = cls._get_validator(schema_path)

        errors: list[str] = []
        for error in validator.iter_errors(data):
            path = ".".join(str(p) for p in error.path) or "(root)"
            prefix = f"{context}: " if context else ""
            errors.append(f"{prefix}{path}: {error.message}")

        if not errors:
            return ValidationResult.success()

        if cls._dev_mode:
            error_msg = "\n".join(errors)
            raise ValueError(f"Schema validation failed:\n{error_msg}")
        for error in errors:
            logger.warning(f"Schema validation error: {error}")
        return ValidationResult.failure(errors)


def validate_rule_bundle(bundle: Any, source: Path | str | None = None) -> ValidationResult:
    """Convenience function to validate an app rule bundle."""
    context = Path(source).name if source else ""
    return SchemaValidator.validate(bundle, APP_RULES_SCHEMA, context)
