"""Structural validation of variation records (JSON Schema per kind)."""

from vrsdigest.validate.schema import (
    SchemaValidator,
    default_validator,
    load_schema,
    validator_for,
)

__all__ = ["SchemaValidator", "default_validator", "load_schema", "validator_for"]
