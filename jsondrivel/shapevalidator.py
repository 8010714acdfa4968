"""Validates JSON instances against inferred schemas.

This module checks that a value conforms to a schema tree:
- Kinds: null, boolean, integer, float, string, enum, array, object
- Bounds: numeric ranges, string and array lengths
- Enum membership, required and undeclared object fields
- Nullability

Indeterminate positions accept any value.
"""

import math
from typing import Any, List, Sequence

from jsondrivel.common import display_path, json_type_name
from jsondrivel.schema_model import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    FloatSchema,
    IndeterminateSchema,
    IntegerSchema,
    NullSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    check_schema_node,
)


class ShapeValidationError(Exception):
    """Exception raised when a JSON instance doesn't match a schema."""

    def __init__(self, message: str, path: Sequence[Any] = ()):
        self.message = message
        self.path = display_path(path)
        super().__init__(f"{message} at {self.path}")


class ShapeValidator:
    """Validates JSON instances against a schema tree."""

    def __init__(self, schema: SchemaNode):
        """Initialize the validator with a schema.

        Args:
            schema: The schema to validate against
        """
        self.schema = check_schema_node(schema)

    def validate(self, instance: Any) -> None:
        """Validates a JSON instance against the schema.

        Args:
            instance: The JSON value to validate

        Raises:
            ShapeValidationError: If the instance doesn't match the schema
        """
        self._validate(instance, self.schema, [])

    def _validate(self, instance: Any, schema: SchemaNode, path: List[Any]) -> None:
        if isinstance(schema, IndeterminateSchema):
            return
        if instance is None:
            if schema.nullable or isinstance(schema, NullSchema):
                return
            raise ShapeValidationError(f"Expected {schema.KIND}, got null", path)

        if isinstance(schema, NullSchema):
            raise ShapeValidationError(f"Expected null, got {json_type_name(instance)}", path)
        if isinstance(schema, BooleanSchema):
            if not isinstance(instance, bool):
                raise ShapeValidationError(f"Expected boolean, got {json_type_name(instance)}", path)
        elif isinstance(schema, IntegerSchema):
            if not isinstance(instance, int) or isinstance(instance, bool):
                raise ShapeValidationError(f"Expected integer, got {json_type_name(instance)}", path)
            self._check_range(instance, schema.minimum, schema.maximum, path)
        elif isinstance(schema, FloatSchema):
            if not isinstance(instance, (int, float)) or isinstance(instance, bool):
                raise ShapeValidationError(f"Expected float, got {json_type_name(instance)}", path)
            if isinstance(instance, float) and math.isnan(instance):
                raise ShapeValidationError("NaN is outside every range", path)
            self._check_range(instance, schema.minimum, schema.maximum, path)
        elif isinstance(schema, (StringSchema, EnumSchema)):
            self._validate_string(instance, schema, path)
        elif isinstance(schema, ArraySchema):
            self._validate_array(instance, schema, path)
        elif isinstance(schema, ObjectSchema):
            self._validate_object(instance, schema, path)

    def _check_range(self, instance, minimum, maximum, path: List[Any]) -> None:
        if not minimum <= instance <= maximum:
            raise ShapeValidationError(f"Number {instance} out of range [{minimum}, {maximum}]", path)

    def _validate_string(self, instance: Any, schema: StringSchema | EnumSchema, path: List[Any]) -> None:
        if not isinstance(instance, str):
            raise ShapeValidationError(f"Expected string, got {json_type_name(instance)}", path)
        if not schema.min_length <= len(instance) <= schema.max_length:
            raise ShapeValidationError(
                f"String length {len(instance)} out of range [{schema.min_length}, {schema.max_length}]", path)
        if isinstance(schema, EnumSchema) and instance not in schema.values:
            raise ShapeValidationError(
                f"'{instance}' is not a valid enum value. Valid values: {sorted(schema.values)}", path)

    def _validate_array(self, instance: Any, schema: ArraySchema, path: List[Any]) -> None:
        if not isinstance(instance, list):
            raise ShapeValidationError(f"Expected array, got {json_type_name(instance)}", path)
        if not schema.min_length <= len(instance) <= schema.max_length:
            raise ShapeValidationError(
                f"Array length {len(instance)} out of range [{schema.min_length}, {schema.max_length}]", path)
        if schema.element is None:
            return
        for index, item in enumerate(instance):
            self._validate(item, schema.element, path + [index])

    def _validate_object(self, instance: Any, schema: ObjectSchema, path: List[Any]) -> None:
        if not isinstance(instance, dict):
            raise ShapeValidationError(f"Expected object, got {json_type_name(instance)}", path)
        for name, member in schema.fields.items():
            if name in instance:
                self._validate(instance[name], member.schema, path + [name])
            elif member.required:
                raise ShapeValidationError(f"Missing required field '{name}'", path)
        for name in instance:
            if name not in schema.fields:
                raise ShapeValidationError(f"Undeclared field '{name}'", path)


def validate_value_against_schema(instance: Any, schema: SchemaNode) -> List[str]:
    """Validates a JSON instance against a schema.

    Args:
        instance: The JSON value to validate
        schema: The schema tree

    Returns:
        List of validation error messages (empty if valid)
    """
    validator = ShapeValidator(schema)
    try:
        validator.validate(instance)
        return []
    except ShapeValidationError as e:
        return [str(e)]
