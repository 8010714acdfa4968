"""Schema inference logic for JSON data.

This module provides the core inference logic used by:
- describe: render the inferred schema as text or markdown
- produce: synthesize data shaped like the samples
- json-schema: export the inferred schema as a JSON Schema document
"""

import copy
import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from jsondrivel.common import detect_string_format, json_type_name
from jsondrivel.enum_inference import classify_enums
from jsondrivel.schema_model import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    FieldSchema,
    FloatSchema,
    IndeterminateSchema,
    InferenceOptions,
    IntegerSchema,
    NullSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    check_schema_node,
    schema_kind,
)

logger = logging.getLogger(__name__)

JsonNode = Dict[str, 'JsonNode'] | List['JsonNode'] | str | bool | int | float | None


class SchemaInferrer:
    """Infers and merges schemas from JSON values."""

    def __init__(self, options: Optional[InferenceOptions] = None):
        """Initialize the schema inferrer.

        Args:
            options: Inference options; enum inference is disabled when omitted
        """
        self.options = options or InferenceOptions()
        # distinct strings are only worth tracking when they can become enums
        self.track_strings = self.options.enum_inference is not None

    def infer_one(self, value: JsonNode) -> SchemaNode:
        """Infers the schema that describes exactly one JSON value.

        Numeric bounds equal the value, string length bounds equal its length,
        array elements are merged and every object field is required.
        """
        return classify_enums(self.python_value_to_schema(value), self.options.enum_inference)

    def infer_many(self, values: Iterable[JsonNode]) -> SchemaNode:
        """Folds a sequence of JSON values into one schema.

        Args:
            values: Parsed JSON values, in sample order

        Returns:
            The merged schema, with enum detection applied once at the end
        """
        merged: Optional[SchemaNode] = None
        count = 0
        for value in values:
            schema = self.python_value_to_schema(value)
            merged = schema if merged is None else self._merge(merged, schema, owned=True)
            count += 1
        if merged is None:
            raise ValueError("At least one value is required for inference")
        logger.debug("Folded %d samples into a %s schema", count, schema_kind(merged))
        return classify_enums(merged, self.options.enum_inference)

    def python_value_to_schema(self, value: JsonNode) -> SchemaNode:
        """Maps a Python value, as produced by a JSON parser, to a schema node.

        Enum detection is not applied here; strings only record what they saw.
        """
        if value is None:
            return NullSchema()
        # bool is a subclass of int, so check it first
        if isinstance(value, bool):
            return BooleanSchema()
        if isinstance(value, int):
            return IntegerSchema(value, value)
        if isinstance(value, float):
            if not math.isfinite(value):
                logger.debug("Non-finite number %r treated as indeterminate", value)
                return IndeterminateSchema()
            return FloatSchema(value, value)
        if isinstance(value, str):
            length = len(value)
            if self.track_strings:
                return StringSchema(length, length, detect_string_format(value),
                                    values_seen={value}, samples_seen=1)
            return StringSchema(length, length, detect_string_format(value))
        if isinstance(value, list):
            element: Optional[SchemaNode] = None
            for item in value:
                item_schema = self.python_value_to_schema(item)
                element = item_schema if element is None else self._merge(element, item_schema, owned=True)
            return ArraySchema(len(value), len(value), element)
        if isinstance(value, dict):
            fields = {}
            for key, item in value.items():
                fields[str(key)] = FieldSchema(self.python_value_to_schema(item), required=True)
            return ObjectSchema(fields)
        raise TypeError(f"Cannot infer a schema for a value of type {json_type_name(value)}")

    def merge(self, left: SchemaNode, right: SchemaNode) -> SchemaNode:
        """Merges two schemas into one that accepts every value either accepts.

        Merge is total: pairs without a rule degrade to an indeterminate node.
        Neither input is modified.
        """
        return self._merge(left, right, owned=False)

    def _merge(self, left: SchemaNode, right: SchemaNode, owned: bool) -> SchemaNode:
        """Merges two nodes. When ``owned`` is set both inputs belong to the caller
        and are discarded afterwards, so their parts are reused instead of copied.
        """
        check_schema_node(left)
        check_schema_node(right)
        nullable = left.nullable or right.nullable

        if isinstance(left, NullSchema) and isinstance(right, NullSchema):
            return NullSchema()
        if isinstance(left, NullSchema):
            return self._make_nullable(right, owned)
        if isinstance(right, NullSchema):
            return self._make_nullable(left, owned)
        if isinstance(left, IndeterminateSchema) or isinstance(right, IndeterminateSchema):
            return IndeterminateSchema(nullable=nullable)

        rule = self._MERGE_RULES.get((type(left), type(right)))
        if rule is None:
            logger.debug("Merging %s with %s degrades to indeterminate", schema_kind(left), schema_kind(right))
            return IndeterminateSchema(nullable=nullable)
        return rule(self, left, right, nullable, owned)

    def _make_nullable(self, schema: SchemaNode, owned: bool) -> SchemaNode:
        """Returns ``schema`` with the nullable flag set, copied unless it is owned."""
        nullable_schema = self._take(schema, owned)
        nullable_schema.nullable = True
        return nullable_schema

    @staticmethod
    def _take(schema: Optional[SchemaNode], owned: bool) -> Optional[SchemaNode]:
        return schema if owned else copy.deepcopy(schema)

    def _merge_booleans(self, left: BooleanSchema, right: BooleanSchema, nullable: bool, owned: bool) -> SchemaNode:
        return BooleanSchema(nullable=nullable)

    def _merge_integers(self, left: IntegerSchema, right: IntegerSchema, nullable: bool, owned: bool) -> SchemaNode:
        return IntegerSchema(min(left.minimum, right.minimum), max(left.maximum, right.maximum), nullable=nullable)

    def _merge_numbers(self, left: IntegerSchema | FloatSchema, right: IntegerSchema | FloatSchema,
                       nullable: bool, owned: bool) -> SchemaNode:
        """Integer mixed with float widens to float.

        Bounds keep their exact values: an integer bound stays an int, since
        converting it could round inward or overflow.
        """
        return FloatSchema(min(left.minimum, right.minimum), max(left.maximum, right.maximum),
                           nullable=nullable)

    def _merge_strings(self, left: StringSchema, right: StringSchema, nullable: bool, owned: bool) -> SchemaNode:
        if owned:
            values_seen = left.values_seen
            values_seen.update(right.values_seen)
        else:
            values_seen = left.values_seen | right.values_seen
        return StringSchema(
            min(left.min_length, right.min_length),
            max(left.max_length, right.max_length),
            left.format if left.format == right.format else None,
            nullable=nullable,
            values_seen=values_seen,
            samples_seen=left.samples_seen + right.samples_seen)

    def _merge_enums(self, left: EnumSchema, right: EnumSchema, nullable: bool, owned: bool) -> SchemaNode:
        return EnumSchema(left.values | right.values,
                          min(left.min_length, right.min_length),
                          max(left.max_length, right.max_length),
                          nullable=nullable)

    def _merge_string_with_enum(self, left: StringSchema | EnumSchema, right: StringSchema | EnumSchema,
                                nullable: bool, owned: bool) -> SchemaNode:
        """An open string absorbs an enum; the enum's values count as seen once each."""
        string_schema, enum_schema = (left, right) if isinstance(left, StringSchema) else (right, left)
        return StringSchema(
            min(left.min_length, right.min_length),
            max(left.max_length, right.max_length),
            nullable=nullable,
            values_seen=string_schema.values_seen | enum_schema.values if self.track_strings else set(),
            samples_seen=string_schema.samples_seen + len(enum_schema.values) if self.track_strings else 0)

    def _merge_arrays(self, left: ArraySchema, right: ArraySchema, nullable: bool, owned: bool) -> SchemaNode:
        if left.element is None:
            element = self._take(right.element, owned)
        elif right.element is None:
            element = self._take(left.element, owned)
        else:
            element = self._merge(left.element, right.element, owned)
        return ArraySchema(min(left.min_length, right.min_length),
                           max(left.max_length, right.max_length),
                           element,
                           nullable=nullable)

    def _merge_objects(self, left: ObjectSchema, right: ObjectSchema, nullable: bool, owned: bool) -> SchemaNode:
        """Merges two objects by combining their fields.

        Fields present on both sides are merged and stay required only if both
        sides require them. Fields present on one side only become optional.
        Field order follows the left side, then new fields from the right.
        """
        fields: Dict[str, FieldSchema] = {}
        for name, left_field in left.fields.items():
            right_field = right.fields.get(name)
            if right_field is None:
                fields[name] = FieldSchema(self._take(left_field.schema, owned), required=False)
            else:
                fields[name] = FieldSchema(self._merge(left_field.schema, right_field.schema, owned),
                                           required=left_field.required and right_field.required)
        for name, right_field in right.fields.items():
            if name not in left.fields:
                fields[name] = FieldSchema(self._take(right_field.schema, owned), required=False)
        return ObjectSchema(fields, nullable=nullable)

    _MERGE_RULES: Dict[Tuple[Type, Type], Callable[..., SchemaNode]] = {
        (BooleanSchema, BooleanSchema): _merge_booleans,
        (IntegerSchema, IntegerSchema): _merge_integers,
        (IntegerSchema, FloatSchema): _merge_numbers,
        (FloatSchema, IntegerSchema): _merge_numbers,
        (FloatSchema, FloatSchema): _merge_numbers,
        (StringSchema, StringSchema): _merge_strings,
        (StringSchema, EnumSchema): _merge_string_with_enum,
        (EnumSchema, StringSchema): _merge_string_with_enum,
        (EnumSchema, EnumSchema): _merge_enums,
        (ArraySchema, ArraySchema): _merge_arrays,
        (ObjectSchema, ObjectSchema): _merge_objects,
    }


# Convenience functions for direct use

def infer_schema(value: Any, options: Optional[InferenceOptions] = None) -> SchemaNode:
    """Infers the schema of a single JSON value.

    Args:
        value: Parsed JSON value
        options: Inference options

    Returns:
        Inferred schema
    """
    return SchemaInferrer(options).infer_one(value)


def infer_schema_from_iter(values: Iterable[Any], options: Optional[InferenceOptions] = None) -> SchemaNode:
    """Infers one schema from a sequence of JSON values.

    Args:
        values: Parsed JSON values, e.g. the records of a JSON Lines stream
        options: Inference options

    Returns:
        Inferred schema accepting every value
    """
    return SchemaInferrer(options).infer_many(values)


def merge_schemas(left: SchemaNode, right: SchemaNode, options: Optional[InferenceOptions] = None) -> SchemaNode:
    """Merges two schemas without applying enum detection."""
    return SchemaInferrer(options).merge(left, right)
