"""Converts an inferred schema to a JSON Schema (draft 2020-12) document.

Only the keywords that the importer in jsonstoschema reads back are emitted:
type, minimum, maximum, minLength, maxLength, format, enum, items, minItems,
maxItems, properties and required.
"""

import json
from typing import Any, Dict, List

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

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

JSON_TYPE_NAMES = {
    NullSchema: 'null',
    BooleanSchema: 'boolean',
    IntegerSchema: 'integer',
    FloatSchema: 'number',
    StringSchema: 'string',
    EnumSchema: 'string',
    ArraySchema: 'array',
    ObjectSchema: 'object',
}


def _type_keyword(schema: SchemaNode) -> str | List[str]:
    type_name = JSON_TYPE_NAMES[type(schema)]
    if schema.nullable and type_name != 'null':
        return [type_name, 'null']
    return type_name


def schema_to_json_schema_node(schema: SchemaNode) -> Dict[str, Any]:
    """
    Convert one schema node, and its children, to a JSON Schema object.

    Args:
        schema (SchemaNode): The node to convert.

    Returns:
        Dict[str, Any]: The JSON Schema object for the node.
    """
    check_schema_node(schema)
    if isinstance(schema, IndeterminateSchema):
        return {}

    json_schema: Dict[str, Any] = {"type": _type_keyword(schema)}
    if isinstance(schema, (IntegerSchema, FloatSchema)):
        json_schema["minimum"] = schema.minimum
        json_schema["maximum"] = schema.maximum
    elif isinstance(schema, StringSchema):
        json_schema["minLength"] = schema.min_length
        json_schema["maxLength"] = schema.max_length
        if schema.format:
            json_schema["format"] = schema.format
    elif isinstance(schema, EnumSchema):
        values: List[Any] = sorted(schema.values)
        if schema.nullable:
            # enum is checked independently of type, so null has to be listed too
            values.append(None)
        json_schema["enum"] = values
        json_schema["minLength"] = schema.min_length
        json_schema["maxLength"] = schema.max_length
    elif isinstance(schema, ArraySchema):
        if schema.element is not None:
            json_schema["items"] = schema_to_json_schema_node(schema.element)
        json_schema["minItems"] = schema.min_length
        json_schema["maxItems"] = schema.max_length
    elif isinstance(schema, ObjectSchema):
        json_schema["properties"] = {
            name: schema_to_json_schema_node(member.schema) for name, member in schema.fields.items()
        }
        required = [name for name, member in schema.fields.items() if member.required]
        if required:
            json_schema["required"] = required
    return json_schema


def convert_schema_to_json_schema(schema: SchemaNode, schema_id: str = '') -> Dict[str, Any]:
    """
    Convert an inferred schema to a JSON Schema document.

    Args:
        schema (SchemaNode): The inferred schema.
        schema_id (str): Optional $id for the document.

    Returns:
        Dict[str, Any]: The JSON Schema document, with $schema at the root.
    """
    document: Dict[str, Any] = {"$schema": JSON_SCHEMA_DIALECT}
    if schema_id:
        document["$id"] = schema_id
    document.update(schema_to_json_schema_node(schema))
    return document


def convert_schema_to_json_schema_file(schema: SchemaNode, json_schema_file: str, schema_id: str = '') -> None:
    """Write the JSON Schema document for ``schema`` to a file."""
    with open(json_schema_file, 'w', encoding='utf-8') as f:
        json.dump(convert_schema_to_json_schema(schema, schema_id), f, indent=2)
