"""Converts a JSON Schema document back into an inferred-schema tree.

The importer accepts the keyword subset written by schematojsons. Documents
authored elsewhere are checked keyword by keyword; anything outside the subset,
or a combination that contradicts itself, raises a SchemaImportError naming the
offending keyword and its location in the document.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Set

from jsondrivel.common import STRING_FORMATS, display_path, join_names, json_pointer, json_type_name
from jsondrivel.schema_model import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    FieldSchema,
    FloatSchema,
    IndeterminateSchema,
    IntegerSchema,
    NullSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
)

logger = logging.getLogger(__name__)

# Keywords that carry no structural meaning and are ignored wherever they appear.
ANNOTATION_KEYWORDS = {
    '$schema', '$id', '$comment', 'title', 'description', 'default', 'examples',
    'deprecated', 'readOnly', 'writeOnly',
}

TYPE_KEYWORDS: Dict[str, Set[str]] = {
    'null': set(),
    'boolean': set(),
    'integer': {'minimum', 'maximum'},
    'number': {'minimum', 'maximum'},
    'string': {'minLength', 'maxLength', 'format', 'enum'},
    'array': {'items', 'minItems', 'maxItems'},
    'object': {'properties', 'required', 'additionalProperties'},
}


class SchemaImportError(Exception):
    """Exception raised when a JSON Schema document cannot be imported."""

    def __init__(self, message: str, path: Sequence[Any] = ()):
        self.message = message
        self.path = json_pointer(path)
        super().__init__(f"{message} at {display_path(path)}")


class UnsupportedSchemaConstruct(SchemaImportError):
    """A keyword, or combination of keywords, that has no schema-tree equivalent."""

    def __init__(self, message: str, keyword: str, path: Sequence[Any] = ()):
        self.keyword = keyword
        super().__init__(message, path)


class MissingKeywordError(SchemaImportError):
    """A declared type lacks a keyword needed to rebuild its bounds or fields."""

    def __init__(self, keyword: str, type_name: str, path: Sequence[Any] = ()):
        self.keyword = keyword
        super().__init__(f"Type '{type_name}' requires '{keyword}'", path)


class JsonSchemaImporter:
    """Builds a schema tree from a JSON Schema document."""

    def import_document(self, document: Any) -> SchemaNode:
        """Imports a complete document.

        Args:
            document: The parsed JSON Schema document

        Returns:
            The schema tree

        Raises:
            SchemaImportError: If the document uses unsupported or contradictory keywords
        """
        return self._import_node(document, [])

    def _import_node(self, node: Any, path: List[Any]) -> SchemaNode:
        if node is True:
            return IndeterminateSchema()
        if node is False:
            raise UnsupportedSchemaConstruct("The 'false' schema accepts nothing", 'false', path)
        if not isinstance(node, dict):
            raise SchemaImportError(f"Expected a schema object, got {json_type_name(node)}", path)

        if 'type' not in node:
            constraints = sorted(key for key in node if key not in ANNOTATION_KEYWORDS)
            if constraints:
                raise UnsupportedSchemaConstruct(
                    f"Keyword '{constraints[0]}' is not supported without 'type'", constraints[0], path)
            logger.debug("Schema without type at %s imported as indeterminate", display_path(path))
            return IndeterminateSchema()

        type_name, nullable = self._read_type(node['type'], path)
        allowed = TYPE_KEYWORDS[type_name] | ANNOTATION_KEYWORDS | {'type'}
        for key in node:
            if key not in allowed:
                raise UnsupportedSchemaConstruct(
                    f"Keyword '{key}' is not supported for type '{type_name}'", key, path + [key])

        if type_name == 'null':
            return NullSchema()
        if type_name == 'boolean':
            return BooleanSchema(nullable=nullable)
        if type_name == 'integer':
            minimum, maximum = self._read_numeric_bounds(node, type_name, path, integral=True)
            return IntegerSchema(minimum, maximum, nullable=nullable)
        if type_name == 'number':
            minimum, maximum = self._read_numeric_bounds(node, type_name, path, integral=False)
            return FloatSchema(minimum, maximum, nullable=nullable)
        if type_name == 'string':
            return self._import_string(node, nullable, path)
        if type_name == 'array':
            return self._import_array(node, nullable, path)
        return self._import_object(node, nullable, path)

    def _read_type(self, type_value: Any, path: List[Any]) -> tuple[str, bool]:
        """Returns the primary type name and whether null is also accepted."""
        type_path = path + ['type']
        names = type_value if isinstance(type_value, list) else [type_value]
        if not names:
            raise UnsupportedSchemaConstruct("Empty type list", 'type', type_path)
        for name in names:
            if not isinstance(name, str):
                raise SchemaImportError(f"Type names must be strings, got {json_type_name(name)}", type_path)
            if name not in TYPE_KEYWORDS:
                raise UnsupportedSchemaConstruct(f"Unknown type '{name}'", 'type', type_path)
        primary = [name for name in dict.fromkeys(names) if name != 'null']
        if len(primary) > 1:
            raise UnsupportedSchemaConstruct(
                f"Union of types {join_names(primary)} is not supported", 'type', type_path)
        if not primary:
            return 'null', True
        return primary[0], 'null' in names

    def _read_numeric_bounds(self, node: Dict[str, Any], type_name: str, path: List[Any],
                             integral: bool) -> tuple[Any, Any]:
        bounds = []
        for keyword in ('minimum', 'maximum'):
            if keyword not in node:
                raise MissingKeywordError(keyword, type_name, path)
            value = node[keyword]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SchemaImportError(f"'{keyword}' must be a number, got {json_type_name(value)}",
                                        path + [keyword])
            if isinstance(value, float) and not math.isfinite(value):
                raise UnsupportedSchemaConstruct(
                    f"Non-finite '{keyword}' {value} has no JSON representation", keyword, path + [keyword])
            if integral:
                if isinstance(value, float):
                    if not value.is_integer():
                        raise UnsupportedSchemaConstruct(
                            f"Fractional '{keyword}' {value} contradicts type 'integer'", keyword, path + [keyword])
                    value = int(value)
            bounds.append(value)
        if bounds[0] > bounds[1]:
            raise UnsupportedSchemaConstruct(
                f"'minimum' {bounds[0]} exceeds 'maximum' {bounds[1]}", 'minimum', path)
        return bounds[0], bounds[1]

    def _read_length_bounds(self, node: Dict[str, Any], type_name: str, path: List[Any],
                            lower_keyword: str, upper_keyword: str) -> tuple[int, int]:
        bounds = []
        for keyword in (lower_keyword, upper_keyword):
            if keyword not in node:
                raise MissingKeywordError(keyword, type_name, path)
            value = node[keyword]
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise SchemaImportError(f"'{keyword}' must be an integer, got {json_type_name(value)}",
                                        path + [keyword])
            if value < 0:
                raise UnsupportedSchemaConstruct(f"'{keyword}' must not be negative", keyword, path + [keyword])
            bounds.append(value)
        if bounds[0] > bounds[1]:
            raise UnsupportedSchemaConstruct(
                f"'{lower_keyword}' {bounds[0]} exceeds '{upper_keyword}' {bounds[1]}", lower_keyword, path)
        return bounds[0], bounds[1]

    def _import_string(self, node: Dict[str, Any], nullable: bool, path: List[Any]) -> SchemaNode:
        min_length, max_length = self._read_length_bounds(node, 'string', path, 'minLength', 'maxLength')
        format_name = node.get('format')
        if format_name is not None and format_name not in STRING_FORMATS:
            raise UnsupportedSchemaConstruct(f"Unsupported string format '{format_name}'", 'format',
                                             path + ['format'])
        if 'enum' not in node:
            return StringSchema(min_length, max_length, format_name, nullable=nullable)

        enum_path = path + ['enum']
        members = node['enum']
        if not isinstance(members, list):
            raise SchemaImportError(f"'enum' must be an array, got {json_type_name(members)}", enum_path)
        if format_name is not None:
            raise UnsupportedSchemaConstruct("'format' cannot be combined with 'enum'", 'format', path)
        values = set()
        for index, member in enumerate(members):
            if member is None:
                if not nullable:
                    raise UnsupportedSchemaConstruct("'enum' lists null but the type does not accept null",
                                                     'enum', enum_path + [index])
                continue
            if not isinstance(member, str):
                raise UnsupportedSchemaConstruct(
                    f"'enum' member of type {json_type_name(member)} contradicts type 'string'",
                    'enum', enum_path + [index])
            if not min_length <= len(member) <= max_length:
                raise UnsupportedSchemaConstruct(
                    f"'enum' member {member!r} lies outside the declared length bounds",
                    'enum', enum_path + [index])
            values.add(member)
        if not values:
            raise UnsupportedSchemaConstruct("'enum' lists no string values", 'enum', enum_path)
        return EnumSchema(values, min_length, max_length, nullable=nullable)

    def _import_array(self, node: Dict[str, Any], nullable: bool, path: List[Any]) -> SchemaNode:
        min_length, max_length = self._read_length_bounds(node, 'array', path, 'minItems', 'maxItems')
        element: Optional[SchemaNode] = None
        if 'items' in node:
            element = self._import_node(node['items'], path + ['items'])
        elif max_length > 0:
            raise MissingKeywordError('items', 'array', path)
        return ArraySchema(min_length, max_length, element, nullable=nullable)

    def _import_object(self, node: Dict[str, Any], nullable: bool, path: List[Any]) -> SchemaNode:
        if 'properties' not in node:
            raise MissingKeywordError('properties', 'object', path)
        properties = node['properties']
        if not isinstance(properties, dict):
            raise SchemaImportError(f"'properties' must be an object, got {json_type_name(properties)}",
                                    path + ['properties'])
        additional = node.get('additionalProperties', True)
        if not isinstance(additional, bool):
            raise UnsupportedSchemaConstruct("Schema-valued 'additionalProperties' is not supported",
                                             'additionalProperties', path + ['additionalProperties'])

        required = node.get('required', [])
        if not isinstance(required, list) or not all(isinstance(name, str) for name in required):
            raise SchemaImportError("'required' must be an array of strings", path + ['required'])
        undeclared = [name for name in required if name not in properties]
        if undeclared:
            raise UnsupportedSchemaConstruct(
                f"'required' names undeclared properties {join_names(undeclared)}", 'required', path + ['required'])

        fields = {}
        for name, property_node in properties.items():
            fields[name] = FieldSchema(self._import_node(property_node, path + ['properties', name]),
                                       required=name in required)
        return ObjectSchema(fields, nullable=nullable)


def convert_json_schema_to_schema(document: Any) -> SchemaNode:
    """Imports a JSON Schema document.

    Args:
        document: The parsed JSON Schema document

    Returns:
        The schema tree

    Raises:
        SchemaImportError: If the document cannot be represented
    """
    return JsonSchemaImporter().import_document(document)


def convert_json_schema_file_to_schema(json_schema_file: str) -> SchemaNode:
    """Reads and imports a JSON Schema document from a file."""
    with open(json_schema_file, 'r', encoding='utf-8') as f:
        document = json.load(f)
    return convert_json_schema_to_schema(document)


def check_json_schema(document: Any) -> List[str]:
    """Checks whether a JSON Schema document can be imported.

    Args:
        document: The parsed JSON Schema document

    Returns:
        List of error messages (empty if the document imports cleanly)
    """
    try:
        convert_json_schema_to_schema(document)
        return []
    except SchemaImportError as e:
        return [str(e)]
