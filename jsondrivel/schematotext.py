"""Renders an inferred schema as an indented, human-readable tree.

Objects and arrays open a block whose contents are indented by two spaces;
everything else renders on one line. Examples::

    {
      "id": int (1 to 250),
      "name": string (3 to 12 chars),
      "email"?: string email (14 to 31 chars) | null,
      "tags": [
        string enum ("new", "sale")
      ] (0 to 3 items)
    }

A ``?`` after a field name marks a field that was missing from some samples;
``| null`` marks a position where null was observed.
"""

import json
from typing import List

from jsondrivel.schema_model import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    FloatSchema,
    IntegerSchema,
    NullSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    check_schema_node,
)

INDENT = '  '


def _range(lower, upper, unit: str = '') -> str:
    suffix = f' {unit}' if unit else ''
    if lower == upper:
        return f'({lower}{suffix})'
    return f'({lower} to {upper}{suffix})'


def _nullable_suffix(schema: SchemaNode) -> str:
    return ' | null' if schema.nullable and not isinstance(schema, NullSchema) else ''


def _render_lines(schema: SchemaNode, depth: int) -> List[str]:
    """Render a node as lines; the first line carries no indentation of its own."""
    check_schema_node(schema)
    pad = INDENT * depth
    suffix = _nullable_suffix(schema)

    if isinstance(schema, ObjectSchema):
        if not schema.fields:
            return ['{}' + suffix]
        lines = ['{']
        names = list(schema.fields)
        for index, name in enumerate(names):
            member = schema.fields[name]
            key = json.dumps(name, ensure_ascii=False) + ('' if member.required else '?')
            body = _render_lines(member.schema, depth + 1)
            body[0] = f'{pad}{INDENT}{key}: {body[0]}'
            if index < len(names) - 1:
                body[-1] += ','
            lines.extend(body)
        lines.append(f'{pad}}}{suffix}')
        return lines

    if isinstance(schema, ArraySchema):
        bounds = _range(schema.min_length, schema.max_length, 'items')
        if schema.element is None:
            return [f'[] {bounds}{suffix}']
        body = _render_lines(schema.element, depth + 1)
        body[0] = f'{pad}{INDENT}{body[0]}'
        return ['['] + body + [f'{pad}] {bounds}{suffix}']

    return [_render_scalar(schema) + suffix]


def _render_scalar(schema: SchemaNode) -> str:
    if isinstance(schema, NullSchema):
        return 'null'
    if isinstance(schema, BooleanSchema):
        return 'boolean'
    if isinstance(schema, IntegerSchema):
        return f'int {_range(schema.minimum, schema.maximum)}'
    if isinstance(schema, FloatSchema):
        return f'float {_range(schema.minimum, schema.maximum)}'
    if isinstance(schema, StringSchema):
        kind = f'string {schema.format}' if schema.format else 'string'
        return f'{kind} {_range(schema.min_length, schema.max_length, "chars")}'
    if isinstance(schema, EnumSchema):
        values = ', '.join(json.dumps(value, ensure_ascii=False) for value in sorted(schema.values))
        return f'string enum ({values})'
    return 'indeterminate'


def render_schema(schema: SchemaNode) -> str:
    """
    Render a schema as an indented text tree.

    Args:
        schema (SchemaNode): The schema to describe.

    Returns:
        str: The description. Field order is the order fields were first seen.
    """
    return '\n'.join(_render_lines(schema, 0))
