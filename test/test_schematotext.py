"""Tests for the text rendering of schemas."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsondrivel.schema_inference import infer_schema, infer_schema_from_iter
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
    StringSchema,
)
from jsondrivel.schematotext import render_schema


class TestRenderScalars(unittest.TestCase):
    """Single-line renderings."""

    def test_integer(self):
        self.assertEqual(render_schema(IntegerSchema(1, 3)), 'int (1 to 3)')
        self.assertEqual(render_schema(IntegerSchema(5, 5)), 'int (5)')

    def test_float(self):
        self.assertEqual(render_schema(FloatSchema(0.5, 2.25)), 'float (0.5 to 2.25)')

    def test_strings(self):
        self.assertEqual(render_schema(StringSchema(3, 5)), 'string (3 to 5 chars)')
        self.assertEqual(render_schema(StringSchema(10, 10, 'date')), 'string date (10 chars)')

    def test_enum_sorted(self):
        self.assertEqual(render_schema(EnumSchema({"b", "a"}, 1, 1)), 'string enum ("a", "b")')

    def test_other_kinds(self):
        self.assertEqual(render_schema(BooleanSchema()), 'boolean')
        self.assertEqual(render_schema(NullSchema()), 'null')
        self.assertEqual(render_schema(IndeterminateSchema()), 'indeterminate')

    def test_nullable_suffix(self):
        self.assertEqual(render_schema(IntegerSchema(1, 2, nullable=True)), 'int (1 to 2) | null')
        self.assertEqual(render_schema(IndeterminateSchema(nullable=True)), 'indeterminate | null')


class TestRenderContainers(unittest.TestCase):
    """Indented blocks for objects and arrays."""

    def test_object(self):
        schema = ObjectSchema({
            "id": FieldSchema(IntegerSchema(1, 250)),
            "email": FieldSchema(StringSchema(14, 31, 'email', nullable=True), required=False),
        })
        expected = '\n'.join([
            '{',
            '  "id": int (1 to 250),',
            '  "email"?: string email (14 to 31 chars) | null',
            '}',
        ])
        self.assertEqual(render_schema(schema), expected)

    def test_empty_object(self):
        self.assertEqual(render_schema(ObjectSchema()), '{}')

    def test_array(self):
        expected = '\n'.join([
            '[',
            '  int (1 to 3)',
            '] (2 to 5 items)',
        ])
        self.assertEqual(render_schema(ArraySchema(2, 5, IntegerSchema(1, 3))), expected)

    def test_empty_array(self):
        self.assertEqual(render_schema(ArraySchema(0, 0, None)), '[] (0 items)')

    def test_nested(self):
        schema = infer_schema({"user": {"tags": ["ab", "c"]}, "ok": True})
        expected = '\n'.join([
            '{',
            '  "user": {',
            '    "tags": [',
            '      string (1 to 2 chars)',
            '    ] (2 items)',
            '  },',
            '  "ok": boolean',
            '}',
        ])
        self.assertEqual(render_schema(schema), expected)

    def test_nullable_nested_object(self):
        schema = infer_schema_from_iter([{"a": {"b": 1}}, {"a": None}])
        expected = '\n'.join([
            '{',
            '  "a": {',
            '    "b": int (1)',
            '  } | null',
            '}',
        ])
        self.assertEqual(render_schema(schema), expected)

    def test_field_names_quoted(self):
        schema = ObjectSchema({'say "hi"': FieldSchema(BooleanSchema())})
        self.assertEqual(render_schema(schema), '{\n  "say \\"hi\\"": boolean\n}')


if __name__ == '__main__':
    unittest.main()
