"""Tests for schema inference and merging."""

import json
import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsondrivel.schema_inference import (
    SchemaInferrer,
    infer_schema,
    infer_schema_from_iter,
    merge_schemas,
)
from jsondrivel.schema_model import (
    ArraySchema,
    BooleanSchema,
    EnumInference,
    EnumSchema,
    FieldSchema,
    FloatSchema,
    IndeterminateSchema,
    InferenceOptions,
    IntegerSchema,
    NullSchema,
    ObjectSchema,
    StringSchema,
)
from jsondrivel.shapevalidator import validate_value_against_schema


class TestInferOne(unittest.TestCase):
    """Inference from a single value."""

    def test_primitives(self):
        self.assertEqual(infer_schema(None), NullSchema())
        self.assertEqual(infer_schema(True), BooleanSchema())
        self.assertEqual(infer_schema(42), IntegerSchema(42, 42))
        self.assertEqual(infer_schema(2.5), FloatSchema(2.5, 2.5))
        self.assertEqual(infer_schema("hello"), StringSchema(5, 5))

    def test_bool_is_not_integer(self):
        self.assertIsInstance(infer_schema(False), BooleanSchema)

    def test_string_length_counts_characters(self):
        schema = infer_schema("日本語")
        self.assertEqual((schema.min_length, schema.max_length), (3, 3))

    def test_string_formats(self):
        self.assertEqual(infer_schema("2024-01-31").format, 'date')
        self.assertEqual(infer_schema("2024-01-31T10:00:00Z").format, 'date-time')
        self.assertEqual(infer_schema("10:00:00").format, 'time')
        self.assertEqual(infer_schema("123e4567-e89b-12d3-a456-426614174000").format, 'uuid')
        self.assertEqual(infer_schema("alice@example.com").format, 'email')
        self.assertEqual(infer_schema("https://example.com/a").format, 'uri')
        self.assertIsNone(infer_schema("hello world").format)

    def test_object_fields_required(self):
        schema = infer_schema({"name": "Alice", "age": 30})
        self.assertIsInstance(schema, ObjectSchema)
        self.assertEqual(list(schema.fields), ["name", "age"])
        self.assertTrue(all(member.required for member in schema.fields.values()))
        self.assertEqual(schema.fields["age"].schema, IntegerSchema(30, 30))

    def test_array_elements_merged(self):
        schema = infer_schema([1, 5, 3])
        self.assertEqual(schema, ArraySchema(3, 3, IntegerSchema(1, 5)))

    def test_mixed_array_is_indeterminate(self):
        schema = infer_schema([1, "a"])
        self.assertIsInstance(schema.element, IndeterminateSchema)

    def test_empty_array_has_no_element(self):
        self.assertEqual(infer_schema([]), ArraySchema(0, 0, None))

    def test_array_with_null_elements(self):
        schema = infer_schema([1, None, 2])
        self.assertEqual(schema.element, IntegerSchema(1, 2, nullable=True))

    def test_non_finite_float_is_indeterminate(self):
        self.assertIsInstance(infer_schema(float('nan')), IndeterminateSchema)

    def test_non_json_value_rejected(self):
        with self.assertRaises(TypeError):
            infer_schema({1, 2})


class TestMerge(unittest.TestCase):
    """Pairwise merge rules."""

    def setUp(self):
        self.inferrer = SchemaInferrer()

    def test_integer_bounds_union(self):
        merged = self.inferrer.merge(IntegerSchema(1, 3), IntegerSchema(-2, 2))
        self.assertEqual(merged, IntegerSchema(-2, 3))

    def test_integer_with_float_widens(self):
        merged = self.inferrer.merge(IntegerSchema(1, 10), FloatSchema(0.5, 2.5))
        self.assertEqual(merged, FloatSchema(0.5, 10.0))
        self.assertEqual(self.inferrer.merge(FloatSchema(0.5, 2.5), IntegerSchema(1, 10)), merged)

    def test_integer_with_float_keeps_exact_bounds(self):
        big = 2 ** 60 + 1
        merged = self.inferrer.merge(IntegerSchema(big, big), FloatSchema(0.5, 0.5))
        self.assertEqual(merged.maximum, big)
        self.assertIsInstance(merged.maximum, int)
        schema = infer_schema_from_iter([big, 0.5])
        self.assertEqual(validate_value_against_schema(big, schema), [])

    def test_integer_beyond_float_range_with_float(self):
        records = json.loads('[{"a": 1' + '0' * 400 + '}, {"a": 0.5}]')
        schema = infer_schema_from_iter(records)
        self.assertIsInstance(schema.fields["a"].schema, FloatSchema)
        for record in records:
            self.assertEqual(validate_value_against_schema(record, schema), [])

    def test_merge_does_not_share_seen_values(self):
        inferrer = SchemaInferrer(InferenceOptions(enum_inference=EnumInference()))
        left = StringSchema(1, 1, values_seen={"a"}, samples_seen=1)
        right = StringSchema(1, 1, values_seen={"b"}, samples_seen=1)
        merged = inferrer.merge(left, right)
        self.assertEqual(merged.values_seen, {"a", "b"})
        self.assertEqual(left.values_seen, {"a"})
        self.assertEqual(right.values_seen, {"b"})

    def test_null_sets_nullable(self):
        merged = self.inferrer.merge(NullSchema(), IntegerSchema(1, 2))
        self.assertEqual(merged, IntegerSchema(1, 2, nullable=True))
        self.assertEqual(self.inferrer.merge(IntegerSchema(1, 2), NullSchema()), merged)

    def test_null_with_null_stays_null(self):
        self.assertEqual(self.inferrer.merge(NullSchema(), NullSchema()), NullSchema())

    def test_null_does_not_modify_input(self):
        original = IntegerSchema(1, 2)
        self.inferrer.merge(original, NullSchema())
        self.assertFalse(original.nullable)

    def test_string_bounds_and_format(self):
        merged = self.inferrer.merge(StringSchema(10, 10, 'date'), StringSchema(10, 10, 'date'))
        self.assertEqual(merged, StringSchema(10, 10, 'date'))
        merged = self.inferrer.merge(StringSchema(10, 10, 'date'), StringSchema(2, 4))
        self.assertEqual(merged, StringSchema(2, 10))

    def test_cross_kind_is_indeterminate(self):
        merged = self.inferrer.merge(StringSchema(1, 1), ObjectSchema())
        self.assertEqual(merged, IndeterminateSchema())
        merged = self.inferrer.merge(BooleanSchema(), IntegerSchema(0, 1))
        self.assertEqual(merged, IndeterminateSchema())

    def test_indeterminate_absorbs(self):
        merged = self.inferrer.merge(IndeterminateSchema(), IntegerSchema(1, 2, nullable=True))
        self.assertEqual(merged, IndeterminateSchema(nullable=True))

    def test_nullable_carried_through_cross_kind(self):
        merged = self.inferrer.merge(StringSchema(1, 1, nullable=True), IntegerSchema(1, 1))
        self.assertEqual(merged, IndeterminateSchema(nullable=True))

    def test_enum_with_enum(self):
        merged = self.inferrer.merge(EnumSchema({"a"}, 1, 1), EnumSchema({"bb"}, 2, 2))
        self.assertEqual(merged, EnumSchema({"a", "bb"}, 1, 2))

    def test_enum_with_string_opens(self):
        merged = self.inferrer.merge(EnumSchema({"a"}, 1, 1), StringSchema(3, 4))
        self.assertEqual(merged, StringSchema(1, 4))

    def test_array_element_merge(self):
        merged = self.inferrer.merge(ArraySchema(2, 2, IntegerSchema(1, 2)),
                                     ArraySchema(0, 0, None))
        self.assertEqual(merged, ArraySchema(0, 2, IntegerSchema(1, 2)))

    def test_object_merge_disjoint_fields(self):
        """Folding {"x": 1} then {"y": 2} yields two optional integer fields."""
        schema = infer_schema_from_iter([{"x": 1}, {"y": 2}])
        self.assertEqual(list(schema.fields), ["x", "y"])
        self.assertEqual(schema.fields["x"], FieldSchema(IntegerSchema(1, 1), required=False))
        self.assertEqual(schema.fields["y"], FieldSchema(IntegerSchema(2, 2), required=False))

    def test_object_merge_shared_fields(self):
        schema = infer_schema_from_iter([{"x": 1, "y": 2}, {"x": 3, "y": 4}])
        self.assertEqual(schema.fields["x"], FieldSchema(IntegerSchema(1, 3), required=True))
        self.assertEqual(schema.fields["y"], FieldSchema(IntegerSchema(2, 4), required=True))

    def test_required_only_when_present_in_every_sample(self):
        schema = infer_schema_from_iter([
            {"name": "Alice", "age": 30},
            {"name": "Bob", "email": "bob@example.com"},
            {"name": "Charlie", "age": 35, "email": "charlie@example.com"},
        ])
        required = {name for name, member in schema.fields.items() if member.required}
        self.assertEqual(required, {"name"})
        self.assertEqual(list(schema.fields), ["name", "age", "email"])

    def test_field_null_in_one_sample(self):
        schema = infer_schema_from_iter([{"a": None}, {"a": "xy"}])
        self.assertEqual(schema.fields["a"], FieldSchema(StringSchema(2, 2, nullable=True), required=True))

    def test_field_only_null(self):
        schema = infer_schema_from_iter([{"a": None}, {"a": None}])
        self.assertEqual(schema.fields["a"].schema, NullSchema())


class TestMergeProperties(unittest.TestCase):
    """Algebraic properties of merge."""

    def setUp(self):
        self.inferrer = SchemaInferrer()
        self.samples = [
            NullSchema(),
            BooleanSchema(),
            IntegerSchema(-4, 9),
            FloatSchema(0.25, 8.5),
            StringSchema(2, 7, 'email'),
            EnumSchema({"red", "green"}, 3, 5),
            IndeterminateSchema(nullable=True),
        ]

    def test_idempotent(self):
        for schema in self.samples:
            with self.subTest(schema=schema):
                self.assertEqual(self.inferrer.merge(schema, schema), schema)

    def test_commutative_for_widening(self):
        pairs = [
            (IntegerSchema(1, 2), IntegerSchema(-5, 0)),
            (FloatSchema(1.5, 2.5), IntegerSchema(0, 100)),
            (StringSchema(1, 1), StringSchema(4, 9)),
            (ArraySchema(1, 2, IntegerSchema(1, 1)), ArraySchema(3, 3, FloatSchema(0.5, 0.5))),
        ]
        for left, right in pairs:
            with self.subTest(left=left, right=right):
                self.assertEqual(self.inferrer.merge(left, right), self.inferrer.merge(right, left))

    def test_associative_for_widening(self):
        a, b, c = IntegerSchema(1, 2), IntegerSchema(7, 9), IntegerSchema(-3, 0)
        merge = self.inferrer.merge
        self.assertEqual(merge(merge(a, b), c), merge(a, merge(b, c)))

        a, b, c = StringSchema(3, 3), StringSchema(0, 1), StringSchema(8, 12)
        self.assertEqual(merge(merge(a, b), c), merge(a, merge(b, c)))

    def test_merge_schemas_function(self):
        self.assertEqual(merge_schemas(IntegerSchema(1, 1), IntegerSchema(2, 2)), IntegerSchema(1, 2))


class TestInferMany(unittest.TestCase):
    """Sequential folding of samples."""

    def test_array_bound_accumulation(self):
        schema = infer_schema_from_iter([[1, 2], [3, 4, 5, 6, 7], [0.5, 8, 9]])
        self.assertEqual(schema.min_length, 2)
        self.assertEqual(schema.max_length, 5)
        self.assertEqual(schema.element, FloatSchema(0.5, 9.0))

    def test_requires_a_value(self):
        with self.assertRaises(ValueError):
            infer_schema_from_iter([])

    def test_accepts_generators(self):
        schema = infer_schema_from_iter(n for n in range(5))
        self.assertEqual(schema, IntegerSchema(0, 4))

    def test_incompatible_roots(self):
        schema = infer_schema_from_iter([{"a": 1}, [1]])
        self.assertIsInstance(schema, IndeterminateSchema)

    def test_nested_objects_in_arrays(self):
        schema = infer_schema_from_iter([
            {"items": [{"id": 1, "name": "Item1"}, {"id": 2}]},
            {"items": []},
        ])
        items = schema.fields["items"].schema
        self.assertEqual((items.min_length, items.max_length), (0, 2))
        self.assertTrue(items.element.fields["id"].required)
        self.assertFalse(items.element.fields["name"].required)

    def test_unique_strings_counted(self):
        options = InferenceOptions(enum_inference=EnumInference(max_unique_ratio=0.5, min_sample_size=1))
        inferrer = SchemaInferrer(options)
        records = [{"id": f"id-{i}", "tags": [f"t{i}", "x"]} for i in range(3000)]
        schema = inferrer.infer_many(records)
        self.assertIsInstance(schema.fields["id"].schema, StringSchema)
        self.assertEqual(len(schema.fields["id"].schema.values_seen), 3000)
        self.assertEqual(schema.fields["id"].schema.samples_seen, 3000)
        self.assertEqual(schema.fields["tags"].schema.element.samples_seen, 6000)

    def test_fold_leaves_input_values_alone(self):
        records = [{"a": None, "b": [1]}, {"a": "x", "b": []}, {"a": None}]
        snapshot = json.dumps(records)
        infer_schema_from_iter(records)
        self.assertEqual(json.dumps(records), snapshot)

    def test_enum_applied_after_fold(self):
        options = InferenceOptions(enum_inference=EnumInference(max_unique_ratio=0.5, min_sample_size=4))
        schema = infer_schema_from_iter([{"s": "a"}, {"s": "b"}, {"s": "a"}, {"s": "a"}], options)
        self.assertEqual(schema.fields["s"].schema, EnumSchema({"a", "b"}, 1, 1))

    def test_infer_one_applies_enum_detection(self):
        options = InferenceOptions(enum_inference=EnumInference(max_unique_ratio=1.0, min_sample_size=1))
        self.assertEqual(infer_schema("on", options), EnumSchema({"on"}, 2, 2))


if __name__ == '__main__':
    unittest.main()
