# coding: utf-8
"""
Module to convert an inferred schema to a markdown report.
"""

from dataclasses import dataclass
from typing import Any, List

from jsondrivel.common import code_span, display_path, process_template
from jsondrivel.schema_model import (
    ArraySchema,
    EnumSchema,
    FloatSchema,
    IntegerSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    check_schema_node,
)


@dataclass
class SchemaRow:
    """One position of the schema as a report row."""
    path: str
    kind: str
    constraints: str
    optional: bool
    nullable: bool


class SchemaToMarkdownConverter:
    """
    Class to convert an inferred schema to a markdown report.
    """

    def __init__(self, schema: SchemaNode):
        """
        Initialize the converter.

        :param schema: The schema to describe.
        """
        self.schema = check_schema_node(schema)
        self.rows: List[SchemaRow] = []

    def collect_rows(self, schema: SchemaNode, path: List[Any], optional: bool = False):
        """
        Walk the schema depth-first and record one row per position, in encounter order.
        """
        self.rows.append(SchemaRow(display_path(path), schema.KIND, self.describe_constraints(schema),
                                   optional, schema.nullable))
        if isinstance(schema, ArraySchema) and schema.element is not None:
            self.collect_rows(schema.element, path + ['*'])
        elif isinstance(schema, ObjectSchema):
            for name, member in schema.fields.items():
                self.collect_rows(member.schema, path + [name], not member.required)

    def describe_constraints(self, schema: SchemaNode) -> str:
        """
        Summarize the bounds of a node for the constraints column.
        """
        if isinstance(schema, (IntegerSchema, FloatSchema)):
            return f'{schema.minimum} to {schema.maximum}'
        if isinstance(schema, StringSchema):
            constraints = f'length {schema.min_length} to {schema.max_length}'
            if schema.format:
                constraints += f', format {code_span(schema.format)}'
            return constraints
        if isinstance(schema, EnumSchema):
            return 'one of ' + ', '.join(code_span(value) for value in sorted(schema.values))
        if isinstance(schema, ArraySchema):
            return f'{schema.min_length} to {schema.max_length} items'
        if isinstance(schema, ObjectSchema):
            return f'{len(schema.fields)} fields'
        return ''

    def generate_markdown(self, title: str, description: str = '') -> str:
        """
        Generate markdown content from the collected rows using the Jinja2 template.

        :param title: The report heading.
        :param description: Optional paragraph placed under the heading.
        :return: Markdown content as a string.
        """
        self.rows = []
        self.collect_rows(self.schema, [])
        return process_template("schematomd/README.md.jinja",
                                title=title,
                                description=description,
                                rows=self.rows)


def convert_schema_to_markdown(schema: SchemaNode, title: str = 'Schema', description: str = '') -> str:
    """
    Render a markdown report for an inferred schema.

    :param schema: The schema to describe.
    :param title: The report heading.
    :param description: Optional paragraph placed under the heading.
    :return: Markdown content as a string.
    """
    return SchemaToMarkdownConverter(schema).generate_markdown(title, description)
