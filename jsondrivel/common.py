"""
Common utility functions for jsondrivel.
"""

# pylint: disable=line-too-long

import os
import re
from typing import Any, List, Optional, Sequence

import jinja2
from jsonpointer import JsonPointer


STRING_FORMATS = ('date-time', 'date', 'time', 'uuid', 'email', 'uri')

_DATETIME_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:?\d{2})?$')
_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_TIME_PATTERN = re.compile(r'^\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:?\d{2})?$')
_UUID_PATTERN = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')
_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_URI_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://[^\s]+$')

_FORMAT_PATTERNS = [
    ('date-time', _DATETIME_PATTERN),
    ('date', _DATE_PATTERN),
    ('time', _TIME_PATTERN),
    ('uuid', _UUID_PATTERN),
    ('email', _EMAIL_PATTERN),
    ('uri', _URI_PATTERN),
]


def detect_string_format(value: str) -> Optional[str]:
    """
    Detect the semantic format of a string value.

    Args:
        value (str): The string to inspect.

    Returns:
        Optional[str]: One of STRING_FORMATS, or None for a plain string.
    """
    for format_name, pattern in _FORMAT_PATTERNS:
        if pattern.match(value):
            return format_name
    return None


def json_type_name(value: Any) -> str:
    """Name the JSON type of a Python value as produced by a JSON parser."""
    if value is None:
        return 'null'
    # bool is a subclass of int
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, int):
        return 'integer'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def json_pointer(parts: Sequence[Any]) -> str:
    """
    Build an escaped JSON pointer from path segments.

    Args:
        parts (Sequence[Any]): Property names and array indexes, outermost first.

    Returns:
        str: The JSON pointer, '' for the document root.
    """
    return JsonPointer.from_parts([str(part) for part in parts]).path


def display_path(parts: Sequence[Any]) -> str:
    """Render a path as a URI fragment ('#' for the root)."""
    return '#' + json_pointer(parts)


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package directory.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)
    template_env.filters['code'] = code_span

    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def code_span(text: Any) -> str:
    """Wrap text in a markdown code span, escaping table pipes."""
    text = str(text).replace('|', '\\|')
    if '`' in text:
        return f'`` {text} ``'
    return f'`{text}`'


def join_names(names: List[str]) -> str:
    """Join names for human-readable messages."""
    return ', '.join(f"'{name}'" for name in names)
