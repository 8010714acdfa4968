"""Infers a schema from JSON text or JSON files.

Input is either one JSON document or a JSON Lines stream with one document
per line. A single document is inferred on its own, so an array at the root
stays an array; a stream is folded record by record.
"""

import json
import logging
from typing import Any, List, Optional, Tuple

from jsondrivel.schema_inference import SchemaInferrer
from jsondrivel.schema_model import InferenceOptions, SchemaNode

logger = logging.getLogger(__name__)


def load_json_values(content: str) -> Tuple[List[Any], bool]:
    """Parses JSON text as a single document or, failing that, as JSON Lines.

    Args:
        content: The input text

    Returns:
        Tuple of (values, is_stream). A single document yields one value and
        is_stream False.

    Raises:
        ValueError: If the text is neither valid JSON nor valid JSON Lines
    """
    try:
        return [json.loads(content)], False
    except json.JSONDecodeError:
        pass

    values: List[Any] = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            values.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing input on line {line_number}; are you sure it is valid JSON? {e}") from e
    if not values:
        raise ValueError("No JSON data found in input")
    logger.debug("Parsed %d JSON Lines records", len(values))
    return values, True


def infer_schema_from_text(content: str, options: Optional[InferenceOptions] = None) -> SchemaNode:
    """Infers a schema from JSON or JSON Lines text.

    Args:
        content: The input text
        options: Inference options

    Returns:
        Inferred schema
    """
    values, is_stream = load_json_values(content)
    inferrer = SchemaInferrer(options)
    if is_stream:
        return inferrer.infer_many(values)
    return inferrer.infer_one(values[0])


def infer_schema_from_files(input_files: List[str], options: Optional[InferenceOptions] = None) -> SchemaNode:
    """Infers one schema from several JSON or JSON Lines files.

    Every document of every file is folded into the same schema, in file order.

    Args:
        input_files: List of file paths
        options: Inference options

    Returns:
        Inferred schema accepting every document
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    values: List[Any] = []
    for file_path in input_files:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        if not content.strip():
            continue
        file_values, _ = load_json_values(content)
        values.extend(file_values)

    if not values:
        raise ValueError("No valid JSON data found in input files")
    return SchemaInferrer(options).infer_many(values)
