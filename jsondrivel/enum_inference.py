"""Enum detection for string positions.

While enum inference is enabled, the inferrer records the distinct values and
the number of samples seen at every string position. Once inference is
complete, each string position is classified: it becomes a closed enum when
enough samples were seen and few enough of them were distinct.
"""

import logging
from typing import Optional

from jsondrivel.schema_model import (
    ArraySchema,
    EnumInference,
    EnumSchema,
    FieldSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    check_schema_node,
)

logger = logging.getLogger(__name__)


class EnumDetector:
    """Reclassifies string positions as enums according to ``EnumInference`` thresholds."""

    def __init__(self, settings: EnumInference):
        self.settings = settings

    def is_enum_candidate(self, distinct_count: int, total_samples: int) -> bool:
        """Check the sample size and uniqueness ratio thresholds.

        Args:
            distinct_count: Number of distinct values observed
            total_samples: Number of samples observed, duplicates included

        Returns:
            True if the position should be modeled as an enum
        """
        if total_samples < self.settings.min_sample_size:
            return False
        return distinct_count / total_samples <= self.settings.max_unique_ratio

    def classify(self, node: SchemaNode) -> SchemaNode:
        """Returns a copy of the tree with every qualifying string position turned into an enum."""
        check_schema_node(node)
        if isinstance(node, StringSchema):
            return self._classify_string(node)
        if isinstance(node, ArraySchema):
            element = self.classify(node.element) if node.element is not None else None
            return ArraySchema(node.min_length, node.max_length, element, nullable=node.nullable)
        if isinstance(node, ObjectSchema):
            fields = {name: FieldSchema(self.classify(member.schema), member.required)
                      for name, member in node.fields.items()}
            return ObjectSchema(fields, nullable=node.nullable)
        return node

    def _classify_string(self, node: StringSchema) -> SchemaNode:
        distinct_count = len(node.values_seen)
        if distinct_count and self.is_enum_candidate(distinct_count, node.samples_seen):
            logger.debug("String position with %d distinct values in %d samples is an enum",
                         distinct_count, node.samples_seen)
            return EnumSchema(set(node.values_seen), node.min_length, node.max_length,
                              nullable=node.nullable)
        return node


def classify_enums(node: SchemaNode, settings: Optional[EnumInference]) -> SchemaNode:
    """Applies enum detection to a schema tree, or returns it unchanged when disabled."""
    if settings is None:
        return node
    return EnumDetector(settings).classify(node)
