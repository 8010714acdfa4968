"""The generalized structural type inferred from JSON data.

A schema is a tree of nodes drawn from a closed set of variants:

- NullSchema, BooleanSchema
- IntegerSchema, FloatSchema (numeric bounds)
- StringSchema (length bounds, optional format hint), EnumSchema (closed value set)
- ArraySchema (length bounds and one element schema)
- ObjectSchema (named fields, each with a required flag)
- IndeterminateSchema (a position whose samples had incompatible kinds)

Every node carries a ``nullable`` flag that is set when a null was observed
at its position. Nodes exclusively own their children; the tree is acyclic.
Code that dispatches on the variant uses ``SCHEMA_NODE_TYPES`` and rejects
anything else with ``check_schema_node``.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Set, Union


class InvalidOptionsError(ValueError):
    """Raised when inference options are out of range."""


@dataclass
class EnumInference:
    """Thresholds for reclassifying string positions as enums.

    Attributes:
        max_unique_ratio: Largest ratio of distinct values to samples that still counts as an enum.
        min_sample_size: Number of string samples required before a position is considered.
    """
    max_unique_ratio: float = 0.1
    min_sample_size: int = 1

    def __post_init__(self):
        if isinstance(self.max_unique_ratio, bool) or not isinstance(self.max_unique_ratio, (int, float)):
            raise InvalidOptionsError(f"max_unique_ratio must be a number, got {type(self.max_unique_ratio).__name__}")
        if not 0.0 <= self.max_unique_ratio <= 1.0:
            raise InvalidOptionsError(f"max_unique_ratio must be within [0, 1], got {self.max_unique_ratio}")
        if isinstance(self.min_sample_size, bool) or not isinstance(self.min_sample_size, int):
            raise InvalidOptionsError(f"min_sample_size must be an integer, got {type(self.min_sample_size).__name__}")
        if self.min_sample_size < 1:
            raise InvalidOptionsError(f"min_sample_size must be at least 1, got {self.min_sample_size}")


@dataclass
class InferenceOptions:
    """Options for schema inference. Enum inference is disabled when ``enum_inference`` is None."""
    enum_inference: Optional[EnumInference] = None


def _check_bounds(kind: str, lower, upper):
    if not lower <= upper:
        raise ValueError(f"{kind} lower bound {lower!r} exceeds upper bound {upper!r}")


def _check_length(kind: str, lower: int, upper: int):
    if lower < 0:
        raise ValueError(f"{kind} length bound {lower} is negative")
    _check_bounds(kind, lower, upper)


@dataclass
class NullSchema:
    """A position where only nulls were observed."""
    KIND: ClassVar[str] = 'null'
    nullable: bool = True


@dataclass
class BooleanSchema:
    KIND: ClassVar[str] = 'boolean'
    nullable: bool = False


@dataclass
class IntegerSchema:
    KIND: ClassVar[str] = 'integer'
    minimum: int
    maximum: int
    nullable: bool = False

    def __post_init__(self):
        _check_bounds('integer', self.minimum, self.maximum)


@dataclass
class FloatSchema:
    """A number position. A bound taken from an integer sample stays an int so that it is exact."""
    KIND: ClassVar[str] = 'float'
    minimum: Union[int, float]
    maximum: Union[int, float]
    nullable: bool = False

    def __post_init__(self):
        _check_bounds('float', self.minimum, self.maximum)


@dataclass
class StringSchema:
    """An open string position.

    ``values_seen`` and ``samples_seen`` feed enum detection. They are only
    populated while enum inference is enabled and take no part in equality.
    """
    KIND: ClassVar[str] = 'string'
    min_length: int
    max_length: int
    format: Optional[str] = None
    nullable: bool = False
    values_seen: Set[str] = field(default_factory=set, compare=False, repr=False)
    samples_seen: int = field(default=0, compare=False, repr=False)

    def __post_init__(self):
        _check_length('string', self.min_length, self.max_length)


@dataclass
class EnumSchema:
    """A string position restricted to a closed, non-empty set of values."""
    KIND: ClassVar[str] = 'enum'
    values: Set[str]
    min_length: int
    max_length: int
    nullable: bool = False

    def __post_init__(self):
        if not self.values:
            raise ValueError("enum value set must not be empty")
        _check_length('enum', self.min_length, self.max_length)


@dataclass
class ArraySchema:
    """An array position. ``element`` is None when every observed array was empty."""
    KIND: ClassVar[str] = 'array'
    min_length: int
    max_length: int
    element: Optional['SchemaNode'] = None
    nullable: bool = False

    def __post_init__(self):
        _check_length('array', self.min_length, self.max_length)
        if self.element is None and self.max_length > 0:
            raise ValueError("array with a non-zero maximum length needs an element schema")


@dataclass
class FieldSchema:
    """A named member of an object schema."""
    schema: 'SchemaNode'
    required: bool = True


@dataclass
class ObjectSchema:
    """An object position. Field order is the order fields were first encountered."""
    KIND: ClassVar[str] = 'object'
    fields: Dict[str, FieldSchema] = field(default_factory=dict)
    nullable: bool = False


@dataclass
class IndeterminateSchema:
    """A polymorphic position; absorbs every other variant on merge."""
    KIND: ClassVar[str] = 'indeterminate'
    nullable: bool = False


SchemaNode = Union[NullSchema, BooleanSchema, IntegerSchema, FloatSchema, StringSchema,
                   EnumSchema, ArraySchema, ObjectSchema, IndeterminateSchema]

SCHEMA_NODE_TYPES = (NullSchema, BooleanSchema, IntegerSchema, FloatSchema, StringSchema,
                     EnumSchema, ArraySchema, ObjectSchema, IndeterminateSchema)


def check_schema_node(node) -> SchemaNode:
    """Return ``node`` if it is a schema node, otherwise raise TypeError."""
    if not isinstance(node, SCHEMA_NODE_TYPES):
        raise TypeError(f"Not a schema node: {type(node).__name__}")
    return node


def schema_kind(node: SchemaNode) -> str:
    """Return the variant name of a schema node."""
    return check_schema_node(node).KIND
