"""Synthesizes JSON values that conform to an inferred schema."""

import logging
import math
import random
import string
import sys
from typing import Any, Callable, Dict, Optional

from faker import Faker

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

logger = logging.getLogger(__name__)

DEFAULT_NULL_PROBABILITY = 0.1
PRINTABLE_CHARACTERS = string.ascii_letters + string.digits


class SchemaProducer:
    """Produces random values from a schema.

    Each producer owns its random generator, so producers running side by side
    never share state. Nullable nodes yield null with probability
    ``null_probability`` and a value of their primary variant otherwise.
    """

    def __init__(self, seed: Optional[int] = None, null_probability: float = DEFAULT_NULL_PROBABILITY):
        """Initialize the producer.

        Args:
            seed: Seed for the random generator; None seeds from the operating system
            null_probability: Chance that a nullable node yields null, within [0, 1]
        """
        if not 0.0 <= null_probability <= 1.0:
            raise ValueError(f"null_probability must be within [0, 1], got {null_probability}")
        self.random = random.Random(seed)
        self.null_probability = null_probability
        self._faker: Optional[Faker] = None

    @property
    def faker(self) -> Faker:
        """Faker instance seeded from this producer's generator, created on first use."""
        if self._faker is None:
            self._faker = Faker()
            self._faker.seed_instance(self.random.getrandbits(32))
        return self._faker

    def produce(self, schema: SchemaNode, n_repeat: int = 1) -> Any:
        """Produces ``n_repeat`` independent values.

        Args:
            schema: The schema to sample from
            n_repeat: Number of values; more than one are returned as a list

        Returns:
            A single value when n_repeat is 1, otherwise a list of n_repeat values
        """
        if n_repeat < 1:
            raise ValueError(f"n_repeat must be at least 1, got {n_repeat}")
        if n_repeat == 1:
            return self.produce_one(schema)
        return [self.produce_one(schema) for _ in range(n_repeat)]

    def produce_one(self, schema: SchemaNode) -> Any:
        """Produces one value conforming to ``schema``."""
        check_schema_node(schema)
        if schema.nullable and self.random.random() < self.null_probability:
            return None
        return self._PRODUCERS[type(schema)](self, schema)

    def _produce_null(self, schema: NullSchema) -> Any:
        return None

    def _produce_boolean(self, schema: BooleanSchema) -> bool:
        return self.random.random() < 0.5

    def _produce_integer(self, schema: IntegerSchema) -> int:
        return self.random.randint(schema.minimum, schema.maximum)

    def _produce_float(self, schema: FloatSchema) -> float | int:
        lower = _float_within(schema.minimum, math.inf)
        upper = _float_within(schema.maximum, -math.inf)
        if lower > upper:
            # integer bounds with no float between them
            return schema.minimum
        if math.isfinite(upper - lower):
            value = self.random.uniform(lower, upper)
        else:
            # the span itself overflows a float
            fraction = self.random.random()
            value = lower * (1 - fraction) + upper * fraction
        # uniform() may round past the upper bound
        return min(max(value, lower), upper)

    def _produce_string(self, schema: StringSchema) -> str:
        if schema.format:
            value = self._produce_formatted(schema.format)
            if value is not None and schema.min_length <= len(value) <= schema.max_length:
                return value
        length = self.random.randint(schema.min_length, schema.max_length)
        return ''.join(self.random.choice(PRINTABLE_CHARACTERS) for _ in range(length))

    def _produce_formatted(self, format_name: str) -> Optional[str]:
        factory = self._FORMAT_FACTORIES.get(format_name)
        if factory is None:
            logger.debug("No generator for string format '%s'", format_name)
            return None
        return factory(self.faker)

    def _produce_enum(self, schema: EnumSchema) -> str:
        # sorted so that a seeded producer is reproducible across runs
        return self.random.choice(sorted(schema.values))

    def _produce_array(self, schema: ArraySchema) -> list:
        if schema.element is None:
            return []
        length = self.random.randint(schema.min_length, schema.max_length)
        return [self.produce_one(schema.element) for _ in range(length)]

    def _produce_object(self, schema: ObjectSchema) -> dict:
        # every field is emitted; required only records how the samples looked
        return {name: self.produce_one(member.schema) for name, member in schema.fields.items()}

    def _produce_indeterminate(self, schema: IndeterminateSchema) -> Any:
        return None

    _PRODUCERS: Dict[type, Callable[..., Any]] = {
        NullSchema: _produce_null,
        BooleanSchema: _produce_boolean,
        IntegerSchema: _produce_integer,
        FloatSchema: _produce_float,
        StringSchema: _produce_string,
        EnumSchema: _produce_enum,
        ArraySchema: _produce_array,
        ObjectSchema: _produce_object,
        IndeterminateSchema: _produce_indeterminate,
    }

    _FORMAT_FACTORIES: Dict[str, Callable[[Faker], str]] = {
        'date-time': lambda fake: fake.iso8601(),
        'date': lambda fake: fake.date(),
        'time': lambda fake: fake.time(),
        'uuid': lambda fake: str(fake.uuid4()),
        'email': lambda fake: fake.email(),
        'uri': lambda fake: fake.url(),
    }


def _float_within(bound: int | float, direction: float) -> float:
    """Nearest float to ``bound`` that lies on the ``direction`` side of it."""
    if isinstance(bound, float):
        return bound
    try:
        value = float(bound)
    except OverflowError:
        if (bound > 0) == (direction > 0):
            return direction
        return sys.float_info.max if bound > 0 else -sys.float_info.max
    if (value < bound and direction > 0) or (value > bound and direction < 0):
        value = math.nextafter(value, direction)
    return value


def produce(schema: SchemaNode, n_repeat: int = 1, seed: Optional[int] = None,
            null_probability: float = DEFAULT_NULL_PROBABILITY) -> Any:
    """Produces synthetic data from a schema with a fresh producer.

    Args:
        schema: The schema to sample from
        n_repeat: Number of values; more than one are returned as a list
        seed: Seed for reproducible output
        null_probability: Chance that a nullable node yields null

    Returns:
        A single value, or a list of n_repeat values
    """
    return SchemaProducer(seed=seed, null_probability=null_probability).produce(schema, n_repeat)

