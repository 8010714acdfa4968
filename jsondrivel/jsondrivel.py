"""

Command line utility to describe JSON data and produce synthetic data shaped like it.

"""


import argparse
import json
import logging
import sys
from typing import Any, Optional

from jsondrivel import _version
from jsondrivel.jsonstoschema import SchemaImportError, convert_json_schema_to_schema
from jsondrivel.jsontoschema import infer_schema_from_text
from jsondrivel.schema_model import ArraySchema, EnumInference, InferenceOptions, SchemaNode
from jsondrivel.schematodata import DEFAULT_NULL_PROBABILITY, SchemaProducer
from jsondrivel.schematojsons import convert_schema_to_json_schema
from jsondrivel.schematomd import convert_schema_to_markdown
from jsondrivel.schematotext import render_schema

logger = logging.getLogger(__name__)


def add_produce_args(parser: argparse.ArgumentParser):
    """Add the arguments shared by the commands that produce data."""
    parser.add_argument('-n', '--n-repeat', type=int, default=1,
                        help='Produce n elements. Default = 1.')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for reproducible output.')
    parser.add_argument('--null-probability', type=float, default=DEFAULT_NULL_PROBABILITY,
                        help=f'Chance that a nullable position produces null. Default = {DEFAULT_NULL_PROBABILITY}.')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        description='Infer a schema from JSON or JSON Lines data, describe it, or produce data adhering to it.')
    parser.add_argument('--version', action='store_true', help='Print the version of jsondrivel.')
    parser.add_argument('--input', type=str, default=None, help='Input file. Reads stdin when omitted.')
    parser.add_argument('--verbose', action='store_true', help='Log debug output to stderr.')
    parser.add_argument('--infer-enum', action='store_true',
                        help='Infer that some string fields are enums based on the number of unique values seen.')
    parser.add_argument('--enum-max-uniq', type=float, default=0.1,
                        help='The maximum ratio of unique values to total values for a field to be considered an enum. Default = 0.1.')
    parser.add_argument('--enum-min-n', type=int, default=1,
                        help='The minimum sample size of strings before enum inference will be attempted. Default = 1.')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('describe', help='Describe the inferred schema for the input data')
    produce_parser = subparsers.add_parser('produce', help='Produce synthetic data adhering to the inferred schema')
    add_produce_args(produce_parser)
    subparsers.add_parser('json-schema', help='Print the inferred schema as a JSON Schema document')
    markdown_parser = subparsers.add_parser('markdown', help='Print a markdown report of the inferred schema')
    markdown_parser.add_argument('--title', type=str, default='Schema', help='Report heading.')
    from_schema_parser = subparsers.add_parser(
        'from-schema', help='Produce synthetic data adhering to a JSON Schema document read from the input')
    add_produce_args(from_schema_parser)
    return parser


def inference_options(args: argparse.Namespace) -> InferenceOptions:
    """Map the enum flags to inference options."""
    if not getattr(args, 'infer_enum', False):
        return InferenceOptions()
    return InferenceOptions(enum_inference=EnumInference(
        max_unique_ratio=args.enum_max_uniq,
        min_sample_size=args.enum_min_n))


def produce_output(schema: SchemaNode, args: argparse.Namespace) -> Any:
    """Produce data, repeating the records of an array root rather than the array itself."""
    n_repeat = args.n_repeat
    if n_repeat < 1:
        raise ValueError(f"--n-repeat must be at least 1, got {n_repeat}")
    producer = SchemaProducer(seed=args.seed, null_probability=args.null_probability)
    if n_repeat > 1 and isinstance(schema, ArraySchema) and schema.element is not None:
        return producer.produce(schema.element, n_repeat)
    return producer.produce(schema, n_repeat)


def read_input(input_file_path: Optional[str]) -> str:
    """Read the input file, or stdin to EOF."""
    if input_file_path:
        with open(input_file_path, 'r', encoding='utf-8') as f:
            return f.read()
    return sys.stdin.read()


def main():
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'jsondrivel {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        content = read_input(getattr(args, 'input', None))
        if args.command == 'from-schema':
            schema = convert_json_schema_to_schema(json.loads(content))
        else:
            schema = infer_schema_from_text(content, inference_options(args))

        if args.command == 'describe':
            print(render_schema(schema))
        elif args.command == 'produce' or args.command == 'from-schema':
            print(json.dumps(produce_output(schema, args), indent=2, ensure_ascii=False))
        elif args.command == 'json-schema':
            print(json.dumps(convert_schema_to_json_schema(schema), indent=2, ensure_ascii=False))
        elif args.command == 'markdown':
            print(convert_schema_to_markdown(schema, args.title))
    except (OSError, ValueError, SchemaImportError) as e:
        # InvalidOptionsError and JSONDecodeError are ValueErrors
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
