"""Main CLI entry point for template-expand."""

import argparse
import csv
import sys
from typing import Optional

from .commands import expand_template


class AppendCsvAction(argparse.Action):
    """Append comma-separated items, accepting the flag multiple times.

    ``-k a=1,b=2 -k c=3`` yields ``['a=1', 'b=2', 'c=3']``. Items holding a
    comma can be double-quoted: ``-k '"msg=hello, world"'``. A value spanning
    several lines is never split.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        items = list(getattr(namespace, self.dest, None) or [])
        # Multi-line values (certificates, scripts) are taken whole
        if '\n' in values or '\r' in values:
            items.append(values)
            setattr(namespace, self.dest, items)
            return
        try:
            for row in csv.reader([values]):
                items.extend(row)
        except csv.Error as e:
            parser.error(f"invalid value for {option_string}: {e}")
        setattr(namespace, self.dest, items)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the template-expand CLI."""
    parser = argparse.ArgumentParser(
        prog='template-expand',
        description='Expand placeholder tokens in a template using YAML and key=value values'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    expand_parser = subparsers.add_parser('expand', help='Expand a template')
    expand_parser.add_argument(
        'template',
        nargs='?',
        type=str,
        help='Path to the template file (default: read standard input)'
    )
    expand_parser.add_argument(
        '-f', '--file',
        action=AppendCsvAction,
        default=[],
        metavar='FILE',
        help='Files containing values to substitute (can be specified multiple times)'
    )
    expand_parser.add_argument(
        '-k', '--value',
        action=AppendCsvAction,
        default=[],
        metavar='KEY=VALUE',
        help='key=value pairs to substitute (can be specified multiple times)'
    )
    expand_parser.add_argument(
        '-i', '--ignore-missing-files',
        action='store_true',
        help='Ignore source files that are not found'
    )
    expand_parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    expand_parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warning', 'error'],
        default='warning',
        help='Set log level'
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command == 'expand':
        return expand_template(parsed_args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
