"""Expand command implementation."""

import logging
import sys
from argparse import Namespace
from typing import Optional

from expander.exceptions import ExpandError, FileReadError, OutputWriteError
from expander.variables import TokenExpander, ValueResolver


logger = logging.getLogger(__name__)


def configure_logging(log_level: str = 'warning', debug: bool = False) -> None:
    """Route log records to stderr; stdout carries only the expanded output."""
    level = logging.DEBUG if debug else getattr(logging, log_level.upper())

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )
    logging.getLogger('expander').setLevel(level)


def read_template(path: Optional[str] = None) -> bytes:
    """Read the whole template from a file, or from stdin when path is None."""
    if path is None:
        try:
            return sys.stdin.buffer.read()
        except OSError as e:
            raise FileReadError('<stdin>', e) from e

    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileReadError(path, e.strerror or e) from e


def write_output(expanded: bytes) -> None:
    """Write the expanded bytes to stdout in one call."""
    try:
        sys.stdout.buffer.write(expanded)
        sys.stdout.buffer.flush()
    except OSError as e:
        raise OutputWriteError(e) from e


def expand_template(args: Namespace) -> int:
    """
    Resolve values, expand the template and print the result.

    Returns:
        Exit code (0 for success, the error's exit code on failure)
    """
    configure_logging(
        getattr(args, 'log_level', 'warning'),
        getattr(args, 'debug', False)
    )

    try:
        resolver = ValueResolver(ignore_missing=args.ignore_missing_files)
        values = resolver.resolve(args.file, args.value)

        source = args.template if args.template is not None else '<stdin>'
        logger.info(f"Expanding template: {source}")
        template = read_template(args.template)

        expanded, error = TokenExpander().expand(template, values)
        if error is not None:
            raise error

        write_output(expanded)
        return 0

    except ExpandError as e:
        logger.error(str(e))
        return e.exit_code
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
