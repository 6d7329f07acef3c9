"""
Lookup table construction.

Values come from two kinds of sources, applied in this order:
- YAML files (--file), each a top-level mapping, in the order given
- inline key=value pairs (--value), in the order given

A later source overwrites an earlier one for the same key, so inline pairs
always win over file values no matter how the flags were interleaved.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import yaml

from expander.exceptions import FileReadError, MalformedPairError, ParseError
from .substitution import format_value


logger = logging.getLogger(__name__)


class ValueLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps every mapping key addressable by a token.

    Keys are rendered to strings while the mapping is built, so ``1:`` and
    ``true:`` stay separate entries ``"1"`` and ``"true"``. Timestamps are
    kept as the text written in the file.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise yaml.constructor.ConstructorError(
                None, None,
                f"expected a mapping node, but found {node.id}",
                node.start_mark
            )
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            if not isinstance(key, str):
                key = format_value(key)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


ValueLoader.add_constructor(
    'tag:yaml.org,2002:timestamp',
    lambda loader, node: loader.construct_scalar(node)
)


def parse_pair(pair: str) -> Tuple[str, str]:
    """Split an inline ``key=value`` pair on its first ``=``.

    The value is kept as a plain string; no YAML-style coercion is applied.
    """
    if '=' not in pair:
        raise MalformedPairError(pair)
    key, value = pair.split('=', 1)
    return key, value


class ValueResolver:
    """Merges YAML value files and inline pairs into one flat lookup table."""

    def __init__(self, ignore_missing: bool = False):
        """
        Initialize the resolver.

        Args:
            ignore_missing: Skip value files that do not exist instead of failing
        """
        self.ignore_missing = ignore_missing

    def resolve(
        self,
        file_sources: Optional[Iterable[Union[str, Path]]] = None,
        inline_values: Optional[Iterable[str]] = None
    ) -> Dict[str, Any]:
        """
        Build the lookup table.

        Args:
            file_sources: Paths to YAML files holding a mapping of values
            inline_values: ``key=value`` strings

        Returns:
            Flat mapping of key to value

        Raises:
            FileReadError: A value file is missing (without ignore_missing) or unreadable
            ParseError: A value file is not a YAML mapping
            MalformedPairError: An inline value has no ``=``
        """
        values: Dict[str, Any] = {}

        for path in file_sources or []:
            data = self.load_value_file(path)
            if data is None:
                continue
            values.update(data)

        for pair in inline_values or []:
            key, value = parse_pair(pair)
            values[key] = value

        for key, value in values.items():
            logger.debug(f"\t{key!r}={value!r}")

        return values

    def load_value_file(self, path: Union[str, Path]) -> Optional[Dict[str, Any]]:
        """
        Read and decode one YAML value file.

        Returns:
            The decoded mapping, or None if the file is missing and
            ignore_missing is set
        """
        try:
            with open(path, 'rb') as f:
                content = f.read()
        except FileNotFoundError as e:
            if self.ignore_missing:
                logger.warning(f"Skipping missing file '{path}'")
                return None
            raise FileReadError(str(path), e.strerror or e) from e
        except OSError as e:
            raise FileReadError(str(path), e.strerror or e) from e

        try:
            data = yaml.load(content, Loader=ValueLoader)
        except yaml.YAMLError as e:
            raise ParseError(str(path), e) from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ParseError(
                str(path),
                f"expected a mapping at the top level, got {type(data).__name__}"
            )

        return data
