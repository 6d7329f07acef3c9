"""
Token substitution implementation.

Three token syntaxes are expanded, one pass each, strictly in this order:
- quoted:   $(key)   -> "value"
- unquoted: $((key)) -> value
- legacy:   {{key}}  -> value

Keys are restricted to lowercase letters, underscore and dot. Each pass works
on the output of the previous one, so a value inserted by an earlier pass that
itself looks like a later-pass token is expanded again by that later pass.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Tuple

from expander.exceptions import KeyNotFoundError


logger = logging.getLogger(__name__)


def format_value(value: Any) -> str:
    """Render a lookup value the same way for every token syntax."""
    if isinstance(value, str):
        return value
    elif isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, (int, float)):
        return str(value)
    elif value is None:
        return ''
    elif isinstance(value, (list, dict)):
        # Structured values get a compact JSON representation
        return json.dumps(value, default=str)
    else:
        return str(value)


@dataclass(frozen=True)
class TokenPass:
    """One scan-and-replace sweep for a single token syntax."""
    name: str
    pattern: Pattern[bytes]
    quoted: bool = False


class TokenExpander:
    """
    Expands tokens in template bytes against a lookup table.

    Unresolved tokens are left in place. The first unresolved key of a pass
    is reported and stops the remaining passes.
    """

    PASSES = (
        TokenPass('quoted', re.compile(rb'\$\(([a-z_.]+)\)'), quoted=True),
        TokenPass('unquoted', re.compile(rb'\$\(\(([a-z_.]+)\)\)')),
        TokenPass('legacy', re.compile(rb'\{\{([a-z_.]+)\}\}')),
    )

    def __init__(self):
        """Initialize the expander."""
        self.undefined_keys: List[str] = []

    def expand(
        self,
        template: bytes,
        table: Dict[str, Any]
    ) -> Tuple[bytes, Optional[KeyNotFoundError]]:
        """
        Run all passes over a template.

        Args:
            template: Raw template bytes
            table: Lookup table of key to value

        Returns:
            Tuple of (expanded bytes, first KeyNotFoundError or None). When an
            error is returned the bytes reflect only the passes run so far.
        """
        self.undefined_keys = []

        expanded = template
        for token_pass in self.PASSES:
            expanded, error = self._run_pass(token_pass, expanded, table)
            if error is not None:
                logger.debug(f"Undefined keys in {token_pass.name} pass: {self.undefined_keys}")
                return expanded, error

        return expanded, None

    def _run_pass(
        self,
        token_pass: TokenPass,
        text: bytes,
        table: Dict[str, Any]
    ) -> Tuple[bytes, Optional[KeyNotFoundError]]:
        """Replace every match of one token syntax, keeping the first miss."""
        first_error: Optional[KeyNotFoundError] = None

        def replace_token(match):
            nonlocal first_error
            key = match.group(1).decode('ascii')
            value = table.get(key)

            if value is None:
                self.undefined_keys.append(key)
                if first_error is None:
                    first_error = KeyNotFoundError(key)
                return match.group(0)

            rendered = format_value(value)
            if token_pass.quoted:
                rendered = f'"{rendered}"'
            return rendered.encode('utf-8')

        result = token_pass.pattern.sub(replace_token, text)
        return result, first_error
