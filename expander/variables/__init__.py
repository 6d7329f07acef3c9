"""
Value resolution and token substitution.
Builds the lookup table from YAML files and key=value pairs, then expands
$(key), $((key)) and {{key}} tokens against it.
"""

from .resolver import ValueResolver
from .substitution import TokenExpander, format_value

__all__ = ['ValueResolver', 'TokenExpander', 'format_value']
