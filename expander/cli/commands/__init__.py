"""CLI command handlers."""

from .expand import expand_template

__all__ = ['expand_template']
