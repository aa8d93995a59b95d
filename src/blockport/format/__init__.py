"""Text hygiene and block repair for blockport documents."""

from .repair import fix_markdown_in_block, has_markdown_syntax
from .sanitize import sanitize_markdown

__all__ = [
    "fix_markdown_in_block",
    "has_markdown_syntax",
    "sanitize_markdown",
]
