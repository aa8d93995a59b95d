"""Repair text blocks that still carry raw markdown inline syntax."""

import re
from dataclasses import replace

from ..adapters.idgen import RandomKeys
from ..adapters.inline import resolve_inline
from ..core.model import Block, TextBlock
from ..core.ports import KeyGenerator

_MARKDOWN_SYNTAX_RE = re.compile(r"(\*\*|\*|__|_|\[.*\]\(.*\)|`)")


def has_markdown_syntax(text: str) -> bool:
    return bool(_MARKDOWN_SYNTAX_RE.search(text))


def fix_markdown_in_block(block: Block, keys: KeyGenerator | None = None) -> Block:
    """Re-resolve a text block whose spans still contain markdown syntax.

    Spans are joined and run through the inline resolver again, with a fresh
    block-scoped link map. Style, list kind and indent are kept. Blocks with
    no text, no markdown syntax, or that are not text blocks are returned
    unchanged. The input block is never modified.
    """
    if not isinstance(block, TextBlock) or not block.children:
        return block

    text = block.plain_text
    if not has_markdown_syntax(text):
        return block

    inline = resolve_inline(text, keys or RandomKeys())
    return replace(block, children=inline.children, mark_defs=inline.mark_defs)
