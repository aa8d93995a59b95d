from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..core.model import (
    LIST_BULLET,
    LIST_NUMBER,
    STYLE_BLOCKQUOTE,
    STYLE_NORMAL,
    Block,
    Span,
    TextBlock,
    heading_style,
)
from ..core.ports import KeyGenerator, MarkdownParserStrategy
from .idgen import RandomKeys
from .inline import resolve_inline

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(#{1,4})\s+(.+)$")
LIST_ITEM_RE = re.compile(r"^(\s*)([-*+]|\d+\.)\s+(\S.*)$")
ORDERED_MARKER_RE = re.compile(r"^\d+\.$")
RULE_RE = re.compile(r"^[-*_]{3,}$")
FENCE = "```"


def _indent_width(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip(" "))


def text_block(
    text: str,
    keys: KeyGenerator,
    style: str = STYLE_NORMAL,
    list_item: str | None = None,
) -> TextBlock:
    """Build a text block from raw inline markdown."""
    inline = resolve_inline(text, keys)
    return TextBlock(
        key=keys.new_key(),
        children=inline.children,
        style=style,
        mark_defs=inline.mark_defs,
        list_item=list_item,
    )


@dataclass
class _ListEntry:
    text: str
    ordered: bool
    indent: int


@dataclass
class _ParseState:
    """Buffers for one parse call. Nothing here outlives the call."""

    keys: KeyGenerator
    blocks: list[Block] = field(default_factory=list)
    paragraph: list[str] = field(default_factory=list)
    items: list[_ListEntry] = field(default_factory=list)
    in_code: bool = False
    code: list[str] = field(default_factory=list)

    def flush_paragraph(self) -> None:
        if self.paragraph:
            text = " ".join(self.paragraph).strip()
            if text:
                self.blocks.append(text_block(text, self.keys))
            self.paragraph = []

    def flush_list(self) -> None:
        # Blocks stay flat; the renderer regroups runs of the same kind.
        for item in self.items:
            kind = LIST_NUMBER if item.ordered else LIST_BULLET
            self.blocks.append(text_block(item.text, self.keys, list_item=kind))
        self.items = []

    def flush_code(self) -> None:
        if self.code:
            self.blocks.append(
                TextBlock(
                    key=self.keys.new_key(),
                    children=[
                        Span(
                            key=self.keys.new_key(),
                            text="\n".join(self.code),
                            marks=["code"],
                        )
                    ],
                )
            )
            self.code = []


class MarkdownParser(MarkdownParserStrategy):
    def parse(self, text: str, keys: KeyGenerator | None = None) -> list[Block]:
        state = _ParseState(keys=keys or RandomKeys())

        for raw in text.split("\n"):
            self._consume_line(state, raw.rstrip("\r"))

        if state.in_code:
            logger.debug("Unterminated code fence; treating rest of input as code")
        state.flush_paragraph()
        state.flush_list()
        state.flush_code()
        return state.blocks

    def _consume_line(self, state: _ParseState, line: str) -> None:
        trimmed = line.strip()

        if trimmed.startswith(FENCE):
            if state.in_code:
                state.flush_code()
                state.in_code = False
            else:
                state.flush_paragraph()
                state.flush_list()
                state.in_code = True
            return

        if state.in_code:
            state.code.append(line)
            return

        heading_match = HEADING_RE.match(trimmed)
        if heading_match:
            state.flush_paragraph()
            state.flush_list()
            level = len(heading_match.group(1))
            state.blocks.append(
                text_block(heading_match.group(2), state.keys, style=heading_style(level))
            )
            return

        if trimmed.startswith("> "):
            state.flush_paragraph()
            state.flush_list()
            state.blocks.append(
                text_block(trimmed[2:], state.keys, style=STYLE_BLOCKQUOTE)
            )
            return

        list_match = LIST_ITEM_RE.match(line)
        if list_match:
            state.flush_paragraph()
            indent, marker, item_text = list_match.groups()
            state.items.append(
                _ListEntry(
                    text=item_text.strip(),
                    ordered=bool(ORDERED_MARKER_RE.match(marker)),
                    indent=_indent_width(indent),
                )
            )
            return

        if RULE_RE.match(trimmed):
            state.flush_paragraph()
            state.flush_list()
            return

        if not trimmed:
            if state.items:
                state.flush_list()
            else:
                state.flush_paragraph()
            return

        # Text indented past the open item's marker continues that item
        if state.items and _indent_width(line) > state.items[-1].indent:
            last = state.items[-1]
            last.text = f"{last.text} {trimmed}"
            return

        if state.items:
            state.flush_list()
        state.paragraph.append(trimmed)


def parse_markdown(text: str, keys: KeyGenerator | None = None) -> list[Block]:
    """Parse markdown text into a block-tree."""
    return MarkdownParser().parse(text, keys)
