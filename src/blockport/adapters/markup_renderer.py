"""Linearize a block-tree into the simplified markup that seeds the editor.

Output is deterministic: the same block-tree always yields the same string.
"""

from __future__ import annotations

import html
import json
from typing import Callable, Sequence

from ..core.model import (
    DECORATORS,
    LIST_BULLET,
    STYLE_BLOCKQUOTE,
    Block,
    ImageBlock,
    Span,
    TableBlock,
    TextBlock,
)
from ..core.ports import Renderer

_LIST_TAGS = {LIST_BULLET: "ul"}
# Decorator names double as their tag names
_MARK_TAGS = {mark: mark for mark in DECORATORS}


def _attr(name: str, value: object) -> str:
    return f'{name}="{html.escape(str(value), quote=True)}"'


class _MarkupState:
    def __init__(self) -> None:
        self.out: list[str] = []
        self.list_kind: str | None = None
        self.list_items: list[str] = []

    def flush_list(self) -> None:
        if self.list_kind is None:
            return
        tag = _LIST_TAGS.get(self.list_kind, "ol")
        items = "".join(f"<li>{item}</li>" for item in self.list_items)
        self.out.append(f"<{tag}>{items}</{tag}>")
        self.list_kind = None
        self.list_items = []

    def add_list_item(self, kind: str, inner: str) -> None:
        if self.list_kind != kind:
            self.flush_list()
            self.list_kind = kind
        self.list_items.append(inner)


class MarkupRenderer(Renderer):
    def __init__(self, image_src: Callable[[str], str] | None = None):
        # image_src maps an asset reference to a display URL (CDN lookup)
        self.image_src = image_src

    def render_markup(self, blocks: Sequence[Block]) -> str:
        state = _MarkupState()
        for block in blocks:
            if isinstance(block, TextBlock) and block.list_item:
                state.add_list_item(block.list_item, self.render_inline(block))
                continue

            state.flush_list()
            if isinstance(block, TextBlock):
                state.out.append(self._render_text_block(block))
            elif isinstance(block, ImageBlock):
                rendered = self._render_image(block)
                if rendered:
                    state.out.append(rendered)
            elif isinstance(block, TableBlock):
                state.out.append(self._render_table(block))

        state.flush_list()
        return "".join(state.out)

    def render_inline(self, block: TextBlock) -> str:
        return "".join(self._render_span(span, block) for span in block.children)

    def _render_span(self, span: Span, block: TextBlock) -> str:
        if not span.text:
            return ""
        text = html.escape(span.text)
        # Marks wrap inner to outer in list order
        for mark in span.marks:
            mark_def = block.mark_def(mark)
            if mark_def is not None and mark_def.type == "link" and mark_def.href:
                text = f"<a {_attr('href', mark_def.href)}>{text}</a>"
            elif mark in _MARK_TAGS:
                tag = _MARK_TAGS[mark]
                text = f"<{tag}>{text}</{tag}>"
        return text

    def _render_text_block(self, block: TextBlock) -> str:
        inner = self.render_inline(block)
        if block.heading_level is not None:
            tag = f"h{block.heading_level}"
        elif block.style == STYLE_BLOCKQUOTE:
            return f"<blockquote>{inner}</blockquote>"
        else:
            tag = "p"
        indent = ""
        if block.indent_level > 0:
            indent = " " + _attr("data-indent-level", block.indent_level)
        return f"<{tag}{indent}>{inner}</{tag}>"

    def _render_image(self, block: ImageBlock) -> str | None:
        if not block.asset_ref:
            return None
        attrs = []
        if self.image_src is not None:
            attrs.append(_attr("src", self.image_src(block.asset_ref)))
        attrs.append(_attr("alt", block.alt or ""))
        attrs.append(_attr("data-asset-ref", block.asset_ref))
        meta = json.dumps({"ref": block.asset_ref, "alt": block.alt}, sort_keys=True)
        attrs.append(_attr("data-asset", meta))
        return f"<img {' '.join(attrs)} />"

    def _render_table(self, block: TableBlock) -> str:
        rows = []
        for row in block.rows:
            cells = []
            for cell in row.cells:
                tag = "th" if cell.is_header else "td"
                inner = "".join(
                    f"<p>{self.render_inline(content)}</p>" for content in cell.content
                )
                cells.append(f"<{tag}>{inner}</{tag}>")
            rows.append(f"<tr>{''.join(cells)}</tr>")
        return f"<table><tbody>{''.join(rows)}</tbody></table>"


def render_markup(
    blocks: Sequence[Block], image_src: Callable[[str], str] | None = None
) -> str:
    """Render a block-tree to editor markup."""
    return MarkupRenderer(image_src=image_src).render_markup(blocks)
