"""Convert the rich-text editor's native node tree back into a block-tree.

The editor tree is the JSON document the editing surface exports: a ``doc``
node whose ``content`` holds block nodes (paragraph, heading, blockquote,
bulletList, orderedList, image, table). Inline content is a tree of ``text``
nodes carrying editor mark names (bold, italic, code, link).

Link destinations are deduplicated across the whole conversion call: every
span linking to the same href shares one key, and each block using that key
carries its own copy of the definition.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from ..core.model import (
    LIST_BULLET,
    LIST_NUMBER,
    STYLE_BLOCKQUOTE,
    STYLE_NORMAL,
    Block,
    ImageBlock,
    MarkDef,
    Span,
    TableBlock,
    TableCell,
    TableRow,
    TextBlock,
    clamp_indent,
    heading_style,
)
from ..core.ports import EditorTreeParser, KeyGenerator
from .idgen import RandomKeys

logger = logging.getLogger(__name__)

Node = Mapping[str, Any]

# Editor mark name -> block-tree decorator
EDITOR_MARKS = {
    "bold": "strong",
    "strong": "strong",
    "italic": "em",
    "em": "em",
    "code": "code",
}


class NodeKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    IMAGE = "image"
    TABLE = "table"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, node: Any) -> "NodeKind":
        node_type = node.get("type") if isinstance(node, Mapping) else None
        try:
            return cls(node_type)
        except (TypeError, ValueError):
            return cls.UNKNOWN


LIST_KINDS = {NodeKind.BULLET_LIST: LIST_BULLET, NodeKind.ORDERED_LIST: LIST_NUMBER}
# Block kinds whose inline content may sit in a table cell
CELL_CONTENT_KINDS = (NodeKind.PARAGRAPH, NodeKind.HEADING, NodeKind.BLOCKQUOTE)


@dataclass
class _Conversion:
    """State threaded through one conversion call."""

    keys: KeyGenerator
    link_keys: dict[str, str] = field(default_factory=dict)  # href -> key
    blocks: list[Block] = field(default_factory=list)

    def link_key(self, href: str) -> str:
        key = self.link_keys.get(href)
        if key is None:
            key = self.keys.new_key()
            self.link_keys[href] = key
        return key


def _attrs(node: Node) -> Mapping[str, Any]:
    attrs = node.get("attrs")
    return attrs if isinstance(attrs, Mapping) else {}


def _content(node: Node) -> list[Any]:
    content = node.get("content")
    return content if isinstance(content, list) else []


def _walk_inline(
    node: Node, conv: _Conversion, children: list[Span], mark_defs: list[MarkDef]
) -> None:
    if node.get("type") == "text":
        marks: list[str] = []
        for mark in node.get("marks") or []:
            if not isinstance(mark, Mapping):
                continue
            name = mark.get("type")
            if name in EDITOR_MARKS:
                marks.append(EDITOR_MARKS[name])
            elif name == "link":
                href = _attrs(mark).get("href")
                if not href:
                    continue
                key = conv.link_key(href)
                marks.append(key)
                if not any(md.key == key for md in mark_defs):
                    mark_defs.append(MarkDef(key=key, href=href))
        text = node.get("text")
        children.append(
            Span(
                key=conv.keys.new_key(),
                text=text if text is None or isinstance(text, str) else str(text),
                marks=marks,
            )
        )
        return

    for child in _content(node):
        if isinstance(child, Mapping):
            _walk_inline(child, conv, children, mark_defs)


def _inline_block(
    node: Node,
    conv: _Conversion,
    style: str = STYLE_NORMAL,
    list_item: str | None = None,
    indent_level: int = 0,
) -> TextBlock:
    children: list[Span] = []
    mark_defs: list[MarkDef] = []
    _walk_inline(node, conv, children, mark_defs)
    if not children:
        # Structural placeholder: an empty node still yields one empty span
        children = [Span(key=conv.keys.new_key(), text="")]
    return TextBlock(
        key=conv.keys.new_key(),
        children=children,
        style=style,
        mark_defs=mark_defs,
        list_item=list_item,
        indent_level=indent_level,
    )


def _convert_paragraph(node: Node, conv: _Conversion) -> None:
    indent = clamp_indent(_attrs(node).get("indentLevel"))
    conv.blocks.append(_inline_block(node, conv, indent_level=indent))


def _convert_heading(node: Node, conv: _Conversion) -> None:
    attrs = _attrs(node)
    level = attrs.get("level")
    if not isinstance(level, int) or isinstance(level, bool):
        level = 1
    indent = clamp_indent(attrs.get("indentLevel"))
    conv.blocks.append(
        _inline_block(node, conv, style=heading_style(level), indent_level=indent)
    )


def _convert_blockquote(node: Node, conv: _Conversion) -> None:
    conv.blocks.append(_inline_block(node, conv, style=STYLE_BLOCKQUOTE))


def _convert_list(node: Node, conv: _Conversion) -> None:
    list_item = LIST_KINDS[NodeKind.of(node)]
    for item in _content(node):
        if not isinstance(item, Mapping) or item.get("type") != "listItem":
            continue
        for child in _content(item):
            if not isinstance(child, Mapping):
                continue
            if NodeKind.of(child) in LIST_KINDS:
                # Nested lists flatten into further list-item blocks
                _convert_list(child, conv)
            else:
                conv.blocks.append(_inline_block(child, conv, list_item=list_item))


def _convert_image(node: Node, conv: _Conversion) -> None:
    attrs = _attrs(node)
    alt = attrs.get("alt") or None
    ref = None

    meta = attrs.get("data-asset")
    if meta:
        try:
            data = json.loads(meta) if isinstance(meta, str) else meta
            ref = data.get("ref")
            alt = data.get("alt") or alt
        except (ValueError, AttributeError) as e:
            logger.warning("Malformed image metadata %r: %s", meta, e)

    if not ref:
        ref = attrs.get("data-asset-ref") or None

    if not ref:
        # A bare display URL cannot be turned back into a backend asset id
        logger.warning(
            "Dropping image without a backend asset reference: %s",
            attrs.get("src") or "<no src>",
        )
        return

    conv.blocks.append(ImageBlock(key=conv.keys.new_key(), asset_ref=str(ref), alt=alt))


def _convert_cell(node: Node, conv: _Conversion) -> TableCell | None:
    children = [c for c in _content(node) if isinstance(c, Mapping)]
    if not children:
        content = [_inline_block({}, conv)]
    else:
        content = [
            _inline_block(child, conv)
            for child in children
            if NodeKind.of(child) in CELL_CONTENT_KINDS
        ]
    if not content:
        logger.debug("Dropping table cell without paragraph content")
        return None
    return TableCell(
        key=conv.keys.new_key(),
        content=content,
        is_header=node.get("type") == "tableHeader",
    )


def _convert_table(node: Node, conv: _Conversion) -> None:
    rows: list[TableRow] = []
    for row_node in _content(node):
        if not isinstance(row_node, Mapping) or row_node.get("type") != "tableRow":
            continue
        cells = []
        for cell_node in _content(row_node):
            if not isinstance(cell_node, Mapping):
                continue
            if cell_node.get("type") not in ("tableCell", "tableHeader"):
                continue
            cell = _convert_cell(cell_node, conv)
            if cell is not None:
                cells.append(cell)
        if cells:
            rows.append(TableRow(key=conv.keys.new_key(), cells=cells))
        else:
            logger.debug("Dropping table row without valid cells")

    if not rows:
        logger.debug("Dropping table without valid rows")
        return
    conv.blocks.append(TableBlock(key=conv.keys.new_key(), rows=rows))


NODE_HANDLERS: dict[NodeKind, Callable[[Node, _Conversion], None]] = {
    NodeKind.PARAGRAPH: _convert_paragraph,
    NodeKind.HEADING: _convert_heading,
    NodeKind.BLOCKQUOTE: _convert_blockquote,
    NodeKind.BULLET_LIST: _convert_list,
    NodeKind.ORDERED_LIST: _convert_list,
    NodeKind.IMAGE: _convert_image,
    NodeKind.TABLE: _convert_table,
}


class EditorParser(EditorTreeParser):
    def parse(self, doc: Mapping[str, Any], keys: KeyGenerator | None = None) -> list[Block]:
        if not isinstance(doc, Mapping):
            raise TypeError(f"Editor document must be a mapping, got {type(doc).__name__}")

        conv = _Conversion(keys=keys or RandomKeys())
        for node in _content(doc):
            kind = NodeKind.of(node)
            if kind is NodeKind.UNKNOWN:
                logger.debug(
                    "Ignoring editor node of unknown type %r",
                    node.get("type") if isinstance(node, Mapping) else node,
                )
                continue
            NODE_HANDLERS[kind](node, conv)
        return conv.blocks


def parse_editor_tree(doc: Mapping[str, Any], keys: KeyGenerator | None = None) -> list[Block]:
    """Convert an editor JSON document into a block-tree."""
    return EditorParser().parse(doc, keys)
