"""Encode/decode the block-tree to and from its portable storage shape."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ..core.model import (
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
)


def _span_to_dict(span: Span) -> dict[str, Any]:
    data: dict[str, Any] = {"_type": "span", "_key": span.key}
    if span.text is not None:
        data["text"] = span.text
    data["marks"] = list(span.marks)
    return data


def _text_block_to_dict(block: TextBlock) -> dict[str, Any]:
    data: dict[str, Any] = {
        "_type": "block",
        "_key": block.key,
        "style": block.style,
        "children": [_span_to_dict(s) for s in block.children],
        "markDefs": [
            {"_key": md.key, "_type": md.type, "href": md.href}
            for md in block.mark_defs
        ],
    }
    if block.list_item:
        data["listItem"] = block.list_item
    if block.indent_level > 0:
        data["indentLevel"] = block.indent_level
    return data


def block_to_dict(block: Block) -> dict[str, Any]:
    if isinstance(block, TextBlock):
        return _text_block_to_dict(block)
    if isinstance(block, ImageBlock):
        data: dict[str, Any] = {
            "_type": "image",
            "_key": block.key,
            "asset": {"_type": "reference", "_ref": block.asset_ref},
        }
        if block.alt:
            data["alt"] = block.alt
        return data
    return {
        "_type": "table",
        "_key": block.key,
        "rows": [
            {
                "_key": row.key,
                "cells": [
                    {
                        "_key": cell.key,
                        "content": [_text_block_to_dict(b) for b in cell.content],
                        "isHeader": cell.is_header,
                    }
                    for cell in row.cells
                ],
            }
            for row in block.rows
        ],
    }


def to_portable(blocks: Sequence[Block]) -> list[dict[str, Any]]:
    """Encode a block-tree as plain JSON-ready dictionaries."""
    return [block_to_dict(b) for b in blocks]


def _text_block_from_dict(data: dict[str, Any]) -> TextBlock:
    return TextBlock(
        key=data.get("_key", ""),
        children=[
            Span(
                key=child.get("_key", ""),
                text=child.get("text"),
                marks=list(child.get("marks") or []),
            )
            for child in data.get("children") or []
            if child.get("_type", "span") == "span"
        ],
        style=data.get("style") or STYLE_NORMAL,
        mark_defs=[
            MarkDef(key=md.get("_key", ""), href=md.get("href", ""), type=md.get("_type", "link"))
            for md in data.get("markDefs") or []
        ],
        list_item=data.get("listItem"),
        indent_level=clamp_indent(data.get("indentLevel")),
    )


def block_from_dict(data: dict[str, Any]) -> Block | None:
    block_type = data.get("_type")
    if block_type == "block":
        return _text_block_from_dict(data)
    if block_type == "image":
        asset = data.get("asset")
        if isinstance(asset, dict):
            ref = asset.get("_ref")
        else:
            # Legacy documents stored a bare URL here
            ref = asset
        return ImageBlock(key=data.get("_key", ""), asset_ref=ref, alt=data.get("alt"))
    if block_type == "table":
        return TableBlock(
            key=data.get("_key", ""),
            rows=[
                TableRow(
                    key=row.get("_key", ""),
                    cells=[
                        TableCell(
                            key=cell.get("_key", ""),
                            content=[
                                _text_block_from_dict(b)
                                for b in cell.get("content") or []
                            ],
                            is_header=bool(cell.get("isHeader", False)),
                        )
                        for cell in row.get("cells") or []
                    ],
                )
                for row in data.get("rows") or []
            ],
        )
    return None


def from_portable(items: Iterable[dict[str, Any]]) -> list[Block]:
    """Decode portable dictionaries; unknown `_type` entries are skipped."""
    blocks = []
    for item in items:
        block = block_from_dict(item)
        if block is not None:
            blocks.append(block)
    return blocks
