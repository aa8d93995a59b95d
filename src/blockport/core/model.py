from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

STYLE_NORMAL = "normal"
STYLE_BLOCKQUOTE = "blockquote"
HEADING_STYLES = ("h1", "h2", "h3", "h4")

LIST_BULLET = "bullet"
LIST_NUMBER = "number"

# Decorator marks; anything else in Span.marks is a MarkDef key.
DECORATORS = ("strong", "em", "code")

MAX_INDENT = 8


def heading_style(level: int) -> str:
    return f"h{max(1, min(level, 4))}"


def clamp_indent(level: object) -> int:
    if not isinstance(level, int) or isinstance(level, bool):
        return 0
    return max(0, min(level, MAX_INDENT))


@dataclass
class MarkDef:
    key: str
    href: str
    type: str = "link"


@dataclass
class Span:
    key: str
    text: str | None  # None = text absent in the source node
    marks: list[str] = field(default_factory=list)


@dataclass
class TextBlock:
    key: str
    children: list[Span] = field(default_factory=list)
    style: str = STYLE_NORMAL  # "normal" | "h1".."h4" | "blockquote"
    mark_defs: list[MarkDef] = field(default_factory=list)
    list_item: str | None = None  # "bullet" | "number"
    indent_level: int = 0

    @property
    def kind(self) -> str:
        if self.list_item:
            return "list-item"
        if self.style in HEADING_STYLES:
            return "heading"
        if self.style == STYLE_BLOCKQUOTE:
            return "blockquote"
        return "paragraph"

    @property
    def heading_level(self) -> int | None:
        if self.style in HEADING_STYLES:
            return int(self.style[1])
        return None

    @property
    def plain_text(self) -> str:
        return "".join(s.text or "" for s in self.children)

    def mark_def(self, key: str) -> MarkDef | None:
        for md in self.mark_defs:
            if md.key == key:
                return md
        return None


@dataclass
class ImageBlock:
    key: str
    asset_ref: str | None  # backend-issued id, never a URL once validated
    alt: str | None = None

    kind = "image"


@dataclass
class TableCell:
    key: str
    content: list[TextBlock] = field(default_factory=list)
    is_header: bool = False


@dataclass
class TableRow:
    key: str
    cells: list[TableCell] = field(default_factory=list)


@dataclass
class TableBlock:
    key: str
    rows: list[TableRow] = field(default_factory=list)

    kind = "table"


Block = Union[TextBlock, ImageBlock, TableBlock]
