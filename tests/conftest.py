"""Shared fixtures: an in-memory stand-in for the rich-text editing surface."""

from html.parser import HTMLParser

import pytest

from blockport.adapters.idgen import SequenceKeys

_BLOCK_NODES = {
    "p": "paragraph",
    "h1": "heading",
    "h2": "heading",
    "h3": "heading",
    "h4": "heading",
    "blockquote": "blockquote",
    "ul": "bulletList",
    "ol": "orderedList",
    "li": "listItem",
    "table": "table",
    "tr": "tableRow",
    "th": "tableHeader",
    "td": "tableCell",
}
_MARK_NODES = {"strong": "bold", "em": "italic", "code": "code", "a": "link"}
# The editor wraps inline content of these in a paragraph
_WRAPS_PARAGRAPH = ("li", "blockquote")


class EditorSurface(HTMLParser):
    """Load editor markup the way the editing surface would, into its JSON tree."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.doc: dict = {"type": "doc", "content": []}
        self.stack: list[dict] = [self.doc]
        self.marks: list[dict] = []

    def _append(self, node: dict) -> None:
        self.stack[-1].setdefault("content", []).append(node)

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag in _MARK_NODES:
            mark = {"type": _MARK_NODES[tag]}
            if tag == "a":
                mark["attrs"] = {"href": attrs.get("href")}
            self.marks.append(mark)
            return
        if tag == "img":
            self._append({"type": "image", "attrs": attrs})
            return
        if tag not in _BLOCK_NODES:
            return

        node: dict = {"type": _BLOCK_NODES[tag]}
        if tag in ("h1", "h2", "h3", "h4"):
            node["attrs"] = {"level": int(tag[1])}
        if "data-indent-level" in attrs:
            node.setdefault("attrs", {})["indentLevel"] = int(attrs["data-indent-level"])
        self._append(node)
        self.stack.append(node)
        if tag in _WRAPS_PARAGRAPH:
            paragraph = {"type": "paragraph"}
            self._append(paragraph)
            self.stack.append(paragraph)

    def handle_endtag(self, tag):
        if tag in _MARK_NODES:
            self.marks.pop()
            return
        if tag not in _BLOCK_NODES:
            return
        if tag in _WRAPS_PARAGRAPH:
            self.stack.pop()
        self.stack.pop()

    def handle_data(self, data):
        node: dict = {"type": "text", "text": data}
        if self.marks:
            node["marks"] = [dict(m) for m in self.marks]
        self._append(node)


def markup_to_editor_doc(markup: str) -> dict:
    surface = EditorSurface()
    surface.feed(markup)
    surface.close()
    return surface.doc


@pytest.fixture
def keys():
    """Deterministic key generator."""
    return SequenceKeys()


@pytest.fixture
def load_in_editor():
    """Turn rendered markup into the editor's JSON document."""
    return markup_to_editor_doc
