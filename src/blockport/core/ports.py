from typing import Any, Mapping, Protocol, Sequence

from .model import Block


class KeyGenerator(Protocol):
    """
    Source of block/span/mark keys. Keys only need to be unique within one
    document and one conversion call.
    """

    def new_key(self) -> str:
        pass


class MarkdownParserStrategy(Protocol):
    """
    Turn markdown text into a block-tree. MUST NOT raise on malformed input.
    """

    def parse(self, text: str, keys: KeyGenerator | None = None) -> list[Block]:
        pass


class EditorTreeParser(Protocol):
    """
    Turn the editing surface's native node tree back into a block-tree.
    """

    def parse(
        self, doc: Mapping[str, Any], keys: KeyGenerator | None = None
    ) -> list[Block]:
        pass


class Renderer(Protocol):
    def render_markup(self, blocks: Sequence[Block]) -> str:
        pass
