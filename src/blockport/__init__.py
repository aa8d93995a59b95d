"""blockport - move long-form content between markdown, portable block-trees and editor markup."""

__version__ = "0.1.0"

from .adapters.editor_parser import parse_editor_tree
from .adapters.markdown_parser import parse_markdown
from .adapters.markup_renderer import render_markup
from .pipeline import import_markdown, save_editor_tree, seed_editor
from .validate import validate_content

__all__ = [
    "__version__",
    "import_markdown",
    "parse_editor_tree",
    "parse_markdown",
    "render_markup",
    "save_editor_tree",
    "seed_editor",
    "validate_content",
]
