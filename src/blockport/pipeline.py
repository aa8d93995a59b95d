"""Conversion drivers: markdown import, editor seeding and editor save."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

from .adapters.editor_parser import parse_editor_tree
from .adapters.markdown_parser import parse_markdown
from .adapters.markup_renderer import render_markup
from .adapters.yaml_codec import YamlFrontmatter
from .config import ImportConfig
from .core.model import Block
from .core.ports import KeyGenerator
from .core.utils import Tag, normalize_tag, slugify
from .format import fix_markdown_in_block, sanitize_markdown
from .validate import ValidationResult, validate_content

logger = logging.getLogger(__name__)


class ContentImportError(ValueError):
    """Markdown import input violates a limit or is missing."""


@dataclass
class ImportedPost:
    """Result of importing a markdown document."""

    title: str | None
    slug: str | None
    excerpt: str
    tags: list[Tag] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)  # unrecognized frontmatter


def _split_tags(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [t for t in (part.strip() for part in raw.split(",")) if t]
    return [str(t).strip() for t in raw if str(t).strip()]


def normalize_tags(labels: Iterable[str], extra_acronyms: Iterable[str] = ()) -> list[Tag]:
    """Normalize labels, dropping empties and duplicates by slug."""
    extra = tuple(extra_acronyms)
    seen: set[str] = set()
    out: list[Tag] = []
    for label in labels:
        tag = normalize_tag(label, extra)
        if not tag.slug or tag.slug in seen:
            continue
        seen.add(tag.slug)
        out.append(tag)
    return out


def import_markdown(
    markdown: str,
    title: str | None = None,
    excerpt: str | None = None,
    tags: Sequence[str] | None = None,
    keys: KeyGenerator | None = None,
    limits: ImportConfig | None = None,
    extra_acronyms: Iterable[str] = (),
) -> ImportedPost:
    """Import a markdown document, with optional YAML frontmatter.

    Explicit arguments win over frontmatter values. The body is sanitized
    and parsed into a block-tree; the slug defaults to one derived from the
    title.

    Raises:
        ContentImportError: empty input, or a size/length limit exceeded
    """
    if not isinstance(markdown, str) or not markdown.strip():
        raise ContentImportError("Markdown content is required")

    limits = limits or ImportConfig()
    if len(markdown.encode("utf-8")) > limits.max_bytes:
        raise ContentImportError(f"Content too large (max {limits.max_bytes} bytes)")

    meta, body = YamlFrontmatter().decode(markdown)
    meta = dict(meta)
    fm_title = meta.pop("title", None)
    fm_excerpt = meta.pop("excerpt", None)
    fm_slug = meta.pop("slug", None)
    fm_tags = meta.pop("tags", None)

    if title is None and fm_title is not None:
        title = str(fm_title)
    if excerpt is None:
        excerpt = "" if fm_excerpt is None else str(fm_excerpt)

    if title is not None and len(title) > limits.max_title:
        raise ContentImportError(f"Title too long (max {limits.max_title} characters)")
    if len(excerpt) > limits.max_excerpt:
        raise ContentImportError(f"Excerpt too long (max {limits.max_excerpt} characters)")

    if fm_slug:
        slug = slugify(str(fm_slug))
    elif title:
        slug = slugify(title)
    else:
        slug = None

    labels = list(tags) if tags is not None else _split_tags(fm_tags)
    blocks = parse_markdown(sanitize_markdown(body), keys)
    logger.debug("Imported %d block(s) from markdown (title=%r)", len(blocks), title)

    return ImportedPost(
        title=title,
        slug=slug,
        excerpt=excerpt,
        tags=normalize_tags(labels, extra_acronyms),
        blocks=blocks,
        meta=meta,
    )


def seed_editor(
    blocks: Sequence[Block],
    image_src: Callable[[str], str] | None = None,
    repair: bool = False,
    keys: KeyGenerator | None = None,
) -> str:
    """Render stored blocks to the markup the editor is initialized with.

    With ``repair``, text blocks still carrying raw markdown syntax are
    re-resolved first.
    """
    if repair:
        blocks = [fix_markdown_in_block(b, keys) for b in blocks]
    return render_markup(blocks, image_src=image_src)


def save_editor_tree(
    doc: Mapping[str, Any], keys: KeyGenerator | None = None
) -> ValidationResult:
    """Convert the editor document and validate it for persistence."""
    return validate_content(parse_editor_tree(doc, keys))
