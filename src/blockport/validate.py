"""Post-conversion checks run before a block-tree may be persisted.

Blocking conditions are returned as a tagged ``ValidationResult``; nothing
here raises.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Literal, Protocol, Sequence

from .core.model import Block, ImageBlock, TableBlock, TextBlock

logger = logging.getLogger(__name__)

INVALID_IMAGE_REFERENCE = "invalid-image-reference"
EMPTY_CONTENT = "empty-content"

_URL_SHAPED_RE = re.compile(
    r"^(?:[a-z][a-z0-9+.\-]*://|//|(?:https?|data|blob|javascript):)", re.IGNORECASE
)


@dataclass
class Finding:
    severity: str  # "info" | "warn" | "error"
    message: str
    code: str | None = None
    block_key: str | None = None


class ValidationRule(Protocol):
    id: str

    def check(self, blocks: Sequence[Block]) -> list[Finding]:
        pass


@dataclass
class ImageCheck:
    valid: bool
    invalid_count: int = 0
    message: str | None = None


@dataclass
class ValidationResult:
    status: Literal["ok", "error"]
    blocks: list[Block] = field(default_factory=list)  # filtered, when ok
    code: str | None = None
    message: str | None = None
    invalid_count: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def is_valid_asset_ref(ref: object) -> bool:
    """A backend asset id: a non-empty string that is not shaped like a URL."""
    return isinstance(ref, str) and bool(ref.strip()) and not _URL_SHAPED_RE.match(ref)


def _invalid_images(blocks: Sequence[Block]) -> list[ImageBlock]:
    return [
        b for b in blocks
        if isinstance(b, ImageBlock) and not is_valid_asset_ref(b.asset_ref)
    ]


def validate_image_references(blocks: Sequence[Block]) -> ImageCheck:
    """Check every image carries a backend asset reference."""
    bad = _invalid_images(blocks)
    if not bad:
        return ImageCheck(valid=True)
    noun = "the image" if len(bad) == 1 else "the images"
    return ImageCheck(
        valid=False,
        invalid_count=len(bad),
        message=(
            "Some images are missing valid asset references. "
            f"Please remove and re-upload {noun} using the image upload button."
        ),
    )


def has_content(block: Block) -> bool:
    if isinstance(block, ImageBlock):
        return True
    if isinstance(block, TableBlock):
        return any(row.cells for row in block.rows)
    if isinstance(block, TextBlock):
        # Empty and whitespace-only text still counts: blank lines matter
        return any(span.text is not None for span in block.children)
    return False


def filter_valid_blocks(blocks: Sequence[Block]) -> list[Block]:
    """Drop blocks that carry no content at all."""
    return [b for b in blocks if has_content(b)]


class ImageReferenceRule:
    id = "image-reference"

    def check(self, blocks: Sequence[Block]) -> list[Finding]:
        return [
            Finding(
                "error",
                f"Image has no valid asset reference: {img.asset_ref!r}",
                code=INVALID_IMAGE_REFERENCE,
                block_key=img.key,
            )
            for img in _invalid_images(blocks)
        ]


class EmptyContentRule:
    id = "empty-content"

    def check(self, blocks: Sequence[Block]) -> list[Finding]:
        out = [
            Finding("warn", "Block has no content and will be dropped", block_key=b.key)
            for b in blocks
            if not has_content(b)
        ]
        if not filter_valid_blocks(blocks):
            out.append(Finding("error", "Cannot save empty content", code=EMPTY_CONTENT))
        return out


DEFAULT_RULES: tuple[ValidationRule, ...] = (ImageReferenceRule(), EmptyContentRule())


def lint_blocks(
    blocks: Sequence[Block], rules: Sequence[ValidationRule] = DEFAULT_RULES
) -> list[Finding]:
    """Run every rule and collect its findings."""
    findings: list[Finding] = []
    for rule in rules:
        findings.extend(rule.check(blocks))
    return findings


def validate_content(blocks: Sequence[Block]) -> ValidationResult:
    """Decide whether a converted block-tree may be persisted.

    Image references are checked first, then contentless blocks are filtered
    out. Either condition failing yields an ``error`` result; otherwise the
    filtered blocks are returned with status ``ok``.
    """
    images = validate_image_references(blocks)
    if not images.valid:
        logger.warning("Blocking save: %d invalid image reference(s)", images.invalid_count)
        return ValidationResult(
            status="error",
            code=INVALID_IMAGE_REFERENCE,
            message=images.message,
            invalid_count=images.invalid_count,
        )

    filtered = filter_valid_blocks(blocks)
    if not filtered:
        logger.warning("Blocking save: content is empty")
        return ValidationResult(
            status="error",
            code=EMPTY_CONTENT,
            message="Cannot save empty content",
        )

    return ValidationResult(status="ok", blocks=filtered)
