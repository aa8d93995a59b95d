"""Tests for pre-persistence validation."""

import logging

from blockport.adapters.editor_parser import parse_editor_tree
from blockport.core.model import (
    ImageBlock,
    Span,
    TableBlock,
    TableCell,
    TableRow,
    TextBlock,
)
from blockport.validate import (
    EMPTY_CONTENT,
    INVALID_IMAGE_REFERENCE,
    filter_valid_blocks,
    has_content,
    is_valid_asset_ref,
    lint_blocks,
    validate_content,
    validate_image_references,
)


def _text_block(key, *texts):
    return TextBlock(key=key, children=[Span(f"{key}s{i}", t) for i, t in enumerate(texts)])


def test_asset_ref_shapes():
    assert is_valid_asset_ref("image-abc123-800x600-png")
    assert is_valid_asset_ref("abc123")
    assert not is_valid_asset_ref("https://example.com/x.png")
    assert not is_valid_asset_ref("HTTP://EXAMPLE.COM/x.png")
    assert not is_valid_asset_ref("//cdn.example.com/x.png")
    assert not is_valid_asset_ref("data:image/png;base64,AAAA")
    assert not is_valid_asset_ref("blob:abc")
    assert not is_valid_asset_ref("ftp://files/x.png")
    assert not is_valid_asset_ref("")
    assert not is_valid_asset_ref("   ")
    assert not is_valid_asset_ref(None)


def test_editor_image_with_url_reference_blocks_save(caplog):
    """An image whose only reference is a URL is a blocking error."""
    doc = {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "hi"}]},
            {"type": "image", "attrs": {"data-asset-ref": "https://example.com/x.png"}},
        ],
    }
    blocks = parse_editor_tree(doc)
    with caplog.at_level(logging.WARNING, logger="blockport.validate"):
        result = validate_content(blocks)

    assert not result.ok
    assert result.status == "error"
    assert result.code == INVALID_IMAGE_REFERENCE
    assert result.invalid_count == 1
    assert "re-upload the image using" in result.message
    assert result.blocks == []
    assert "invalid image reference" in caplog.text


def test_image_message_pluralizes():
    check = validate_image_references([
        ImageBlock("i1", "https://a/x.png"),
        ImageBlock("i2", ""),
        ImageBlock("i3", "image-ok"),
    ])
    assert not check.valid
    assert check.invalid_count == 2
    assert "re-upload the images using" in check.message


def test_valid_images_pass():
    check = validate_image_references([ImageBlock("i1", "image-ok")])
    assert check.valid
    assert check.invalid_count == 0
    assert check.message is None


def test_image_check_runs_before_empty_check():
    result = validate_content([ImageBlock("i1", None)])
    assert result.code == INVALID_IMAGE_REFERENCE


def test_empty_content_blocks_save():
    """A single block whose only span has no text cannot be saved."""
    block = TextBlock(key="b1", children=[Span("s1", None)])
    result = validate_content([block])
    assert result.status == "error"
    assert result.code == EMPTY_CONTENT
    assert result.message == "Cannot save empty content"


def test_empty_document_blocks_save():
    assert validate_content([]).code == EMPTY_CONTENT


def test_blank_text_counts_as_content():
    """Empty and whitespace-only spans are legitimate blank lines."""
    assert has_content(_text_block("b1", ""))
    assert has_content(_text_block("b2", "   "))
    assert not has_content(TextBlock(key="b3", children=[]))
    assert not has_content(TextBlock(key="b4", children=[Span("s", None)]))


def test_table_content():
    cell = TableCell("c1", [_text_block("p1", "x")])
    assert has_content(TableBlock("t1", [TableRow("r1", [cell])]))
    assert not has_content(TableBlock("t2", [TableRow("r2", [])]))
    assert not has_content(TableBlock("t3", []))


def test_ok_result_filters_contentless_blocks():
    keep = _text_block("b1", "kept")
    drop = TextBlock(key="b2", children=[])
    image = ImageBlock("i1", "image-ok")
    result = validate_content([keep, drop, image])
    assert result.ok
    assert result.blocks == [keep, image]
    assert filter_valid_blocks([drop]) == []


def test_lint_reports_each_problem():
    findings = lint_blocks([
        ImageBlock("i1", "https://a/x.png"),
        TextBlock(key="b1", children=[]),
    ])
    by_code = {(f.severity, f.code, f.block_key) for f in findings}
    assert ("error", INVALID_IMAGE_REFERENCE, "i1") in by_code
    assert ("warn", None, "b1") in by_code
    assert not any(f.code == EMPTY_CONTENT for f in findings)


def test_lint_reports_empty_document():
    findings = lint_blocks([TextBlock(key="b1", children=[])])
    assert [f.code for f in findings if f.severity == "error"] == [EMPTY_CONTENT]


def test_lint_clean_document():
    assert lint_blocks([_text_block("b1", "fine")]) == []
