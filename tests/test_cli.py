"""Tests for the blockport command line."""

import json

import pytest

from blockport.cli import main


def run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "blockport.toml").write_text('[keys]\nstrategy = "sequence"\n')
    return tmp_path


def test_import_command(workdir, capsys):
    src = workdir / "post.md"
    src.write_text("---\ntitle: Hello There\n---\n# Hi\n\nText [x](u)\n")

    assert run(["import", str(src), "--tag", "ai", "--tag", "ml ops"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["title"] == "Hello There"
    assert data["slug"] == "hello-there"
    assert data["tags"] == [
        {"title": "AI", "slug": "ai"},
        {"title": "ML Ops", "slug": "ml-ops"},
    ]
    assert [b["style"] for b in data["content"]] == ["h1", "normal"]
    assert data["content"][0]["_key"] == "k2"


def test_import_command_reports_errors(workdir, capsys):
    src = workdir / "empty.md"
    src.write_text("   ")

    assert run(["import", str(src)]) == 1
    assert "Error: Markdown content is required" in capsys.readouterr().err


def test_render_command(workdir, capsys):
    blocks = [{
        "_type": "block", "_key": "b1", "style": "normal", "markDefs": [],
        "children": [{"_type": "span", "_key": "s1", "text": "a **b**", "marks": []}],
    }]
    src = workdir / "blocks.json"
    src.write_text(json.dumps({"content": blocks}))

    assert run(["render", str(src)]) == 0
    assert capsys.readouterr().out.strip() == "<p>a **b**</p>"

    assert run(["render", str(src), "--repair"]) == 0
    assert capsys.readouterr().out.strip() == "<p>a <strong>b</strong></p>"


def test_save_command(workdir, capsys):
    doc = {"type": "doc", "content": [
        {"type": "paragraph", "content": [{"type": "text", "text": "hello"}]},
    ]}
    src = workdir / "doc.json"
    src.write_text(json.dumps(doc))

    assert run(["save", str(src)]) == 0
    [block] = json.loads(capsys.readouterr().out)
    assert block["children"][0]["text"] == "hello"


def test_save_command_blocks_bad_images(workdir, capsys):
    doc = {"type": "doc", "content": [
        {"type": "image", "attrs": {"data-asset-ref": "https://example.com/x.png"}},
    ]}
    src = workdir / "doc.json"
    src.write_text(json.dumps(doc))

    assert run(["--json", "save", str(src)]) == 1
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["code"] == "invalid-image-reference"
    assert data["invalid_count"] == 1
    assert "Error:" in captured.err


def test_validate_command(workdir, capsys):
    src = workdir / "blocks.json"
    src.write_text(json.dumps([
        {"_type": "block", "_key": "b1", "children": [{"_type": "span", "_key": "s1", "text": "x"}]},
        {"_type": "block", "_key": "b2", "children": []},
    ]))

    assert run(["validate", str(src)]) == 0
    out = capsys.readouterr().out
    assert "[warn] Block has no content and will be dropped (b2)" in out
    assert "OK: 1 block(s)" in out


def test_validate_command_json(workdir, capsys):
    src = workdir / "blocks.json"
    src.write_text(json.dumps([
        {"_type": "image", "_key": "i1", "asset": "https://legacy/x.png"},
    ]))

    assert run(["--json", "validate", str(src)]) == 1
    findings = json.loads(capsys.readouterr().out)
    assert findings == [{
        "severity": "error",
        "code": "invalid-image-reference",
        "message": "Image has no valid asset reference: 'https://legacy/x.png'",
        "block_key": "i1",
    }]


def test_tag_command(workdir, capsys):
    assert run(["tag", "machine-learning", "rest_api"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "Machine Learning\tmachine-learning",
        "REST API\trest-api",
    ]


def test_tag_command_uses_configured_acronyms(workdir, capsys):
    (workdir / "blockport.toml").write_text('[tags]\nacronyms = ["GraphQL"]\n')

    assert run(["--json", "tag", "graphql"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"title": "GraphQL", "slug": "graphql"}]


def test_bad_key_strategy_fails_early(workdir, capsys):
    (workdir / "blockport.toml").write_text('[keys]\nstrategy = "uuid"\n')

    assert run(["tag", "x"]) == 1
    assert "Unknown key strategy" in capsys.readouterr().err
