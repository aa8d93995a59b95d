"""CLI for blockport - convert long-form content between markdown, block-trees and editor markup."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.portable_codec import from_portable, to_portable
from .core.utils import normalize_tag
from .pipeline import import_markdown, save_editor_tree, seed_editor
from .runtime import Runtime, build_runtime
from .validate import lint_blocks, validate_content


def _read_text(source: str) -> str:
    """Read a file argument; `-` means stdin."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _read_json(source: str) -> Any:
    return json.loads(_read_text(source))


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _blocks_payload(data: Any) -> list:
    # Accept a bare block list or an imported post document
    if isinstance(data, dict):
        data = data.get("content", [])
    if not isinstance(data, list):
        raise ValueError("Expected a JSON list of blocks")
    return data


def cmd_import(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert markdown to a portable block-tree document."""
    post = import_markdown(
        _read_text(args.file),
        title=args.title,
        excerpt=args.excerpt,
        tags=args.tag or None,
        keys=rt.new_keys(),
        limits=rt.config.import_,
        extra_acronyms=rt.config.tags.acronyms,
    )
    _print_json({
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "tags": [{"title": t.title, "slug": t.slug} for t in post.tags],
        "meta": post.meta,
        "content": to_portable(post.blocks),
    })
    return 0


def cmd_render(args: argparse.Namespace, rt: Runtime) -> int:
    """Render a portable block-tree to editor markup."""
    blocks = from_portable(_blocks_payload(_read_json(args.file)))
    print(seed_editor(blocks, repair=args.repair, keys=rt.new_keys()))
    return 0


def cmd_save(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert an editor document to a validated block-tree."""
    result = save_editor_tree(_read_json(args.file), keys=rt.new_keys())
    if not result.ok:
        if args.json:
            _print_json({
                "status": result.status,
                "code": result.code,
                "message": result.message,
                "invalid_count": result.invalid_count,
            })
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    _print_json(to_portable(result.blocks))
    return 0


def cmd_validate(args: argparse.Namespace, rt: Runtime) -> int:
    """Check a portable block-tree before persisting it."""
    blocks = from_portable(_blocks_payload(_read_json(args.file)))
    findings = lint_blocks(blocks)
    result = validate_content(blocks)

    if args.json:
        _print_json([
            {
                "severity": f.severity,
                "code": f.code,
                "message": f.message,
                "block_key": f.block_key,
            }
            for f in findings
        ])
    elif not args.quiet:
        for f in findings:
            where = f" ({f.block_key})" if f.block_key else ""
            print(f"[{f.severity}] {f.message}{where}")
        if result.ok:
            print(f"OK: {len(result.blocks)} block(s)")

    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    return 0


def cmd_tag(args: argparse.Namespace, rt: Runtime) -> int:
    """Normalize free-form labels to titles and slugs."""
    tags = [normalize_tag(label, rt.config.tags.acronyms) for label in args.labels]
    if args.json:
        _print_json([{"title": t.title, "slug": t.slug} for t in tags])
    else:
        for t in tags:
            print(f"{t.title}\t{t.slug}")
    return 0


def _version_string() -> str:
    return (
        f"blockport {__version__} "
        f"(python {platform.python_version()}, platform {platform.system().lower()})"
    )


def _configure_logging(args: argparse.Namespace, rt: Runtime) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, rt.config.logging.level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="blockport", description="Blockport content conversion CLI"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/blockport.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # import command
    parser_import = subparsers.add_parser(
        "import", help="Convert markdown to a portable block-tree"
    )
    parser_import.add_argument("file", help="Markdown file (- for stdin)")
    parser_import.add_argument("--title", default=None, help="Post title")
    parser_import.add_argument("--excerpt", default=None, help="Post excerpt")
    parser_import.add_argument(
        "--tag", action="append", default=[], help="Tag label (repeatable)"
    )

    # render command
    parser_render = subparsers.add_parser(
        "render", help="Render a block-tree to editor markup"
    )
    parser_render.add_argument("file", help="Block-tree JSON file (- for stdin)")
    parser_render.add_argument(
        "--repair",
        action="store_true",
        help="Re-resolve blocks that still contain markdown syntax",
    )

    # save command
    parser_save = subparsers.add_parser(
        "save", help="Convert an editor document to a validated block-tree"
    )
    parser_save.add_argument("file", help="Editor JSON file (- for stdin)")

    # validate command
    parser_validate = subparsers.add_parser(
        "validate", help="Validate a block-tree before persisting"
    )
    parser_validate.add_argument("file", help="Block-tree JSON file (- for stdin)")

    # tag command
    parser_tag = subparsers.add_parser("tag", help="Normalize tag labels")
    parser_tag.add_argument("labels", nargs="+", help="Free-form labels")

    args = parser.parse_args(argv)

    try:
        rt = build_runtime(config_path=args.config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    _configure_logging(args, rt)

    handlers = {
        "import": cmd_import,
        "render": cmd_render,
        "save": cmd_save,
        "validate": cmd_validate,
        "tag": cmd_tag,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
