"""Resolve inline markdown emphasis into non-overlapping spans.

Each syntax is scanned independently across the whole string, candidates are
ordered by start offset and accepted greedily when they do not overlap an
already accepted range. Ties on the start offset go to the higher priority
kind: link > code > strong > em.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.model import MarkDef, Span
from ..core.ports import KeyGenerator
from .idgen import RandomKeys

LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
CODE_RE = re.compile(r"`([^`]+)`")
STRONG_RE = re.compile(r"\*\*([^*]+)\*\*|__([^_]+)__")
EM_RE = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)|(?<!_)_([^_]+)_(?!_)")

# Lower value wins when two candidates start at the same offset.
_PRIORITY = {"link": 0, "code": 1, "strong": 2, "em": 3}


@dataclass(frozen=True)
class Candidate:
    start: int
    end: int
    kind: str  # "link" | "code" | "strong" | "em"
    content: str
    href: str | None = None


@dataclass
class InlineResult:
    children: list[Span]
    mark_defs: list[MarkDef]


def find_candidates(text: str) -> list[Candidate]:
    """Collect every syntax match in `text`, overlapping or not."""
    found: list[Candidate] = []

    for m in LINK_RE.finditer(text):
        found.append(Candidate(m.start(), m.end(), "link", m.group(1), m.group(2)))

    for m in CODE_RE.finditer(text):
        found.append(Candidate(m.start(), m.end(), "code", m.group(1)))

    strong_ranges = []
    for m in STRONG_RE.finditer(text):
        found.append(
            Candidate(m.start(), m.end(), "strong", m.group(1) or m.group(2))
        )
        strong_ranges.append((m.start(), m.end()))

    for m in EM_RE.finditer(text):
        # Skip emphasis that starts inside a strong run
        if any(start <= m.start() < end for start, end in strong_ranges):
            continue
        found.append(Candidate(m.start(), m.end(), "em", m.group(1) or m.group(2)))

    return found


def select_candidates(candidates: list[Candidate]) -> list[Candidate]:
    """Greedy non-overlapping selection in start order, priority on ties."""
    ordered = sorted(candidates, key=lambda c: (c.start, _PRIORITY[c.kind]))
    accepted: list[Candidate] = []
    for cand in ordered:
        overlaps = any(
            not (cand.end <= a.start or cand.start >= a.end) for a in accepted
        )
        if not overlaps:
            accepted.append(cand)
    return accepted


def resolve_inline(text: str, keys: KeyGenerator | None = None) -> InlineResult:
    """
    Split raw inline text into spans and block-scoped link definitions.

    Links sharing a destination within this call reuse a single MarkDef.
    With no matches, the result is one plain span holding `text` unchanged,
    even when `text` is empty.
    """
    keys = keys or RandomKeys()
    children: list[Span] = []
    mark_defs: list[MarkDef] = []
    link_keys: dict[str, str] = {}

    last = 0
    for cand in select_candidates(find_candidates(text)):
        if cand.start > last:
            children.append(Span(key=keys.new_key(), text=text[last:cand.start]))

        if cand.kind == "link" and cand.href:
            link_key = link_keys.get(cand.href)
            if link_key is None:
                link_key = keys.new_key()
                link_keys[cand.href] = link_key
                mark_defs.append(MarkDef(key=link_key, href=cand.href))
            children.append(
                Span(key=keys.new_key(), text=cand.content, marks=[link_key])
            )
        else:
            children.append(
                Span(key=keys.new_key(), text=cand.content, marks=[cand.kind])
            )
        last = cand.end

    if last < len(text):
        children.append(Span(key=keys.new_key(), text=text[last:]))

    if not children:
        children.append(Span(key=keys.new_key(), text=text))

    return InlineResult(children=children, mark_defs=mark_defs)
