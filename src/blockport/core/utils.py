"""Label utilities: title casing and slugs for tags, categories and titles."""

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable

COMMON_ACRONYMS = (
    "AI", "API", "APIs", "AWS", "CDN", "CI", "CD", "CRM", "CSS", "DB", "DNS",
    "ETL", "GDPR", "GPU", "HTML", "HTTP", "HTTPS", "ID", "IDE", "IoT", "IP",
    "JSON", "JS", "ML", "NLP", "OS", "OSS", "OWASP", "PEER", "RAG", "REST",
    "SDK", "SEO", "SQL", "SSH", "SSL", "UI", "URL", "UX", "VPN", "XML",
    "DeFi", "NFT", "NFTs", "DAO", "Web3", "CISO", "NIST", "CSP",
    "CBDC", "DePIN", "YOLO", "OCR", "TRUEBench", "IFA", "n8n",
)

_WORD_SPLIT_RE = re.compile(r"[\s_-]+")
_ALL_CAPS_RE = re.compile(r"^[A-Z]{2,5}$")


@dataclass(frozen=True)
class Tag:
    title: str
    slug: str


def _acronym_map(extra: Iterable[str] = ()) -> dict[str, str]:
    # First spelling wins, so the built-in list cannot be overridden by case.
    out: dict[str, str] = {}
    for acronym in (*COMMON_ACRONYMS, *extra):
        out.setdefault(acronym.upper(), acronym)
    return out


def to_title_case(text: str, extra_acronyms: Iterable[str] = ()) -> str:
    """
    Convert a free-form label to Title Case.

    - Splits on whitespace, hyphens and underscores
    - Known acronyms (matched case-insensitively) use their canonical spelling
    - Other all-caps words of 2-5 letters are kept verbatim
    - Everything else is capitalized

    Examples:
        >>> to_title_case("machine-learning")
        'Machine Learning'
        >>> to_title_case("ai_models")
        'AI Models'
        >>> to_title_case("defi protocols")
        'DeFi Protocols'
    """
    if not text:
        return ""

    acronyms = _acronym_map(extra_acronyms)
    words = []
    for word in _WORD_SPLIT_RE.split(text):
        if not word:
            continue
        canonical = acronyms.get(word.upper())
        if canonical is not None:
            words.append(canonical)
        elif _ALL_CAPS_RE.match(word):
            words.append(word)
        else:
            words.append(word[0].upper() + word[1:].lower())
    return " ".join(words)


def slugify(text: str) -> str:
    """
    Convert text to a URL-safe identifier.

    - Unicode normalize (NFKD), drop combining marks
    - Lowercase
    - Collapse every run of non-alphanumeric characters to a single `-`
    - Strip leading/trailing `-`

    Examples:
        >>> slugify("Edge Computing")
        'edge-computing'
        >>> slugify("C++ & Rust!")
        'c-rust'
    """
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def normalize_tag(label: str, extra_acronyms: Iterable[str] = ()) -> Tag:
    """Title-case a label and derive its slug from the cased title."""
    title = to_title_case(label.strip(), extra_acronyms)
    return Tag(title=title, slug=slugify(title))
