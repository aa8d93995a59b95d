"""Tests for tag titles and slugs."""

from blockport.core.utils import Tag, normalize_tag, slugify, to_title_case


def test_slugify_basic():
    """Test basic slugification."""
    assert slugify("Hello World") == "hello-world"
    assert slugify("Edge Computing") == "edge-computing"


def test_slugify_collapses_punctuation():
    """Runs of non-alphanumerics collapse to one hyphen."""
    assert slugify("C++ & Rust!") == "c-rust"
    assert slugify("a -- b __ c") == "a-b-c"
    assert slugify("foo/bar.baz") == "foo-bar-baz"


def test_slugify_trims_hyphens():
    assert slugify("--hello--") == "hello"
    assert slugify("  !leading and trailing?  ") == "leading-and-trailing"


def test_slugify_unicode():
    """Accents are folded; other non-ASCII letters are dropped."""
    assert slugify("Café Déjà Vu") == "cafe-deja-vu"
    assert slugify("日本語") == ""


def test_slugify_empty():
    assert slugify("") == ""
    assert slugify("!!!") == ""


def test_slugify_numbers():
    assert slugify("Top 10 Tips for 2024") == "top-10-tips-for-2024"


def test_title_case_basic():
    assert to_title_case("machine learning") == "Machine Learning"
    assert to_title_case("machine-learning") == "Machine Learning"
    assert to_title_case("data_science  tips") == "Data Science Tips"


def test_title_case_lowercases_rest_of_word():
    assert to_title_case("hELLO wORLD") == "Hello World"


def test_title_case_acronyms():
    """Acronyms match case-insensitively and use their canonical spelling."""
    assert to_title_case("ai models") == "AI Models"
    assert to_title_case("defi protocols") == "DeFi Protocols"
    assert to_title_case("rest api design") == "REST API Design"
    assert to_title_case("iot devices") == "IoT Devices"
    assert to_title_case("WEB3") == "Web3"


def test_title_case_keeps_short_all_caps():
    """Unknown 2-5 letter all-caps words are kept verbatim."""
    assert to_title_case("ABCD method") == "ABCD Method"
    assert to_title_case("TOOLONG word") == "Toolong Word"
    assert to_title_case("A team") == "A Team"


def test_title_case_extra_acronyms():
    assert to_title_case("graphql tips") == "Graphql Tips"
    assert to_title_case("graphql tips", ["GraphQL"]) == "GraphQL Tips"


def test_title_case_empty():
    assert to_title_case("") == ""
    assert to_title_case("   ") == ""


def test_normalize_tag():
    assert normalize_tag("  machine-learning ") == Tag("Machine Learning", "machine-learning")
    assert normalize_tag("ai_ethics") == Tag("AI Ethics", "ai-ethics")
    assert normalize_tag("n8n workflows") == Tag("n8n Workflows", "n8n-workflows")
