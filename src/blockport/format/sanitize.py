"""Input hygiene for markdown arriving from generation pipelines or users."""

import re

MAX_MARKDOWN_LENGTH = 10 * 1024 * 1024

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"""on\w+\s*=\s*["'][^"']*["']""", re.IGNORECASE)
_UNSAFE_LINK_RE = re.compile(r"\[([^\]]+)\]\((?:javascript|data):[^)]+\)", re.IGNORECASE)


def sanitize_markdown(markdown: str, max_length: int = MAX_MARKDOWN_LENGTH) -> str:
    """Strip active content from markdown before it is parsed.

    Args:
        markdown: Raw markdown text
        max_length: Characters kept; anything beyond is cut off

    Returns:
        Markdown with LF line endings, without script elements or inline
        event handlers, and with javascript:/data: link targets replaced by `#`
    """
    if not markdown:
        return ""

    result = markdown.replace('\r\n', '\n').replace('\r', '\n')
    result = _SCRIPT_RE.sub('', result)
    result = _EVENT_HANDLER_RE.sub('', result)
    result = _UNSAFE_LINK_RE.sub(r'[\1](#)', result)

    if len(result) > max_length:
        result = result[:max_length]

    return result
