import io
import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class YamlFrontmatter:
    """Split optional YAML frontmatter off a markdown document."""

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError as e:
            # Leave the block in place; it will be parsed as ordinary text
            logger.warning("Ignoring unparseable frontmatter: %s", e)
            return {}, text
        if not isinstance(fm, dict):
            logger.warning("Ignoring frontmatter that is not a mapping")
            return {}, text
        return fm, text[m.end():]
