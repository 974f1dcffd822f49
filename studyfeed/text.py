"""
Text normalization for feed-supplied HTML fragments.

Feed titles and descriptions arrive as small HTML snippets. Block-level tags
are turned into line breaks before the remaining markup is dropped so that
paragraph and list structure survives as plain text.
"""

import re

# Opening tag name -> replacement text. Matched case-insensitively.
DEFAULT_BLOCK_TAGS: dict[str, str] = {
    "p": "\n\n",
    "br": "\n",
    "li": "\n• ",
    "div": "\n",
}

# &amp; must stay last so "&amp;lt;" decodes to "&lt;" and not "<".
HTML_ENTITIES: list[tuple[str, str]] = [
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&nbsp;", " "),
    ("&rsquo;", "'"),
    ("&lsquo;", "'"),
    ("&rdquo;", '"'),
    ("&ldquo;", '"'),
    ("&ndash;", "-"),
    ("&mdash;", "—"),
    ("&amp;", "&"),
]

_TAG_RE = re.compile(r"<[^>]+>")
_block_tag_cache: dict[str, re.Pattern] = {}


def _block_tag_pattern(tag: str) -> re.Pattern:
    pattern = _block_tag_cache.get(tag)
    if pattern is None:
        # \b keeps <p> from matching <pre> or <param>
        pattern = re.compile(rf"<{re.escape(tag)}\b[^>]*>", re.IGNORECASE)
        _block_tag_cache[tag] = pattern
    return pattern


def decode_entities(text: str) -> str:
    """Decode the fixed table of named entities used by journal feeds."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def normalize_lines(text: str) -> str:
    """Trim every line and drop the blank ones."""
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def strip_html(text: str, block_tags: dict[str, str] | None = None) -> str:
    """
    Convert an HTML fragment to plain text.

    Args:
        text: HTML fragment from a feed field
        block_tags: Opening tags to replace with line breaks before all
            other tags are removed. Defaults to DEFAULT_BLOCK_TAGS.

    Returns:
        Plain text with no leading/trailing blank lines and no
        whitespace-only lines. Empty input returns "".
    """
    if not text:
        return ""

    tags = DEFAULT_BLOCK_TAGS if block_tags is None else block_tags
    for tag, replacement in tags.items():
        text = _block_tag_pattern(tag).sub(replacement, text)

    text = _TAG_RE.sub("", text)
    text = decode_entities(text)
    return normalize_lines(text)
