"""
DOI and structured-abstract extraction for medical journal items.

Journal feeds usually carry the article DOI somewhere in the link or the
description, and many descriptions are structured abstracts
("BACKGROUND: ... METHODS: ... RESULTS: ...") flattened into one string.
"""

import re
from dataclasses import dataclass

from .text import strip_html

DOI_PATTERN = re.compile(r"10\.\d{4,9}/[-._;()/:A-Z0-9]+", re.IGNORECASE)
DOI_URL_PREFIX = "doi.org/"

ABSTRACT_HEADERS = [
    "BACKGROUND",
    "METHODS",
    "RESULTS",
    "CONCLUSIONS",
    "OBJECTIVE",
    "DESIGN",
    "SETTING",
    "PATIENTS",
    "INTERVENTIONS",
    "MEASUREMENTS",
    "LIMITATIONS",
    "DATA SOURCES",
    "STUDY SELECTION",
    "DATA EXTRACTION",
    "DATA SYNTHESIS",
    "PARTICIPANTS",
    "MAIN OUTCOME MEASURES",
    "REVIEW METHODS",
    "IMPORTANCE",
    "CONCLUSIONS AND RELEVANCE",
]


def _build_header_pattern(headers: list[str]) -> re.Pattern:
    # Longest first so "CONCLUSIONS AND RELEVANCE" wins over "CONCLUSIONS"
    alternation = "|".join(
        re.escape(h) for h in sorted(headers, key=len, reverse=True)
    )
    return re.compile(
        rf"(?:^|(?<=[.\n]))[ \t]*(?P<header>{alternation})(?=[ \t]*(?:[:\-\n]|[A-Z])|$)",
        re.MULTILINE,
    )


_HEADER_RE = _build_header_pattern(ABSTRACT_HEADERS)
_ABSTRACT_LABEL_RE = re.compile(r"^\s*Abstract\b[\s:.\-]*")


@dataclass(frozen=True)
class AbstractSection:
    """One labelled part of a structured abstract."""
    title: str
    content: str


def find_doi(text: str) -> str | None:
    """Return the first DOI in text, without any doi.org/ prefix."""
    if not text:
        return None
    match = DOI_PATTERN.search(text)
    if not match:
        return None
    return match.group(0).replace(DOI_URL_PREFIX, "")


def extract_doi(link: str, description: str) -> str | None:
    """
    Find an item's DOI.

    The link is searched before the description; the first match wins.
    A miss is not an error and returns None.
    """
    return find_doi(link) or find_doi(description)


def segment_abstract(description: str) -> list[AbstractSection] | None:
    """
    Split a structured abstract into labelled sections.

    Args:
        description: Raw (possibly HTML) description of a feed item

    Returns:
        Sections in document order, or None when no known header is found
        so callers can fall back to the plain description.
    """
    text = strip_html(description)
    text = _ABSTRACT_LABEL_RE.sub("", text, count=1)
    if not text:
        return None

    matches = list(_HEADER_RE.finditer(text))
    if not matches:
        return None

    sections: list[AbstractSection] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        content = text[match.end():end].strip().lstrip(":-").strip()
        if content:
            sections.append(AbstractSection(title=match.group("header"), content=content))

    return sections or None


def abstract_sections_or_whole(text: str, title: str = "Abstract") -> list[AbstractSection]:
    """Segment text, or wrap it as one section when it has no known headers."""
    sections = segment_abstract(text)
    if sections:
        return sections
    return [AbstractSection(title=title, content=text.strip())] if text.strip() else []
