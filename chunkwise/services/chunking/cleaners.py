"""Text cleaners shared by the normalizer and strategies: whitespace, markup → plain text, re-wrapping."""

import html
import re

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

_WS_RE = re.compile(r"\s+")

# Tags whose start separates words even when the markup has no whitespace
_BREAKING_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "caption", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
    "li", "main", "nav", "ol", "p", "pre", "section", "table", "tbody", "td", "tfoot",
    "th", "thead", "tr", "ul",
})
_SKIPPED_TAGS = frozenset({"script", "style", "template"})

EMPTY_PREVIEW = "Empty content..."
PREVIEW_CHARS = 100


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    if not text or not isinstance(text, str):
        return ""
    return _WS_RE.sub(" ", text).strip()


def element_text(element: Tag) -> str:
    """Plain text of a parsed element; block-level tags act as word separators."""
    parts: list[str] = []
    for node in element.descendants:
        if isinstance(node, Tag):
            if node.name in _BREAKING_TAGS:
                parts.append(" ")
            continue
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        if any(parent.name in _SKIPPED_TAGS for parent in node.parents if isinstance(parent, Tag)):
            continue
        parts.append(str(node))
    return normalize_whitespace("".join(parts))


def html_to_text(markup: str) -> str:
    """
    Plain text of a markup fragment. Text of whole blocks' markup joined by
    newlines equals their individual texts joined by single spaces.
    """
    if not markup:
        return ""
    return element_text(BeautifulSoup(markup, "html.parser"))


def wrap_paragraph(text: str) -> str:
    """Wrap plain text in escaped paragraph markup."""
    return f"<p>{html.escape(text, quote=False)}</p>"


def make_preview(text: str) -> str:
    return text[:PREVIEW_CHARS] or EMPTY_PREVIEW


def leading_words_title(text: str, count: int = 5) -> str:
    """First few words of text, with an ellipsis when more follows."""
    words = text.split()
    head = " ".join(words[:count])
    return f"{head}..." if len(words) > count else head
