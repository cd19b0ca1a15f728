"""
Block normalizer: parsed-document markup → DocumentStructure.

Walks the markup tree depth-first in document order and classifies elements
into typed blocks. Page/slide marker containers (<div data-source=... data-page=...>)
update a sticky cursor that every following block inherits until the next marker.
"""

import copy
import html
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from chunkwise.config.logging import get_logger
from chunkwise.schema.document import Block, BlockType, DocumentStructure, SourceFormat, SourceMeta
from chunkwise.services.chunking.cleaners import html_to_text, normalize_whitespace

logger = get_logger(__name__)

_HEADING_RE = re.compile(r"^h([1-6])$")
_MARKER_TAGS = frozenset({"div", "section"})
_CONTAINER_TAGS = frozenset({"div", "section", "blockquote", "article", "aside", "main"})
_LIST_TAGS = ["ul", "ol"]
_SKIPPED_TAGS = frozenset({"script", "style", "template", "head", "title", "meta", "link"})


def _is_text_node(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _has_direct_text(element: Tag) -> bool:
    return any(_is_text_node(child) and child.strip() for child in element.children)


def _has_element_children(element: Tag) -> bool:
    return any(isinstance(child, Tag) for child in element.children)


def _is_speaker_note(element: Tag) -> bool:
    if element.name != "aside":
        return False
    return element.has_attr("data-notes") or "notes" in (element.get("class") or [])


def _parse_index(value: str | list[str] | None) -> int | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass
class _BlockWalker:
    """Depth-first walk with a sticky page/slide cursor."""

    source_format: SourceFormat
    page: int | None = None
    slide: int | None = None
    blocks: list[Block] = field(default_factory=list)

    def visit(self, node: PageElement) -> None:
        if _is_text_node(node):
            self._visit_loose_text(node)
            return
        if not isinstance(node, Tag):
            return
        name = (node.name or "").lower()
        if name in _SKIPPED_TAGS:
            return

        if name in _MARKER_TAGS and node.has_attr("data-source"):
            self._enter_marker(node)
            self._visit_children(node)
            return

        match = _HEADING_RE.match(name)
        if match:
            block_type = BlockType.SLIDE_TITLE if self.source_format == "pptx" else BlockType.HEADING
            self._emit(block_type, str(node), level=int(match.group(1)))
            return

        if name == "p":
            self._emit(BlockType.PARAGRAPH, str(node))
        elif name == "li":
            self._visit_list_item(node)
        elif name == "table":
            self._emit(BlockType.TABLE, str(node))
        elif name in ("pre", "code"):
            self._emit(BlockType.CODE, str(node))
        elif _is_speaker_note(node):
            self._emit(BlockType.SLIDE_NOTE, str(node))
        elif name in _CONTAINER_TAGS:
            if _has_element_children(node) and not _has_direct_text(node):
                self._visit_children(node)
            else:
                self._emit(BlockType.OTHER, str(node))
        else:
            self._visit_children(node)

    def _visit_children(self, element: Tag) -> None:
        for child in list(element.children):
            self.visit(child)

    def _visit_loose_text(self, node: NavigableString) -> None:
        # Only text sitting directly under the document root or a page/slide marker;
        # inline text elsewhere belongs to the block that contains it
        parent = node.parent
        if parent is None:
            return
        at_root = isinstance(parent, BeautifulSoup) or parent.name == "body"
        in_marker = parent.name in _MARKER_TAGS and parent.has_attr("data-source")
        if not (at_root or in_marker):
            return
        text = normalize_whitespace(str(node))
        if text:
            self._emit(BlockType.OTHER, html.escape(text, quote=False))

    def _enter_marker(self, element: Tag) -> None:
        source = str(element.get("data-source") or "").lower()
        index = _parse_index(element.get("data-page"))
        if index is None:
            index = _parse_index(element.get("data-slide"))
        if index is None:
            return
        if source == "pptx":
            self.slide = index
        else:
            self.page = index

    def _visit_list_item(self, element: Tag) -> None:
        """
        A list item with nested lists is emitted as the runs of its own content
        between those lists, each followed by the nested items, in source order.
        """
        level = max(1, len(element.find_parents(_LIST_TAGS)))
        nested = [lst for lst in element.find_all(_LIST_TAGS) if lst.find_parent("li") is element]
        if not nested:
            self._emit(BlockType.LIST_ITEM, str(element), level=level)
            return

        children = list(element.contents)
        start = 0
        deferred: list[Tag] = []
        for i, child in enumerate(children):
            if any(child is lst for lst in nested):
                self._emit_item_run(element, start, i, level, deferred)
                self._visit_children(child)
                start, deferred = i + 1, []
            elif isinstance(child, Tag):
                deferred.extend(lst for lst in nested if any(p is child for p in lst.parents))
        self._emit_item_run(element, start, len(children), level, deferred)

    def _emit_item_run(self, element: Tag, start: int, stop: int, level: int, deferred: list[Tag]) -> None:
        # Lists nested deeper than a direct child become word separators here
        # and are walked right after the run
        if start < stop:
            run = copy.copy(element)
            for child in run.contents[stop:] + run.contents[:start]:
                child.extract()
            for lst in run.find_all(_LIST_TAGS):
                if lst.find_parent(_LIST_TAGS) is None:
                    lst.replace_with(" ")
            self._emit(BlockType.LIST_ITEM, str(run), level=level)
        for lst in deferred:
            self._visit_children(lst)

    def _emit(self, block_type: BlockType, markup: str, level: int | None = None) -> None:
        text = html_to_text(markup)
        if not text:
            return
        meta = SourceMeta(source=self.source_format, page=self.page, slide=self.slide)
        self.blocks.append(Block(type=block_type, level=level, text=text, html=markup, meta=meta))


def normalize(markup: str, source_format: SourceFormat, source_file: str) -> DocumentStructure:
    """
    Convert markup from a document reader into a DocumentStructure.
    Malformed markup yields a best-effort partial structure; markup that cannot
    be parsed at all yields an empty one.
    """
    empty = DocumentStructure(source_file=source_file, source_type=source_format)
    if not isinstance(markup, str) or not markup.strip():
        return empty
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning(
            "Markup rejected by parser, returning empty document",
            extra={"source_file": source_file, "error": str(e)},
        )
        return empty

    root = soup.body or soup
    walker = _BlockWalker(source_format=source_format)
    for child in list(root.children):
        walker.visit(child)

    logger.debug(
        "Normalized document",
        extra={"source_file": source_file, "source_type": source_format, "blocks": len(walker.blocks)},
    )
    return DocumentStructure(blocks=tuple(walker.blocks), source_file=source_file, source_type=source_format)
