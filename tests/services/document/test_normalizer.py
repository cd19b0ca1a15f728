from __future__ import annotations

from chunkwise.schema.document import BlockType
from chunkwise.services.chunking.cleaners import html_to_text
from chunkwise.services.document.normalizer import normalize


def test_normalize_classifies_blocks_in_document_order() -> None:
    markup = """
    <h1>Intro</h1>
    <p>Hello <b>world</b>.</p>
    <h2>Details</h2>
    <table><tr><td>a</td><td>b</td></tr></table>
    <pre><code>print("x")</code></pre>
    """

    structure = normalize(markup, "docx", "report.docx")

    assert structure.source_file == "report.docx"
    assert structure.source_type == "docx"
    assert [b.type for b in structure.blocks] == [
        BlockType.HEADING,
        BlockType.PARAGRAPH,
        BlockType.HEADING,
        BlockType.TABLE,
        BlockType.CODE,
    ]
    assert [b.level for b in structure.blocks[:3]] == [1, None, 2]
    assert structure.blocks[1].text == "Hello world."
    assert structure.blocks[1].html == "<p>Hello <b>world</b>.</p>"
    assert structure.blocks[3].text == "a b"
    assert structure.blocks[4].text == 'print("x")'


def test_block_text_matches_plain_text_of_its_markup() -> None:
    markup = "<h1>Title</h1><p>One <i>two</i></p><ul><li>three<ul><li>four</li></ul></li></ul>"

    structure = normalize(markup, "docx", "doc.docx")

    assert structure.blocks
    for block in structure.blocks:
        assert block.text == html_to_text(block.html)


def test_pptx_headings_become_slide_titles_with_sticky_slide_numbers() -> None:
    markup = """
    <div data-source="pptx" data-page="1"><h2>Welcome</h2><p>First slide</p></div>
    <div data-source="pptx" data-page="2"><h2>Agenda</h2><p>Second slide</p></div>
    """

    structure = normalize(markup, "pptx", "deck.pptx")

    assert [b.type for b in structure.blocks] == [
        BlockType.SLIDE_TITLE,
        BlockType.PARAGRAPH,
        BlockType.SLIDE_TITLE,
        BlockType.PARAGRAPH,
    ]
    assert [b.meta.slide for b in structure.blocks] == [1, 1, 2, 2]
    assert all(b.meta.page is None for b in structure.blocks)
    assert all(b.meta.source == "pptx" for b in structure.blocks)


def test_pdf_page_cursor_persists_across_siblings_until_changed() -> None:
    markup = """
    <div data-source="pdf" data-page="3"><p>on three</p></div>
    <p>still three</p>
    <div data-source="pdf" data-page="4"><p>on four</p></div>
    """

    structure = normalize(markup, "pdf", "paper.pdf")

    assert [(b.text, b.meta.page) for b in structure.blocks] == [
        ("on three", 3),
        ("still three", 3),
        ("on four", 4),
    ]


def test_list_items_carry_nesting_level_and_exclude_nested_lists() -> None:
    markup = "<ul><li>one<ul><li>two<ol><li>three</li></ol></li></ul></li><li>four</li></ul>"

    structure = normalize(markup, "docx", "list.docx")

    assert [(b.type, b.level, b.text) for b in structure.blocks] == [
        (BlockType.LIST_ITEM, 1, "one"),
        (BlockType.LIST_ITEM, 2, "two"),
        (BlockType.LIST_ITEM, 3, "three"),
        (BlockType.LIST_ITEM, 1, "four"),
    ]
    assert "<ul>" not in structure.blocks[0].html


def test_list_item_text_around_nested_list_keeps_order_and_word_breaks() -> None:
    structure = normalize("<ul><li>A<ul><li>B</li></ul>C</li></ul>", "docx", "list.docx")

    assert [(b.level, b.text) for b in structure.blocks] == [(1, "A"), (2, "B"), (1, "C")]
    for block in structure.blocks:
        assert block.text == html_to_text(block.html)


def test_list_nested_below_a_wrapper_still_separates_words() -> None:
    structure = normalize("<ul><li>A<div><ul><li>B</li></ul></div>C</li></ul>", "docx", "list.docx")

    assert [(b.level, b.text) for b in structure.blocks] == [(1, "A C"), (2, "B")]


def test_generic_containers_descend_only_without_direct_text() -> None:
    markup = """
    <section><div><p>inner a</p><p>inner b</p></div></section>
    <blockquote>quoted <em>words</em></blockquote>
    <div>lead text<p>and paragraph</p></div>
    """

    structure = normalize(markup, "docx", "doc.docx")

    assert [(b.type, b.text) for b in structure.blocks] == [
        (BlockType.PARAGRAPH, "inner a"),
        (BlockType.PARAGRAPH, "inner b"),
        (BlockType.OTHER, "quoted words"),
        (BlockType.OTHER, "lead text and paragraph"),
    ]


def test_empty_blocks_scripts_and_unknown_tags() -> None:
    markup = """
    <p>   </p>
    <p>kept<script>alert(1)</script></p>
    <span><p>inside span</p></span>
    <aside class="notes">Speaker notes here</aside>
    """

    structure = normalize(markup, "pptx", "deck.pptx")

    assert [(b.type, b.text) for b in structure.blocks] == [
        (BlockType.PARAGRAPH, "kept"),
        (BlockType.PARAGRAPH, "inside span"),
        (BlockType.SLIDE_NOTE, "Speaker notes here"),
    ]


def test_malformed_markup_degrades_to_partial_structure() -> None:
    structure = normalize("<h1>Broken<p>unclosed <b>bold", "docx", "broken.docx")

    assert structure.blocks
    assert structure.blocks[0].type == BlockType.HEADING
    assert "Broken" in structure.blocks[0].text


def test_empty_or_non_string_markup_yields_empty_structure() -> None:
    assert normalize("", "pdf", "a.pdf").blocks == ()
    assert normalize("   \n ", "pdf", "a.pdf").blocks == ()
    assert normalize(None, "pdf", "a.pdf").blocks == ()  # type: ignore[arg-type]


def test_loose_top_level_text_becomes_other_block() -> None:
    structure = normalize("plain leading text<p>para</p>", "docx", "doc.docx")

    assert [(b.type, b.text) for b in structure.blocks] == [
        (BlockType.OTHER, "plain leading text"),
        (BlockType.PARAGRAPH, "para"),
    ]
