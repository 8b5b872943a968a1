from core.content_renderer import (
    NO_CONTENT_HTML,
    calculate_read_time,
    extract_text,
    heading_level,
    render_document,
    render_node,
)


def doc(*blocks):
    return {"type": "doc", "content": list(blocks)}


def text(value, *marks):
    node = {"type": "text", "text": value}
    if marks:
        node["marks"] = list(marks)
    return node


def paragraph(*children):
    return {"type": "paragraph", "content": list(children)}


def test_document_is_wrapped_in_article_container():
    html = render_document(doc(paragraph(text("Hello"))))
    assert html == '<div class="article-content"><p>Hello</p></div>'


def test_blocks_render_in_order():
    html = render_document(doc(
        {"type": "heading", "attrs": {"level": 1}, "content": [text("Title")]},
        paragraph(text("First")),
        {"type": "horizontalRule"},
        paragraph(text("Second")),
    ))
    assert html == (
        '<div class="article-content">'
        '<h1>Title</h1><p>First</p><hr><p>Second</p>'
        '</div>'
    )


def test_rendering_is_deterministic():
    document = doc(paragraph(text("Same", {"type": "italic"})))
    assert render_document(document) == render_document(document)


def test_first_mark_is_innermost():
    node = text(
        "hi",
        {"type": "bold"},
        {"type": "italic"},
        {"type": "link", "attrs": {"href": "https://example.com"}},
    )
    assert render_node(node) == (
        '<a href="https://example.com" target="_blank" rel="noopener noreferrer">'
        '<em><strong>hi</strong></em></a>'
    )


def test_simple_marks_map_to_tags():
    node = text("x", {"type": "underline"}, {"type": "strike"}, {"type": "code"})
    assert render_node(node) == "<code><s><u>x</u></s></code>"


def test_unknown_and_malformed_marks_are_ignored():
    node = text("x", {"type": "highlight"}, "bold", {"type": "link", "attrs": {}})
    assert render_node(node) == "x"


def test_link_href_is_escaped():
    node = text("go", {"type": "link", "attrs": {"href": 'https://x.test/?a=1&b="2"'}})
    assert 'href="https://x.test/?a=1&amp;b=&quot;2&quot;"' in render_node(node)


def test_text_is_escaped():
    assert render_node(text("<script>alert(1)</script>")) == "&lt;script&gt;alert(1)&lt;/script&gt;"


def test_heading_level_out_of_range_becomes_h6():
    node = {"type": "heading", "attrs": {"level": 7}, "content": [text("Deep")]}
    assert render_node(node) == "<h6>Deep</h6>"


def test_heading_without_level_defaults_to_h2():
    assert render_node({"type": "heading", "content": [text("T")]}) == "<h2>T</h2>"
    assert heading_level({"type": "heading", "attrs": {}}) == 2


def test_heading_level_rejects_non_integers():
    assert heading_level({"attrs": {"level": "3"}}) == 6
    assert heading_level({"attrs": {"level": 2.0}}) == 6
    assert heading_level({"attrs": {"level": True}}) == 6
    assert heading_level({"attrs": {"level": 0}}) == 6
    assert heading_level({"attrs": {"level": 4}}) == 4


def test_lists_and_blockquote():
    node = {
        "type": "bulletList",
        "content": [
            {"type": "listItem", "content": [paragraph(text("one"))]},
            {"type": "listItem", "content": [paragraph(text("two"))]},
        ],
    }
    assert render_node(node) == "<ul><li><p>one</p></li><li><p>two</p></li></ul>"
    quote = {"type": "blockquote", "content": [paragraph(text("q"))]}
    assert render_node(quote) == "<blockquote><p>q</p></blockquote>"


def test_code_block_and_hard_break():
    block = {"type": "codeBlock", "content": [text("a < b")]}
    assert render_node(block) == "<pre><code>a &lt; b</code></pre>"
    assert render_node(paragraph(text("a"), {"type": "hardBreak"}, text("b"))) == "<p>a<br>b</p>"


def test_image_with_and_without_source():
    image = {"type": "image", "attrs": {"src": "https://cdn.test/a.png", "alt": "Chart"}}
    assert render_node(image) == '<img src="https://cdn.test/a.png" alt="Chart">'
    assert render_node({"type": "image", "attrs": {"alt": "Missing"}}) == '<img alt="Missing">'
    assert render_node({"type": "image"}) == '<img alt="">'


def test_unknown_node_keeps_children():
    node = {"type": "callout", "content": [paragraph(text("Note"))]}
    assert render_node(node) == "<div><p>Note</p></div>"
    assert render_node({"type": "mention", "attrs": {"id": 3}}) == ""


def test_malformed_nodes_render_empty():
    node = paragraph(None, "loose", 42, {"type": "text", "text": 5}, text("ok"))
    assert render_node(node) == "<p>ok</p>"
    assert render_node({"type": "paragraph", "content": "not a list"}) == "<p></p>"


def test_legacy_html_is_returned_verbatim():
    legacy = {"html": "<p>Old <b>post</b></p>"}
    assert render_document(legacy) == "<p>Old <b>post</b></p>"


def test_missing_document_shows_placeholder():
    assert render_document(None) == NO_CONTENT_HTML
    assert render_document({}) == NO_CONTENT_HTML
    assert render_document("just a string") == NO_CONTENT_HTML


def test_extract_text_and_read_time():
    document = doc(
        {"type": "heading", "content": [text("Big")]},
        paragraph(text("small "), text("words", {"type": "bold"})),
    )
    assert extract_text(document).split() == ["Big", "small", "words"]
    assert extract_text({"html": "<p>Hello <em>there</em></p>"}) == "Hello there"
    assert extract_text(None) == ""


def test_read_time_rounds_up_and_never_drops_below_one():
    assert calculate_read_time("") == 1
    assert calculate_read_time("word " * 200) == 1
    assert calculate_read_time("word " * 201) == 2
    assert calculate_read_time("word " * 450) == 3


def test_links_keep_safe_targets():
    for href in ["https://example.com", "http://example.com", "mailto:desk@thedividend.ng",
                 "/blog/other-post/", "#section", "//cdn.example.com/x"]:
        html = render_node(text("go", {"type": "link", "attrs": {"href": href}}))
        assert html.startswith("<a href="), href


def test_links_with_script_schemes_keep_only_text():
    for href in ["javascript:alert(1)", " JavaScript:alert(1)", "java\tscript:alert(1)",
                 "java\nscript:alert(1)", "data:text/html;base64,PHNjcmlwdD4=", "vbscript:msgbox(1)"]:
        node = text("click", {"type": "bold"}, {"type": "link", "attrs": {"href": href}})
        assert render_node(node) == "<strong>click</strong>", href
