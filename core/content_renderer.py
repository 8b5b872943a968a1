"""
Rendering of editor documents into HTML.

Articles store the block editor's document tree as JSON:

    {"type": "doc", "content": [
        {"type": "heading", "attrs": {"level": 2},
         "content": [{"type": "text", "text": "Title"}]},
        {"type": "paragraph", "content": [
            {"type": "text", "text": "Hello ", "marks": [{"type": "bold"}]},
        ]},
    ]}

``render_document`` turns that tree back into markup. It is a pure function
of its input: no database, network or request access, and the same tree
always renders to the same string.

Conventions:

* Nodes are dispatched on their ``type`` through ``NODE_RENDERERS``. Unknown
  types keep their children inside a ``<div>``; unknown leaves render empty.
* Marks on a text node are applied in list order, each one wrapping the
  previous result, so the first mark is the innermost tag.
* Malformed nodes render as an empty string instead of raising.
* Links keep only http, https, mailto and relative targets; any other
  scheme (``javascript:``, ``data:``) drops the link and keeps its text.
* Text and attribute values are escaped. The legacy ``{"html": "..."}``
  wrapper is emitted verbatim and is NOT sanitised.
"""
import math
import logging
from urllib.parse import urlsplit

from django.utils.html import escape, strip_tags
from django.utils.safestring import mark_safe

logger = logging.getLogger(__name__)

NO_CONTENT_HTML = '<p class="text-muted-foreground">No content available.</p>'

DEFAULT_HEADING_LEVEL = 2
FALLBACK_HEADING_LEVEL = 6

WORDS_PER_MINUTE = 200

SAFE_LINK_SCHEMES = {'http', 'https', 'mailto'}

# Simple marks map straight onto an inline tag
MARK_TAGS = {
    'bold': 'strong',
    'italic': 'em',
    'underline': 'u',
    'strike': 's',
    'code': 'code',
}

# Container nodes map straight onto a block tag
BLOCK_TAGS = {
    'paragraph': 'p',
    'blockquote': 'blockquote',
    'bulletList': 'ul',
    'orderedList': 'ol',
    'listItem': 'li',
}


def render_document(document):
    """
    Render a stored article body.

    Accepts a document tree, a legacy ``{"html": ...}`` wrapper, or nothing.
    Returns a ``SafeString`` ready for a template.
    """
    if isinstance(document, dict) and isinstance(document.get('html'), str):
        # Legacy bodies were saved as pre-rendered HTML
        return mark_safe(document['html'])

    if not isinstance(document, dict) or not document.get('type'):
        return mark_safe(NO_CONTENT_HTML)

    return mark_safe(f'<div class="article-content">{render_children(document)}</div>')


def render_children(node):
    """Render the ``content`` list of ``node`` in order."""
    children = node.get('content')
    if not isinstance(children, list):
        return ''
    return ''.join(render_node(child) for child in children)


def render_node(node):
    """Render a single node of the tree."""
    if not isinstance(node, dict):
        logger.debug(f"Skipping malformed document node: {node!r}")
        return ''
    renderer = NODE_RENDERERS.get(node.get('type'), _render_unknown)
    return renderer(node)


def heading_level(node):
    """
    Heading level for ``node``.
    Missing level means 2; anything other than an int in 1..6 means 6.
    """
    attrs = node.get('attrs')
    level = attrs.get('level') if isinstance(attrs, dict) else None
    if level is None:
        return DEFAULT_HEADING_LEVEL
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
        return FALLBACK_HEADING_LEVEL
    return level


def is_safe_href(href):
    """
    True for http, https and mailto URLs and for relative references.
    Browsers ignore whitespace and control characters inside a scheme,
    so they are removed before parsing.
    """
    cleaned = ''.join(ch for ch in href if ch > ' ' and ch != '\x7f')
    try:
        scheme = urlsplit(cleaned).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in SAFE_LINK_SCHEMES


def apply_mark(mark, html):
    """Wrap already-rendered ``html`` in the tag for ``mark``."""
    if not isinstance(mark, dict):
        return html

    mark_type = mark.get('type')
    tag = MARK_TAGS.get(mark_type)
    if tag:
        return f'<{tag}>{html}</{tag}>'

    if mark_type == 'link':
        attrs = mark.get('attrs')
        href = attrs.get('href') if isinstance(attrs, dict) else None
        if not isinstance(href, str) or not is_safe_href(href):
            return html
        return (
            f'<a href="{escape(href)}" target="_blank" rel="noopener noreferrer">'
            f'{html}</a>'
        )

    return html


def _render_block(node):
    tag = BLOCK_TAGS[node['type']]
    return f'<{tag}>{render_children(node)}</{tag}>'


def _render_heading(node):
    level = heading_level(node)
    return f'<h{level}>{render_children(node)}</h{level}>'


def _render_text(node):
    text = node.get('text')
    if not isinstance(text, str):
        return ''
    html = escape(text)
    marks = node.get('marks')
    if isinstance(marks, list):
        for mark in marks:
            html = apply_mark(mark, html)
    return html


def _render_image(node):
    attrs = node.get('attrs')
    if not isinstance(attrs, dict):
        attrs = {}
    alt = attrs.get('alt') if isinstance(attrs.get('alt'), str) else ''
    src = attrs.get('src')
    if not isinstance(src, str) or not src:
        return f'<img alt="{escape(alt)}">'
    return f'<img src="{escape(src)}" alt="{escape(alt)}">'


def _render_horizontal_rule(node):
    return '<hr>'


def _render_hard_break(node):
    return '<br>'


def _render_code_block(node):
    return f'<pre><code>{render_children(node)}</code></pre>'


def _render_unknown(node):
    if not isinstance(node.get('content'), list):
        return ''
    return f'<div>{render_children(node)}</div>'


NODE_RENDERERS = {
    'paragraph': _render_block,
    'blockquote': _render_block,
    'bulletList': _render_block,
    'orderedList': _render_block,
    'listItem': _render_block,
    'heading': _render_heading,
    'text': _render_text,
    'image': _render_image,
    'horizontalRule': _render_horizontal_rule,
    'hardBreak': _render_hard_break,
    'codeBlock': _render_code_block,
}


def extract_text(document):
    """
    Plain text of a stored article body, used for read-time estimates
    and excerpts.
    """
    if isinstance(document, dict) and isinstance(document.get('html'), str):
        return strip_tags(document['html'])
    if not isinstance(document, dict):
        return ''
    return _extract_from_nodes(document.get('content'))


def _extract_from_nodes(nodes):
    if not isinstance(nodes, list):
        return ''
    parts = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if node.get('type') == 'text':
            text = node.get('text')
            parts.append(text if isinstance(text, str) else '')
        else:
            parts.append(_extract_from_nodes(node.get('content')))
    return ' '.join(parts)


def calculate_read_time(text):
    """Estimate reading time in minutes (never less than one)."""
    word_count = len((text or '').split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))
