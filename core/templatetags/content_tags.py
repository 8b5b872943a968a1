from django import template

from ..content_renderer import render_document

register = template.Library()


@register.filter
def render_content(document):
    """Render an article's stored document tree: ``{{ article.content|render_content }}``."""
    return render_document(document)
