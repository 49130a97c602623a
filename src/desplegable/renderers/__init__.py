"""Renderers for the token stream."""

from desplegable.renderers.html import HtmlRenderer, html_escape

__all__ = ["HtmlRenderer", "html_escape"]
