"""
Markdown converter
Converts Markdown to sanitized HTML
"""

import markdown
from bleach.css_sanitizer import CSSSanitizer
from bleach.sanitizer import Cleaner

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]

ALLOWED_TAGS = frozenset({
    "a", "abbr", "b", "blockquote", "br", "code", "dd", "del", "div", "dl",
    "dt", "em", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins",
    "kbd", "li", "ol", "p", "pre", "s", "span", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title"],
    "abbr": ["title"],
    "img": ["src", "alt", "title", "width", "height"],
    "code": ["class"],
    "ol": ["start"],
    "th": ["align", "style"],
    "td": ["align", "style"],
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

# tables extension writes alignment as inline style
ALLOWED_CSS_PROPERTIES = frozenset({"text-align"})


class MarkdownConverter:
    """Markdown converter"""

    def __init__(self, extensions: list[str] | None = None):
        self._extensions = list(extensions or MARKDOWN_EXTENSIONS)
        self._cleaner = Cleaner(
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
            css_sanitizer=CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES),
            strip=True,
            strip_comments=True,
        )

    def render_html(self, markdown_text: str) -> str:
        """Convert Markdown to an HTML fragment with unsafe markup removed"""
        html_body = markdown.markdown(markdown_text, extensions=self._extensions)
        return self.sanitize(html_body)

    def sanitize(self, html: str) -> str:
        """Strip disallowed tags, attributes and URL schemes"""
        return self._cleaner.clean(html)
