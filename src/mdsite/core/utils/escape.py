"""HTML escaping and tag stripping for safe interpolation into templates"""

import re


# Ampersand first so entities produced by later replacements are not re-escaped.
_ENTITIES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#039;'),
)

_TAG_RE = re.compile(r'<[^>]+>')


def escape_html(text: str | None) -> str:
    """Replace & < > " ' with HTML entities. Not idempotent: escaping twice double-encodes."""
    text = text or ''
    for char, entity in _ENTITIES:
        text = text.replace(char, entity)
    return text


def strip_tags(html: str) -> str:
    """Remove every <...> tag, leaving text content."""
    return _TAG_RE.sub('', html)
