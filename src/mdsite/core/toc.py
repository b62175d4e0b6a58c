"""Heading extraction, table-of-contents markup, and reading-time estimate"""

import math
import re

from mdsite.core.models import Heading
from mdsite.core.utils.escape import escape_html, strip_tags


HEADING_HTML_RE = re.compile(r'<h([234]) id="([^"]+)">(.*?)</h\1>')
MARKER_RE = re.compile(r'<span class="hash">.*?</span>')


def extract_headings(html: str) -> list[Heading]:
    """Return h2-h4 headings in document order with marker span and nested tags removed."""
    return [
        Heading(level=int(m.group(1)), id=m.group(2), text=strip_tags(MARKER_RE.sub('', m.group(3))).strip())
        for m in HEADING_HTML_RE.finditer(html)
    ]


def generate_toc(headings: list[Heading]) -> str:
    """Render a contents <nav>, one <li class="toc-N"> per heading; '' when there are none."""
    if not headings:
        return ''
    entries = ''.join(
        f'<li class="toc-{h.level}"><a href="#{h.id}">{escape_html(h.text)}</a></li>'
        for h in headings
    )
    return f'<nav class="toc">\n  <h4>Contents</h4>\n  <ul>{entries}</ul>\n</nav>'


def reading_time(body: str, words_per_minute: int = 200) -> int:
    """Minutes to read body: whitespace-separated words / wpm, rounded up, at least 1."""
    return max(1, math.ceil(len(body.split()) / words_per_minute))
