"""Slug generation for heading ids, output paths and wikilinks"""

import re


MAX_SLUG_LENGTH = 80

_QUOTES_RE = re.compile(r"['\"‘’“”]")
_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')


def slugify(text: str | None) -> str:
    """Convert text to a lowercase, hyphen-separated slug of at most 80 chars; 'untitled' if empty."""
    text = (text or '').lower().strip()
    text = _QUOTES_RE.sub('', text)
    text = _NON_ALNUM_RE.sub('-', text).strip('-')
    return text[:MAX_SLUG_LENGTH].rstrip('-') or 'untitled'


def wikilink_slug(text: str) -> str:
    """Looser slug used for [[wikilink]] targets; keeps underscores and non-ascii word chars."""
    text = text.lower().strip()
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'[^\w-]', '', text)
    return re.sub(r'-+', '-', text)
