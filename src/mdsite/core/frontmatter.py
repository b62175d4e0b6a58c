"""Frontmatter splitting and restricted YAML-like field coercion"""

import re
from typing import Any


FRONTMATTER_RE = re.compile(r'^---\r?\n(?:(.*?)\r?\n)?---(?:\r?\n|$)(.*)$', re.DOTALL)


def _unquote(value: str) -> str:
    """Strip one layer of matching single or double quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def coerce_value(value: str) -> Any:
    """Coerce a trimmed right-hand side into a list, bool, or string."""
    if value.startswith('[') and value.endswith(']'):
        inner = value[1:-1]
        if not inner.strip():
            return []
        return [re.sub(r'^["\']|["\']$', '', v.strip()) for v in inner.split(',')]
    if value in ('true', 'false'):
        return value == 'true'
    return _unquote(value)


def parse_fields(header: str) -> dict[str, Any]:
    """Parse 'key: value' lines; lines without ':' are skipped and the last duplicate key wins."""
    fields: dict[str, Any] = {}
    for line in header.splitlines():
        key, sep, value = line.partition(':')
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = coerce_value(value.strip())
    return fields


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter, body). Without a closed '---' header the whole text is the body."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    return parse_fields(m.group(1) or ''), m.group(2)
