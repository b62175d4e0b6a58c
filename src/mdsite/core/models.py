"""Data models for parsed documents, content items, and the JSON content index"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


KINDS = ('article', 'image', 'video', 'music')


class Heading(BaseModel):
    """One table-of-contents entry taken from a rendered <h2>/<h3>/<h4>."""
    level: Literal[2, 3, 4]
    id: str
    text: str


class ContentItem(BaseModel):
    """A published content item; serialized with camelCase keys for the browser script."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    slug: str
    kind: str = 'article'
    summary: str = ''
    tags: list[str] = Field(default_factory=list)
    thumbnail_url: str = ''
    drive_url: str = ''
    content_html: str = ''
    headings: list[Heading] = Field(default_factory=list)
    reading_time: int = 1
    date: str
    updated_time: str
    local_path: str | None = None


class ContentIndex(BaseModel):
    """Public contract of data/content.json."""
    items: list[ContentItem] = Field(default_factory=list)


@dataclass
class ParsedDoc:
    """A source file split into frontmatter and body; not persisted."""
    path:        Path
    raw:         str               # full file content (includes frontmatter)
    body:        str               # markdown with frontmatter removed
    frontmatter: dict[str, Any]


@dataclass
class BuildResult:
    """Outcome of one site build."""
    items:    list[ContentItem] = field(default_factory=list)
    written:  list[Path] = field(default_factory=list)
    failures: list[tuple[Path, str]] = field(default_factory=list)
