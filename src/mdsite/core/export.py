"""Export: RSS feed, JSON content index, and page file writing"""

from datetime import date, datetime, timezone
from email.utils import format_datetime
from pathlib import Path

from mdsite.config import Settings
from mdsite.core.models import ContentIndex, ContentItem
from mdsite.core.utils.escape import escape_html


def parse_date(value: str) -> datetime:
    """Parse an ISO date or datetime string as UTC; unparseable values sort oldest."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(value[:10]), datetime.min.time())
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc) if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def latest_articles(items: list[ContentItem], limit: int | None = None) -> list[ContentItem]:
    """Articles sorted by date descending, optionally truncated to limit."""
    articles = sorted((i for i in items if i.kind == 'article'), key=lambda i: parse_date(i.date), reverse=True)
    return articles[:limit] if limit else articles


def build_rss(items: list[ContentItem], settings: Settings, now: datetime | None = None) -> str:
    """Return an RSS 2.0 document for the latest settings.rss_limit articles."""
    now = now or datetime.now(timezone.utc)
    site = settings.site_url.rstrip('/')
    entries = []
    for item in latest_articles(items, settings.rss_limit):
        link = f"{site}/posts/{item.slug}/"
        categories = ''.join(f"\n      <category>{escape_html(t)}</category>" for t in item.tags)
        entries.append(f"""
    <item>
      <title>{escape_html(item.title)}</title>
      <link>{link}</link>
      <guid isPermaLink="true">{link}</guid>
      <pubDate>{format_datetime(parse_date(item.date), usegmt=True)}</pubDate>
      <description>{escape_html(item.summary)}</description>{categories}
    </item>""")
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{escape_html(settings.site_title)}</title>
    <link>{site}</link>
    <description>{escape_html(settings.site_description)}</description>
    <language>{settings.language}</language>
    <lastBuildDate>{format_datetime(now, usegmt=True)}</lastBuildDate>
    <atom:link href="{site}/feed.xml" rel="self" type="application/rss+xml"/>{''.join(entries)}
  </channel>
</rss>
"""


def build_content_index(items: list[ContentItem]) -> str:
    """Serialize items as the camelCase JSON consumed by the site's browser script."""
    return ContentIndex(items=items).model_dump_json(by_alias=True, indent=2)


def write_file(path: Path, content: str) -> Path:
    """Write content as UTF-8, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


def write_rss(items: list[ContentItem], settings: Settings) -> Path:
    return write_file(Path(settings.output_dir) / 'feed.xml', build_rss(items, settings))


def write_content_index(items: list[ContentItem], settings: Settings) -> Path:
    return write_file(Path(settings.output_dir) / 'data' / 'content.json', build_content_index(items))
