"""Build orchestration: read content, render articles, write pages, feed, and index"""

import logging
from datetime import date, datetime
from pathlib import Path

from mdsite.config import Settings
from mdsite.core.export import latest_articles, write_content_index, write_file, write_rss
from mdsite.core.media import MediaResult, copy_media, resolve_deployed
from mdsite.core.models import KINDS, BuildResult, ContentItem, ParsedDoc
from mdsite.core.pages import (
    GALLERY_DIRS,
    about_page,
    article_page,
    gallery_page,
    home_page,
    posts_page,
    subscribe_page,
    tags_page,
)
from mdsite.core.parse import discover_files, parse_file
from mdsite.core.render import render_markdown
from mdsite.core.toc import extract_headings, reading_time
from mdsite.core.utils.slug import slugify


log = logging.getLogger(__name__)

SAMPLE_POST = """\
---
title: Welcome
kind: article
date: 2026-01-01
tags: [welcome, intro]
summary: Welcome to the new site.
publish: true
---

# Welcome

Hello and welcome to the new site!

## What to Expect

- **Tech insights** - Latest developments in software
- **Development tips** - Things learned along the way

> [!TIP] Stay tuned
> More content is coming soon.

---

*Thanks for visiting!*
"""


def _resolve_media(parsed: ParsedDoc, title: str, kind: str, settings: Settings) -> MediaResult:
    """Copy the frontmatter 'image' and, for video/music, the 'url' media into the output dir."""
    fm = parsed.frontmatter
    content_dir = Path(settings.content_dir)
    result = MediaResult()
    if isinstance(fm.get('image'), str) and fm['image']:
        result = copy_media(content_dir / fm['image'], title, 'image', settings)

    url = fm.get('url')
    if isinstance(url, str) and url and kind in ('video', 'music'):
        if url.startswith('/'):
            deployed = resolve_deployed(url, title, kind, settings)
        else:
            deployed = copy_media(content_dir / url, title, kind, settings)
        result = MediaResult(
            media_url=deployed.media_url or result.media_url,
            thumbnail_url=deployed.thumbnail_url or result.thumbnail_url,
        )
    return result


def build_item(parsed: ParsedDoc, settings: Settings, today: date | None = None) -> ContentItem | None:
    """Turn a parsed document into a ContentItem; None when publish is false."""
    fm = parsed.frontmatter
    if fm.get('publish') is False:
        return None

    title = str(fm.get('title') or parsed.path.stem)
    kind = str(fm.get('kind') or 'article').lower()
    if kind not in KINDS:
        log.warning("%s: unknown kind '%s'", parsed.path, kind)
    media = _resolve_media(parsed, title, kind, settings)

    content_html, headings, minutes = '', [], 1
    if kind == 'article':
        content_html = render_markdown(parsed.body, settings.base_path)
        headings = extract_headings(content_html)
        minutes = reading_time(parsed.body, settings.words_per_minute)

    today = today or date.today()
    dated = str(fm['date']) if fm.get('date') else None
    return ContentItem(
        title=title,
        slug=slugify(title),
        kind=kind,
        summary=str(fm.get('summary') or ''),
        tags=[t for t in fm['tags'] if t] if isinstance(fm.get('tags'), list) else [],
        thumbnail_url=media.thumbnail_url,
        drive_url=media.media_url or media.thumbnail_url,
        content_html=content_html,
        headings=headings,
        reading_time=minutes,
        date=dated or today.isoformat(),
        updated_time=dated or datetime.now().isoformat(timespec='seconds'),
    )


def collect_items(settings: Settings, result: BuildResult) -> None:
    """Parse every content file into result.items; per-file failures are logged and recorded."""
    for path in discover_files(Path(settings.content_dir)):
        try:
            item = build_item(parse_file(path), settings)
        except (OSError, ValueError) as e:
            log.error("Failed to process %s: %s", path, e)
            result.failures.append((path, str(e)))
            continue
        if item is None:
            log.info("Skipping unpublished %s", path)
            continue
        log.info("Processing: %s (%s)", item.title, item.kind)
        result.items.append(item)


def run_build(settings: Settings) -> BuildResult:
    """Build the whole site into settings.output_dir and return what was written."""
    result = BuildResult()
    collect_items(settings, result)
    out = Path(settings.output_dir)

    for item in result.items:
        if item.kind != 'article':
            continue
        item.local_path = f"/posts/{item.slug}/"
        try:
            result.written.append(write_file(out / 'posts' / item.slug / 'index.html', article_page(item, settings)))
        except OSError as e:
            log.error("Failed to write page for %s: %s", item.slug, e)
            result.failures.append((out / 'posts' / item.slug, str(e)))

    articles = latest_articles(result.items)
    result.written.append(write_file(out / 'index.html', home_page(result.items, settings)))
    result.written.append(write_file(out / 'posts' / 'index.html', posts_page(articles, settings)))
    result.written.append(write_file(out / 'tags' / 'index.html', tags_page(articles, settings)))
    for kind, dirname in GALLERY_DIRS.items():
        kind_items = [i for i in result.items if i.kind == kind]
        result.written.append(write_file(out / dirname / 'index.html', gallery_page(kind_items, kind, settings)))
    result.written.append(write_file(out / 'about' / 'index.html', about_page(settings)))
    result.written.append(write_file(out / 'subscribe' / 'index.html', subscribe_page(settings)))
    result.written.append(write_content_index(result.items, settings))
    result.written.append(write_rss(result.items, settings))
    return result


def write_sample_content(content_dir: Path) -> Path:
    """Create content_dir with a sample welcome post. Refuses to overwrite an existing file."""
    content_dir.mkdir(parents=True, exist_ok=True)
    path = content_dir / 'welcome.md'
    if path.exists():
        raise FileExistsError(f"{path} already exists")
    path.write_text(SAMPLE_POST, encoding='utf-8')
    return path
