"""HTML page templates: shared shell, article, post list, tags, galleries, home, about and newsletter"""

from collections import Counter

from mdsite.config import Settings
from mdsite.core.models import ContentItem
from mdsite.core.toc import generate_toc
from mdsite.core.utils.escape import escape_html, strip_tags
from mdsite.core.utils.slug import slugify


SECURITY_HEADERS = """\
  <meta http-equiv="Content-Security-Policy" content="default-src 'self'; script-src 'self' 'unsafe-inline'; \
style-src 'self' 'unsafe-inline'; img-src 'self' https: data: blob:; media-src 'self' https: blob:; \
object-src 'none'; frame-ancestors 'none'; base-uri 'self';">
  <meta http-equiv="X-Content-Type-Options" content="nosniff">
  <meta name="referrer" content="strict-origin-when-cross-origin">"""

NAV_LINKS = (
    ('posts', 'Posts'),
    ('tags', 'Tags'),
    ('images', 'Images'),
    ('videos', 'Videos'),
    ('music', 'Music'),
    ('about', 'About'),
    ('subscribe', 'Newsletter'),
)

GALLERY_DIRS = {'image': 'images', 'video': 'videos', 'music': 'music'}

KIND_FILTERS = (
    ('article', 'Articles'),
    ('image', 'Images'),
    ('video', 'Videos'),
    ('music', 'Music'),
)

FILTER_SCRIPT = """\
  <script>
    const filters = document.querySelectorAll('.content-filters input[type="checkbox"]');
    const cards = document.querySelectorAll('.content-card');
    function applyFilters() {
      const active = Array.from(filters).filter(cb => cb.checked).map(cb => cb.value);
      cards.forEach(card => {
        const show = active.length === 0 || active.includes(card.getAttribute('data-kind'));
        card.style.display = show ? '' : 'none';
      });
    }
    filters.forEach(cb => cb.addEventListener('change', applyFilters));
  </script>"""

THEME_SCRIPT = """\
  <script>
    const root = document.documentElement;
    root.setAttribute('data-theme', localStorage.getItem('theme') || 'dark');
    document.querySelector('.theme-toggle').addEventListener('click', () => {
      const next = root.getAttribute('data-theme') === 'dark' ? 'light' : 'dark';
      root.setAttribute('data-theme', next);
      localStorage.setItem('theme', next);
    });
  </script>"""


def description_from_html(html: str, limit: int = 160) -> str:
    """Plain-text excerpt of rendered content for <meta name="description">."""
    text = ' '.join(strip_tags(html).split())
    return text if len(text) <= limit else text[:limit] + '...'


def page(title: str, body: str, settings: Settings, description: str = '', og_type: str = 'website') -> str:
    """Wrap body in the site shell (head, header nav, theme toggle)."""
    base = settings.base_path
    full_title = f"{title} - {settings.site_title}" if title != settings.site_title else title
    nav = '\n'.join(f'        <a href="{base}/{path}/">{label}</a>' for path, label in NAV_LINKS)
    return f"""<!doctype html>
<html lang="{settings.language}" data-theme="dark">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
{SECURITY_HEADERS}
  <title>{escape_html(full_title)}</title>
  <meta name="description" content="{escape_html(description or settings.site_description)}" />
  <meta name="author" content="{escape_html(settings.author)}" />
  <meta property="og:title" content="{escape_html(title)}" />
  <meta property="og:type" content="{og_type}" />
  <link rel="stylesheet" href="{base}/styles.css" />
  <link rel="alternate" type="application/rss+xml" title="{escape_html(settings.site_title)}" href="{base}/feed.xml" />
</head>
<body>
  <header class="site-header">
    <div class="header-content">
      <a href="{base}/" class="site-logo">{escape_html(settings.site_title)}</a>
      <nav class="site-nav">
{nav}
        <button class="theme-toggle" aria-label="Toggle theme"></button>
      </nav>
    </div>
  </header>
{body}
{THEME_SCRIPT}
</body>
</html>
"""


def _tag_links(tags: list[str], settings: Settings) -> str:
    if not tags:
        return ''
    links = ''.join(
        f'<a href="{settings.base_path}/tags/#{slugify(t)}" class="tag">{escape_html(t)}</a>' for t in tags
    )
    return f'<div class="post-tags">{links}</div>'


def _post_entry(item: ContentItem, settings: Settings) -> str:
    summary = f'<p class="post-summary">{escape_html(item.summary)}</p>' if item.summary else ''
    return f"""    <article class="post-card">
      <h2><a href="{settings.base_path}{item.local_path or ''}">{escape_html(item.title)}</a></h2>
      <div class="post-meta"><time datetime="{escape_html(item.date)}">{escape_html(item.date)}</time>
        <span>{item.reading_time} min read</span></div>
      {summary}
    </article>"""


def article_page(item: ContentItem, settings: Settings) -> str:
    """Full article page: title, meta line, tags, TOC sidebar, and rendered content."""
    toc = generate_toc(item.headings)
    sidebar = f'  <aside class="sidebar"><div class="toc-wrapper">\n{toc}\n  </div></aside>\n' if toc else ''
    author = f'<span class="post-author">{escape_html(settings.author)}</span>' if settings.author else ''
    body = f"""  <div class="page-container">
{sidebar}    <main class="post-main">
      <article class="post">
        <header class="post-header">
          <h1 class="post-title">{escape_html(item.title)}</h1>
          <div class="post-meta">{author}
            <time datetime="{escape_html(item.date)}">{escape_html(item.date)}</time>
            <span class="reading-time">{item.reading_time} min read</span>
          </div>
          {_tag_links(item.tags, settings)}
        </header>
        <div class="post-content">
{item.content_html}
        </div>
      </article>
    </main>
  </div>"""
    return page(item.title, body, settings, description_from_html(item.content_html), og_type='article')


def posts_page(articles: list[ContentItem], settings: Settings) -> str:
    """List of articles, newest first (caller sorts)."""
    entries = '\n'.join(_post_entry(a, settings) for a in articles)
    empty = '' if articles else '    <p class="empty-message">No posts yet.</p>'
    body = f'  <main class="page-main">\n    <h1>Posts</h1>\n{entries}{empty}\n  </main>'
    return page('Posts', body, settings)


def tags_page(articles: list[ContentItem], settings: Settings) -> str:
    """Tag cloud ordered by count, then one section per tag listing its articles."""
    counts = Counter(tag for a in articles for tag in a.tags)
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    cloud = ''.join(
        f'<a href="#{slugify(tag)}" class="tag">{escape_html(tag)} <span class="count">{n}</span></a>'
        for tag, n in ordered
    )
    sections = []
    for tag, _ in ordered:
        posts = '\n'.join(_post_entry(a, settings) for a in articles if tag in a.tags)
        sections.append(f'    <section id="{slugify(tag)}" class="tag-section">\n'
                        f'      <h2>{escape_html(tag)}</h2>\n{posts}\n    </section>')
    empty = '' if ordered else '    <p class="empty-message">No tags yet.</p>'
    body = (f'  <main class="page-main">\n    <h1>Tags</h1>\n    <div class="tag-cloud">{cloud}</div>\n'
            + '\n'.join(sections) + f'{empty}\n  </main>')
    return page('Tags', body, settings)


def gallery_page(items: list[ContentItem], kind: str, settings: Settings) -> str:
    """Grid of image, video, or music items."""
    heading = GALLERY_DIRS[kind].capitalize()
    cards = []
    for item in items:
        thumb = (f'<img src="{escape_html(item.thumbnail_url)}" alt="{escape_html(item.title)}" loading="lazy" />'
                 if item.thumbnail_url else '')
        cards.append(f'    <a class="gallery-item gallery-{kind}" href="{escape_html(item.drive_url or "#")}">'
                     f'{thumb}<span class="gallery-title">{escape_html(item.title)}</span></a>')
    empty = '' if items else f'    <p class="empty-message">No {GALLERY_DIRS[kind]} yet.</p>'
    body = (f'  <main class="page-main">\n    <h1>{heading}</h1>\n    <div class="gallery-grid">\n'
            + '\n'.join(cards) + f'\n    </div>\n{empty}\n  </main>')
    return page(heading, body, settings)


def home_page(items: list[ContentItem], settings: Settings) -> str:
    """All items as cards with a kind badge and kind filter checkboxes.

    Articles link to their page, media to the file. Unchecking a kind hides
    its cards client-side; with nothing checked every card is shown.
    """
    filters = '\n'.join(
        f'      <label class="filter-label"><input type="checkbox" value="{kind}" checked> {label}</label>'
        for kind, label in KIND_FILTERS
    )
    cards = []
    for item in items:
        href = f"{settings.base_path}{item.local_path}" if item.local_path else (item.drive_url or '#')
        cards.append(
            f'    <a class="content-card" data-kind="{escape_html(item.kind)}" href="{escape_html(href)}">'
            f'<span class="content-kind-badge">{escape_html(item.kind)}</span>'
            f'<h3>{escape_html(item.title)}</h3>'
            f'<p>{escape_html(item.summary)}</p></a>'
        )
    body = (f'  <main class="page-main">\n    <h1>{escape_html(settings.site_title)}</h1>\n'
            f'    <div class="content-filters">\n{filters}\n    </div>\n'
            f'    <div class="content-grid" id="contentGrid">\n' + '\n'.join(cards) + '\n    </div>\n  </main>\n'
            + FILTER_SCRIPT)
    return page(settings.site_title, body, settings, settings.site_description)


def about_page(settings: Settings) -> str:
    """Static about page; about_text paragraphs are split on blank lines and escaped."""
    paragraphs = [p.strip() for p in settings.about_text.split('\n\n') if p.strip()]
    if not paragraphs:
        paragraphs = [f"{settings.site_title} is written by {settings.author or 'its author'}."]
    text = '\n'.join(f'        <p>{escape_html(p)}</p>' for p in paragraphs)
    body = (f'  <main class="page-main">\n    <article class="about-content">\n'
            f'      <h1 class="page-title">About</h1>\n      <div class="about-body">\n{text}\n'
            f'      </div>\n    </article>\n  </main>')
    return page('About', body, settings)


def subscribe_page(settings: Settings) -> str:
    """Newsletter signup form (when newsletter_url is set) plus the RSS feed link."""
    form = ''
    if settings.newsletter_url:
        form = (f'      <form action="{escape_html(settings.newsletter_url)}" method="post" class="newsletter-form">\n'
                f'        <div class="form-row">\n'
                f'          <input type="email" name="email" placeholder="your@email.com" required />\n'
                f'          <button type="submit">Subscribe</button>\n'
                f'        </div>\n      </form>\n'
                f'      <p class="subscribe-note">No spam, unsubscribe at any time.</p>\n')
    body = (f'  <main class="page-main">\n    <div class="subscribe-content">\n'
            f'      <h1 class="page-title">Newsletter</h1>\n'
            f'      <p class="subscribe-text">Get notified when new posts are published.</p>\n'
            f'{form}'
            f'      <p class="subscribe-note"><a href="{settings.base_path}/feed.xml">RSS Feed</a></p>\n'
            f'    </div>\n  </main>')
    return page('Newsletter', body, settings)
