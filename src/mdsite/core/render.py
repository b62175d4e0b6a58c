"""Markdown to HTML rendering as an ordered pipeline of whole-document string passes.

Each pass is a pure str -> str function that assumes the output of the
previous one. Fenced code is swapped out for placeholder tokens before any
other pass runs and swapped back in at the end, so code content is never
reinterpreted as Markdown.

Pass order:
  1. extract_code_blocks
  2. convert_tables
  3. convert_headings
  4. convert_callouts      (must precede blockquotes)
  5. convert_blockquotes
  6. convert_rules
  7. group_lists
  8. apply_inline          (images, links, emphasis, code, del, mark, wikilinks)
  9. wrap_paragraphs
 10. restore_code_blocks
 11. cleanup
"""

import re

from mdsite.core.utils.escape import escape_html
from mdsite.core.utils.slug import slugify, wikilink_slug


PLACEHOLDER_PREFIX = 'CODEBLOCKPLACEHOLDER'
PLACEHOLDER_SUFFIX = 'ENDCODEBLOCK'

CALLOUT_KINDS = ('NOTE', 'TIP', 'WARNING', 'IMPORTANT')

FENCE_RE = re.compile(r'```([\w+#.-]*)\n(.*?)```', re.DOTALL)
TABLE_RE = re.compile(r'^\|(.+)\|\n\|[-:| ]+\|\n((?:\|.+\|(?:\n|$))+)', re.MULTILINE)
HEADING_RE = re.compile(r'^(#{1,3}) (.+)$', re.MULTILINE)
CALLOUT_RE = re.compile(r'^> \[!(\w+)\][ \t]*(.*)$')
BLOCKQUOTE_RE = re.compile(r'^> (.+)$', re.MULTILINE)
RULE_RE = re.compile(r'^(?:---|\*\*\*)$', re.MULTILINE)
UL_ITEM_RE = re.compile(r'^[-*] (.+)$')
OL_ITEM_RE = re.compile(r'^\d+\. (.+)$')

IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(([^)]+)\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
WIKILINK_RE = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')

# (pattern, replacement) applied in order; underscore forms require non-word
# boundaries so snake_case identifiers and file names are left alone.
EMPHASIS_RULES = (
    (re.compile(r'\*\*\*(.+?)\*\*\*'), r'<strong><em>\1</em></strong>'),
    (re.compile(r'(?<!\w)___(.+?)___(?!\w)'), r'<strong><em>\1</em></strong>'),
    (re.compile(r'\*\*(.+?)\*\*'), r'<strong>\1</strong>'),
    (re.compile(r'(?<!\w)__(.+?)__(?!\w)'), r'<strong>\1</strong>'),
    (re.compile(r'\*([^*\n]+)\*'), r'<em>\1</em>'),
    (re.compile(r'(?<!\w)_([^_\n]+)_(?!\w)'), r'<em>\1</em>'),
)
INLINE_CODE_RE = re.compile(r'`([^`\n]+)`')
STRIKE_RE = re.compile(r'~~(.+?)~~')
HIGHLIGHT_RE = re.compile(r'==(.+?)==')

# A <p> is unwrapped only when it encloses exactly one of these block elements.
_BLOCK_TAGS = r'h[234]|table|ul|ol|li|blockquote|figure|pre|div'
_P_WRAPPED_BLOCK_RE = re.compile(rf'<p>(<({_BLOCK_TAGS})\b.*?</\2>|<hr />)</p>')
_EMPTY_P_RE = re.compile(r'<p>\s*</p>')


def placeholder(index: int) -> str:
    """Return the placeholder token for the code block at index."""
    return f'{PLACEHOLDER_PREFIX}{index}{PLACEHOLDER_SUFFIX}'


def extract_code_blocks(text: str) -> tuple[str, list[str]]:
    """Replace fenced code blocks with placeholder tokens.

    Returns the rewritten text and the list of rendered <pre><code> blocks,
    indexed by the number embedded in each token.
    """
    blocks: list[str] = []

    def _stash(m: re.Match) -> str:
        lang, code = m.group(1), m.group(2)
        blocks.append(
            f'<pre><code data-lang="{escape_html(lang)}">{escape_html(code.strip())}</code></pre>'
        )
        return placeholder(len(blocks) - 1)

    return FENCE_RE.sub(_stash, text), blocks


def _split_cells(row: str) -> list[str]:
    """Trim cells; only the empty edge cells left by the outer pipes are dropped."""
    cells = [cell.strip() for cell in row.split('|')]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def convert_tables(text: str) -> str:
    """Convert pipe tables (header, separator, one or more rows) to <table> markup."""

    def _table(m: re.Match) -> str:
        headers = _split_cells(f'|{m.group(1)}|')
        rows = [_split_cells(row) for row in m.group(2).strip().split('\n')]
        parts = ['<table>', '<thead>', '<tr>' + ''.join(f'<th>{h}</th>' for h in headers) + '</tr>',
                 '</thead>', '<tbody>']
        parts.extend('<tr>' + ''.join(f'<td>{c}</td>' for c in row) + '</tr>' for row in rows)
        parts.extend(['</tbody>', '</table>'])
        trailing = '\n' if m.group(0).endswith('\n') else ''
        return '\n'.join(parts) + trailing

    return TABLE_RE.sub(_table, text)


def convert_headings(text: str) -> str:
    """Convert '#'..'###' lines to <h2>..<h4>; <h1> is reserved for the page title."""

    def _heading(m: re.Match) -> str:
        hashes, title = m.group(1), m.group(2)
        level = len(hashes) + 1
        return f'<h{level} id="{slugify(title)}"><span class="hash">{hashes}</span> {title}</h{level}>'

    return HEADING_RE.sub(_heading, text)


def _render_callout(keyword: str, title: str, body: list[str]) -> str:
    kind = keyword.lower()
    title = title or kind.capitalize()
    content = '<br />'.join(line for line in body if line.strip())
    return (
        f'<div class="callout callout-{kind}">'
        f'<p class="callout-title">{title}</p>'
        f'<div class="callout-body">{content}</div>'
        f'</div>'
    )


def convert_callouts(text: str) -> str:
    """Collapse '> [!KIND] title' blocks and their following '>' lines into one callout line.

    Unknown kinds are left untouched for the blockquote pass.
    """
    lines = text.split('\n')
    out: list[str] = []
    i = 0
    while i < len(lines):
        m = CALLOUT_RE.match(lines[i])
        if not m or m.group(1).upper() not in CALLOUT_KINDS:
            out.append(lines[i])
            i += 1
            continue
        body = []
        i += 1
        while i < len(lines) and lines[i].startswith('>'):
            body.append(re.sub(r'^> ?', '', lines[i]))
            i += 1
        out.append(_render_callout(m.group(1), m.group(2).strip(), body))
    return '\n'.join(out)


def convert_blockquotes(text: str) -> str:
    """Wrap every remaining '> ' line in its own <blockquote>."""
    return BLOCKQUOTE_RE.sub(r'<blockquote>\1</blockquote>', text)


def convert_rules(text: str) -> str:
    """Turn lines of exactly '---' or '***' into <hr />."""
    return RULE_RE.sub('<hr />', text)


def group_lists(text: str) -> str:
    """Group consecutive '- '/'* ' lines into <ul> and 'N. ' lines into <ol>. No nesting."""
    out: list[str] = []
    open_tag = None

    def _close():
        nonlocal open_tag
        if open_tag:
            out.append(f'</{open_tag}>')
            open_tag = None

    for line in text.split('\n'):
        stripped = line.strip()
        ul, ol = UL_ITEM_RE.match(stripped), OL_ITEM_RE.match(stripped)
        tag, m = ('ul', ul) if ul else ('ol', ol) if ol else (None, None)
        if tag is None:
            _close()
            out.append(line)
            continue
        if open_tag != tag:
            _close()
            out.append(f'<{tag}>')
            open_tag = tag
        out.append(f'<li>{m.group(1)}</li>')
    _close()
    return '\n'.join(out)


def resolve_wikilinks(text: str, base_path: str = '') -> str:
    """Turn [[Note]] and [[Note|Label]] into links to {base_path}/posts/<slug>/."""

    def _link(m: re.Match) -> str:
        target, label = m.group(1).strip(), m.group(2)
        href = f'{base_path}/posts/{wikilink_slug(target)}/'
        return f'<a href="{href}" class="wikilink">{(label or target).strip()}</a>'

    return WIKILINK_RE.sub(_link, text)


def apply_inline(text: str, base_path: str = '') -> str:
    """Apply inline formatting in a fixed order so later patterns skip earlier output."""
    text = IMAGE_RE.sub(
        lambda m: f'<figure><img src="{escape_html(m.group(2))}" alt="{escape_html(m.group(1))}" loading="lazy" /></figure>',
        text,
    )
    text = LINK_RE.sub(lambda m: f'<a href="{escape_html(m.group(2))}">{m.group(1)}</a>', text)
    for pattern, repl in EMPHASIS_RULES:
        text = pattern.sub(repl, text)
    text = INLINE_CODE_RE.sub(r'<code>\1</code>', text)
    text = STRIKE_RE.sub(r'<del>\1</del>', text)
    text = HIGHLIGHT_RE.sub(r'<mark>\1</mark>', text)
    return resolve_wikilinks(text, base_path)


def wrap_paragraphs(text: str) -> str:
    """Wrap plain lines in <p>; collapse runs of blank lines to one."""
    out: list[str] = []
    for line in text.split('\n'):
        stripped = line.strip()
        if not stripped:
            if out and out[-1] != '':
                out.append('')
            continue
        if stripped.startswith('<') or stripped.startswith(PLACEHOLDER_PREFIX):
            out.append(line)
        else:
            out.append(f'<p>{line}</p>')
    return '\n'.join(out).strip('\n')


def restore_code_blocks(text: str, blocks: list[str]) -> str:
    """Substitute placeholder tokens (bare or wrapped in <p>) back with their code blocks."""
    for i, block in enumerate(blocks):
        token = placeholder(i)
        text = text.replace(f'<p>{token}</p>', block).replace(token, block)
    return text


def cleanup(text: str) -> str:
    """Drop empty paragraphs and <p> wrappers around block-level elements."""
    text = _EMPTY_P_RE.sub('', text)
    return _P_WRAPPED_BLOCK_RE.sub(r'\1', text)


def render_markdown(body: str, base_path: str = '') -> str:
    """Render a Markdown body (frontmatter already removed) to an HTML fragment."""
    text = body.replace('\r\n', '\n')
    text, blocks = extract_code_blocks(text)
    text = convert_tables(text)
    text = convert_headings(text)
    text = convert_callouts(text)
    text = convert_blockquotes(text)
    text = convert_rules(text)
    text = group_lists(text)
    text = apply_inline(text, base_path)
    text = wrap_paragraphs(text)
    text = restore_code_blocks(text, blocks)
    return cleanup(text)
