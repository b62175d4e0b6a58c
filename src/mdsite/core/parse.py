"""Content discovery and per-file frontmatter splitting"""

from pathlib import Path

from mdsite.core.frontmatter import split_frontmatter
from mdsite.core.models import ParsedDoc


MD_EXTENSIONS = {'.md'}
SKIP_MARKER = 'CLAUDE.MD'


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md files under path, or [path] if a single file. Workspace notes are skipped."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(
        p for p in path.rglob('*')
        if p.is_file() and p.suffix in MD_EXTENSIONS and SKIP_MARKER not in p.name.upper()
    )


def parse_file(path: Path) -> ParsedDoc:
    """Read a markdown file and split it into frontmatter and body."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = split_frontmatter(raw)
    return ParsedDoc(path=path, raw=raw, body=body, frontmatter=frontmatter)
