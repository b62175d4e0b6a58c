"""Unit tests for core/parse.py"""

from mdsite.core.models import ParsedDoc
from mdsite.core.parse import discover_files, parse_file


def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.md"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    """discover_files ignores non-.md files."""
    (tmp_path / "notes.txt").write_text("text")
    (tmp_path / "page.mdx").write_text("text")
    assert discover_files(tmp_path) == []


def test_discover_files_dir_sorted_recursive(tmp_path):
    """discover_files finds .md files recursively in sorted order."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "a"
    sub.mkdir()
    (sub / "c.md").write_text("c")
    assert discover_files(tmp_path) == [sub / "c.md", tmp_path / "b.md"]


def test_discover_files_skips_workspace_notes(tmp_path):
    """CLAUDE.md workspace files are not content."""
    (tmp_path / "CLAUDE.md").write_text("notes")
    (tmp_path / "post.md").write_text("post")
    assert discover_files(tmp_path) == [tmp_path / "post.md"]


def test_discover_files_missing_dir(tmp_path):
    assert discover_files(tmp_path / "missing") == []


def test_parse_file_with_frontmatter(tmp_path, sample_fm_md):
    f = tmp_path / "doc.md"
    f.write_text(sample_fm_md, encoding="utf-8")
    doc = parse_file(f)
    assert isinstance(doc, ParsedDoc)
    assert doc.frontmatter["title"] == "Test Doc"
    assert doc.frontmatter["tags"] == ["a", "b"]
    assert doc.body.startswith("\n# Title")
    assert doc.raw == sample_fm_md


def test_parse_file_no_frontmatter(tmp_path):
    f = tmp_path / "plain.md"
    f.write_text("# Hello\n\nWorld.\n")
    doc = parse_file(f)
    assert doc.frontmatter == {}
    assert doc.body == "# Hello\n\nWorld.\n"
