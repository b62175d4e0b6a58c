"""Unit tests for core/pipeline.py"""

import json
from datetime import date
from pathlib import Path

import pytest

from mdsite.core.models import ParsedDoc
from mdsite.core.pipeline import build_item, run_build, write_sample_content


@pytest.fixture(name="content_dir")
def content_dir_fixture(settings):
    path = Path(settings.content_dir)
    path.mkdir(parents=True)
    return path


def _parsed(frontmatter: dict, body: str = "", name: str = "my-post.md") -> ParsedDoc:
    return ParsedDoc(path=Path(name), raw=body, body=body, frontmatter=frontmatter)


# --- build_item ---

def test_build_item_unpublished_is_skipped(settings):
    assert build_item(_parsed({"publish": False}), settings) is None


def test_build_item_defaults(settings):
    """Title falls back to the file stem, kind to article, date to today."""
    item = build_item(_parsed({}, "# Hi\n\nSome words here"), settings, today=date(2026, 2, 3))
    assert item.title == "my-post"
    assert item.slug == "my-post"
    assert item.kind == "article"
    assert item.date == "2026-02-03"
    assert item.tags == []
    assert item.reading_time == 1
    assert item.headings[0].id == "hi"
    assert '<h2 id="hi">' in item.content_html


def test_build_item_frontmatter_fields(settings):
    item = build_item(_parsed({
        "title": "Hello World", "kind": "Article", "date": "2026-01-01",
        "tags": ["a", "b"], "summary": "Sum",
    }), settings)
    assert item.slug == "hello-world"
    assert item.kind == "article"
    assert item.date == item.updated_time == "2026-01-01"
    assert item.tags == ["a", "b"]
    assert item.summary == "Sum"


def test_build_item_non_list_tags_ignored(settings):
    assert build_item(_parsed({"tags": "solo"}), settings).tags == []


def test_build_item_empty_tags_dropped(settings):
    assert build_item(_parsed({"tags": ["a", "", "b"]}), settings).tags == ["a", "b"]


def test_build_item_wikilinks_use_base_path(settings):
    item = build_item(_parsed({}, "See [[Other Post]]"), settings)
    assert 'href="/blog/posts/other-post/"' in item.content_html


def test_build_item_non_article_not_rendered(settings):
    item = build_item(_parsed({"kind": "video"}, "# Not rendered"), settings)
    assert item.content_html == ""
    assert item.headings == []


def test_build_item_copies_image(settings, content_dir):
    (content_dir / "pic.jpg").write_bytes(b"jpg")
    item = build_item(_parsed({"title": "Pic", "kind": "image", "image": "pic.jpg"}), settings)
    assert item.thumbnail_url == "/blog/media/pic.jpg"
    assert item.drive_url == "/blog/media/pic.jpg"


def test_build_item_missing_deployed_media(settings):
    item = build_item(_parsed({"title": "Clip", "kind": "video", "url": "/blog/media/none.mp4"}), settings)
    assert item.drive_url == ""
    assert item.thumbnail_url == ""


# --- run_build ---

def test_run_build_writes_site(settings, content_dir):
    (content_dir / "post.md").write_text(
        "---\ntitle: First Post\ndate: 2026-01-01\ntags: [intro]\n---\n# Hello\n\nWorld\n", encoding="utf-8"
    )
    (content_dir / "draft.md").write_text("---\ntitle: Draft\npublish: false\n---\nhidden\n", encoding="utf-8")
    result = run_build(settings)
    out = Path(settings.output_dir)

    assert [i.title for i in result.items] == ["First Post"]
    assert result.failures == []
    for rel in ("index.html", "posts/index.html", "tags/index.html", "images/index.html",
                "videos/index.html", "music/index.html", "about/index.html", "subscribe/index.html",
                "feed.xml", "data/content.json",
                "posts/first-post/index.html"):
        assert (out / rel).exists(), rel
        assert out / rel in result.written
    assert not (out / "posts" / "draft").exists()

    page = (out / "posts" / "first-post" / "index.html").read_text(encoding="utf-8")
    assert '<h2 id="hello">' in page
    index = json.loads((out / "data" / "content.json").read_text(encoding="utf-8"))
    assert index["items"][0]["localPath"] == "/posts/first-post/"


def test_run_build_continues_past_bad_file(settings, content_dir):
    """A document that cannot be decoded is recorded as a failure; the rest still build."""
    (content_dir / "bad.md").write_bytes(b"\xff\xfe\x00 not utf-8")
    (content_dir / "good.md").write_text("# Good\n", encoding="utf-8")
    result = run_build(settings)
    assert [i.title for i in result.items] == ["good"]
    assert len(result.failures) == 1
    assert result.failures[0][0].name == "bad.md"
    assert (Path(settings.output_dir) / "posts" / "good" / "index.html").exists()


def test_run_build_empty_content(settings, content_dir):
    result = run_build(settings)
    assert result.items == []
    assert (Path(settings.output_dir) / "feed.xml").exists()


# --- write_sample_content ---

def test_write_sample_content(tmp_path):
    path = write_sample_content(tmp_path / "content")
    assert path.name == "welcome.md"
    assert path.read_text(encoding="utf-8").startswith("---\ntitle: Welcome")


def test_write_sample_content_refuses_overwrite(tmp_path):
    write_sample_content(tmp_path / "content")
    with pytest.raises(FileExistsError):
        write_sample_content(tmp_path / "content")
