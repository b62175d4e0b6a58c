"""Unit tests for the individual passes in core/render.py"""

from mdsite.core.render import (
    cleanup,
    convert_blockquotes,
    convert_callouts,
    convert_headings,
    convert_rules,
    extract_code_blocks,
    group_lists,
    placeholder,
    resolve_wikilinks,
    restore_code_blocks,
    wrap_paragraphs,
)


def test_extract_code_blocks_returns_tokens_and_blocks():
    text, blocks = extract_code_blocks("a\n```js\nlet x = 1 < 2;\n```\nb")
    assert text == f"a\n{placeholder(0)}\nb"
    assert blocks == ['<pre><code data-lang="js">let x = 1 &lt; 2;</code></pre>']


def test_extract_code_blocks_state_is_per_call():
    """Numbering restarts on every call."""
    _, first = extract_code_blocks("```\na\n```")
    text, second = extract_code_blocks("```\nb\n```")
    assert len(first) == len(second) == 1
    assert text == placeholder(0)


def test_restore_code_blocks_unwraps_paragraph():
    block = "<pre><code>x</code></pre>"
    html = restore_code_blocks(f"<p>{placeholder(0)}</p>\n<p>see {placeholder(1)}</p>", [block, block])
    assert html == f"{block}\n<p>see {block}</p>"


def test_convert_headings_marker_span():
    assert convert_headings("### Deep Dive") == (
        '<h4 id="deep-dive"><span class="hash">###</span> Deep Dive</h4>'
    )


def test_convert_callouts_leaves_other_lines():
    text = "intro\n> [!IMPORTANT] Read me\n> now\n> plain quote"
    out = convert_callouts(text).split("\n")
    assert out[0] == "intro"
    assert out[1].startswith('<div class="callout callout-important">')
    assert "now<br />plain quote" in out[1]
    assert len(out) == 2


def test_callouts_must_run_before_blockquotes():
    """Running the blockquote pass first destroys the callout marker."""
    md = "> [!TIP] Pro tip\n> use this"
    assert "callout" not in convert_callouts(convert_blockquotes(md))
    assert "<blockquote>" not in convert_blockquotes(convert_callouts(md))


def test_convert_rules_only_whole_lines():
    assert convert_rules("---\n--- not\n***\n****") == "<hr />\n--- not\n<hr />\n****"


def test_group_lists_closes_at_end():
    assert group_lists("1. a\n2. b") == "<ol>\n<li>a</li>\n<li>b</li>\n</ol>"


def test_group_lists_switching_type():
    assert group_lists("- a\n1. b\n- c") == (
        "<ul>\n<li>a</li>\n</ul>\n<ol>\n<li>b</li>\n</ol>\n<ul>\n<li>c</li>\n</ul>"
    )


def test_resolve_wikilinks_default_base():
    assert resolve_wikilinks("[[A B]] and [[C|d]]") == (
        '<a href="/posts/a-b/" class="wikilink">A B</a> and '
        '<a href="/posts/c/" class="wikilink">d</a>'
    )


def test_wrap_paragraphs_skips_html_and_placeholders():
    text = f"plain\n<div>x</div>\n{placeholder(0)}\n\n\n  indented"
    assert wrap_paragraphs(text) == f"<p>plain</p>\n<div>x</div>\n{placeholder(0)}\n\n<p>  indented</p>"


def test_cleanup_removes_empty_and_block_wrapping_paragraphs():
    html = "<p> </p><p><hr /></p><p><pre>x</pre></p><p><figure>f</figure></p><p>keep</p>"
    assert cleanup(html) == "<hr /><pre>x</pre><figure>f</figure><p>keep</p>"


def test_cleanup_keeps_paragraph_that_ends_in_a_block():
    """Only a <p> around a lone block element is unwrapped; text before the block keeps its paragraph."""
    html = '<p>See <figure><img src="c.png" alt="cat" loading="lazy" /></figure></p>'
    assert cleanup(html) == html
