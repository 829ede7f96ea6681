from __future__ import annotations

import pytest

from ledger.markdown import ARTICLE_CLASSES, NEWSLETTER_CLASSES, PLAIN_CLASSES, render_markdown


def plain(text: str, trusted: bool = True) -> str:
    return render_markdown(text, PLAIN_CLASSES, trusted=trusted)


def test_empty_input_renders_nothing():
    assert render_markdown("") == ""


def test_bold_runs_before_italic():
    assert plain("**bold** and *it*") == "<p><strong>bold</strong> and <em>it</em></p>"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("# Title", "<p><h1>Title</h1></p>"),
        ("## Section", "<p><h2>Section</h2></p>"),
        ("### Sub", "<p><h3>Sub</h3></p>"),
        ("~~old~~", "<p><del>old</del></p>"),
        ("==new==", "<p><mark>new</mark></p>"),
        ("`code`", "<p><code>code</code></p>"),
        ("1. first", "<p><li>first</li></p>"),
        ("> quoted", "<p><blockquote>quoted</blockquote></p>"),
    ],
)
def test_single_constructs(source, expected):
    assert plain(source) == expected


def test_list_lines_join_with_breaks():
    assert plain("- a\n- b") == "<p><li>a</li><br /><li>b</li></p>"


def test_image_is_matched_before_link():
    html = plain("![Map](https://cdn.test/map.png) see [the site](https://albany.gov)")
    assert '<img src="https://cdn.test/map.png" alt="Map" />' in html
    assert '<a href="https://albany.gov">the site</a>' in html
    assert "!<a" not in html


def test_blank_line_starts_new_paragraph():
    assert plain("one\n\ntwo\nthree") == "<p>one</p><p>two<br />three</p>"


def test_article_variant_inlines_styles():
    html = render_markdown("# Title")
    assert html.startswith(f"<p {ARTICLE_CLASSES['p']}><h1 {ARTICLE_CLASSES['h1']}>Title</h1>")


def test_newsletter_variant_leaves_unstyled_elements_bare():
    html = render_markdown("**hi**", NEWSLETTER_CLASSES)
    assert html == "<p><strong>hi</strong></p>"


def test_trusted_input_passes_html_through():
    assert plain("<b>x</b>") == "<p><b>x</b></p>"


def test_untrusted_input_is_escaped():
    assert plain("<script>alert(1)</script>", trusted=False) == "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>"


def test_untrusted_blockquote_still_renders():
    assert plain("> careful", trusted=False) == "<p><blockquote>careful</blockquote></p>"


def test_untrusted_script_urls_are_neutralised():
    html = plain("[click](javascript:alert(1))", trusted=False)
    assert 'href="#"' in html
    assert "javascript" not in html


def test_untrusted_image_alt_cannot_break_out_of_attribute():
    html = plain('![x" onerror="alert(1)](pic.png)', trusted=False)
    assert 'alt="x&quot; onerror=&quot;alert(1)"' in html
    assert 'onerror="' not in html


def test_script_urls_are_neutralised_for_trusted_authors_too():
    html = plain("[click](javascript:alert(1)) ![p](data:text/html;base64,xx)")
    assert 'href="#"' in html
    assert 'src="#"' in html
    assert "javascript" not in html


def test_link_href_quotes_are_escaped():
    assert 'href="https://albany.gov/?q=&quot;x&quot;"' in plain('[s](https://albany.gov/?q="x")')
