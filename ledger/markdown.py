"""
Lightweight markdown-to-HTML conversion for article and newsletter previews.

This is an ordered list of regex substitutions, not a parser: headings,
emphasis, lists and links are rewritten line by line and the result is
wrapped in one paragraph. Nested lists and other CommonMark constructs are
not supported.

Streamlit strips CSS classes from unsafe HTML it did not generate, so each
variant maps an element to inline attributes.
"""

from __future__ import annotations
import html
import re
from typing import Dict


ARTICLE_CLASSES: Dict[str, str] = {
    "h1": 'style="font-size:1.875rem;font-weight:700;margin-bottom:1.5rem;color:#5e6461;'
          'border-bottom:1px solid #e5e7eb;padding-bottom:0.5rem"',
    "h2": 'style="font-size:1.5rem;font-weight:700;margin:2rem 0 1rem;color:#5e6461"',
    "h3": 'style="font-size:1.25rem;font-weight:700;margin:1.5rem 0 0.75rem;color:#5e6461"',
    "strong": 'style="font-weight:700;color:#5e6461"',
    "em": 'style="font-style:italic"',
    "del": 'style="text-decoration:line-through;color:#6b7280"',
    "mark": 'style="background:#fef08a;padding:0.125rem 0.25rem;border-radius:0.25rem"',
    "code": 'style="background:#f3f4f6;padding:0.25rem 0.5rem;border-radius:0.25rem;'
            'font-family:monospace;font-size:0.875rem;color:#d36530"',
    "li": 'style="margin-left:1.5rem;margin-bottom:0.25rem;list-style-type:disc"',
    "li_ordered": 'style="margin-left:1.5rem;margin-bottom:0.25rem;list-style-type:decimal"',
    "blockquote": 'style="border-left:4px solid #d36530;padding:0.5rem 1rem;margin:1rem 0;'
                  'font-style:italic;color:#5e6461;background:#f9fafb"',
    "img": 'style="max-width:100%;height:auto;border-radius:0.5rem;margin:1.5rem 0"',
    "a": 'style="color:#d36530;font-weight:500"',
    "p": 'style="margin-bottom:1rem;color:#5e6461;line-height:1.625"',
}

NEWSLETTER_CLASSES: Dict[str, str] = {
    "h1": 'style="font-size:1.875rem;font-weight:700;margin-bottom:1rem"',
    "h2": 'style="font-size:1.5rem;font-weight:700;margin-bottom:0.75rem"',
    "h3": 'style="font-size:1.25rem;font-weight:700;margin-bottom:0.5rem"',
    "mark": 'style="background:#fef08a"',
    "code": 'style="background:#f3f4f6;padding:0 0.25rem;border-radius:0.25rem"',
    "blockquote": 'style="border-left:4px solid #d1d5db;padding-left:1rem;font-style:italic"',
    "img": 'style="max-width:100%;height:auto"',
    "a": 'style="color:#d36530"',
}

PLAIN_CLASSES: Dict[str, str] = {}


def _open(tag: str, classes: Dict[str, str], key: str = "") -> str:
    attrs = classes.get(key or tag, "")
    return f"<{tag} {attrs}>" if attrs else f"<{tag}>"


def _attrs(classes: Dict[str, str], key: str) -> str:
    attrs = classes.get(key, "")
    return f" {attrs}" if attrs else ""


_UNSAFE_URL = re.compile(r"^\s*(javascript|vbscript|data):", re.IGNORECASE)


def _attr_value(value: str) -> str:
    # Untrusted input is already escaped without quotes; normalise before quoting
    return html.escape(html.unescape(value), quote=True)


def _url(value: str) -> str:
    if _UNSAFE_URL.match(html.unescape(value)):
        return "#"
    return _attr_value(value)


def render_markdown(text: str, classes: Dict[str, str] = ARTICLE_CLASSES, trusted: bool = True) -> str:
    """
    Convert markdown-ish text to HTML.

    Args:
        text: Source text
        classes: Element -> attribute string map (ARTICLE_CLASSES,
            NEWSLETTER_CLASSES or PLAIN_CLASSES)
        trusted: When False the input is HTML-escaped before conversion so
            raw tags in the source are shown, not executed

    Returns:
        HTML string wrapped in a single <p>
    """
    if not text:
        return ""

    out = html.escape(text, quote=False) if not trusted else text
    out = out.replace("\r\n", "\n")

    def tag(name: str, key: str = "") -> str:
        return _open(name, classes, key)

    # Headings
    out = re.sub(r'^# (.*)$', lambda m: f"{tag('h1')}{m.group(1)}</h1>", out, flags=re.MULTILINE)
    out = re.sub(r'^## (.*)$', lambda m: f"{tag('h2')}{m.group(1)}</h2>", out, flags=re.MULTILINE)
    out = re.sub(r'^### (.*)$', lambda m: f"{tag('h3')}{m.group(1)}</h3>", out, flags=re.MULTILINE)

    # Inline emphasis; bold must run before italic
    out = re.sub(r'\*\*(.*?)\*\*', lambda m: f"{tag('strong')}{m.group(1)}</strong>", out)
    out = re.sub(r'\*(.*?)\*', lambda m: f"{tag('em')}{m.group(1)}</em>", out)
    out = re.sub(r'~~(.*?)~~', lambda m: f"{tag('del')}{m.group(1)}</del>", out)
    out = re.sub(r'==(.*?)==', lambda m: f"{tag('mark')}{m.group(1)}</mark>", out)
    out = re.sub(r'`(.*?)`', lambda m: f"{tag('code')}{m.group(1)}</code>", out)

    # Block-level lines
    out = re.sub(r'^- (.*)$', lambda m: f"{tag('li')}{m.group(1)}</li>", out, flags=re.MULTILINE)
    out = re.sub(r'^\d+\. (.*)$', lambda m: f"{tag('li', 'li_ordered')}{m.group(1)}</li>", out, flags=re.MULTILINE)
    out = re.sub(r'^(?:>|&gt;) (.*)$', lambda m: f"{tag('blockquote')}{m.group(1)}</blockquote>", out,
                 flags=re.MULTILINE)

    # Images before links
    out = re.sub(
        r'!\[([^\]]*)\]\(([^)]+)\)',
        lambda m: f'<img src="{_url(m.group(2))}" alt="{_attr_value(m.group(1))}"{_attrs(classes, "img")} />',
        out,
    )
    out = re.sub(
        r'\[([^\]]+)\]\(([^)]+)\)',
        lambda m: f'<a href="{_url(m.group(2))}"{_attrs(classes, "a")}>{m.group(1)}</a>',
        out,
    )

    out = out.replace("\n\n", f"</p>{tag('p')}")
    out = out.replace("\n", "<br />")

    return f"{tag('p')}{out}</p>"
