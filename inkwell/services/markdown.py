"""
Markdown Rendering

A deliberately small regex-based renderer for post bodies.
"""

import re
from markupsafe import Markup, escape

_RULES = [
    (re.compile(r'^### (.*)$', re.M), r'<h3>\1</h3>'),
    (re.compile(r'^## (.*)$', re.M), r'<h2>\1</h2>'),
    (re.compile(r'^# (.*)$', re.M), r'<h1>\1</h1>'),
    (re.compile(r'^\* (.*)$', re.M), r'<li>\1</li>'),
    (re.compile(r'\*\*(.+?)\*\*'), r'<strong>\1</strong>'),
    (re.compile(r'\*(.+?)\*'), r'<em>\1</em>'),
    (re.compile(r'`(.+?)`'), r'<code>\1</code>'),
    (re.compile(r'\[(.+?)\]\(((?:https?://|/)[^)\s]*)\)'), r'<a href="\2">\1</a>'),
]


def render_markdown(text):
    """Render Markdown to HTML. Input is escaped first, so raw HTML never passes through."""
    html = str(escape(text or ''))
    for pattern, replacement in _RULES:
        html = pattern.sub(replacement, html)
    lines = html.split('\n')
    out = []
    for i, line in enumerate(lines):
        out.append(line)
        # Block elements already break the line
        if i < len(lines) - 1 and not line.endswith(('</h1>', '</h2>', '</h3>', '</li>')):
            out.append('<br/>')
    return Markup(''.join(out))
