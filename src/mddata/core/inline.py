"""Inline formatting: images, links, emphasis, placeholders, escapes, task marks"""

import html
import re

from mddata.core.models import Escape, Inline


# Images must run before links: the link pattern would match '[alt](src)'
# inside '![alt](src)' and leave a stray '!'. Bold must run before italic.
IMG_RE = re.compile(r'!\[([^\]]+)\]\( *([^ )]+) *([^)]*)\)')
IMG_BARE_RE = re.compile(r'!\[\]\( *([^ )]+) *([^)]*)\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
LINK_BARE_RE = re.compile(r'\[\]\(([^)]+)\)')
BOLD_RE = re.compile(r'\*\*([^*]+)\*\*')
ITALIC_RE = re.compile(r'\*([^*]+)\*')

PLACEHOLDERS = (
    ("___?", "<input class='form-control' type='text'/>"),
    ("_ok_?", "<input class='btn btn-primary' type='submit' value='Submit'>"),
)

TAG_ESCAPES = {'b', 'i', 'em', 'strong', 'code', 'sup', 'sub', 'u'}

TASK_MARKS = {
    'x': "<span class='ballot-no'>☒</span>",
    ' ': "☐",
    '/': "<span class='ballot-yes'>☑</span>",
}


def format_inline(text: str) -> str:
    """Convert inline markup in text to HTML."""
    text = IMG_RE.sub(r'<img alt="\1" style="\3" src="\2">', text)
    text = IMG_BARE_RE.sub(r'<img style="\2" src="\1">', text)
    text = LINK_RE.sub(r'<a href="\2">\1</a>', text)
    text = LINK_BARE_RE.sub(r'<a href="\1">\1</a>', text)
    text = BOLD_RE.sub(r'<b>\1</b>', text)
    text = ITALIC_RE.sub(r'<em>\1</em>', text)
    for placeholder, control in PLACEHOLDERS:
        text = text.replace(placeholder, control)
    return text


def render_escape(escape: Escape) -> str:
    """Render a known tag escape; anything else is written back as source."""
    if escape.name in TAG_ESCAPES:
        inner = format_inline(", ".join(escape.args))
        return f"<{escape.name}>{inner}</{escape.name}>"
    return html.escape(escape.source(), quote=False)


def render_inline(content: Inline) -> str:
    return "".join(
        format_inline(s) if isinstance(s, str) else render_escape(s)
        for s in content
    )


def task_marker(text: str) -> tuple[str, bool]:
    """Replace a leading [x], [ ] or [/] with a ballot mark. Returns (text, is_task)."""
    if len(text) >= 3 and text[0] == '[' and text[2] == ']' and text[1] in TASK_MARKS:
        return TASK_MARKS[text[1]] + text[3:], True
    return text, False
