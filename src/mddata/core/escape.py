"""Inline escape parsing: \\name, \\name(args), \\(args)

Escapes let prose embed small expressions. An escape that cannot be parsed
(unterminated argument list or quote) is left in the text as written.
"""

import logging

from mddata.core.models import Escape, Inline


logger = logging.getLogger(__name__)


def _parse_quoted(s: str, i: int) -> tuple[str, int] | None:
    """Parse a double-quoted string starting at s[i] == '"'. Returns (value, next_index)."""
    out = []
    i += 1
    while i < len(s):
        c = s[i]
        if c == '\\' and i + 1 < len(s):
            out.append(s[i + 1])
            i += 2
            continue
        if c == '"':
            return ''.join(out), i + 1
        out.append(c)
        i += 1
    return None


def _parse_args(s: str, i: int) -> tuple[tuple[str, ...], int] | None:
    """Parse a comma separated argument list; s[i] is the char after '('."""
    args: list[str] = []
    n = len(s)
    while True:
        while i < n and s[i] in ' \t':
            i += 1
        if i >= n:
            return None
        if s[i] == ')':
            return tuple(args), i + 1
        if s[i] == ',':
            i += 1
            continue
        if s[i] == '"':
            parsed = _parse_quoted(s, i)
            if parsed is None:
                return None
            value, i = parsed
            args.append(value)
            continue
        start = i
        while i < n and s[i] not in ',)':
            i += 1
        args.append(s[start:i].strip())


def parse_escape(s: str, i: int) -> tuple[Escape, int] | None:
    """Parse an escape at s[i] == '\\'. Returns (escape, next_index) or None."""
    j = i + 1
    if j >= len(s):
        return None
    c = s[j]
    if not (c.isalpha() or c == '('):
        return None

    name = ''
    if c.isalpha():
        start = j
        while j < len(s) and (s[j].isalnum() or s[j] == '_'):
            j += 1
        name = s[start:j]
        if j >= len(s) or s[j] != '(':
            return Escape(name), j

    parsed = _parse_args(s, j + 1)
    if parsed is None:
        logger.debug("Unterminated escape at offset %d, kept as text", i)
        return None
    args, j = parsed
    return Escape(name, args), j


def split_escapes(text: str) -> Inline:
    """Split text into plain string runs and Escape segments."""
    segments: list = []
    buf: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == '\\':
            parsed = parse_escape(text, i)
            if parsed is not None:
                if buf:
                    segments.append(''.join(buf))
                    buf = []
                escape, i = parsed
                segments.append(escape)
                continue
        buf.append(c)
        i += 1
    if buf:
        segments.append(''.join(buf))
    return tuple(segments)
