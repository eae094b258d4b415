"""Key normalization for anchors and data keys, plus file-name slugs"""

import re
import unicodedata


MAX_KEY_LENGTH = 64

ANCHOR_RE = re.compile(r'\{#(\w+)\}')
TYPE_RE = re.compile(r'\{!(\w+)\}')
_NON_WORD_RE = re.compile(r'[\W_]+')
_DELIM_RUN_RE = re.compile(r'_+')


def strip_accents(text: str) -> str:
    """Decompose, drop combining marks, recompose."""
    decomposed = unicodedata.normalize('NFD', text)
    kept = ''.join(c for c in decomposed if unicodedata.category(c) != 'Mn')
    return unicodedata.normalize('NFC', kept)


def _delimited(text: str, delimiter: str = '_') -> str:
    """Lower-case text, inserting delimiter at case and digit boundaries.

    Acronyms stay whole: 'JSONData' -> 'json_data', 'item2' -> 'item_2'.
    """
    out = []
    n = len(text)
    for i, c in enumerate(text):
        if c == ' ':
            out.append(delimiter)
            continue
        nxt = text[i + 1] if i + 1 < n else ''
        is_cap, is_low, is_num = c.isupper(), c.islower(), c.isdigit()
        if (is_cap and (nxt.islower() or nxt.isdigit())) \
                or (is_low and (nxt.isupper() or nxt.isdigit())) \
                or (is_num and (nxt.isupper() or nxt.islower())):
            if is_cap and nxt.islower() and i > 0 and text[i - 1].isupper():
                out.append(delimiter)
            out.append(c.lower())
            if is_low or is_num or nxt.isdigit():
                out.append(delimiter)
            continue
        out.append(c.lower())
    return ''.join(out)


def normalize(text: str, max_length: int = MAX_KEY_LENGTH) -> str:
    """Return the normalized key for text, or '' if empty or longer than max_length."""
    text = text.strip()
    if not text:
        return ''
    text = _NON_WORD_RE.sub(' ', strip_accents(text))
    key = _DELIM_RUN_RE.sub('_', _delimited(text)).strip('_')
    if len(key) > max_length:
        return ''
    return key


def get_key(text: str, max_length: int = MAX_KEY_LENGTH) -> tuple[str, str]:
    """Return (key, display_text). An explicit {#key} wins over normalization."""
    m = ANCHOR_RE.search(text)
    if m:
        return m.group(1), (text[:m.start()] + text[m.end():]).strip()
    return normalize(text, max_length), text.strip()


def get_type(text: str) -> tuple[str, str]:
    """Return (type, remaining_text) for a {!type} annotation, else ('', text)."""
    m = TYPE_RE.search(text)
    if not m:
        return '', text
    return m.group(1), (text[:m.start()] + text[m.end():]).strip()


def clean_to_lower(text: str) -> str:
    """Lower-cased text without edge punctuation; '' unless 3-32 chars long."""
    text = strip_accents(text)
    start, end = 0, len(text)
    while start < end and _is_punct_or_space(text[start]):
        start += 1
    while end > start and _is_punct_or_space(text[end - 1]):
        end -= 1
    text = text[start:end]
    if len(text) < 3 or len(text) > 32:
        return ''
    return text.lower()


def _is_punct_or_space(c: str) -> bool:
    return c.isspace() or unicodedata.category(c).startswith('P')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')
