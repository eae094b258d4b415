"""Section lookup by header path"""

from typing import Sequence

from mddata.core.models import Block, Header


def build_parts_index(blocks: Sequence[Block]) -> dict[str, tuple[int, int]]:
    """Map dotted header key paths ('a.b') to (block position, header level).

    The title and headers with an empty key are not addressable. A repeated
    path points to its last occurrence.
    """
    index: dict[str, tuple[int, int]] = {}
    trail: list[tuple[int, str]] = []

    for position, block in enumerate(blocks):
        if not isinstance(block, Header) or block.level == 0:
            continue
        while trail and trail[-1][0] >= block.level:
            trail.pop()
        trail.append((block.level, block.key))
        if block.key:
            path = ".".join(key for _, key in trail if key)
            index[path] = (position, block.level)

    return index


def section_end(blocks: Sequence[Block], start: int, level: int) -> int:
    """Index of the next header at level <= `level` after start, else len(blocks)."""
    for i in range(start + 1, len(blocks)):
        block = blocks[i]
        if isinstance(block, Header) and block.level <= level:
            return i
    return len(blocks)
