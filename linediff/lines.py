"""
Line splitting and line fingerprints.

Documents are split on '\n' only. Nothing is normalized: trailing whitespace,
a trailing '\r' or a final empty line after the last terminator all stay
part of the document.
"""
from collections.abc import Iterable


INT32_MASK = 0xFFFFFFFF
INT32_SIGN = 0x80000000


def split_lines(text: str) -> list[str]:
    """Splits text into lines. The empty text has no lines at all."""
    if text == '':
        return []
    return text.split('\n')


def hash_line(line: str) -> int:
    """
    Rolling polynomial hash (h = h * 31 + ch) folded into a signed 32-bit int.

    Collisions are possible, so callers must only use it as a pre-filter
    before comparing the lines themselves.
    """
    h = 0
    for ch in line:
        h = (h * 31 + ord(ch)) & INT32_MASK
    if h & INT32_SIGN:
        h -= 1 << 32
    return h


def hash_lines(lines: Iterable[str]) -> list[int]:
    return [hash_line(line) for line in lines]
