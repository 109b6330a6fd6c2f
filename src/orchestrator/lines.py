"""List <-> text codec for ingredients and steps.

Recipes store ordered lists as a single text field, one item per line.
Suggestions carry real lists. These two functions are the only place the
conversion happens.
"""

from typing import Iterable


def encode_lines(items: Iterable[str]) -> str:
    """Join items into newline-separated text.

    Items are stripped and blank items dropped, so a decoded value encodes back
    to the same text.

    >>> encode_lines(["2 tortillas", " 1 taza frijoles "])
    '2 tortillas\\n1 taza frijoles'
    """
    return "\n".join(item.strip() for item in items if item and item.strip())


def decode_lines(text: str) -> list[str]:
    """Split newline-separated text into items, ignoring blank lines.

    >>> decode_lines("2 tortillas\\n\\n1 taza frijoles\\n")
    ['2 tortillas', '1 taza frijoles']
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]
