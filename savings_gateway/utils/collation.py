"""Turkish-aware case folding and alphabetical sort keys.

Only the Turkish alphabet is collated. Latin letters with diacritics the
alphabet lacks (é, â, î) rank as their base letter; characters of other
scripts, digits and punctuation keep code point order. This is not a
general locale collation.
"""

import unicodedata
from typing import Tuple

TURKISH_ALPHABET = "abcçdefgğhıijklmnoöpqrsştuüvwxyz"
_RANK = {ch: index for index, ch in enumerate(TURKISH_ALPHABET)}
_LETTER_BASE = 0x10000  # letters sort after digits, spaces and punctuation


def turkish_lower(text: str) -> str:
    """Lowercase with the dotted/dotless I rules (I -> ı, İ -> i)"""
    return text.replace("I", "ı").replace("İ", "i").lower()


def _collation_weight(ch: str) -> int:
    if ch in _RANK:
        return _LETTER_BASE + _RANK[ch]
    base = unicodedata.normalize("NFD", ch)[:1]
    if base in _RANK:
        return _LETTER_BASE + _RANK[base]
    return ord(ch)


def turkish_sort_key(text: str) -> Tuple[int, ...]:
    """
    Sort key ordering strings by the Turkish alphabet, case-insensitively.

    "Çekirdek" sorts after "Cepte" and before "Deniz"; "Émlak" sorts with
    the e's.
    """
    return tuple(_collation_weight(ch) for ch in turkish_lower(text))
