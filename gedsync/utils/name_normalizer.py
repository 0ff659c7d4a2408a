"""Match-time normalization of names and places."""

import re
from typing import Optional

from .transliterator import RUSSIAN_TABLE


class NameNormalizer:
    """Builds the comparison keys used by the fuzzy matcher.

    Every Cyrillic letter goes through one table (Russian with the
    Ukrainian and Belarusian extensions) so that a Russian and a Ukrainian
    spelling of the same name land on the same key.
    """

    PUNCTUATION = re.compile(r"[-'.’ʼ]")
    WHITESPACE = re.compile(r'\s+')

    @staticmethod
    def transliterate(text: Optional[str]) -> Optional[str]:
        """Lowercase Latin rendering of text; non-Cyrillic characters are kept."""
        if not text:
            return text
        return ''.join(RUSSIAN_TABLE.get(c, c) for c in text.lower())

    @classmethod
    def normalize(cls, name: Optional[str]) -> Optional[str]:
        """Compact comparison key: transliterated, lowercased, no separators.

        Hyphens, apostrophes, dots and spaces are removed, so 'Анна-Мария'
        gives 'annamariya' and "O'Brien" gives 'obrien'.

        Returns:
            Key, or None for blank input
        """
        if not name or not name.strip():
            return None
        key = cls.PUNCTUATION.sub('', cls.transliterate(name))
        return cls.WHITESPACE.sub('', key)

    @classmethod
    def normalize_for_comparison(cls, name: Optional[str]) -> str:
        """Token-preserving key: like normalize() but words stay space-separated.

        Hyphens become spaces so that double names split into tokens.
        """
        if not name or not name.strip():
            return ''
        text = cls.transliterate(name).replace('-', ' ')
        text = cls.PUNCTUATION.sub('', text)
        return cls.WHITESPACE.sub(' ', text).strip()

    @staticmethod
    def normalize_place(place: Optional[str]) -> str:
        """Lowercase, drop dots, turn hyphens into spaces."""
        if not place:
            return ''
        return place.lower().replace('.', '').replace('-', ' ').strip()
