"""Diacritic stripping for Latin-script names."""

import unicodedata
from typing import Optional

from .script_detector import ScriptDetector


class DiacriticsRemover:
    """Maps extended-Latin letters to their base ASCII letters.

    Only Latin letters are touched: Cyrillic й or ё keep their marks, and
    Hebrew or Greek text passes through unchanged.
    """

    # Letters with no canonical decomposition
    SPECIAL_LETTERS = {
        'ł': 'l', 'Ł': 'L',
        'ø': 'o', 'Ø': 'O',
        'đ': 'd', 'Đ': 'D',
        'ð': 'd', 'Ð': 'D',
        'ħ': 'h', 'Ħ': 'H',
        'ı': 'i',
        'ŀ': 'l', 'Ŀ': 'L',
        'ß': 'ss', 'ẞ': 'SS',
        'æ': 'ae', 'Æ': 'AE',
        'œ': 'oe', 'Œ': 'OE',
        'þ': 'th', 'Þ': 'Th',
    }

    @classmethod
    def remove_diacritics(cls, text: Optional[str]) -> Optional[str]:
        """Strip accents from Latin letters (ä→a, š→s, ł→l, ß→ss).

        Idempotent: the output contains no further Latin diacritics.

        Args:
            text: Text to simplify

        Returns:
            Simplified text; None/empty input is returned as-is
        """
        if not text:
            return text

        result = []
        base_is_latin = False
        for c in unicodedata.normalize('NFD', text):
            if unicodedata.combining(c):
                if not base_is_latin:
                    result.append(c)
                continue
            base_is_latin = ScriptDetector.is_latin_char(c)
            result.append(cls.SPECIAL_LETTERS.get(c, c))

        return unicodedata.normalize('NFC', ''.join(result))

    @classmethod
    def has_diacritics(cls, text: Optional[str]) -> bool:
        """True when remove_diacritics would change the text."""
        if not text:
            return False
        return cls.remove_diacritics(text) != unicodedata.normalize('NFC', text)

    @staticmethod
    def is_basic_latin(text: Optional[str]) -> bool:
        """True iff every letter is within A-Z / a-z."""
        return ScriptDetector.is_basic_latin(text)
