"""Deterministic transliteration of Cyrillic and Hebrew names into Latin.

Russian and Ukrainian use separate tables (Ukrainian г→h and и→y where
Russian gives g and i). Scripts without a table here fall back to
`unidecode`.
"""

from typing import Dict, Optional

from unidecode import unidecode

from .diacritics import DiacriticsRemover
from .script_detector import ScriptDetector


RUSSIAN_TABLE: Dict[str, str] = {
    'а': 'a', 'б': 'b', 'в': 'v', 'г': 'g', 'д': 'd',
    'е': 'e', 'ё': 'yo', 'ж': 'zh', 'з': 'z', 'и': 'i',
    'й': 'y', 'к': 'k', 'л': 'l', 'м': 'm', 'н': 'n',
    'о': 'o', 'п': 'p', 'р': 'r', 'с': 's', 'т': 't',
    'у': 'u', 'ф': 'f', 'х': 'kh', 'ц': 'ts', 'ч': 'ch',
    'ш': 'sh', 'щ': 'shch', 'ъ': '', 'ы': 'y', 'ь': '',
    'э': 'e', 'ю': 'yu', 'я': 'ya',
    # Ukrainian and Belarusian letters seen in Russian-tagged data
    'і': 'i', 'ї': 'yi', 'є': 'ye', 'ґ': 'g', 'ў': 'w',
}

UKRAINIAN_TABLE: Dict[str, str] = {
    **RUSSIAN_TABLE,
    'г': 'h', 'ґ': 'g', 'и': 'y', 'і': 'i', 'ї': 'yi',
    'є': 'ye', 'й': 'y', 'ю': 'yu', 'я': 'ya',
}

HEBREW_TABLE: Dict[str, str] = {
    'א': '', 'ב': 'v', 'ג': 'g', 'ד': 'd', 'ה': 'h',
    'ו': 'v', 'ז': 'z', 'ח': 'ch', 'ט': 't', 'י': 'y',
    'כ': 'k', 'ך': 'k', 'ל': 'l', 'מ': 'm', 'ם': 'm',
    'נ': 'n', 'ן': 'n', 'ס': 's', 'ע': '', 'פ': 'f',
    'ף': 'f', 'צ': 'tz', 'ץ': 'tz', 'ק': 'k', 'ר': 'r',
    'ש': 'sh', 'ת': 't',
    # Vowel points (nikkud)
    '\u05b0': 'e', '\u05b1': 'e', '\u05b2': 'a', '\u05b3': 'o',
    '\u05b4': 'i', '\u05b5': 'e', '\u05b6': 'e', '\u05b7': 'a',
    '\u05b8': 'a', '\u05b9': 'o', '\u05bb': 'u', '\u05bc': '',
}

UKRAINIAN_MARKERS = frozenset('іІїЇєЄґҐ')
BELARUSIAN_MARKERS = frozenset('ўЎ')
APOSTROPHES = frozenset("'’ʼ")


class Transliterator:
    """Character-by-character transliteration utilities. All methods are pure."""

    TABLES = {
        'ru': RUSSIAN_TABLE,
        'be': RUSSIAN_TABLE,
        'uk': UKRAINIAN_TABLE,
        'he': HEBREW_TABLE,
    }

    @classmethod
    def transliterate(cls, text: Optional[str], language: str = 'ru') -> Optional[str]:
        """Transliterate text with the table for `language` ('ru', 'uk', 'be', 'he').

        Characters without a table entry are kept. Upper-case letters give
        capitalized output ('Щ' → 'Shch'), or all-caps output inside an
        upper-case word ('ЩУКИН' → 'SHCHUKIN').

        Raises:
            ValueError: If no table exists for the language
        """
        if not text:
            return text

        table = cls.TABLES.get(language)
        if table is None:
            raise ValueError(f"No transliteration table for language: {language!r}")

        result = []
        for i, c in enumerate(text):
            if language == 'uk' and c in APOSTROPHES and i > 0 and ScriptDetector.is_cyrillic_char(text[i - 1]):
                continue

            mapped = table.get(c.lower())
            if mapped is None:
                # Other Hebrew marks (cantillation, shin dots) carry no sound
                if language == 'he' and ScriptDetector.is_hebrew_char(c):
                    continue
                result.append(c)
                continue

            if c.isupper() and mapped:
                if cls._neighbour_is_upper(text, i):
                    mapped = mapped.upper()
                else:
                    mapped = mapped.capitalize()
            result.append(mapped)

        return ''.join(result)

    @staticmethod
    def _neighbour_is_upper(text: str, i: int) -> bool:
        prev_upper = i > 0 and text[i - 1].isalpha() and text[i - 1].isupper()
        next_upper = i + 1 < len(text) and text[i + 1].isalpha() and text[i + 1].isupper()
        return prev_upper or next_upper

    @classmethod
    def transliterate_russian(cls, text: Optional[str]) -> Optional[str]:
        return cls.transliterate(text, 'ru')

    @classmethod
    def transliterate_ukrainian(cls, text: Optional[str]) -> Optional[str]:
        return cls.transliterate(text, 'uk')

    @classmethod
    def transliterate_hebrew(cls, text: Optional[str]) -> Optional[str]:
        """Transliterate Hebrew and title-case the resulting words."""
        if not text:
            return text
        return cls.to_title_case(cls.transliterate(text, 'he'))

    @staticmethod
    def detect_cyrillic_language(text: str) -> str:
        """'uk' when Ukrainian letters are present, 'be' for ў, otherwise 'ru'."""
        if any(c in UKRAINIAN_MARKERS for c in text):
            return 'uk'
        if any(c in BELARUSIAN_MARKERS for c in text):
            return 'be'
        return 'ru'

    @classmethod
    def transliterate_cyrillic(cls, text: Optional[str]) -> Optional[str]:
        """Transliterate Cyrillic text for use as a proper name.

        Picks the Ukrainian table when Ukrainian letters are present and
        title-cases the result.
        """
        if not text:
            return text
        language = cls.detect_cyrillic_language(text)
        return cls.to_title_case(cls.transliterate(text, language))

    @classmethod
    def to_ascii(cls, text: Optional[str]) -> Optional[str]:
        """Reduce text to ASCII.

        Cyrillic and Hebrew letters go through the deterministic tables,
        Latin diacritics are stripped and anything left over (Greek,
        Arabic, symbols) is handed to unidecode.
        """
        if not text:
            return text

        if ScriptDetector.contains_cyrillic(text):
            text = cls.transliterate(text, cls.detect_cyrillic_language(text))
        if ScriptDetector.contains_hebrew(text):
            text = cls.transliterate(text, 'he')

        text = DiacriticsRemover.remove_diacritics(text)
        if not text.isascii():
            text = unidecode(text)
        return text

    @staticmethod
    def needs_transliteration(text: Optional[str]) -> bool:
        """True when text has letters outside ASCII."""
        if not text:
            return False
        return any(c.isalpha() and ord(c) > 127 for c in text)

    @staticmethod
    def to_title_case(text: Optional[str]) -> Optional[str]:
        """Title-case words, treating each hyphen-joined part as a word."""
        if not text:
            return text

        words = []
        for word in text.split():
            parts = [p[:1].upper() + p[1:].lower() if p else p for p in word.split('-')]
            words.append('-'.join(parts))
        return ' '.join(words)
