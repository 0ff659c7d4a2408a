"""Writing-system and language detection for name strings.

Classifies text as Latin, Cyrillic, Hebrew (or Greek/Arabic), flags mixed
values, splits mixed values into same-script runs and guesses the language
of Latin and Cyrillic names from characteristic letters and surname endings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Script(Enum):
    """Writing systems relevant for genealogical names."""
    UNKNOWN = "unknown"
    LATIN = "latin"
    CYRILLIC = "cyrillic"
    HEBREW = "hebrew"
    ARABIC = "arabic"
    GREEK = "greek"
    MIXED = "mixed"


@dataclass(frozen=True, slots=True)
class LanguageGuess:
    """A language estimate for a name string."""
    code: str
    confidence: float
    reason: str

    def __str__(self) -> str:
        return f"{self.code} ({self.confidence:.2f}): {self.reason}"


class ScriptDetector:
    """Character-level script classification and language guessing."""

    # Locale assignment threshold for language guesses
    MIN_CONFIDENCE = 0.75

    # Characters that separate words when splitting mixed values
    SEPARATORS = frozenset(' /|()[]-')

    UKRAINIAN_CHARS = frozenset('іІїЇєЄґҐ')
    UKRAINIAN_ENDINGS = ('енко', 'ейко', 'ченко', 'шенко', 'чук', 'щук')

    LITHUANIAN_CHARS = frozenset('ąčęėįšųūžĄČĘĖĮŠŲŪŽ')
    LITHUANIAN_ENDINGS = ('auskas', 'aitis', 'ūnas', 'ėnas', 'onis', 'inis', 'ulis',
                          'ienė', 'ytė', 'aitė', 'utė', 'ūtė')
    LITHUANIAN_STRONG_ENDINGS = ('auskas', 'aitis', 'ūnas', 'ėnas', 'ienė', 'ytė', 'aitė')

    ESTONIAN_CHARS = frozenset('õÕ')
    ESTONIAN_PATTERNS = ('mäe', 'mets', 'saar', 'pere', 'nurm', 'vald', 'järv')
    ESTONIAN_STRONG_PATTERNS = ('mäe', 'mets', 'saar', 'pere')

    LATVIAN_CHARS = frozenset('āčēģīķļņšūžĀČĒĢĪĶĻŅŠŪŽ')
    LATVIAN_MARKS = frozenset('āēīūģķļņĀĒĪŪĢĶĻŅ')
    LATVIAN_ENDINGS = ('iņš', 'āns', 'ēns')

    POLISH_CHARS = frozenset('ąćęłńóśźżĄĆĘŁŃÓŚŹŻ')

    UMLAUTS = frozenset('äöüÄÖÜ')
    GERMAN_PATTERNS = ('müller', 'schmidt', 'schneider', 'fischer', 'meyer', 'weber',
                       'schäfer', 'köhler', 'böhm', 'günther', 'größ', 'weiß')

    # Character classification

    @staticmethod
    def is_latin_char(c: str) -> bool:
        """Latin letter, including Latin-1 and Latin Extended ranges."""
        if ('A' <= c <= 'Z') or ('a' <= c <= 'z'):
            return True
        code = ord(c)
        if code in (0xD7, 0xF7):  # multiplication and division signs
            return False
        return (0xC0 <= code <= 0x24F) or (0x1E00 <= code <= 0x1EFF)

    @staticmethod
    def is_basic_latin_char(c: str) -> bool:
        return ('A' <= c <= 'Z') or ('a' <= c <= 'z')

    @staticmethod
    def is_cyrillic_char(c: str) -> bool:
        code = ord(c)
        return ((0x0400 <= code <= 0x052F) or
                (0x2DE0 <= code <= 0x2DFF) or
                (0xA640 <= code <= 0xA69F))

    @staticmethod
    def is_hebrew_char(c: str) -> bool:
        return 0x0590 <= ord(c) <= 0x05FF

    @staticmethod
    def is_arabic_char(c: str) -> bool:
        code = ord(c)
        return (0x0600 <= code <= 0x06FF) or (0x0750 <= code <= 0x077F)

    @staticmethod
    def is_greek_char(c: str) -> bool:
        code = ord(c)
        return (0x0370 <= code <= 0x03FF) or (0x1F00 <= code <= 0x1FFF)

    @classmethod
    def char_script(cls, c: str) -> Optional[Script]:
        """Script of a single character, or None for non-letters."""
        if cls.is_latin_char(c):
            return Script.LATIN
        if cls.is_cyrillic_char(c):
            return Script.CYRILLIC
        if cls.is_hebrew_char(c):
            return Script.HEBREW
        if cls.is_arabic_char(c):
            return Script.ARABIC
        if cls.is_greek_char(c):
            return Script.GREEK
        return None

    # Whole-string classification

    @classmethod
    def detect_script(cls, text: Optional[str]) -> Script:
        """Classify text by writing system.

        Characters outside the known scripts (digits, punctuation, spaces)
        are ignored. More than one script yields MIXED.
        """
        if not text or not text.strip():
            return Script.UNKNOWN

        found = set()
        for c in text:
            script = cls.char_script(c)
            if script is not None:
                found.add(script)

        if not found:
            return Script.UNKNOWN
        if len(found) > 1:
            return Script.MIXED
        return found.pop()

    @classmethod
    def contains_cyrillic(cls, text: Optional[str]) -> bool:
        return bool(text) and any(cls.is_cyrillic_char(c) for c in text)

    @classmethod
    def contains_latin(cls, text: Optional[str]) -> bool:
        return bool(text) and any(cls.is_latin_char(c) for c in text)

    @classmethod
    def contains_hebrew(cls, text: Optional[str]) -> bool:
        return bool(text) and any(cls.is_hebrew_char(c) for c in text)

    @classmethod
    def is_purely_cyrillic(cls, text: Optional[str]) -> bool:
        """True when every letter is Cyrillic (and at least one letter exists)."""
        return cls.detect_script(text) == Script.CYRILLIC

    @classmethod
    def is_purely_latin(cls, text: Optional[str]) -> bool:
        """True when every letter is Latin (and at least one letter exists)."""
        return cls.detect_script(text) == Script.LATIN

    @classmethod
    def is_purely_hebrew(cls, text: Optional[str]) -> bool:
        return cls.detect_script(text) == Script.HEBREW

    @classmethod
    def is_mixed(cls, text: Optional[str]) -> bool:
        return cls.detect_script(text) == Script.MIXED

    @classmethod
    def is_basic_latin(cls, text: Optional[str]) -> bool:
        """True iff every letter in text is within A-Z / a-z."""
        if not text:
            return True
        return all(cls.is_basic_latin_char(c) for c in text if c.isalpha())

    # Mixed-script splitting

    @classmethod
    def split_runs(cls, text: Optional[str]) -> List[Tuple[Script, str]]:
        """Split text into contiguous same-script runs.

        Words are separated on spaces and the characters / | ( ) [ ] -.
        A word that itself switches script is cut at the switch. Adjacent
        words of the same script are joined into one run with single
        spaces. Non-letter characters stay attached to the run they follow.

        Returns:
            List of (script, text) pairs in input order
        """
        if not text or not text.strip():
            return []

        pieces: List[Tuple[Script, str]] = []
        word = []
        for c in text + ' ':
            if c in cls.SEPARATORS:
                if word:
                    pieces.extend(cls._split_word(''.join(word)))
                    word = []
            else:
                word.append(c)

        runs: List[Tuple[Script, str]] = []
        for script, piece in pieces:
            if runs and runs[-1][0] == script:
                runs[-1] = (script, f"{runs[-1][1]} {piece}")
            else:
                runs.append((script, piece))
        return runs

    @classmethod
    def _split_word(cls, word: str) -> List[Tuple[Script, str]]:
        result: List[Tuple[Script, str]] = []
        current_script = None
        current = []

        for c in word:
            script = cls.char_script(c)
            if script is not None and current_script is not None and script != current_script:
                result.append((current_script, ''.join(current)))
                current = []
            if script is not None:
                current_script = script
            current.append(c)

        if current and current_script is not None:
            result.append((current_script, ''.join(current)))
        return result

    @classmethod
    def split_by_script(cls, text: Optional[str]) -> Dict[Script, str]:
        """Collect the runs of a mixed value by script.

        All runs of the same script are joined with a space, so
        'Иван Ivan Петров Petrov' gives {CYRILLIC: 'Иван Петров',
        LATIN: 'Ivan Petrov'}.
        """
        parts: Dict[Script, List[str]] = {}
        for script, run in cls.split_runs(text):
            parts.setdefault(script, []).append(run)
        return {script: ' '.join(runs) for script, runs in parts.items()}

    # Language detection

    @classmethod
    def is_ukrainian(cls, text: Optional[str]) -> bool:
        return cls.detect_ukrainian(text) is not None

    @classmethod
    def detect_ukrainian(cls, text: Optional[str]) -> Optional[LanguageGuess]:
        """Detect Ukrainian in Cyrillic text.

        The letters і ї є ґ are decisive; the -енко / -чук surname families
        give a weaker signal.
        """
        if not cls.contains_cyrillic(text):
            return None

        if any(c in cls.UKRAINIAN_CHARS for c in text):
            return LanguageGuess('uk', 0.95, "Ukrainian letters detected")

        lower = text.strip().lower()
        if lower.endswith(cls.UKRAINIAN_ENDINGS):
            return LanguageGuess('uk', 0.80, "Ukrainian surname ending detected")
        return None

    @classmethod
    def is_lithuanian(cls, text: Optional[str]) -> bool:
        if not text or not text.strip():
            return False
        if any(c in cls.LITHUANIAN_CHARS for c in text):
            return True
        return text.strip().lower().endswith(cls.LITHUANIAN_ENDINGS)

    @classmethod
    def is_estonian(cls, text: Optional[str]) -> bool:
        if not text or not text.strip():
            return False
        if any(c in cls.ESTONIAN_CHARS for c in text):
            return True
        lower = text.lower()
        return any(p in lower for p in cls.ESTONIAN_PATTERNS)

    @classmethod
    def is_latvian(cls, text: Optional[str]) -> bool:
        if not text or not text.strip():
            return False
        if any(c in cls.LATVIAN_CHARS for c in text):
            return True
        return text.strip().lower().endswith(cls.LATVIAN_ENDINGS)

    @classmethod
    def is_polish(cls, text: Optional[str]) -> bool:
        return bool(text) and any(c in cls.POLISH_CHARS for c in text)

    @classmethod
    def is_german(cls, text: Optional[str]) -> bool:
        if not text or not text.strip():
            return False
        if 'ß' in text or 'ẞ' in text:
            return True
        if not any(c in cls.UMLAUTS for c in text):
            return False
        lower = text.lower()
        return any(p in lower for p in cls.GERMAN_PATTERNS)

    @classmethod
    def detect_latin_language(cls, text: Optional[str]) -> Optional[LanguageGuess]:
        """Guess the language of a Latin-script name.

        Checks Lithuanian, Estonian, Latvian, Polish and German in that
        order and falls back to English with confidence 0.5. Text with
        Cyrillic letters is not examined.

        Returns:
            LanguageGuess, or None for blank or non-Latin text
        """
        if not text or not text.strip() or not cls.contains_latin(text):
            return None
        if cls.contains_cyrillic(text):
            return None

        if cls.is_lithuanian(text):
            return LanguageGuess('lt', cls._lithuanian_confidence(text),
                                 "Lithuanian characters or patterns detected")
        if cls.is_estonian(text):
            return LanguageGuess('et', cls._estonian_confidence(text),
                                 "Estonian characters detected")
        if cls.is_latvian(text):
            return LanguageGuess('lv', cls._latvian_confidence(text),
                                 "Latvian characters or patterns detected")
        if cls.is_polish(text):
            return LanguageGuess('pl', cls._polish_confidence(text),
                                 "Polish characters detected")
        if cls.is_german(text):
            confidence = 0.95 if ('ß' in text or 'ẞ' in text) else 0.60
            return LanguageGuess('de', confidence, "German characters detected")

        return LanguageGuess('en-US', 0.5, "Default Latin script")

    @classmethod
    def detect_language(cls, text: Optional[str]) -> Optional[LanguageGuess]:
        """Guess the language of any name string.

        Cyrillic text is Ukrainian when Ukrainian signals are present and
        Russian otherwise; Hebrew text is Hebrew; Latin text goes through
        detect_latin_language.
        """
        script = cls.detect_script(text)
        if script == Script.CYRILLIC:
            return cls.detect_ukrainian(text) or LanguageGuess('ru', 0.6, "Cyrillic script")
        if script == Script.HEBREW:
            return LanguageGuess('he', 0.95, "Hebrew script")
        if script == Script.LATIN:
            return cls.detect_latin_language(text)
        return None

    @classmethod
    def _lithuanian_confidence(cls, text: str) -> float:
        count = sum(1 for c in text if c in cls.LITHUANIAN_CHARS)
        if count >= 2:
            return 0.95
        if count == 1:
            return 0.85
        if text.strip().lower().endswith(cls.LITHUANIAN_STRONG_ENDINGS):
            return 0.90
        return 0.70

    @classmethod
    def _estonian_confidence(cls, text: str) -> float:
        if any(c in cls.ESTONIAN_CHARS for c in text):
            return 0.95
        lower = text.lower()
        if any(c in cls.UMLAUTS for c in text) and any(p in lower for p in cls.ESTONIAN_STRONG_PATTERNS):
            return 0.85
        return 0.70

    @classmethod
    def _latvian_confidence(cls, text: str) -> float:
        count = sum(1 for c in text if c in cls.LATVIAN_MARKS)
        if count >= 2:
            return 0.95
        if count == 1:
            return 0.85
        return 0.70

    @classmethod
    def _polish_confidence(cls, text: str) -> float:
        if 'ł' in text or 'Ł' in text:
            return 0.90
        count = sum(1 for c in text if c in cls.POLISH_CHARS)
        if count >= 2:
            return 0.85
        if count == 1:
            return 0.75
        return 0.60
