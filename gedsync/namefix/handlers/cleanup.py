"""Character cleanup, capitalization, de-duplication and final tidy-up."""

import re
from typing import Dict, List, Optional

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField, PERSONAL_FIELDS
from ...utils.diacritics import DiacriticsRemover
from ...utils.script_detector import ScriptDetector


class SpecialCharsCleanupHandler(NameFixHandler):
    """Strips punctuation noise, invalid symbols and leading digits."""

    name = "SpecialCharsCleanup"
    order = 5

    EDGE_CHARS = '*?#~`^+=<>|\\/_'
    LEADING_DIGITS = re.compile(r'^\d+\s*')
    INVALID_CHARS = re.compile(r'[\[\]{}@#$%^&*+=<>|\\~`]')
    MULTI_SPACE = re.compile(r'\s{2,}')

    def handle(self, context: NameFixContext):
        for locale, name_field, value in context.iter_slots(list(NameField)):
            cleaned = self.clean(value, keep_digits=name_field == NameField.SUFFIX)
            if cleaned != value:
                self.set_value(context, locale, name_field, cleaned or None,
                               "Removed special characters")

    @classmethod
    def clean(cls, value: Optional[str], keep_digits: bool = False) -> Optional[str]:
        """Clean one value.

        Args:
            value: Value to clean
            keep_digits: Keep leading digits (ordinal suffixes such as '2nd')

        Returns:
            Cleaned value, possibly empty
        """
        if value is None:
            return None

        text = value.strip().strip(cls.EDGE_CHARS).strip()
        if not keep_digits:
            text = cls.LEADING_DIGITS.sub('', text)
        text = cls.INVALID_CHARS.sub('', text)
        text = cls.MULTI_SPACE.sub(' ', text)
        return text.strip()


class CapitalizationHandler(NameFixHandler):
    """Converts all-caps or all-lowercase personal names to title case.

    Mixed-case values are left as they are; surname particles were already
    normalized by SurnameParticleHandler.
    """

    name = "Capitalization"
    order = 90

    def handle(self, context: NameFixContext):
        for locale, name_field, value in context.iter_slots(PERSONAL_FIELDS):
            if not self.needs_fix(value):
                continue
            fixed = self.fix_capitalization(value)
            if fixed != value:
                self.set_value(context, locale, name_field, fixed, "Fixed capitalization")

    @staticmethod
    def needs_fix(text: str) -> bool:
        """True when every cased letter is upper case, or every one is lower case."""
        cased = [c for c in text if c.isalpha() and c.upper() != c.lower()]
        if len(cased) < 2:
            return False
        return all(c.isupper() for c in cased) or all(c.islower() for c in cased)

    @classmethod
    def fix_capitalization(cls, text: str) -> str:
        return ' '.join(cls.capitalize_word(word) for word in text.split())

    @classmethod
    def capitalize_word(cls, word: str) -> str:
        """Capitalize a word, handling hyphens (Anna-Maria) and apostrophes (O'Brien)."""
        if not word:
            return word
        if '-' in word:
            return '-'.join(cls.capitalize_word(part) for part in word.split('-'))

        for apostrophe in ("'", '’'):
            index = word.find(apostrophe)
            if 0 < index < len(word) - 1:
                before = word[:index + 1]
                after = word[index + 1:]
                return before[0].upper() + before[1:].lower() + after[0].upper() + after[1:].lower()

        return word[0].upper() + word[1:].lower()


class DuplicateRemovalHandler(NameFixHandler):
    """Keeps a value repeated across locales only in the best locale.

    Values are compared ignoring case and Latin diacritics. The kept locale
    is chosen by a fixed priority, raised when the value's script matches the
    locale. A duplicate is kept anyway when:
    - both locales are Cyrillic (the same name is valid in ru and uk)
    - the kept locale is English and the other value carries diacritics
    - the value is detected as the language of its own locale
    """

    name = "DuplicateRemoval"
    order = 95

    LOCALE_PRIORITY: Dict[Locale, int] = {
        Locale.EN_US: 100,
        Locale.RU: 90,
        Locale.UK: 85,
        Locale.HE: 80,
        Locale.LT: 70,
        Locale.ET: 70,
        Locale.LV: 70,
        Locale.PL: 70,
        Locale.DE: 70,
        Locale.FR: 60,
        Locale.ES: 60,
        Locale.PT: 60,
        Locale.IT: 60,
    }
    DEFAULT_PRIORITY = 50
    SCRIPT_BONUS = 10

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            groups: Dict[str, List[Locale]] = {}
            for locale, value in context.values_for(name_field).items():
                key = DiacriticsRemover.remove_diacritics(value).strip().lower()
                groups.setdefault(key, []).append(locale)

            for locales in groups.values():
                if len(locales) < 2:
                    continue
                self._resolve(context, name_field, locales)

    def _resolve(self, context: NameFixContext, name_field: NameField, locales: List[Locale]):
        values = {locale: context.get_name(locale, name_field) for locale in locales}
        # max() keeps the first of equal priorities
        keep = max(locales, key=lambda loc: self.priority(loc, values[loc]))

        for locale in locales:
            if locale == keep:
                continue
            if self._must_keep(keep, locale, values[locale]):
                continue
            self.remove_name(context, locale, name_field,
                             f"Duplicate value exists in [{keep.value}]")

    @classmethod
    def priority(cls, locale: Locale, value: str) -> int:
        score = cls.LOCALE_PRIORITY.get(locale, cls.DEFAULT_PRIORITY)
        if ScriptDetector.detect_script(value) == locale.script:
            score += cls.SCRIPT_BONUS
        return score

    @staticmethod
    def _must_keep(keep: Locale, other: Locale, value: str) -> bool:
        if keep.is_cyrillic and other.is_cyrillic:
            return True
        if keep.is_english and other.is_latin_language:
            if any(0xC0 <= ord(c) <= 0x24F for c in value):
                return True
        if other.is_latin_language:
            guess = ScriptDetector.detect_latin_language(value)
            if guess is not None and guess.code == other.value and guess.confidence >= ScriptDetector.MIN_CONFIDENCE:
                return True
        return False


class CleanupHandler(NameFixHandler):
    """Final tidy-up of the locale map.

    Trims values (recorded as changes), drops slots that are already blank
    and empty locales, then removes short-English fields that repeat the
    preferred-English value.
    """

    name = "Cleanup"
    order = 98

    TRIM_REASON = "Trimmed surrounding whitespace"

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            value = getattr(context, name_field.value)
            if value is None:
                continue
            if not value.strip():
                setattr(context, name_field.value, None)
            elif value != value.strip():
                self.set_primary(context, name_field, value.strip(), self.TRIM_REASON)

        for locale in list(context.names):
            fields = context.names[locale]
            for name_field in list(fields):
                value = fields[name_field]
                if value is None or not value.strip():
                    # blank slots already read as missing
                    del fields[name_field]
                elif value != value.strip():
                    self.set_name(context, locale, name_field, value.strip(), self.TRIM_REASON)
            if not fields:
                del context.names[locale]

        self._merge_english(context)

    def _merge_english(self, context: NameFixContext):
        if Locale.EN not in context.names or Locale.EN_US not in context.names:
            return

        for name_field, value in context.get_locale_fields(Locale.EN).items():
            if value == context.get_name(Locale.EN_US, name_field):
                self.remove_name(context, Locale.EN, name_field, "Same value exists in [en-US]")

        if not context.has_locale(Locale.EN):
            context.names.pop(Locale.EN, None)
