"""Language detection handlers.

Each handler looks for names written in one language and copies them into
that language's locale slot when the slot is still empty. Values are
copied, never moved, and only detections with a confidence of at least
ScriptDetector.MIN_CONFIDENCE are used.
"""

from typing import Iterator, Optional, Tuple

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField
from ...utils.script_detector import LanguageGuess, ScriptDetector


class LanguageDetectionHandler(NameFixHandler):
    """Copies values detected as `language_name` into `target`.

    Subclasses set `target`, `language_name` and `source_locales` and
    implement `detect()`. A handler that picks the target per value leaves
    `target` unset, and every source locale is then read.
    """

    target: Optional[Locale] = None
    language_name: str = "Unknown"
    source_locales: Tuple[Locale, ...] = (Locale.EN_US, Locale.EN, Locale.RU)
    include_primary: bool = True
    skip_cyrillic: bool = True

    def detect(self, value: str) -> Optional[LanguageGuess]:
        raise NotImplementedError

    def extract(self, value: str) -> str:
        """Part of a detected value that is copied to the target slot."""
        return value.strip()

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            if context.get_name(self.target, name_field) is not None:
                continue

            for source, value in self._sources(context, name_field):
                if self.skip_cyrillic and ScriptDetector.contains_cyrillic(value):
                    continue
                guess = self.detect(value)
                if guess is None or guess.confidence < ScriptDetector.MIN_CONFIDENCE:
                    continue

                extracted = self.extract(value)
                if not extracted:
                    continue

                if source is None:
                    reason = f"{self.language_name} name detected from primary field"
                else:
                    reason = f"{self.language_name} name detected and copied from [{source.value}]"
                self.set_name(context, self.target, name_field, extracted, reason)
                break

    def _sources(self, context: NameFixContext, name_field: NameField) -> Iterator[Tuple[Optional[Locale], str]]:
        for locale in self.source_locales:
            if self.target is not None and locale == self.target:
                continue
            value = context.get_name(locale, name_field)
            if value is not None:
                yield locale, value

        if self.include_primary:
            value = context.get_primary(name_field)
            if value is not None:
                yield None, value


class UkrainianHandler(LanguageDetectionHandler):
    """Detects Ukrainian letters (і ї є ґ) and surname endings (-енко, -чук)."""

    name = "Ukrainian"
    order = 30
    target = Locale.UK
    language_name = "Ukrainian"
    source_locales = tuple(locale for locale in Locale if locale != Locale.UK)
    skip_cyrillic = False

    def detect(self, value: str) -> Optional[LanguageGuess]:
        return ScriptDetector.detect_ukrainian(value)


class LithuanianHandler(LanguageDetectionHandler):
    name = "Lithuanian"
    order = 31
    target = Locale.LT
    language_name = "Lithuanian"

    def detect(self, value: str) -> Optional[LanguageGuess]:
        guess = ScriptDetector.detect_latin_language(value)
        return guess if guess is not None and guess.code == 'lt' else None


class EstonianHandler(LanguageDetectionHandler):
    name = "Estonian"
    order = 32
    target = Locale.ET
    language_name = "Estonian"

    def detect(self, value: str) -> Optional[LanguageGuess]:
        guess = ScriptDetector.detect_latin_language(value)
        return guess if guess is not None and guess.code == 'et' else None


class HebrewHandler(LanguageDetectionHandler):
    """Copies the Hebrew letters of any value into the he slot."""

    name = "Hebrew"
    order = 33
    target = Locale.HE
    language_name = "Hebrew"
    source_locales = tuple(locale for locale in Locale if locale != Locale.HE)
    skip_cyrillic = False

    KEEP = frozenset("-'")

    def detect(self, value: str) -> Optional[LanguageGuess]:
        if not ScriptDetector.contains_hebrew(value):
            return None
        return LanguageGuess('he', 0.95, "Hebrew characters detected")

    def extract(self, value: str) -> str:
        kept = ''.join(
            c for c in value
            if ScriptDetector.is_hebrew_char(c) or c.isspace() or c in self.KEEP
        )
        return ' '.join(kept.split()).strip("-'")


class LatinLanguageHandler(LanguageDetectionHandler):
    """Copies English-slot values into the locale of the detected Latin language.

    Covers the languages without a dedicated handler (Latvian, Polish,
    German). The English slots are the only sources.
    """

    name = "LatinLanguage"
    order = 34
    target = None
    source_locales = (Locale.EN_US, Locale.EN)
    include_primary = False

    EXCLUDED = ('en-US', 'en', 'lt', 'et')

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            for source, value in self._sources(context, name_field):
                if ScriptDetector.contains_cyrillic(value):
                    continue
                guess = ScriptDetector.detect_latin_language(value)
                if guess is None or guess.code in self.EXCLUDED:
                    continue
                if guess.confidence < ScriptDetector.MIN_CONFIDENCE:
                    continue

                target = Locale.parse(guess.code)
                if context.get_name(target, name_field) is not None:
                    continue
                self.set_name(context, target, name_field, value.strip(),
                              f"{guess.code} name detected and copied from [{source.value}]")
                break


__all__ = [
    'LanguageDetectionHandler', 'UkrainianHandler', 'LithuanianHandler',
    'EstonianHandler', 'HebrewHandler', 'LatinLanguageHandler',
]
