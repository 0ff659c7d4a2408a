"""Advisory typo and variant suggestions.

Names are looked up in the name variant dictionary. When a name is a
known variant whose canonical spelling is close to it, or an unknown name
that sounds like a canonical name (same Metaphone code) and is spelled
almost the same, a warning is recorded. Nothing is ever changed.
"""

import logging
import re
from typing import Optional, Tuple

import phonetics
from rapidfuzz import fuzz

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField
from ...data.surname_normalizer import SurnameNormalizer, surname_normalizer as shared_normalizer
from ...utils.transliterator import Transliterator

logger = logging.getLogger(__name__)

NON_LETTERS = re.compile(r'[^a-z]')


class TypoDetectionHandler(NameFixHandler):
    """Warns about likely misspellings; a no-op without a dictionary."""

    name = "TypoDetection"
    order = 99

    MIN_RATIO = 75

    CHECKED_FIELDS = (NameField.FIRST_NAME, NameField.LAST_NAME, NameField.MAIDEN_NAME)
    CHECKED_LOCALES = (Locale.EN_US, Locale.EN)

    def __init__(self, variants=None, surname_normalizer: Optional[SurnameNormalizer] = None):
        """
        Args:
            variants: NameVariantsDictionary to look names up in
            surname_normalizer: Folds feminine surname forms before lookup
        """
        self.variants = variants
        self.surname_normalizer = surname_normalizer or shared_normalizer

    def handle(self, context: NameFixContext):
        if self.variants is None:
            return

        for name_field in self.CHECKED_FIELDS:
            self._check(context, None, name_field)

        for locale in self.CHECKED_LOCALES:
            for name_field in (NameField.FIRST_NAME, NameField.LAST_NAME):
                self._check(context, locale, name_field)

    def _check(self, context: NameFixContext, locale: Optional[Locale], name_field: NameField):
        value = context.get_value(locale, name_field)
        if value is None:
            return

        surname = name_field != NameField.FIRST_NAME
        suggestion = self.suggest(value, surname=surname)
        if suggestion is None:
            return

        canonical, reason = suggestion
        if context.add_warning(name_field, value, canonical, reason, self.name, locale):
            logger.debug(f"{context.person_id}: {name_field.value} {reason}")

    def suggest(self, value: str, surname: bool = False) -> Optional[Tuple[str, str]]:
        """Suggest a canonical spelling for a name.

        Returns:
            (suggestion, reason), or None when the name looks fine
        """
        lookup = value
        if surname:
            # Petrova is checked as Petrov
            lookup = self.surname_normalizer.normalize(value) or value
        name = Transliterator.to_ascii(lookup.strip()).lower().strip()
        if not name:
            return None

        if surname:
            canonical = (self.variants.find_canonical_surname(lookup)
                         or self.variants.find_canonical_surname(name))
        else:
            canonical = (self.variants.find_canonical_given_name(lookup)
                         or self.variants.find_canonical_given_name(name))

        if canonical is not None:
            if canonical == name or fuzz.ratio(name, canonical) < self.MIN_RATIO:
                return None
            suggestion = Transliterator.to_title_case(canonical)
            return suggestion, f"Possible variant/typo: '{value}' → '{suggestion}' (canonical form)"

        match = self._phonetic_match(name, surname)
        if match is None:
            return None
        suggestion = Transliterator.to_title_case(match)
        return suggestion, f"Possible typo: '{value}' sounds like '{suggestion}'"

    def _phonetic_match(self, name: str, surname: bool) -> Optional[str]:
        code = self.metaphone(name)
        if not code:
            return None

        candidates = self.variants.canonical_surnames() if surname else self.variants.canonical_given_names()
        best, best_ratio = None, 0.0
        for candidate in candidates:
            if candidate == name or self.metaphone(candidate) != code:
                continue
            ratio = fuzz.ratio(name, candidate)
            if ratio >= self.MIN_RATIO and ratio > best_ratio:
                best, best_ratio = candidate, ratio
        return best

    @staticmethod
    def metaphone(text: str) -> str:
        """Metaphone code of the letters of an ASCII name."""
        letters = NON_LETTERS.sub('', text.lower())
        if not letters:
            return ""
        return phonetics.metaphone(letters)


__all__ = ['TypoDetectionHandler']
