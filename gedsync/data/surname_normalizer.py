"""Gender normalization of Slavic and Baltic surnames.

Feminine surname forms are mapped to their masculine canonical form so
that husband and wife, or father and daughter, compare as the same
surname: Иванова → Иванов, Kowalska → Kowalski, Petrova → Petrov.
"""

from typing import Callable, List, Optional, Tuple

from rapidfuzz.distance import JaroWinkler


class SurnameNormalizer:
    """Suffix-rule table mapping feminine surname endings to masculine ones.

    Rules are tried longest suffix first so that a specific ending (-ская)
    is never shadowed by a shorter one (-ая). Surnames in the exception set
    are invariant and bypass all rules.
    """

    # (feminine suffix, masculine suffix)
    SUFFIX_RULES: List[Tuple[str, str]] = [
        # Russian adjectival
        ('ская', 'ский'),
        ('цкая', 'цкий'),
        ('ная', 'ный'),
        ('ая', 'ий'),
        # Russian possessive
        ('ова', 'ов'),
        ('ева', 'ев'),
        ('ёва', 'ёв'),
        ('ина', 'ин'),
        ('ына', 'ын'),
        # Ukrainian and Belarusian forms do not change with gender
        ('енко', 'енко'),
        ('ук', 'ук'),
        ('юк', 'юк'),
        ('ак', 'ак'),
        ('як', 'як'),
        # Polish
        ('ska', 'ski'),
        ('cka', 'cki'),
        ('dzka', 'dzki'),
        ('na', 'ny'),
        # Transliterated Russian
        ('skaya', 'skiy'),
        ('tskaya', 'tskiy'),
        ('aya', 'iy'),
        ('ova', 'ov'),
        ('eva', 'ev'),
        ('yova', 'yov'),
        ('ina', 'in'),
        ('yna', 'yn'),
        # Transliterated Ukrainian
        ('enko', 'enko'),
        ('uk', 'uk'),
        ('yuk', 'yuk'),
        ('ak', 'ak'),
        ('yak', 'yak'),
    ]

    # Longest feminine suffix first; ties keep table order
    ORDERED_RULES: List[Tuple[str, str]] = sorted(SUFFIX_RULES, key=lambda rule: -len(rule[0]))

    # Surnames that never change with gender
    EXCEPTIONS = frozenset(name.lower() for name in (
        'Сковорода', 'Skovoroda',
        'Кочерга', 'Kocherga',
        'Лоза', 'Loza',
        'Гроза', 'Groza',
        'Сирота', 'Sirota',
        'Шевченко', 'Shevchenko',
        'Бондаренко', 'Bondarenko',
        'Коваленко', 'Kovalenko',
        'Ткаченко', 'Tkachenko',
        'Савченко', 'Savchenko',
        'Саакашвили', 'Saakashvili',
        'Джугашвили', 'Dzhugashvili',
        'Франко', 'Franko',
    ))

    def normalize(self, surname: Optional[str]) -> str:
        """Return the masculine canonical form of a surname.

        The replacement suffix follows the case pattern of the suffix it
        replaces (ИВАНОВА → ИВАНОВ, Иванова → Иванов). Idempotent.

        Args:
            surname: Surname in any gender form

        Returns:
            Masculine form; empty string for blank input
        """
        if not surname or not surname.strip():
            return ''

        trimmed = surname.strip()
        if self.is_exception(trimmed):
            return trimmed

        lower = trimmed.lower()
        for feminine, masculine in self.ORDERED_RULES:
            if lower.endswith(feminine):
                if feminine == masculine:
                    return trimmed
                if len(trimmed) == len(feminine):
                    # The whole name is a suffix, nothing to normalize
                    return trimmed
                stem = trimmed[:-len(feminine)]
                suffix = trimmed[-len(feminine):]
                return stem + self._preserve_case(suffix, masculine)

        return trimmed

    def is_exception(self, surname: Optional[str]) -> bool:
        """True for surnames that are invariant across genders."""
        return bool(surname) and surname.strip().lower() in self.EXCEPTIONS

    def are_equivalent(self, surname1: Optional[str], surname2: Optional[str]) -> bool:
        """Compare two surnames ignoring gender suffixes.

        Two blank surnames are equivalent; a blank and a non-blank one are not.
        """
        blank1 = not surname1 or not surname1.strip()
        blank2 = not surname2 or not surname2.strip()
        if blank1 and blank2:
            return True
        if blank1 or blank2:
            return False

        return self.normalize(surname1).lower() == self.normalize(surname2).lower()

    def get_similarity(self, surname1: Optional[str], surname2: Optional[str],
                       fallback: Optional[Callable[[str, str], float]] = None) -> float:
        """Similarity of two surnames in [0, 1].

        1.0 when equivalent; otherwise the fallback similarity (Jaro-Winkler
        by default) of the normalized forms.
        """
        if self.are_equivalent(surname1, surname2):
            return 1.0

        norm1 = self.normalize(surname1).lower()
        norm2 = self.normalize(surname2).lower()
        if not norm1 or not norm2:
            return 0.0

        if fallback is None:
            return JaroWinkler.normalized_similarity(norm1, norm2)
        return fallback(norm1, norm2)

    @staticmethod
    def _preserve_case(original: str, replacement: str) -> str:
        """Apply the case pattern of original (upper, title or lower) to replacement."""
        if not original or not replacement:
            return replacement

        letters = [c for c in original if c.isalpha()]
        if letters and all(c.isupper() for c in letters):
            return replacement.upper()
        if original[0].isupper() and all(c.islower() for c in letters[1:]):
            return replacement[0].upper() + replacement[1:].lower()
        return replacement.lower()


# Shared instance; the normalizer holds no state
surname_normalizer = SurnameNormalizer()
