"""Surname handlers: feminine forms, married surnames and particles."""

from typing import List, Optional, Tuple

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField, SURNAME_FIELDS
from ...core.person import Gender
from ...data.surname_normalizer import SurnameNormalizer, surname_normalizer as shared_normalizer
from ...utils.name_normalizer import NameNormalizer
from ...utils.script_detector import ScriptDetector


def replace_ending(surname: str, old_ending: str, new_ending: str) -> str:
    """Replace a suffix, following the case of the replaced suffix."""
    stem = surname[:len(surname) - len(old_ending)]
    replaced = surname[len(surname) - len(old_ending):]
    letters = [c for c in replaced if c.isalpha()]
    if letters and all(c.isupper() for c in letters) and len(letters) > 1:
        return stem + new_ending.upper()
    if replaced[:1].isupper():
        return stem + new_ending[:1].upper() + new_ending[1:]
    return stem + new_ending


def append_ending(surname: str, ending: str) -> str:
    """Append a letter, upper-cased when the surname is written in capitals."""
    letters = [c for c in surname if c.isalpha()]
    if len(letters) > 1 and all(c.isupper() for c in letters):
        return surname + ending.upper()
    return surname + ending


class FeminineSurnameHandler(NameFixHandler):
    """Gives women the feminine form of Slavic surnames.

    Петров → Петрова, Достоевский → Достоевская, Petrov → Petrova. The ru
    and English locales and the primary surname fields are corrected.
    Invariant surnames (-ко, -ых/-их, Georgian -швили) are left alone.
    Latin surnames are only corrected for records that carry a Cyrillic
    rendering, so that Martin or Franklin are not touched.
    """

    name = "FeminineSurname"
    order = 50

    # (masculine ending, feminine ending, replace); replace=False appends
    CYRILLIC_RULES: List[Tuple[str, str, bool]] = [
        ('ский', 'ская', True),
        ('цкий', 'цкая', True),
        ('ний', 'няя', True),
        ('ий', 'ая', True),
        ('ов', 'а', False),
        ('ев', 'а', False),
        ('ёв', 'а', False),
        ('ин', 'а', False),
        ('ын', 'а', False),
    ]
    LATIN_RULES: List[Tuple[str, str, bool]] = [
        ('tskiy', 'tskaya', True),
        ('skiy', 'skaya', True),
        ('sky', 'skaya', True),
        ('iy', 'aya', True),
        ('yov', 'a', False),
        ('ov', 'a', False),
        ('ev', 'a', False),
        ('in', 'a', False),
        ('yn', 'a', False),
    ]

    CYRILLIC_FEMININE = ('ова', 'ева', 'ёва', 'ина', 'ына', 'ская', 'цкая', 'няя', 'ая')
    LATIN_FEMININE = ('ova', 'eva', 'yova', 'ina', 'yna', 'skaya', 'tskaya', 'aya')

    CYRILLIC_EXCEPTIONS = frozenset(name.lower() for name in (
        'Шевченко', 'Коваленко', 'Бондаренко', 'Ткаченко', 'Кравченко',
        'Петренко', 'Мельниченко', 'Федоренко', 'Савченко', 'Марченко',
        'Джугашвили', 'Сталин', 'Берия',
        'Сковорода', 'Кочерга', 'Живаго', 'Дурново', 'Хитрово',
        'Черных', 'Белых', 'Красных', 'Сухих', 'Долгих', 'Седых',
    ))
    LATIN_EXCEPTIONS = frozenset(name.lower() for name in (
        'Shevchenko', 'Kovalenko', 'Bondarenko', 'Tkachenko', 'Kravchenko',
        'Petrenko', 'Melnichenko', 'Fedorenko', 'Savchenko', 'Marchenko',
        'Dzhugashvili', 'Stalin', 'Beria',
        'Skovoroda', 'Kocherga', 'Zhivago', 'Durnovo', 'Khitrovo',
        'Chernykh', 'Belykh', 'Krasnykh', 'Sukhikh', 'Dolgikh', 'Sedykh',
    ))
    CYRILLIC_INVARIANT_ENDINGS = ('ко', 'ых', 'их', 'швили')
    LATIN_INVARIANT_ENDINGS = ('ko', 'ykh', 'ikh', 'shvili')

    LOCALES = (Locale.RU, Locale.EN_US, Locale.EN)

    def __init__(self, surname_normalizer: Optional[SurnameNormalizer] = None):
        self.surname_normalizer = surname_normalizer or shared_normalizer

    def handle(self, context: NameFixContext):
        if context.gender != Gender.FEMALE:
            return

        allow_latin = self._has_cyrillic_rendering(context)
        scopes: List[Optional[Locale]] = [None]
        scopes.extend(locale for locale in self.LOCALES if context.has_locale(locale))

        for locale in scopes:
            for name_field in SURNAME_FIELDS:
                value = context.get_value(locale, name_field)
                if value is None:
                    continue
                cyrillic = ScriptDetector.contains_cyrillic(value)
                if not cyrillic and not allow_latin:
                    continue

                corrected = self.feminine_form(value, cyrillic)
                if corrected is not None and corrected != value:
                    self.set_value(context, locale, name_field, corrected,
                                   f"Corrected feminine surname: '{value}' -> '{corrected}'")

    @staticmethod
    def _has_cyrillic_rendering(context: NameFixContext) -> bool:
        for locale in (Locale.RU, Locale.UK, Locale.BE):
            if context.has_locale(locale):
                return True
        return any(ScriptDetector.contains_cyrillic(context.get_primary(f)) for f in SURNAME_FIELDS)

    def feminine_form(self, surname: str, cyrillic: bool) -> Optional[str]:
        """Feminine form of a masculine surname, or None if nothing applies."""
        trimmed = surname.strip()
        if not trimmed:
            return None

        # A surname the normalizer changes is already feminine
        if self.surname_normalizer.normalize(trimmed).lower() != trimmed.lower():
            return None

        lower = trimmed.lower()
        if cyrillic:
            feminine, exceptions, invariant, rules = (
                self.CYRILLIC_FEMININE, self.CYRILLIC_EXCEPTIONS,
                self.CYRILLIC_INVARIANT_ENDINGS, self.CYRILLIC_RULES,
            )
        else:
            feminine, exceptions, invariant, rules = (
                self.LATIN_FEMININE, self.LATIN_EXCEPTIONS,
                self.LATIN_INVARIANT_ENDINGS, self.LATIN_RULES,
            )

        if lower.endswith(feminine) or lower in exceptions or lower.endswith(invariant):
            return None

        for masculine, ending, replace in rules:
            if lower.endswith(masculine) and len(lower) > len(masculine):
                if replace:
                    return replace_ending(trimmed, masculine, ending)
                return append_ending(trimmed, ending)
        return None


class MarriedSurnameHandler(NameFixHandler):
    """Sorts out birth and married surnames.

    With a spouse surname hint, a woman whose maiden name matches her
    spouse's surname (and whose last name does not) gets the two swapped:
    Попова / Рыжова with husband Рыжов becomes Рыжова / Попова. Without a
    hint, and for men, the birth surname defaults to the current one and
    an empty maiden name is filled from the last name.
    """

    name = "MarriedSurname"
    order = 55

    COPY_REASON = "Copied from LastName (birth name for unmarried person)"

    def __init__(self, surname_normalizer: Optional[SurnameNormalizer] = None):
        self.surname_normalizer = surname_normalizer or shared_normalizer

    def handle(self, context: NameFixContext):
        if not context.has_spouse_hint or context.gender == Gender.MALE:
            self._copy_last_to_maiden(context)
            return

        if context.gender != Gender.FEMALE:
            return

        scopes: List[Optional[Locale]] = [None] + context.active_locales()
        for locale in scopes:
            self._resolve(context, locale)

    def _copy_last_to_maiden(self, context: NameFixContext):
        scopes: List[Optional[Locale]] = [None] + context.active_locales()
        for locale in scopes:
            last = context.get_value(locale, NameField.LAST_NAME)
            if last is not None and context.get_value(locale, NameField.MAIDEN_NAME) is None:
                self.set_value(context, locale, NameField.MAIDEN_NAME, last, self.COPY_REASON)

    def _resolve(self, context: NameFixContext, locale: Optional[Locale]):
        last = context.get_value(locale, NameField.LAST_NAME)
        maiden = context.get_value(locale, NameField.MAIDEN_NAME)
        spouse = context.spouse_last_name_for(locale)
        if last is None or maiden is None or not spouse:
            return

        if not self.matches_spouse(maiden, spouse) or self.matches_spouse(last, spouse):
            return

        self.set_value(context, locale, NameField.LAST_NAME, maiden,
                       f"Swapped with maiden name: '{maiden}' matches spouse surname '{spouse}'")
        self.set_value(context, locale, NameField.MAIDEN_NAME, last,
                       f"Swapped with last name: birth surname is '{last}'")
        self._carry_swap(context, locale, last)

    def _carry_swap(self, context: NameFixContext, swapped: Optional[Locale], birth_surname: str):
        """Moves the birth surname to the maiden slot of other locales.

        Only locales that still hold it as their last name and have no
        maiden name of their own are changed.
        """
        key = NameNormalizer.normalize(birth_surname)
        if key is None:
            return

        for locale in context.active_locales():
            if locale == swapped or context.get_name(locale, NameField.MAIDEN_NAME) is not None:
                continue
            value = context.get_name(locale, NameField.LAST_NAME)
            if value is None or NameNormalizer.normalize(value) != key:
                continue

            source = f"[{swapped.value}]" if swapped is not None else "primary fields"
            self.set_name(context, locale, NameField.MAIDEN_NAME, value,
                          f"Birth surname, as swapped in {source}")
            self.remove_name(context, locale, NameField.LAST_NAME,
                             f"Moved to maiden name, as swapped in {source}")

    def matches_spouse(self, surname: str, spouse_surname: str) -> bool:
        """True if surname is the spouse's surname in any gender form or script."""
        surname = surname.strip()
        spouse_surname = spouse_surname.strip()
        if not surname or not spouse_surname:
            return False

        if surname.lower() == spouse_surname.lower():
            return True
        if self.surname_normalizer.are_equivalent(surname, spouse_surname):
            return True

        # Ryzhova and Рыжов
        left = NameNormalizer.normalize(self.surname_normalizer.normalize(surname))
        right = NameNormalizer.normalize(self.surname_normalizer.normalize(spouse_surname))
        return left is not None and left == right


class SurnameParticleHandler(NameFixHandler):
    """Normalizes nobiliary and patronymic particles in surnames.

    'VAN GOGH' → 'van Gogh', 'de la fontaine' → 'de la Fontaine',
    'o'brien' → "O'Brien", 'mcdonald' → 'McDonald', 'al rashid' → 'al-Rashid'.
    """

    name = "SurnameParticle"
    order = 60

    # lowercase particle -> normalized form
    PARTICLES = {
        # German
        'von': 'von', 'von der': 'von der', 'vom': 'vom', 'zum': 'zum', 'zur': 'zur',
        # Dutch
        'van': 'van', 'van de': 'van de', 'van der': 'van der', 'van den': 'van den',
        'van het': 'van het', 'den': 'den', 'het': 'het', 'ter': 'ter', 'ten': 'ten',
        # French
        'de': 'de', 'du': 'du', 'de la': 'de la', 'des': 'des',
        'le': 'Le', 'la': 'La', "l'": "L'",
        # Spanish and Portuguese
        'del': 'del', 'de los': 'de los', 'de las': 'de las',
        'da': 'da', 'das': 'das', 'do': 'do', 'dos': 'dos',
        # Italian
        'di': 'di', 'della': 'della', 'dello': 'dello', 'dei': 'dei',
        'degli': 'degli', 'dalle': 'dalle',
        # Irish
        "o'": "O'",
        # Arabic
        'al': 'al-', 'el': 'El', 'bin': 'bin', 'ibn': 'ibn',
        # Hebrew
        'ben': 'ben', 'bar': 'bar', 'bat': 'bat',
    }
    ORDERED = sorted(PARTICLES.items(), key=lambda item: -len(item[0]))

    def handle(self, context: NameFixContext):
        for locale, name_field, value in context.iter_slots(SURNAME_FIELDS):
            normalized = self.normalize(value)
            if normalized != value:
                self.set_value(context, locale, name_field, normalized,
                               "Normalized surname particle capitalization")

    @classmethod
    def normalize(cls, surname: str) -> str:
        """Apply particle capitalization and spacing rules to one surname."""
        text = surname.strip()
        if not text:
            return surname

        split = cls.split_particle(text)
        if split is not None:
            particle, rest = split
            separator = '' if particle.endswith(("'", '-')) else ' '
            return particle + separator + cls._capitalize_rest(rest)

        return cls._normalize_prefix(text)

    @classmethod
    def split_particle(cls, surname: str) -> Optional[Tuple[str, str]]:
        """Split into (normalized particle, rest), or None without a particle."""
        lower = surname.lower()
        for key, form in cls.ORDERED:
            if key.endswith("'"):
                if lower.startswith(key) and len(surname) > len(key):
                    return form, surname[len(key):]
                continue
            if lower.startswith(key + ' '):
                rest = surname[len(key) + 1:].strip()
            elif form.endswith('-') and lower.startswith(key + '-'):
                rest = surname[len(key) + 1:].strip()
            else:
                continue
            if rest:
                return form, rest
        return None

    @staticmethod
    def _normalize_prefix(surname: str) -> str:
        """McDonald and MacArthur style prefixes."""
        lower = surname.lower()
        if lower.startswith('mc') and len(surname) > 2 and surname[2].isalpha():
            return 'Mc' + surname[2].upper() + SurnameParticleHandler._capitalize_rest(surname[3:], first=False)
        if lower.startswith('mac') and len(surname) > 3 and surname[3].isupper():
            return 'Mac' + surname[3:]
        return surname

    @staticmethod
    def _capitalize_rest(text: str, first: bool = True) -> str:
        """Capitalize the name after a particle when it is all upper or all lower case."""
        letters = [c for c in text if c.isalpha()]
        if not letters:
            return text
        if not (all(c.isupper() for c in letters) or all(c.islower() for c in letters)):
            return text

        parts = []
        for part in text.split('-'):
            lowered = part.lower()
            if first and lowered:
                lowered = lowered[0].upper() + lowered[1:]
            parts.append(lowered)
            first = True
        return '-'.join(parts)


__all__ = [
    'FeminineSurnameHandler', 'MarriedSurnameHandler', 'SurnameParticleHandler',
    'replace_ending', 'append_ending',
]
