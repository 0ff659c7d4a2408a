"""Script splitting, relocation and transliteration handlers."""

from typing import Dict, Optional

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField, PERSONAL_FIELDS
from ...utils.diacritics import DiacriticsRemover
from ...utils.script_detector import Script, ScriptDetector
from ...utils.transliterator import Transliterator

# Locale a run of each script is moved to
SCRIPT_TARGETS: Dict[Script, Locale] = {
    Script.LATIN: Locale.EN_US,
    Script.CYRILLIC: Locale.RU,
    Script.HEBREW: Locale.HE,
}


def _to_latin(value: str) -> str:
    """Latin rendering of a value of any supported script."""
    script = ScriptDetector.detect_script(value)
    if script == Script.CYRILLIC:
        return Transliterator.transliterate_cyrillic(value)
    if script == Script.HEBREW:
        return Transliterator.transliterate_hebrew(value)
    if script == Script.LATIN:
        return DiacriticsRemover.remove_diacritics(value)
    return Transliterator.to_ascii(value)


class ScriptSplitHandler(NameFixHandler):
    """Splits values that mix scripts, e.g. 'Ivan Иван' or 'Maria (Мария)'.

    In a locale slot the run written in the locale's own script stays and
    every other run goes to the locale of its script (Latin to en-US,
    Cyrillic to ru, Hebrew to he) when that slot is empty. A primary field
    keeps its Latin run, or its first run when there is none.
    """

    name = "ScriptSplit"
    order = 10

    def handle(self, context: NameFixContext):
        for locale, name_field, value in context.iter_slots(list(NameField)):
            if not ScriptDetector.is_mixed(value):
                continue

            parts = {
                script: text for script, text in ScriptDetector.split_by_script(value).items()
                if script in SCRIPT_TARGETS
            }
            if not parts:
                continue

            if locale is None:
                self._split_primary(context, name_field, parts)
            else:
                self._split_locale(context, locale, name_field, parts)

    def _split_primary(self, context: NameFixContext, name_field: NameField, parts: Dict[Script, str]):
        keep_script = Script.LATIN if Script.LATIN in parts else next(iter(parts))
        moved = []
        for script, text in parts.items():
            target = SCRIPT_TARGETS[script]
            if context.get_name(target, name_field) is None:
                self.set_name(context, target, name_field, text,
                              "Split from mixed-script primary field")
                if script != keep_script:
                    moved.append(f"{script.name.capitalize()} to {target.value}")

        kept = keep_script.name.capitalize()
        if moved:
            reason = f"Primary field: kept {kept}, moved {', '.join(moved)} locale"
        else:
            reason = f"Primary field: kept {kept} part of mixed-script value"
        self.set_primary(context, name_field, parts[keep_script], reason)

    def _split_locale(self, context: NameFixContext, locale: Locale, name_field: NameField,
                      parts: Dict[Script, str]):
        placed_all = True
        for script, text in parts.items():
            if script == locale.script:
                continue
            target = SCRIPT_TARGETS[script]
            existing = context.get_name(target, name_field)
            if existing is None:
                self.set_name(context, target, name_field, text,
                              f"{script.name.capitalize()} part split from [{locale.value}]")
            elif existing != text:
                placed_all = False

        own = parts.get(locale.script)
        if own is not None:
            self.set_name(context, locale, name_field, own,
                          f"Kept {locale.script.name.capitalize()} part of mixed-script value")
        elif placed_all:
            self.remove_name(context, locale, name_field,
                             "Mixed-script value redistributed to other locales")


class CyrillicToRuHandler(NameFixHandler):
    """Moves purely Cyrillic values out of the English locales into ru.

    An existing ru value is never overwritten: the English copy is dropped
    instead. A purely Cyrillic primary field is also copied to an empty ru
    slot so that it survives transliteration of the primary field.
    """

    name = "CyrillicToRu"
    order = 20

    def handle(self, context: NameFixContext):
        for locale in (Locale.EN_US, Locale.EN):
            for name_field, value in context.get_locale_fields(locale).items():
                if not ScriptDetector.is_purely_cyrillic(value):
                    continue

                existing = context.get_name(Locale.RU, name_field)
                if existing is None:
                    self.move_name(context, locale, Locale.RU, name_field,
                                   f"Cyrillic value moved from [{locale.value}] to [ru]")
                elif existing == value:
                    self.remove_name(context, locale, name_field,
                                     "Same value exists in [ru]")
                else:
                    self.remove_name(context, locale, name_field,
                                     f"Cyrillic value dropped, [ru] already has '{existing}'")

        for name_field in NameField:
            value = context.get_primary(name_field)
            if ScriptDetector.is_purely_cyrillic(value) and context.get_name(Locale.RU, name_field) is None:
                self.set_name(context, Locale.RU, name_field, value,
                              "Cyrillic primary field copied to [ru]")


class TranslitHandler(NameFixHandler):
    """Generates en-US values from Cyrillic locales and latinizes primary fields."""

    name = "Translit"
    order = 40

    SOURCES = (Locale.RU, Locale.UK, Locale.BE)

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            if context.get_name(Locale.EN_US, name_field) is None:
                self._fill_english(context, name_field)

            primary = context.get_primary(name_field)
            if not ScriptDetector.is_purely_cyrillic(primary):
                continue

            english = context.get_name(Locale.EN_US, name_field)
            if ScriptDetector.is_purely_latin(english):
                latin = english
            else:
                latin = Transliterator.transliterate_cyrillic(primary)
            self.set_primary(context, name_field, latin,
                             "Primary field updated to Latin transliteration")

    def _fill_english(self, context: NameFixContext, name_field: NameField):
        for source in self.SOURCES:
            value = context.get_name(source, name_field)
            if not ScriptDetector.contains_cyrillic(value):
                continue
            latin = self.transliterate(value, source)
            if latin:
                self.set_name(context, Locale.EN_US, name_field, latin,
                              f"Transliterated from [{source.value}]")
                return

    @staticmethod
    def transliterate(value: str, source: Locale) -> Optional[str]:
        """Title-cased transliteration using the table of the source locale."""
        language = 'uk' if source == Locale.UK else Transliterator.detect_cyrillic_language(value)
        return Transliterator.to_title_case(Transliterator.transliterate(value, language))


class EnsureEnglishHandler(NameFixHandler):
    """Makes sure every field has a basic-Latin en-US value.

    Empty en-US fields are filled from, in order: the ru and uk
    transliterations, a Latin value from another Latin locale with its
    diacritics removed, and the primary field. Existing en-US values with
    letters outside A-Z are simplified in place, and primary name fields
    are reduced to basic Latin.
    """

    name = "EnsureEnglish"
    order = 45

    LATIN_SOURCES = (Locale.LT, Locale.ET, Locale.LV, Locale.PL, Locale.DE, Locale.EN,
                     Locale.FR, Locale.ES, Locale.PT, Locale.IT)

    def handle(self, context: NameFixContext):
        for name_field in NameField:
            english = context.get_name(Locale.EN_US, name_field)
            if english is None:
                self._fill(context, name_field)
            elif not ScriptDetector.is_basic_latin(english):
                self._simplify(context, name_field, english)

        for name_field in PERSONAL_FIELDS:
            primary = context.get_primary(name_field)
            if primary is not None and not ScriptDetector.is_basic_latin(primary):
                simplified = Transliterator.to_ascii(primary)
                self.set_primary(context, name_field, simplified,
                                 "Primary field simplified to basic Latin")

    def _fill(self, context: NameFixContext, name_field: NameField):
        candidates = self._candidates(context, name_field)
        for source, value in candidates:
            if value:
                self.set_name(context, Locale.EN_US, name_field, value,
                              f"English value generated from {source}")
                return

    def _candidates(self, context: NameFixContext, name_field: NameField):
        """Yield (source label, Latin value) in priority order."""
        for locale in (Locale.RU, Locale.UK):
            value = context.get_name(locale, name_field)
            if ScriptDetector.contains_cyrillic(value):
                yield f"[{locale.value}]", TranslitHandler.transliterate(value, locale)

        for locale in self.LATIN_SOURCES:
            value = context.get_name(locale, name_field)
            if ScriptDetector.is_purely_latin(value):
                yield f"[{locale.value}]", DiacriticsRemover.remove_diacritics(value)

        primary = context.get_primary(name_field)
        if primary is not None and ScriptDetector.detect_script(primary) != Script.UNKNOWN:
            latin = _to_latin(primary)
            if not ScriptDetector.is_basic_latin(latin):
                latin = Transliterator.to_ascii(latin)
            yield "primary field", latin

    def _simplify(self, context: NameFixContext, name_field: NameField, value: str):
        if ScriptDetector.contains_cyrillic(value) or ScriptDetector.contains_hebrew(value):
            self.set_name(context, Locale.EN_US, name_field, Transliterator.to_ascii(value),
                          "Replaced Cyrillic with transliteration")
            return

        simplified = DiacriticsRemover.remove_diacritics(value)
        if not ScriptDetector.is_basic_latin(simplified):
            simplified = Transliterator.to_ascii(simplified)
        self.set_name(context, Locale.EN_US, name_field, simplified,
                      f"Simplified diacritics: '{value}' -> '{simplified}'")


__all__ = ['ScriptSplitHandler', 'CyrillicToRuHandler', 'TranslitHandler', 'EnsureEnglishHandler']
