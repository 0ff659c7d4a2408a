"""
Tests for the individual name-fix handlers.
"""

import pytest
from gedsync.core.person import Gender
from gedsync.namefix import Locale, NameField
from gedsync.namefix.handlers import (
    SpecialCharsCleanupHandler, ScriptSplitHandler, CyrillicToRuHandler,
    TitleExtractHandler, SuffixExtractHandler, MaidenNameExtractHandler,
    NicknameExtractHandler, PatronymicHandler,
    UkrainianHandler, LithuanianHandler, EstonianHandler, HebrewHandler, LatinLanguageHandler,
    TranslitHandler, EnsureEnglishHandler,
    FeminineSurnameHandler, MarriedSurnameHandler, SurnameParticleHandler,
    CapitalizationHandler, DuplicateRemovalHandler, CleanupHandler, TypoDetectionHandler,
)
from gedsync.namefix.handlers.surnames import append_ending, replace_ending

FIRST = NameField.FIRST_NAME
LAST = NameField.LAST_NAME
MAIDEN = NameField.MAIDEN_NAME


class TestSpecialCharsCleanup:
    """Tests for SpecialCharsCleanupHandler."""

    def test_strips_noise(self, make_context):
        context = make_context(first_name='*Ivan*', last_name='[Petrov]')
        SpecialCharsCleanupHandler().handle(context)
        assert context.first_name == 'Ivan'
        assert context.last_name == 'Petrov'

    def test_leading_digits_removed_except_suffix(self, make_context):
        context = make_context(first_name='12 Maria', suffix='2nd')
        SpecialCharsCleanupHandler().handle(context)
        assert context.first_name == 'Maria'
        assert context.suffix == '2nd'

    def test_value_of_only_noise_is_removed(self, make_context):
        context = make_context(first_name='???')
        SpecialCharsCleanupHandler().handle(context)
        assert context.first_name is None
        assert context.changes[0].reason == "Removed special characters"


class TestScriptSplit:
    """Tests for ScriptSplitHandler."""

    def test_mixed_primary_field(self, make_context):
        """Test that the Latin run stays and the Cyrillic run goes to ru."""
        context = make_context(first_name='Ivan Иван')
        ScriptSplitHandler().handle(context)

        assert context.first_name == 'Ivan'
        assert context.get_name(Locale.EN_US, FIRST) == 'Ivan'
        assert context.get_name(Locale.RU, FIRST) == 'Иван'
        assert context.changes[-1].reason == "Primary field: kept Latin, moved Cyrillic to ru locale"

    def test_mixed_locale_value(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'Maria (Мария)'}})
        ScriptSplitHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Maria'
        assert context.get_name(Locale.RU, FIRST) == 'Мария'

    def test_locale_without_own_script_is_emptied(self, make_context):
        """Test that a ru value with no Cyrillic part is redistributed."""
        context = make_context(names={Locale.RU: {FIRST: 'David דוד'}})
        ScriptSplitHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'David'
        assert context.get_name(Locale.HE, FIRST) == 'דוד'
        assert context.get_name(Locale.RU, FIRST) is None

    def test_existing_slot_not_overwritten(self, make_context):
        context = make_context(first_name='Ivan Иван', names={Locale.RU: {FIRST: 'Иоанн'}})
        ScriptSplitHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Иоанн'
        assert context.first_name == 'Ivan'

    def test_single_script_untouched(self, make_context):
        context = make_context(first_name='Ivan', last_name='Петров')
        ScriptSplitHandler().handle(context)
        assert not context.changes


class TestCyrillicToRu:
    """Tests for CyrillicToRuHandler."""

    def test_moves_cyrillic_from_english(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'Иван'}})
        CyrillicToRuHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Иван'
        assert context.get_name(Locale.EN_US, FIRST) is None

    def test_never_overwrites_ru(self, make_context):
        context = make_context(names={
            Locale.EN_US: {LAST: 'Петров', FIRST: 'Ваня'},
            Locale.RU: {LAST: 'Петров', FIRST: 'Иван'},
        })
        CyrillicToRuHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Иван'
        assert context.get_name(Locale.EN_US, FIRST) is None
        assert context.get_name(Locale.EN_US, LAST) is None
        reasons = {c.reason for c in context.changes}
        assert "Same value exists in [ru]" in reasons

    def test_copies_cyrillic_primary(self, make_context):
        context = make_context(first_name='Иван')
        CyrillicToRuHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Иван'
        assert context.first_name == 'Иван'


class TestTitleExtract:
    """Tests for TitleExtractHandler."""

    def test_latin_title(self, make_context):
        context = make_context(first_name='Dr. John')
        TitleExtractHandler().handle(context)
        assert context.first_name == 'John'
        assert context.title == 'Dr.'

    def test_cyrillic_title_in_locale(self, make_context):
        context = make_context(names={Locale.RU: {FIRST: 'князь Андрей'}})
        TitleExtractHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Андрей'
        assert context.get_name(Locale.RU, NameField.TITLE) == 'князь'

    def test_conflicting_title_kept(self, make_context):
        """Test that a different existing title blocks extraction."""
        context = make_context(first_name='Dr. John', title='Prof.')
        TitleExtractHandler().handle(context)
        assert context.first_name == 'Dr. John'
        assert not context.changes

    def test_title_alone_is_not_extracted(self, make_context):
        context = make_context(first_name='Count')
        TitleExtractHandler().handle(context)
        assert context.first_name == 'Count'


class TestSuffixExtract:
    """Tests for SuffixExtractHandler."""

    def test_suffix_from_last_name(self, make_context):
        context = make_context(last_name='Smith Jr.')
        SuffixExtractHandler().handle(context)
        assert context.last_name == 'Smith'
        assert context.suffix == 'Jr.'

    def test_roman_numeral_after_comma(self, make_context):
        context = make_context(last_name='Smith, III')
        SuffixExtractHandler().handle(context)
        assert context.last_name == 'Smith'
        assert context.suffix == 'III'

    def test_suffix_from_first_name(self, make_context):
        context = make_context(first_name='John junior')
        SuffixExtractHandler().handle(context)
        assert context.first_name == 'John'
        assert context.suffix == 'Jr.'

    def test_existing_suffix_blocks(self, make_context):
        context = make_context(last_name='Smith Jr.', suffix='Sr.')
        SuffixExtractHandler().handle(context)
        assert context.last_name == 'Smith Jr.'

    @pytest.mark.parametrize("raw, expected", [
        ('jr', 'Jr.'), ('SENIOR', 'Sr.'), ('phd', 'Ph.D.'), ('Ph.D.', 'Ph.D.'), ('IV', 'IV'),
    ])
    def test_normalize_suffix(self, raw, expected):
        assert SuffixExtractHandler.normalize_suffix(raw) == expected


class TestMaidenNameExtract:
    """Tests for MaidenNameExtractHandler."""

    def test_russian_birth_name_note(self, make_context):
        context = make_context(last_name='Иванова (урожд. Петрова)')
        MaidenNameExtractHandler().handle(context)
        assert context.last_name == 'Иванова'
        assert context.maiden_name == 'Петрова'

    @pytest.mark.parametrize("value, expected", [
        ('Smith née Jones', ('Smith', 'Jones', "'née'")),
        ('Smith nee Jones', ('Smith', 'Jones', "'née'")),
        ('Smith born Jones', ('Smith', 'Jones', "'born'")),
        ('Smith (Jones)', ('Smith', 'Jones', "parentheses")),
        ('Smith/Jones', ('Smith', 'Jones', "slash")),
    ])
    def test_split_patterns(self, value, expected):
        assert MaidenNameExtractHandler.split(value) == expected

    @pytest.mark.parametrize("value", [
        'Smith (deceased)', 'Smith (aka Smyth)', 'Smith (jones)', 'Smith/1901', 'Smith',
    ])
    def test_not_split(self, value):
        assert MaidenNameExtractHandler.split(value) is None

    def test_existing_maiden_blocks(self, make_context):
        context = make_context(last_name='Smith (Jones)', maiden_name='Brown')
        MaidenNameExtractHandler().handle(context)
        assert context.last_name == 'Smith (Jones)'


class TestNicknameExtract:
    """Tests for NicknameExtractHandler."""

    def test_parenthesized_diminutives(self, make_context):
        context = make_context(first_name='Александр (Саша, Шура)')
        NicknameExtractHandler().handle(context)
        assert context.first_name == 'Александр'
        assert context.nicknames == ['Саша', 'Шура']

    def test_quoted_nickname(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'John "Jack"'}})
        NicknameExtractHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'John'
        assert context.nicknames == ['Jack']

    def test_parenthesized_non_nickname_kept(self, make_context):
        context = make_context(first_name='Anna (Smith)')
        NicknameExtractHandler().handle(context)
        assert context.first_name == 'Anna (Smith)'
        assert not context.nicknames

    def test_is_diminutive(self):
        assert NicknameExtractHandler.is_diminutive('Robert', 'Bob')
        assert NicknameExtractHandler.is_diminutive('Пётр', 'Петя')
        assert NicknameExtractHandler.is_diminutive('Maximilian', 'Max')
        assert not NicknameExtractHandler.is_diminutive('Anna', 'Smith')


class TestPatronymic:
    """Tests for PatronymicHandler."""

    def test_full_name_in_first_name(self, make_context):
        context = make_context(first_name='Иван Петрович Сидоров')
        PatronymicHandler().handle(context)
        assert context.first_name == 'Иван'
        assert context.middle_name == 'Петрович'
        assert context.last_name == 'Сидоров'

    def test_first_name_with_patronymic(self, make_context):
        context = make_context(names={Locale.RU: {FIRST: 'Мария Ивановна'}})
        PatronymicHandler().handle(context)
        assert context.get_name(Locale.RU, FIRST) == 'Мария'
        assert context.get_name(Locale.RU, NameField.MIDDLE_NAME) == 'Ивановна'

    def test_female_patronymic_in_last_name(self, make_context):
        context = make_context(first_name='Мария', last_name='Петровна')
        PatronymicHandler().handle(context)
        assert context.middle_name == 'Петровна'
        assert context.last_name is None

    def test_surname_ending_in_ovich_kept(self, make_context):
        """Test that Rabinovich-type surnames are not taken for patronymics."""
        context = make_context(first_name='Моисей', last_name='Рабинович')
        PatronymicHandler().handle(context)
        assert context.last_name == 'Рабинович'
        assert context.middle_name is None

    def test_is_patronymic(self):
        assert PatronymicHandler.is_patronymic('Ильич')
        assert PatronymicHandler.is_patronymic('Петровна')
        assert not PatronymicHandler.is_patronymic('Бич')
        assert not PatronymicHandler.is_patronymic('Иван')


class TestLanguageDetection:
    """Tests for the language detection handlers."""

    def test_ukrainian_from_primary(self, make_context):
        context = make_context(last_name='Шевченко', first_name='Иван')
        UkrainianHandler().handle(context)
        assert context.get_name(Locale.UK, LAST) == 'Шевченко'
        assert context.get_name(Locale.UK, FIRST) is None
        assert context.changes[0].reason == "Ukrainian name detected from primary field"

    def test_ukrainian_from_ru_locale(self, make_context):
        context = make_context(names={Locale.RU: {FIRST: 'Олексій'}})
        UkrainianHandler().handle(context)
        assert context.get_name(Locale.UK, FIRST) == 'Олексій'
        assert context.get_name(Locale.RU, FIRST) == 'Олексій'
        assert context.changes[0].reason == "Ukrainian name detected and copied from [ru]"

    def test_lithuanian(self, make_context):
        context = make_context(names={Locale.EN_US: {LAST: 'Kazlauskaitė'}})
        LithuanianHandler().handle(context)
        assert context.get_name(Locale.LT, LAST) == 'Kazlauskaitė'

    def test_low_confidence_ignored(self, make_context):
        """Test that a weak Lithuanian ending does not assign a locale."""
        context = make_context(last_name='Petronis')
        LithuanianHandler().handle(context)
        assert not context.has_locale(Locale.LT)

    def test_target_not_overwritten(self, make_context):
        context = make_context(last_name='Kazlauskas', names={Locale.LT: {LAST: 'Kazlauskienė'}})
        LithuanianHandler().handle(context)
        assert context.get_name(Locale.LT, LAST) == 'Kazlauskienė'

    def test_estonian(self, make_context):
        context = make_context(last_name='Õunapuu')
        EstonianHandler().handle(context)
        assert context.get_name(Locale.ET, LAST) == 'Õunapuu'

    def test_hebrew_part_extracted(self, make_context):
        context = make_context(first_name='David דוד')
        HebrewHandler().handle(context)
        assert context.get_name(Locale.HE, FIRST) == 'דוד'

    def test_latin_language(self, make_context):
        context = make_context(names={Locale.EN_US: {LAST: 'Łukasiewicz'}})
        LatinLanguageHandler().handle(context)
        assert context.get_name(Locale.PL, LAST) == 'Łukasiewicz'
        assert context.changes[0].reason == "pl name detected and copied from [en-US]"

    def test_latin_language_skips_dedicated_languages(self, make_context):
        context = make_context(names={Locale.EN_US: {LAST: 'Kazlauskas'}})
        LatinLanguageHandler().handle(context)
        assert not context.changes


class TestTransliteration:
    """Tests for TranslitHandler and EnsureEnglishHandler."""

    def test_english_from_russian(self, make_context):
        context = make_context(names={Locale.RU: {FIRST: 'Григорий'}})
        TranslitHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Grigoriy'
        assert context.changes[0].reason == "Transliterated from [ru]"

    def test_english_from_ukrainian(self, make_context):
        context = make_context(names={Locale.UK: {FIRST: 'Григорій'}})
        TranslitHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Hryhoriy'

    def test_primary_takes_english_value(self, make_context):
        context = make_context(first_name='Григорий', names={Locale.EN_US: {FIRST: 'Gregory'}})
        TranslitHandler().handle(context)
        assert context.first_name == 'Gregory'

    def test_primary_transliterated(self, make_context):
        context = make_context(last_name='Шевченко')
        TranslitHandler().handle(context)
        assert context.last_name == 'Shevchenko'

    def test_english_from_latin_locale(self, make_context):
        context = make_context(names={Locale.LT: {LAST: 'Kazlauskaitė'}})
        EnsureEnglishHandler().handle(context)
        assert context.get_name(Locale.EN_US, LAST) == 'Kazlauskaite'
        assert context.changes[0].reason == "English value generated from [lt]"

    def test_english_value_simplified(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'José'}})
        EnsureEnglishHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Jose'
        assert context.changes[0].reason == "Simplified diacritics: 'José' -> 'Jose'"

    def test_primary_fallback_and_simplification(self, make_context):
        context = make_context(first_name='Jürgen')
        EnsureEnglishHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Jurgen'
        assert context.first_name == 'Jurgen'


class TestFeminineSurname:
    """Tests for FeminineSurnameHandler."""

    def test_cyrillic_surname_made_feminine(self, make_context):
        context = make_context(gender=Gender.FEMALE, last_name='Петров')
        FeminineSurnameHandler().handle(context)
        assert context.last_name == 'Петрова'
        assert context.changes[0].reason == "Corrected feminine surname: 'Петров' -> 'Петрова'"

    @pytest.mark.parametrize("masculine, feminine", [
        ('Достоевский', 'Достоевская'),
        ('Пушкин', 'Пушкина'),
        ('ПЕТРОВ', 'ПЕТРОВА'),
    ])
    def test_cyrillic_rules(self, make_context, masculine, feminine):
        context = make_context(gender=Gender.FEMALE, maiden_name=masculine)
        FeminineSurnameHandler().handle(context)
        assert context.maiden_name == feminine

    @pytest.mark.parametrize("surname", ['Петрова', 'Шевченко', 'Черных', 'Джугашвили'])
    def test_unchanged(self, make_context, surname):
        context = make_context(gender=Gender.FEMALE, last_name=surname)
        FeminineSurnameHandler().handle(context)
        assert context.last_name == surname

    def test_male_untouched(self, make_context):
        context = make_context(gender=Gender.MALE, last_name='Петров')
        FeminineSurnameHandler().handle(context)
        assert context.last_name == 'Петров'

    def test_latin_needs_cyrillic_rendering(self, make_context):
        """Test that Latin surnames are only corrected for Slavic records."""
        context = make_context(gender=Gender.FEMALE, last_name='Martin')
        FeminineSurnameHandler().handle(context)
        assert context.last_name == 'Martin'

        context = make_context(gender=Gender.FEMALE, last_name='Petrov',
                               names={Locale.RU: {LAST: 'Петров'}})
        FeminineSurnameHandler().handle(context)
        assert context.last_name == 'Petrova'
        assert context.get_name(Locale.RU, LAST) == 'Петрова'

    def test_endings_follow_case(self):
        assert replace_ending('ДОСТОЕВСКИЙ', 'ский', 'ская') == 'ДОСТОЕВСКАЯ'
        assert append_ending('PETROV', 'a') == 'PETROVA'


class TestMarriedSurname:
    """Tests for MarriedSurnameHandler."""

    def test_swap_with_spouse_hint(self, make_context):
        context = make_context(gender=Gender.FEMALE, last_name='Попова', maiden_name='Рыжова',
                               spouse_last_name='Рыжов')
        MarriedSurnameHandler().handle(context)
        assert context.last_name == 'Рыжова'
        assert context.maiden_name == 'Попова'

    def test_swap_across_scripts(self, make_context):
        context = make_context(gender=Gender.FEMALE, last_name='Popova', maiden_name='Ryzhova',
                               spouse_last_name='Рыжов')
        MarriedSurnameHandler().handle(context)
        assert context.last_name == 'Ryzhova'
        assert context.maiden_name == 'Popova'

    def test_already_correct(self, make_context):
        context = make_context(gender=Gender.FEMALE, last_name='Рыжова', maiden_name='Попова',
                               spouse_last_name='Рыжов')
        MarriedSurnameHandler().handle(context)
        assert not context.changes

    def test_no_hint_copies_last_name(self, make_context):
        context = make_context(gender=Gender.FEMALE, last_name='Попова',
                               names={Locale.EN_US: {LAST: 'Popova'}})
        MarriedSurnameHandler().handle(context)
        assert context.maiden_name == 'Попова'
        assert context.get_name(Locale.EN_US, MAIDEN) == 'Popova'
        assert context.changes[0].reason == MarriedSurnameHandler.COPY_REASON

    def test_unknown_gender_with_hint(self, make_context):
        context = make_context(last_name='Попова', maiden_name='Рыжова', spouse_last_name='Рыжов')
        MarriedSurnameHandler().handle(context)
        assert not context.changes

    def test_swap_carried_to_language_locale(self, make_context):
        """Test that a locale holding the birth surname as last name follows the swap."""
        context = make_context(gender=Gender.FEMALE, spouse_last_name='Рыжов', names={
            Locale.EN_US: {LAST: 'Kazlauskas', MAIDEN: 'Ryzhova'},
            Locale.LT: {LAST: 'Kazlauskas'},
        })
        MarriedSurnameHandler().handle(context)

        assert context.get_name(Locale.EN_US, LAST) == 'Ryzhova'
        assert context.get_name(Locale.EN_US, MAIDEN) == 'Kazlauskas'
        assert context.get_name(Locale.LT, MAIDEN) == 'Kazlauskas'
        assert context.get_name(Locale.LT, LAST) is None
        assert context.changes[-1].reason == "Moved to maiden name, as swapped in [en-US]"

    def test_swap_not_carried_over_own_maiden_name(self, make_context):
        context = make_context(gender=Gender.FEMALE, spouse_last_name='Рыжов', names={
            Locale.EN_US: {LAST: 'Kazlauskas', MAIDEN: 'Ryzhova'},
            Locale.LT: {LAST: 'Kazlauskas', MAIDEN: 'Kazlauskaitė'},
        })
        MarriedSurnameHandler().handle(context)

        assert context.get_name(Locale.LT, LAST) == 'Kazlauskas'
        assert context.get_name(Locale.LT, MAIDEN) == 'Kazlauskaitė'

    def test_matches_spouse(self):
        handler = MarriedSurnameHandler()
        assert handler.matches_spouse('Рыжова', 'Рыжов')
        assert handler.matches_spouse('ryzhova', 'Ryzhov')
        assert not handler.matches_spouse('Попова', 'Рыжов')


class TestSurnameParticle:
    """Tests for SurnameParticleHandler."""

    @pytest.mark.parametrize("raw, expected", [
        ('VAN GOGH', 'van Gogh'),
        ('de la fontaine', 'de la Fontaine'),
        ("o'brien", "O'Brien"),
        ('mcdonald', 'McDonald'),
        ('al rashid', 'al-Rashid'),
        ('MacArthur', 'MacArthur'),
        ('Smith', 'Smith'),
    ])
    def test_normalize(self, raw, expected):
        assert SurnameParticleHandler.normalize(raw) == expected

    def test_handler_updates_surname_fields(self, make_context):
        context = make_context(last_name='VON DER LEYEN', first_name='von')
        SurnameParticleHandler().handle(context)
        assert context.last_name == 'von der Leyen'
        assert context.first_name == 'von'


class TestCapitalization:
    """Tests for CapitalizationHandler."""

    @pytest.mark.parametrize("raw, expected", [
        ('IVAN', 'Ivan'),
        ("o'brien", "O'Brien"),
        ('anna-maria', 'Anna-Maria'),
        ('ИВАНОВ', 'Иванов'),
    ])
    def test_fix_capitalization(self, make_context, raw, expected):
        context = make_context(first_name=raw)
        CapitalizationHandler().handle(context)
        assert context.first_name == expected

    def test_mixed_case_kept(self, make_context):
        context = make_context(last_name='McDonald', suffix='III')
        CapitalizationHandler().handle(context)
        assert not context.changes


class TestDuplicateRemoval:
    """Tests for DuplicateRemovalHandler."""

    def test_english_duplicate_removed(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'Ivan'}, Locale.EN: {FIRST: 'Ivan'}})
        DuplicateRemovalHandler().handle(context)
        assert context.get_name(Locale.EN_US, FIRST) == 'Ivan'
        assert context.get_name(Locale.EN, FIRST) is None
        assert context.changes[0].reason == "Duplicate value exists in [en-US]"

    def test_cyrillic_locales_both_kept(self, make_context):
        context = make_context(names={Locale.RU: {FIRST: 'Иван'}, Locale.UK: {FIRST: 'Иван'}})
        DuplicateRemovalHandler().handle(context)
        assert not context.changes

    def test_diacritic_value_kept(self, make_context):
        """Test that an accented value survives an unaccented English duplicate."""
        context = make_context(names={Locale.EN_US: {FIRST: 'Jose'}, Locale.ES: {FIRST: 'José'}})
        DuplicateRemovalHandler().handle(context)
        assert context.get_name(Locale.ES, FIRST) == 'José'

    def test_detected_language_kept(self, make_context):
        context = make_context(names={Locale.EN_US: {LAST: 'Kazlauskas'}, Locale.LT: {LAST: 'Kazlauskas'}})
        DuplicateRemovalHandler().handle(context)
        assert context.get_name(Locale.LT, LAST) == 'Kazlauskas'

    def test_undetected_latin_duplicate_removed(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'Jonas'}, Locale.LT: {FIRST: 'Jonas'}})
        DuplicateRemovalHandler().handle(context)
        assert context.get_name(Locale.LT, FIRST) is None


class TestCleanup:
    """Tests for CleanupHandler."""

    def test_blank_fields_dropped_silently(self, make_context):
        context = make_context(middle_name='  ', names={Locale.RU: {FIRST: '  '}})
        CleanupHandler().handle(context)
        assert context.middle_name is None
        assert Locale.RU not in context.names
        assert not context.changes

    def test_trimming_is_audited(self, make_context):
        """Test that every trimmed value leaves a change entry."""
        context = make_context(first_name=' Ivan ', names={Locale.RU: {LAST: 'Петров '}})
        CleanupHandler().handle(context)

        assert context.first_name == 'Ivan'
        assert context.get_name(Locale.RU, LAST) == 'Петров'
        assert [(c.field, c.old_value, c.new_value, c.to_locale) for c in context.changes] == [
            ('first_name', ' Ivan ', 'Ivan', None),
            ('last_name', 'Петров ', 'Петров', Locale.RU),
        ]
        assert all(c.handler == "Cleanup" for c in context.changes)

    def test_short_english_merged(self, make_context):
        context = make_context(names={Locale.EN_US: {FIRST: 'Ivan'}, Locale.EN: {FIRST: 'Ivan'}})
        CleanupHandler().handle(context)
        assert Locale.EN not in context.names
        assert context.changes[0].reason == "Same value exists in [en-US]"


class TestTypoDetection:
    """Tests for TypoDetectionHandler."""

    def test_variant_suggestion(self, make_context, variants):
        context = make_context(last_name='Ivanoff')
        TypoDetectionHandler(variants).handle(context)

        assert context.last_name == 'Ivanoff'
        warning = context.warnings[0]
        assert warning.new_value == 'Ivanov'
        assert warning.reason == "Possible variant/typo: 'Ivanoff' → 'Ivanov' (canonical form)"
        assert not context.is_dirty

    @pytest.mark.parametrize("surname", ['Ivanov', 'Petrova', 'Qwrtzx'])
    def test_no_suggestion(self, make_context, variants, surname):
        context = make_context(last_name=surname)
        TypoDetectionHandler(variants).handle(context)
        assert not context.changes

    def test_without_dictionary(self, make_context):
        context = make_context(last_name='Ivanoff')
        TypoDetectionHandler().handle(context)
        assert not context.changes

    def test_metaphone(self):
        assert TypoDetectionHandler.metaphone("O'Brien") == TypoDetectionHandler.metaphone("OBrien")
        assert TypoDetectionHandler.metaphone("") == ""
        assert TypoDetectionHandler.metaphone("Smith")
