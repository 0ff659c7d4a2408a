"""
Name-fix handlers.

Each handler performs one kind of correction; `default_handlers()` builds
the full standard set in pipeline order.
"""

from .cleanup import (
    SpecialCharsCleanupHandler, CapitalizationHandler,
    DuplicateRemovalHandler, CleanupHandler,
)
from .script import ScriptSplitHandler, CyrillicToRuHandler, TranslitHandler, EnsureEnglishHandler
from .extraction import (
    TitleExtractHandler, SuffixExtractHandler, MaidenNameExtractHandler,
    NicknameExtractHandler, PatronymicHandler,
)
from .languages import (
    LanguageDetectionHandler, UkrainianHandler, LithuanianHandler,
    EstonianHandler, HebrewHandler, LatinLanguageHandler,
)
from .surnames import FeminineSurnameHandler, MarriedSurnameHandler, SurnameParticleHandler
from .typo import TypoDetectionHandler


def default_handlers(variants=None, surname_normalizer=None):
    """Create one instance of every standard handler.

    Args:
        variants: NameVariantsDictionary for typo suggestions (optional)
        surname_normalizer: SurnameNormalizer for surname gender handling (optional)

    Returns:
        List of handlers in ascending order
    """
    return [
        SpecialCharsCleanupHandler(),
        ScriptSplitHandler(),
        CyrillicToRuHandler(),
        TitleExtractHandler(),
        SuffixExtractHandler(),
        MaidenNameExtractHandler(),
        NicknameExtractHandler(),
        PatronymicHandler(),
        UkrainianHandler(),
        LithuanianHandler(),
        EstonianHandler(),
        HebrewHandler(),
        LatinLanguageHandler(),
        TranslitHandler(),
        EnsureEnglishHandler(),
        FeminineSurnameHandler(surname_normalizer),
        MarriedSurnameHandler(surname_normalizer),
        SurnameParticleHandler(),
        CapitalizationHandler(),
        DuplicateRemovalHandler(),
        CleanupHandler(),
        TypoDetectionHandler(variants, surname_normalizer),
    ]


__all__ = [
    'SpecialCharsCleanupHandler', 'ScriptSplitHandler', 'CyrillicToRuHandler',
    'TitleExtractHandler', 'SuffixExtractHandler', 'MaidenNameExtractHandler',
    'NicknameExtractHandler', 'PatronymicHandler',
    'LanguageDetectionHandler', 'UkrainianHandler', 'LithuanianHandler',
    'EstonianHandler', 'HebrewHandler', 'LatinLanguageHandler',
    'TranslitHandler', 'EnsureEnglishHandler',
    'FeminineSurnameHandler', 'MarriedSurnameHandler', 'SurnameParticleHandler',
    'CapitalizationHandler', 'DuplicateRemovalHandler', 'CleanupHandler',
    'TypoDetectionHandler', 'default_handlers',
]
