"""Script detection, transliteration and normalization helpers."""

from .script_detector import Script, ScriptDetector, LanguageGuess
from .diacritics import DiacriticsRemover
from .transliterator import Transliterator
from .name_normalizer import NameNormalizer
from .config import MatchingOptions, default_options

__all__ = [
    'Script', 'ScriptDetector', 'LanguageGuess',
    'DiacriticsRemover', 'Transliterator', 'NameNormalizer',
    'MatchingOptions', 'default_options',
]
