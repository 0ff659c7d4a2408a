"""
GedSync - Multilingual genealogical name normalization and record matching.

Cleans and re-locales personal names from heterogeneous genealogical
sources and scores whether two person records describe the same individual.
"""

__version__ = "0.1.0"

from .core.person import PersonRecord, DateInfo, DatePrecision, DateModifier, Gender
from .utils.config import MatchingOptions, default_options
from .data.name_variants import NameVariantsDictionary
from .data.surname_normalizer import SurnameNormalizer
from .namefix import NameFixContext, NameFixPipeline, create_default_pipeline
from .matching import FuzzyMatcher, MatchCandidate, MatchReason

__all__ = [
    'PersonRecord', 'DateInfo', 'DatePrecision', 'DateModifier', 'Gender',
    'MatchingOptions', 'default_options',
    'NameVariantsDictionary', 'SurnameNormalizer',
    'NameFixContext', 'NameFixPipeline', 'create_default_pipeline',
    'FuzzyMatcher', 'MatchCandidate', 'MatchReason',
]
