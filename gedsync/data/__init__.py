"""Name variant and surname reference data."""

from .name_variants import NameVariantsDictionary
from .surname_normalizer import SurnameNormalizer, surname_normalizer

__all__ = ['NameVariantsDictionary', 'SurnameNormalizer', 'surname_normalizer']
