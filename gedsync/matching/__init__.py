"""
Person record matching.

Fuzzy, multilingual comparison of person records with weighted field
scores, candidate pre-filtering and family relations.
"""

from .matcher import FuzzyMatcher, MatchCandidate, MatchReason
from .family import FamilyRelationsComparer

__all__ = ['FuzzyMatcher', 'MatchCandidate', 'MatchReason', 'FamilyRelationsComparer']
