"""
Family relations comparison.

Scores how well the parents, spouses, children and siblings of two person
records agree. Relatives are resolved through read-only person indexes
when they are available and compared by name; otherwise the raw
identifiers are compared.
"""

from typing import Callable, Dict, List, Mapping, Optional, Sequence

from ..core.person import PersonRecord

NameSimilarity = Callable[[PersonRecord, PersonRecord], float]


class FamilyRelationsComparer:
    """
    Compares the relatives of two person records.

    Category weights (of this sub-score only):
    - Parents: 40%
    - Spouses: 30%
    - Children: 20%
    - Siblings: 10%

    Only categories where at least one side has data take part, and the
    result is scaled by the weight of those categories.

    Lists of relatives are paired greedily: each source relative takes the
    first unused target relative it matches. This is not an optimal
    assignment.
    """

    CATEGORY_WEIGHTS = {
        'parents': 0.40,
        'spouses': 0.30,
        'children': 0.20,
        'siblings': 0.10,
    }

    MIN_FIRST_NAME_SIMILARITY = 0.8
    FULL_MATCH_SIMILARITY = 0.85
    HALF_MATCH_SIMILARITY = 0.7

    def __init__(self, first_name_similarity: NameSimilarity, last_name_similarity: NameSimilarity,
                 source_index: Optional[Mapping[str, PersonRecord]] = None,
                 target_index: Optional[Mapping[str, PersonRecord]] = None):
        """
        Args:
            first_name_similarity: Similarity in [0, 1] of two records' first names
            last_name_similarity: Similarity in [0, 1] of two records' last names
            source_index: Person lookup for the source side, by id
            target_index: Person lookup for the target side, by id
        """
        self.first_name_similarity = first_name_similarity
        self.last_name_similarity = last_name_similarity
        self.source_index = source_index
        self.target_index = target_index

    @property
    def has_lookups(self) -> bool:
        return self.source_index is not None and self.target_index is not None

    def compare(self, source: PersonRecord, target: PersonRecord) -> float:
        """
        Family relations similarity of two records.

        Returns:
            Score in [0, 1]; 0 when neither side has any relatives
        """
        scores: Dict[str, float] = {}

        parent_pairs = [
            (source.father_id, target.father_id),
            (source.mother_id, target.mother_id),
        ]
        parent_pairs = [(s, t) for s, t in parent_pairs if s or t]
        if parent_pairs:
            scores['parents'] = sum(self.compare_relative(s, t) for s, t in parent_pairs) / len(parent_pairs)

        for category, attr in (('spouses', 'spouse_ids'), ('children', 'children_ids'),
                               ('siblings', 'sibling_ids')):
            source_ids = list(getattr(source, attr) or ())
            target_ids = list(getattr(target, attr) or ())
            if source_ids or target_ids:
                scores[category] = self.compare_relative_lists(source_ids, target_ids)

        if not scores:
            return 0.0

        total_weight = sum(self.CATEGORY_WEIGHTS[c] for c in scores)
        weighted = sum(score * self.CATEGORY_WEIGHTS[c] for c, score in scores.items())
        return weighted / total_weight

    def compare_relative(self, source_id: Optional[str], target_id: Optional[str]) -> float:
        """Score one pair of relatives: 1.0 match, 0.5 partial, 0 otherwise."""
        if not source_id or not target_id:
            return 0.0

        source_person = self._resolve(self.source_index, source_id)
        target_person = self._resolve(self.target_index, target_id)
        if source_person is None or target_person is None:
            return 1.0 if source_id == target_id else 0.0

        return self.compare_people(source_person, target_person)

    def compare_people(self, source: PersonRecord, target: PersonRecord) -> float:
        first = self.first_name_similarity(source, target)
        if first < self.MIN_FIRST_NAME_SIMILARITY:
            return 0.0

        combined = (first + self.last_name_similarity(source, target)) / 2
        if combined >= self.FULL_MATCH_SIMILARITY:
            return 1.0
        if combined >= self.HALF_MATCH_SIMILARITY:
            return 0.5
        return 0.0

    def compare_relative_lists(self, source_ids: Sequence[str], target_ids: Sequence[str]) -> float:
        """Score two lists of relatives in [0, 1]."""
        if not source_ids or not target_ids:
            return 0.0

        if not self.has_lookups:
            return self.jaccard(source_ids, target_ids)

        used: List[int] = []
        total = 0.0
        for source_id in source_ids:
            for index, target_id in enumerate(target_ids):
                if index in used:
                    continue
                score = self.compare_relative(source_id, target_id)
                if score > 0:
                    used.append(index)
                    total += score
                    break

        return total / max(len(source_ids), len(target_ids))

    @staticmethod
    def jaccard(source_ids: Sequence[str], target_ids: Sequence[str]) -> float:
        source_set, target_set = set(source_ids), set(target_ids)
        union = source_set | target_set
        if not union:
            return 0.0
        return len(source_set & target_set) / len(union)

    @staticmethod
    def _resolve(index: Optional[Mapping[str, PersonRecord]], person_id: str) -> Optional[PersonRecord]:
        if index is None:
            return None
        return index.get(person_id)
