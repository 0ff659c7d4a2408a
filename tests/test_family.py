"""
Tests for family relations comparison.
"""

import pytest
from gedsync.matching import FamilyRelationsComparer, FuzzyMatcher
from gedsync.utils.config import MatchingOptions


@pytest.fixture
def family_matcher(variants):
    return FuzzyMatcher(variants=variants, options=MatchingOptions(family_relations_weight=10))


class TestWithoutLookups:
    """Tests for identifier-only comparison."""

    def test_same_parent_ids(self, matcher, make_person):
        source = make_person(father_id='@F1@')
        target = make_person(father_id='@F1@')
        assert matcher.family.compare(source, target) == 1.0

    def test_different_parent_ids(self, matcher, make_person):
        source = make_person(father_id='@F1@')
        target = make_person(father_id='@F2@')
        assert matcher.family.compare(source, target) == 0.0

    def test_one_sided_parent_counts(self, matcher, make_person):
        """Test that a parent known on one side only dilutes the parent score."""
        source = make_person(father_id='@F1@', mother_id='@M1@')
        target = make_person(father_id='@F1@')
        assert matcher.family.compare(source, target) == pytest.approx(0.5)

    def test_jaccard(self):
        assert FamilyRelationsComparer.jaccard(['a', 'b'], ['b', 'c']) == pytest.approx(1 / 3)
        assert FamilyRelationsComparer.jaccard([], []) == 0.0

    def test_no_relatives(self, matcher, make_person):
        assert matcher.family.compare(make_person(), make_person()) == 0.0

    def test_category_weights(self, matcher, make_person):
        """Test that only categories with data take part in the weighting."""
        source = make_person(father_id='@F1@', spouse_ids=('@S1@',))
        target = make_person(father_id='@F1@', spouse_ids=('@S2@',))
        # parents 1.0 * 0.4, spouses 0.0 * 0.3
        assert matcher.family.compare(source, target) == pytest.approx(0.4 / 0.7)


class TestWithLookups:
    """Tests for comparison of resolved relatives."""

    def test_resolved_parents_compared_by_name(self, variants, make_person):
        father_a = make_person(id='@A1@', first_name='Иван', last_name='Петров')
        father_b = make_person(id='@B1@', first_name='Ivan', last_name='Petrov')
        matcher = FuzzyMatcher(variants=variants,
                               source_index={father_a.id: father_a},
                               target_index={father_b.id: father_b})

        source = make_person(father_id='@A1@')
        target = make_person(father_id='@B1@')
        assert matcher.family.has_lookups
        assert matcher.family.compare(source, target) == 1.0

    def test_different_first_names_do_not_match(self, variants, make_person):
        father_a = make_person(id='@A1@', first_name='Ivan', last_name='Petrov')
        father_b = make_person(id='@B1@', first_name='Boris', last_name='Petrov')
        matcher = FuzzyMatcher(variants=variants)
        matcher.set_lookups({father_a.id: father_a}, {father_b.id: father_b})

        assert matcher.family.compare_relative('@A1@', '@B1@') == 0.0

    def test_unresolved_id_falls_back_to_equality(self, variants, make_person):
        matcher = FuzzyMatcher(variants=variants, source_index={}, target_index={})
        assert matcher.family.compare_relative('@X@', '@X@') == 1.0
        assert matcher.family.compare_relative('@X@', '@Y@') == 0.0

    def test_children_paired_greedily(self, variants, make_person):
        """Test that each target child is used at most once."""
        anna_a = make_person(id='@A1@', first_name='Anna', last_name='Petrova')
        anna_b = make_person(id='@B1@', first_name='Anna', last_name='Petrova')
        boris_b = make_person(id='@B2@', first_name='Boris', last_name='Petrov')
        matcher = FuzzyMatcher(variants=variants,
                               source_index={anna_a.id: anna_a},
                               target_index={anna_b.id: anna_b, boris_b.id: boris_b})

        score = matcher.family.compare_relative_lists(['@A1@'], ['@B2@', '@B1@'])
        assert score == pytest.approx(0.5)


class TestFamilyInMatcher:
    """Tests for the family sub-score in the overall match."""

    def test_disabled_by_default(self, matcher, make_person):
        source = make_person(first_name='Ivan', father_id='@F1@')
        target = make_person(first_name='Ivan', father_id='@F1@')
        fields = [r.field for r in matcher.compare(source, target).reasons]
        assert 'FamilyRelations' not in fields

    def test_family_reason_when_weighted(self, family_matcher, make_person):
        source = make_person(first_name='Ivan', father_id='@F1@')
        target = make_person(first_name='Ivan', father_id='@F1@')
        reasons = {r.field: r.points for r in family_matcher.compare(source, target).reasons}
        assert reasons['FamilyRelations'] == pytest.approx(10.0)
