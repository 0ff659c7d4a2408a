"""Shared fixtures for the gedsync test suite."""

import pytest

from gedsync.core.person import DateInfo, Gender, PersonRecord
from gedsync.data.name_variants import NameVariantsDictionary
from gedsync.matching import FuzzyMatcher
from gedsync.namefix import NameFixContext, create_default_pipeline


@pytest.fixture(scope="session")
def variants():
    """Dictionary with the built-in seed groups (read-only in tests)."""
    return NameVariantsDictionary()


@pytest.fixture
def pipeline(variants):
    return create_default_pipeline(variants=variants)


@pytest.fixture
def matcher(variants):
    return FuzzyMatcher(variants=variants)


@pytest.fixture
def make_person():
    """Factory for person records; `birth_year` is a shortcut for birth_date."""
    counter = iter(range(1, 10_000))

    def _make(birth_year=None, **fields):
        fields.setdefault('id', f"@I{next(counter)}@")
        if birth_year is not None:
            fields['birth_date'] = DateInfo.from_parts(birth_year)
        if isinstance(fields.get('gender'), str):
            fields['gender'] = Gender.parse(fields['gender'])
        return PersonRecord(**fields)

    return _make


@pytest.fixture
def make_context():
    """Factory for name-fix contexts built directly from field values."""

    def _make(gender=Gender.UNKNOWN, names=None, **fields):
        context = NameFixContext(person_id=fields.pop('person_id', '@I1@'), gender=gender, **fields)
        for locale, values in (names or {}).items():
            context.names[locale] = dict(values)
        return context

    return _make
