"""
Tests for the name variant dictionary.
"""

import pytest
from gedsync.data.name_variants import NameVariantsDictionary


class TestBuiltinVariants:
    """Tests for lookups against the built-in seed groups."""

    def test_diminutive_equivalent_to_full_name(self, variants):
        """Test that Alexander and Sasha are equivalent in both directions."""
        assert variants.are_equivalent("Alexander", "Sasha")
        assert variants.are_equivalent("Sasha", "Alexander")
        assert variants.are_equivalent("Саша", "Alexander")

    def test_cross_language_equivalence(self, variants):
        assert variants.are_equivalent("Иван", "John")
        assert variants.are_equivalent("Mykola", "Nicholas")

    def test_case_insensitive(self, variants):
        assert variants.are_equivalent("IVAN", "ivan")

    def test_transliteration_fallback(self, variants):
        """Test that a name outside the groups still matches its transliteration."""
        assert variants.are_equivalent("Зиновий", "Zinoviy")

    def test_not_equivalent(self, variants):
        assert not variants.are_equivalent("Ivan", "Peter")
        assert not variants.are_equivalent("Ivan", "")
        assert not variants.are_equivalent(None, None)

    def test_get_variants(self, variants):
        result = variants.get_variants("Ivan")
        assert "john" in result
        assert "иван" in result
        assert "ivan" not in result

    def test_surname_groups(self, variants):
        assert variants.are_equivalent_surnames("Petroff", "Петров")
        assert variants.is_known_surname("Rabinowitz")
        assert not variants.are_equivalent_surnames("Petrov", "Ivanov")

    def test_find_canonical(self, variants):
        """Test that canonical forms are ASCII transliterations of the group base."""
        assert variants.find_canonical_given_name("Sasha") == "aleksandr"
        assert variants.find_canonical_given_name("Иван") == "ivan"
        assert variants.find_canonical_surname("Petroff") == "petrov"
        assert variants.find_canonical_given_name("Zebulon") is None

    def test_canonical_lists(self, variants):
        assert "ivan" in variants.canonical_given_names()
        assert "shevchenko" in variants.canonical_surnames()

    def test_counts(self, variants):
        assert variants.given_name_count > 100
        assert variants.surname_count > 30


class TestLoading:
    """Tests for adding groups and reading CSV tables."""

    def test_empty_dictionary(self):
        names = NameVariantsDictionary(load_builtin=False)
        assert names.given_name_count == 0
        assert not names.are_equivalent("Alexander", "Sasha")

    def test_add_is_idempotent(self):
        names = NameVariantsDictionary(load_builtin=False)
        names.add_given_name_variants("Katherine", ["Kate", "Kathy"])
        count = names.given_name_count
        names.add_given_name_variants("Katherine", ["Kate", "Kathy"])
        assert names.given_name_count == count
        assert names.are_equivalent("Kate", "Kathy")

    def test_load_csv(self, tmp_path):
        """Test pipe- and space-separated variants, header and bad rows."""
        path = tmp_path / "given.csv"
        path.write_text(
            'name,variants\n'
            'Katherine,Kate|Kathy\n'
            'Robert,"Bob Bobby"\n'
            'Lonely\n',
            encoding='utf-8',
        )
        names = NameVariantsDictionary(load_builtin=False)
        assert names.load_csv(path) == 2
        assert names.are_equivalent("Kate", "Katherine")
        assert names.are_equivalent("Bobby", "Bob")
        assert not names.is_known_given_name("name")
        assert not names.is_known_given_name("Lonely")

    def test_load_csv_surnames(self, tmp_path):
        path = tmp_path / "surnames.csv"
        path.write_text('Kowalski,Kovalsky|Kowalsky\n', encoding='utf-8')
        names = NameVariantsDictionary(load_builtin=False)
        assert names.load_from_csv(surnames_path=path) == 1
        assert names.are_equivalent_surnames("Kovalsky", "Kowalski")
        assert not names.is_known_given_name("Kowalski")

    def test_load_csv_missing_file(self, tmp_path):
        names = NameVariantsDictionary(load_builtin=False)
        with pytest.raises(FileNotFoundError):
            names.load_csv(tmp_path / "missing.csv")
