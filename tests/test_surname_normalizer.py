"""Tests for gender normalization of Slavic and Baltic surnames."""

import unittest
from gedsync.data.surname_normalizer import SurnameNormalizer, surname_normalizer


class TestSurnameNormalization(unittest.TestCase):
    """Test feminine to masculine surname mapping."""

    def test_russian_possessive(self):
        """Test that -ова/-ева/-ина lose the feminine ending."""
        self.assertEqual(surname_normalizer.normalize('Иванова'), 'Иванов')
        self.assertEqual(surname_normalizer.normalize('Сергеева'), 'Сергеев')
        self.assertEqual(surname_normalizer.normalize('Пушкина'), 'Пушкин')

    def test_russian_adjectival(self):
        """Test that -ская is tried before -ая."""
        self.assertEqual(surname_normalizer.normalize('Достоевская'), 'Достоевский')
        self.assertEqual(surname_normalizer.normalize('Красная'), 'Красный')

    def test_transliterated_and_polish(self):
        self.assertEqual(surname_normalizer.normalize('Petrova'), 'Petrov')
        self.assertEqual(surname_normalizer.normalize('Kowalska'), 'Kowalski')
        self.assertEqual(surname_normalizer.normalize('Dostoevskaya'), 'Dostoevskiy')

    def test_case_pattern_preserved(self):
        """Test that the replacement follows the case of the replaced suffix."""
        self.assertEqual(surname_normalizer.normalize('ИВАНОВА'), 'ИВАНОВ')
        self.assertEqual(surname_normalizer.normalize('petrova'), 'petrov')

    def test_invariant_surnames(self):
        """Test that -енко names and listed exceptions are unchanged."""
        self.assertEqual(surname_normalizer.normalize('Шевченко'), 'Шевченко')
        self.assertEqual(surname_normalizer.normalize('Ткаченко'), 'Ткаченко')
        self.assertEqual(surname_normalizer.normalize('Сковорода'), 'Сковорода')
        self.assertTrue(surname_normalizer.is_exception('Shevchenko'))

    def test_masculine_unchanged(self):
        self.assertEqual(surname_normalizer.normalize('Иванов'), 'Иванов')
        self.assertEqual(surname_normalizer.normalize('Smith'), 'Smith')

    def test_idempotent(self):
        for surname in ('Иванова', 'Kowalska', 'Достоевская', 'Шевченко', 'Smith'):
            once = surname_normalizer.normalize(surname)
            self.assertEqual(surname_normalizer.normalize(once), once)

    def test_blank(self):
        self.assertEqual(surname_normalizer.normalize(''), '')
        self.assertEqual(surname_normalizer.normalize(None), '')


class TestSurnameEquivalence(unittest.TestCase):
    """Test gender-insensitive comparison."""

    def setUp(self):
        self.normalizer = SurnameNormalizer()

    def test_feminine_and_masculine_equivalent(self):
        self.assertTrue(self.normalizer.are_equivalent('Иванова', 'Иванов'))
        self.assertTrue(self.normalizer.are_equivalent('KOWALSKA', 'kowalski'))

    def test_different_surnames(self):
        self.assertFalse(self.normalizer.are_equivalent('Иванова', 'Петров'))

    def test_blank_handling(self):
        """Test that two blanks are equivalent and one blank is not."""
        self.assertTrue(self.normalizer.are_equivalent('', None))
        self.assertFalse(self.normalizer.are_equivalent('Ivanov', ''))

    def test_similarity(self):
        self.assertEqual(self.normalizer.get_similarity('Petrova', 'Petrov'), 1.0)
        self.assertEqual(self.normalizer.get_similarity('Petrov', ''), 0.0)
        similarity = self.normalizer.get_similarity('Petrov', 'Petrovsky')
        self.assertGreater(similarity, 0.5)
        self.assertLess(similarity, 1.0)

    def test_similarity_custom_fallback(self):
        result = self.normalizer.get_similarity('Petrov', 'Sidorov', fallback=lambda a, b: 0.42)
        self.assertEqual(result, 0.42)


if __name__ == '__main__':
    unittest.main()
