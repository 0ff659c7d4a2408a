"""Name variant dictionary for given names and surnames.

Each row of variant data (built-in seed or CSV) forms one equivalence group:
every member of the row is equivalent to every other member. Groups are
keyed by lowercase name, and a name that appears in several rows belongs to
all of them.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from ..utils.name_normalizer import NameNormalizer
from ..utils.transliterator import Transliterator

logger = logging.getLogger(__name__)

BUILTIN_DATA_FILE = Path(__file__).parent / 'builtin_name_variants.json'


class _VariantGroups:
    """One equivalence-group map (given names or surnames)."""

    def __init__(self):
        self.groups: Dict[str, Set[str]] = {}
        # name -> base of the first row it appeared in
        self.canonical: Dict[str, str] = {}
        self.bases: List[str] = []

    def add(self, base: str, variants: Iterable[str]):
        key = base.strip().lower()
        if not key:
            return

        members = {key}
        members.update(v.strip().lower() for v in variants if v and v.strip())

        if key not in self.canonical:
            self.bases.append(key)
        for member in members:
            self.groups.setdefault(member, set()).update(members - {member})
            self.canonical.setdefault(member, key)

    def same_group(self, a: str, b: str) -> bool:
        return b in self.groups.get(a, ()) or a in self.groups.get(b, ())

    def are_equivalent(self, name1: Optional[str], name2: Optional[str]) -> bool:
        if not name1 or not name2 or not name1.strip() or not name2.strip():
            return False

        a = name1.strip().lower()
        b = name2.strip().lower()
        if a == b or self.same_group(a, b):
            return True

        ta = NameNormalizer.transliterate(a)
        tb = NameNormalizer.transliterate(b)
        return ta == tb or self.same_group(ta, tb)


class NameVariantsDictionary:
    """Equivalence groups for given names and surnames.

    Loading is additive: CSV tables can be added at any time on top of the
    built-in seed set. Lookups never modify the groups.
    """

    HEADER_NAMES = ('name', 'given_name', 'givenname', 'surname')

    def __init__(self, load_builtin: bool = True):
        """Create a dictionary.

        Args:
            load_builtin: Load the built-in Slavic seed groups
        """
        self._given = _VariantGroups()
        self._surnames = _VariantGroups()

        if load_builtin:
            self.load_builtin()

    def __repr__(self) -> str:
        return (f"NameVariantsDictionary(given_names={self.given_name_count}, "
                f"surnames={self.surname_count})")

    @property
    def given_name_count(self) -> int:
        """Number of distinct given names known to the dictionary."""
        return len(self._given.groups)

    @property
    def surname_count(self) -> int:
        """Number of distinct surnames known to the dictionary."""
        return len(self._surnames.groups)

    # Loading

    def load_builtin(self):
        """Add the built-in seed groups from builtin_name_variants.json."""
        with open(BUILTIN_DATA_FILE, encoding='utf-8') as f:
            data = json.load(f)

        for base, variants in data.get('given_names', {}).items():
            self.add_given_name_variants(base, variants)
        for base, variants in data.get('surnames', {}).items():
            self.add_surname_variants(base, variants)

        logger.debug(
            f"Loaded {len(data.get('given_names', {}))} built-in given name groups and "
            f"{len(data.get('surnames', {}))} surname groups"
        )

    def load_csv(self, path: Union[str, Path], surnames: bool = False) -> int:
        """Load variant rows from a CSV file.

        Rows look like `name,variant1|variant2` or `name,"variant1 variant2"`;
        further columns are read as more variants. A header row whose first
        cell is name/given_name/surname is skipped. Rows without a variant
        are logged and skipped.

        Args:
            path: CSV file path
            surnames: Load into the surname groups instead of given names

        Returns:
            Number of rows loaded

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        kind = 'surname' if surnames else 'given name'
        logger.info(f"Loading {kind} variants from {path}")

        count = 0
        with open(path, encoding='utf-8-sig', newline='') as f:
            for line_no, row in enumerate(csv.reader(f), start=1):
                if not row or not any(cell.strip() for cell in row):
                    continue

                name = row[0].strip()
                if line_no == 1 and name.lower() in self.HEADER_NAMES:
                    continue

                variants = []
                for cell in row[1:]:
                    variants.extend(v for v in cell.replace('|', ' ').split() if v)

                if not name or not variants:
                    logger.warning(f"{path}:{line_no}: skipping unreadable variant row {row!r}")
                    continue

                if surnames:
                    self.add_surname_variants(name, variants)
                else:
                    self.add_given_name_variants(name, variants)
                count += 1

        logger.info(f"Loaded {count} {kind} entries from {path}")
        return count

    def load_from_csv(self, given_names_path: Optional[Union[str, Path]] = None,
                      surnames_path: Optional[Union[str, Path]] = None) -> int:
        """Load a given-name table and/or a surname table.

        Returns:
            Total number of rows loaded
        """
        total = 0
        if given_names_path is not None:
            total += self.load_csv(given_names_path)
        if surnames_path is not None:
            total += self.load_csv(surnames_path, surnames=True)
        return total

    def add_given_name_variants(self, base_name: str, variants: Iterable[str]):
        """Add a group of equivalent given names. Commutative and idempotent."""
        self._given.add(base_name, variants)

    def add_surname_variants(self, base_name: str, variants: Iterable[str]):
        """Add a group of equivalent surnames. Commutative and idempotent."""
        self._surnames.add(base_name, variants)

    # Lookups

    def are_equivalent(self, name1: Optional[str], name2: Optional[str]) -> bool:
        """Check if two given names are equivalent.

        True when the names are equal ignoring case, share a group, or
        agree after transliteration. Blank names are never equivalent.
        """
        return self._given.are_equivalent(name1, name2)

    def are_equivalent_surnames(self, name1: Optional[str], name2: Optional[str]) -> bool:
        """Check if two surnames are equivalent (same rules as given names)."""
        return self._surnames.are_equivalent(name1, name2)

    def get_variants(self, name: Optional[str]) -> Set[str]:
        """All given names sharing a group with name (lowercase, name excluded)."""
        if not name:
            return set()
        return set(self._given.groups.get(name.strip().lower(), ()))

    def get_surname_variants(self, name: Optional[str]) -> Set[str]:
        """All surnames sharing a group with name (lowercase, name excluded)."""
        if not name:
            return set()
        return set(self._surnames.groups.get(name.strip().lower(), ()))

    def is_known_given_name(self, name: Optional[str]) -> bool:
        return bool(name) and name.strip().lower() in self._given.groups

    def is_known_surname(self, name: Optional[str]) -> bool:
        return bool(name) and name.strip().lower() in self._surnames.groups

    def find_canonical_given_name(self, name: Optional[str]) -> Optional[str]:
        """Canonical form of a given name, as a lowercase ASCII string.

        The canonical form is the base of the first group the name was
        added with, transliterated to ASCII ('sasha' -> 'aleksandr').

        Returns:
            Canonical form, or None for an unknown name
        """
        return self._find_canonical(self._given, name)

    def find_canonical_surname(self, name: Optional[str]) -> Optional[str]:
        """Canonical form of a surname (see find_canonical_given_name)."""
        return self._find_canonical(self._surnames, name)

    def canonical_given_names(self) -> List[str]:
        """ASCII canonical forms of all given-name groups, in load order."""
        return [Transliterator.to_ascii(base).lower() for base in self._given.bases]

    def canonical_surnames(self) -> List[str]:
        """ASCII canonical forms of all surname groups, in load order."""
        return [Transliterator.to_ascii(base).lower() for base in self._surnames.bases]

    @staticmethod
    def _find_canonical(groups: _VariantGroups, name: Optional[str]) -> Optional[str]:
        if not name or not name.strip():
            return None
        base = groups.canonical.get(name.strip().lower())
        if base is None:
            return None
        return Transliterator.to_ascii(base).lower()

    def transliterate(self, text: Optional[str]) -> Optional[str]:
        """Lowercase Latin rendering used for equivalence checks."""
        return NameNormalizer.transliterate(text)
