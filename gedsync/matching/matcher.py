"""
Fuzzy person matching.

Compares two person records field by field (names, dates, places, gender
and, optionally, family relations) and combines the weighted field scores
into a 0-100 confidence that both records describe the same individual.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from rapidfuzz.distance import JaroWinkler

from ..core.person import DateInfo, DatePrecision, Gender, PersonRecord
from ..data.surname_normalizer import SurnameNormalizer, surname_normalizer as shared_normalizer
from ..utils.config import MatchingOptions, default_options
from ..utils.name_normalizer import NameNormalizer
from .family import FamilyRelationsComparer

logger = logging.getLogger(__name__)

TOKEN_SEPARATORS = re.compile(r'[\s\-]+')
PLACE_SEPARATORS = re.compile(r'[,\s]+')


@dataclass(frozen=True, slots=True)
class MatchReason:
    """Points one field contributed to a match score."""
    field: str
    points: float
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {'field': self.field, 'points': self.points, 'details': self.details}


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """Result of comparing a source record with one target record."""
    source: PersonRecord
    target: PersonRecord
    score: float
    reasons: Tuple[MatchReason, ...] = field(default_factory=tuple)

    def is_match(self, options: Optional[MatchingOptions] = None) -> bool:
        """True if score >= the match threshold."""
        return self.score >= (options or default_options).match_threshold

    def is_auto_match(self, options: Optional[MatchingOptions] = None) -> bool:
        """True if score >= the auto-match threshold."""
        return self.score >= (options or default_options).auto_match_threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source_id': self.source.id,
            'target_id': self.target.id,
            'score': round(self.score, 2),
            'reasons': [reason.to_dict() for reason in self.reasons],
        }

    def __str__(self) -> str:
        reasons = ", ".join(f"{r.field}:{r.points:.1f}" for r in self.reasons)
        return f"{self.source.full_name} ↔ {self.target.full_name}: {self.score:.1f}% ({reasons})"


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _similarity(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1]."""
    if not a or not b:
        return 0.0
    return JaroWinkler.normalized_similarity(a, b)


class FuzzyMatcher:
    """
    Scores pairs of person records.

    Field scores are in [0, 1] and weighted by MatchingOptions:
    - First name: normalized equality, variant dictionary, first-token
      match (patronymic present on one side), Jaro-Winkler
    - Last name: maiden-name substitution, variant and gender-form
      equivalence, Jaro-Winkler
    - Maiden name: weighted 1.3x the effective last-name weight
    - Birth and death dates: precision-aware, decaying with the year gap
    - Birth place: normalized equality, containment, token overlap
    - Gender: a known mismatch costs the full gender weight
    - Family relations: see FamilyRelationsComparer

    The sum of points is scaled to 0-100 by the options' normalization
    factor and clamped.
    """

    MAIDEN_WEIGHT_FACTOR = 1.3
    MAIDEN_RESOLVED_SCORE = 0.95
    BONUS_POINTS = 15
    BONUS_MIN_FIRST_NAME = 0.85
    BONUS_MIN_BIRTH_DATE = 0.85

    def __init__(self, variants=None, options: Optional[MatchingOptions] = None,
                 surname_normalizer: Optional[SurnameNormalizer] = None,
                 source_index: Optional[Mapping[str, PersonRecord]] = None,
                 target_index: Optional[Mapping[str, PersonRecord]] = None):
        """
        Initialize the matcher.

        Args:
            variants: NameVariantsDictionary; dictionary checks are skipped without it
            options: Weights and thresholds (default_options when omitted)
            surname_normalizer: Surname gender normalizer (shared instance when omitted)
            source_index: Person lookup by id for the source side
            target_index: Person lookup by id for the target side
        """
        self.variants = variants
        self.options = options or default_options
        self.surname_normalizer = surname_normalizer or shared_normalizer
        self.family = FamilyRelationsComparer(
            self.compare_first_names,
            self.compare_last_names,
            source_index,
            target_index,
        )

        if not self.options.are_weights_normalized:
            logger.warning(
                f"Matching weights sum to {self.options.total_weight} instead of 100; "
                f"scores are normalized with factor {self.options.normalization_factor:.2f} "
                f"(first={self.options.first_name_weight}, last={self.options.last_name_weight}, "
                f"birth_date={self.options.birth_date_weight}, birth_place={self.options.birth_place_weight}, "
                f"death_date={self.options.death_date_weight}, gender={self.options.gender_weight}, "
                f"family={self.options.family_relations_weight})"
            )

    def set_lookups(self, source_index: Optional[Mapping[str, PersonRecord]],
                    target_index: Optional[Mapping[str, PersonRecord]]):
        """Supply the person indexes used to resolve relatives.

        The indexes are read, never modified, and must not change while
        comparisons run.
        """
        self.family.source_index = source_index
        self.family.target_index = target_index

    # Scoring

    def compare(self, source: PersonRecord, target: PersonRecord) -> MatchCandidate:
        """
        Compare two records.

        Args:
            source: Record being matched
            target: Candidate record

        Returns:
            MatchCandidate with score in [0, 100] and the contributing reasons
        """
        opts = self.options
        reasons: List[MatchReason] = []

        first_score = self.compare_first_names(source, target)
        last_score = self.compare_last_names(source, target)

        # Shift half the last-name weight to the first name when a surname is
        # missing and was not recovered from a maiden name
        missing_last = _blank(source.last_name) or _blank(target.last_name)
        if missing_last and last_score < self.MAIDEN_RESOLVED_SCORE:
            first_weight = opts.first_name_weight + opts.last_name_weight / 2
            last_weight = opts.last_name_weight / 2
        else:
            first_weight = opts.first_name_weight
            last_weight = opts.last_name_weight

        if first_score > 0:
            reasons.append(MatchReason(
                'FirstName', first_score * first_weight,
                f"{source.first_name} ↔ {target.first_name} ({first_score:.0%})",
            ))

        if last_score > 0:
            reasons.append(MatchReason(
                'LastName', last_score * last_weight,
                f"{source.last_name} ↔ {target.last_name} ({last_score:.0%})",
            ))

        maiden_score = self.compare_maiden_names(source, target)
        if maiden_score > 0:
            reasons.append(MatchReason(
                'MaidenName', maiden_score * last_weight * self.MAIDEN_WEIGHT_FACTOR,
                f"{source.maiden_name} ↔ {target.maiden_name} ({maiden_score:.0%})",
            ))

        birth_score = self.compare_dates(source.birth_date, target.birth_date)
        if birth_score > 0:
            reasons.append(MatchReason(
                'BirthDate', birth_score * opts.birth_date_weight,
                f"{source.birth_date} ↔ {target.birth_date} ({birth_score:.0%})",
            ))

        place_score = self.compare_places(source.birth_place, target.birth_place)
        if place_score > 0:
            reasons.append(MatchReason(
                'BirthPlace', place_score * opts.birth_place_weight,
                f"{source.birth_place} ↔ {target.birth_place} ({place_score:.0%})",
            ))

        gender_score = self.compare_gender(source.gender, target.gender)
        if gender_score < 1.0:
            reasons.append(MatchReason(
                'Gender', (gender_score * opts.gender_weight) - opts.gender_weight,
                f"{source.gender.value} ↔ {target.gender.value} (penalty)",
            ))

        death_score = self.compare_dates(source.death_date, target.death_date)
        if death_score > 0:
            reasons.append(MatchReason(
                'DeathDate', death_score * opts.death_date_weight,
                f"{source.death_date} ↔ {target.death_date} ({death_score:.0%})",
            ))

        if opts.family_relations_weight > 0:
            family_score = self.compare_family_relations(source, target)
            if family_score > 0:
                reasons.append(MatchReason(
                    'FamilyRelations', family_score * opts.family_relations_weight,
                    f"relatives ({family_score:.0%})",
                ))

        if (last_score >= self.MAIDEN_RESOLVED_SCORE
                and first_score >= self.BONUS_MIN_FIRST_NAME
                and birth_score >= self.BONUS_MIN_BIRTH_DATE):
            reasons.append(MatchReason(
                'Bonus', float(self.BONUS_POINTS),
                "surname, first name and birth date agree",
            ))

        raw_score = sum(reason.points for reason in reasons)
        score = min(100.0, max(0.0, raw_score * opts.normalization_factor))

        return MatchCandidate(source=source, target=target, score=score, reasons=tuple(reasons))

    def find_matches(self, source: PersonRecord, candidates: Iterable[PersonRecord],
                     min_score: float = 0) -> List[MatchCandidate]:
        """
        Score candidates against a source record.

        Candidates with a conflicting known gender, or whose birth year is
        further than max_birth_year_difference from the source's, are
        skipped without scoring.

        Args:
            source: Record being matched
            candidates: Records to compare against
            min_score: Minimum score to include

        Returns:
            Matches with score >= min_score, best first; equal scores keep
            the candidates' order
        """
        matches = []
        for candidate in candidates:
            if (source.gender != Gender.UNKNOWN and candidate.gender != Gender.UNKNOWN
                    and source.gender != candidate.gender):
                logger.debug(
                    f"Skipping candidate {candidate.full_name} - gender mismatch "
                    f"({source.gender.value} != {candidate.gender.value})"
                )
                continue

            if source.birth_year is not None and candidate.birth_year is not None:
                year_diff = abs(source.birth_year - candidate.birth_year)
                if year_diff > self.options.max_birth_year_difference:
                    logger.debug(
                        f"Skipping candidate {candidate.full_name} - birth year too different "
                        f"({source.birth_year} vs {candidate.birth_year}, diff: {year_diff})"
                    )
                    continue

            match = self.compare(source, candidate)
            reasons = ", ".join(f"{r.field}:{r.points:.1f}" for r in match.reasons)
            logger.debug(
                f"Candidate match: {source.full_name} vs {candidate.full_name} - "
                f"Score: {match.score:.1f}% ({reasons})"
            )
            if match.score >= min_score:
                matches.append(match)

        # sort() is stable
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def is_likely_duplicate(self, source: PersonRecord, target: PersonRecord) -> bool:
        """True if the pair scores at least the auto-match threshold."""
        return self.compare(source, target).score >= self.options.auto_match_threshold

    # Names

    def compare_first_names(self, source: PersonRecord, target: PersonRecord) -> float:
        """First-name similarity in [0, 1]."""
        if _blank(source.first_name) or _blank(target.first_name):
            return 0.0

        source_key = source.normalized_first_name
        target_key = target.normalized_first_name
        if source_key and source_key == target_key:
            return 1.0

        if self.variants is not None:
            if self.variants.are_equivalent(source.first_name, target.first_name):
                return 0.95

            source_names = self._first_name_variants(source)
            target_names = self._first_name_variants(target)
            for sv in source_names:
                for tv in target_names:
                    if self.variants.are_equivalent(sv, tv):
                        return 0.90

        source_norm = NameNormalizer.normalize_for_comparison(source.first_name)
        target_norm = NameNormalizer.normalize_for_comparison(target.first_name)

        source_words = [w for w in TOKEN_SEPARATORS.split(source_norm) if w]
        target_words = [w for w in TOKEN_SEPARATORS.split(target_norm) if w]
        if source_words and target_words and source_words[0] == target_words[0]:
            if len(source_words) == 1 and len(target_words) == 1:
                return 1.0
            # Владимир vs Владимир Витальевич
            if abs(len(source_words) - len(target_words)) == 1:
                return 0.90
            return 0.85

        similarity = _similarity(source_norm, target_norm)

        # Diminutives contained in the full name
        if (source_norm in target_norm or target_norm in source_norm) and similarity > 0.7:
            similarity = max(similarity, 0.85)
        return similarity

    def compare_last_names(self, source: PersonRecord, target: PersonRecord) -> float:
        """Last-name similarity in [0, 1]; missing surnames get neutral scores."""
        source_last = None if _blank(source.last_name) else source.last_name
        target_last = None if _blank(target.last_name) else target.last_name

        # Maiden name standing in for a missing surname
        if source_last is None and target_last is not None and not _blank(source.maiden_name):
            if self._same_surname(source.maiden_name, target_last):
                return 1.0
        if target_last is None and source_last is not None and not _blank(target.maiden_name):
            if self._same_surname(target.maiden_name, source_last):
                return 1.0

        if source_last is None and target_last is None:
            return 0.5
        if source_last is None or target_last is None:
            return 0.3

        source_key = source.normalized_last_name
        target_key = target.normalized_last_name
        if source_key and source_key == target_key:
            return 1.0

        if not _blank(source.maiden_name) and NameNormalizer.normalize(source.maiden_name) == target_key:
            return 0.95
        if not _blank(target.maiden_name) and NameNormalizer.normalize(target.maiden_name) == source_key:
            return 0.95

        if self.surnames_equivalent(source_last, target_last):
            return 0.90

        return _similarity(
            NameNormalizer.normalize_for_comparison(source_last),
            NameNormalizer.normalize_for_comparison(target_last),
        )

    def compare_maiden_names(self, source: PersonRecord, target: PersonRecord) -> float:
        """Maiden-name similarity; 0 unless both records have one."""
        if _blank(source.maiden_name) or _blank(target.maiden_name):
            return 0.0

        source_norm = NameNormalizer.normalize_for_comparison(source.maiden_name)
        target_norm = NameNormalizer.normalize_for_comparison(target.maiden_name)
        if source_norm == target_norm:
            return 1.0

        if self.surnames_equivalent(source.maiden_name, target.maiden_name):
            return 0.95

        return _similarity(source_norm, target_norm)

    def surnames_equivalent(self, surname1: str, surname2: str) -> bool:
        """Dictionary variants or gender forms of one surname, in any script."""
        if self.variants is not None and self.variants.are_equivalent_surnames(surname1, surname2):
            return True
        if self.surname_normalizer.are_equivalent(surname1, surname2):
            return True
        return self._same_surname(
            self.surname_normalizer.normalize(surname1),
            self.surname_normalizer.normalize(surname2),
        )

    @staticmethod
    def _same_surname(surname1: Optional[str], surname2: Optional[str]) -> bool:
        key1 = NameNormalizer.normalize(surname1)
        return key1 is not None and key1 == NameNormalizer.normalize(surname2)

    @staticmethod
    def _first_name_variants(person: PersonRecord) -> Set[str]:
        names = set()
        for value in (person.first_name, person.nickname, person.middle_name) + tuple(person.name_variants):
            if not _blank(value):
                names.add(value.strip().lower())
        return names

    # Dates, places, gender, relatives

    @staticmethod
    def compare_dates(source: Optional[DateInfo], target: Optional[DateInfo]) -> float:
        """
        Date similarity in [0, 1].

        Same year: scored at the lesser precision of the two dates. Different
        years: 0.80 within 1 year, 0.60 within 2, 0.40 within 5, 0.20 within
        10, otherwise 0.
        """
        if source is None or target is None or source.date is None or target.date is None:
            return 0.0

        year_diff = abs(source.year - target.year)
        if year_diff == 0:
            precision = min(source.precision, target.precision)
            if precision >= DatePrecision.MONTH:
                if source.month != target.month:
                    return 0.85
                if precision >= DatePrecision.DAY:
                    return 1.0 if source.day == target.day else 0.95
                return 0.95
            return 0.90

        if year_diff <= 1:
            return 0.80
        if year_diff <= 2:
            return 0.60
        if year_diff <= 5:
            return 0.40
        if year_diff <= 10:
            return 0.20
        return 0.0

    @staticmethod
    def compare_places(source: Optional[str], target: Optional[str]) -> float:
        """Place similarity: equality, containment, then token Jaccard."""
        if _blank(source) or _blank(target):
            return 0.0

        source_norm = NameNormalizer.normalize_place(source)
        target_norm = NameNormalizer.normalize_place(target)
        if source_norm == target_norm:
            return 1.0
        if source_norm in target_norm or target_norm in source_norm:
            return 0.80

        source_tokens = {t for t in PLACE_SEPARATORS.split(source_norm) if len(t) > 2}
        target_tokens = {t for t in PLACE_SEPARATORS.split(target_norm) if len(t) > 2}
        if not source_tokens or not target_tokens:
            return 0.0
        return len(source_tokens & target_tokens) / len(source_tokens | target_tokens)

    @staticmethod
    def compare_gender(source: Gender, target: Gender) -> float:
        """1.0 unless both genders are known and differ."""
        if source == Gender.UNKNOWN or target == Gender.UNKNOWN:
            return 1.0
        return 1.0 if source == target else 0.0

    def compare_family_relations(self, source: PersonRecord, target: PersonRecord) -> float:
        """Family relations similarity in [0, 1]."""
        return self.family.compare(source, target)
