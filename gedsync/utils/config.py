"""Configuration for the fuzzy matcher."""

from dataclasses import dataclass, fields
from typing import Dict, Any, Self


@dataclass(frozen=True)
class MatchingOptions:
    """Weights and thresholds used when scoring a pair of person records.

    Weights need not sum to 100: the final score is always scaled by
    `normalization_factor` so scores stay comparable across configurations.
    """

    # Per-field weights
    first_name_weight: int = 30
    last_name_weight: int = 25
    birth_date_weight: int = 20
    birth_place_weight: int = 15
    death_date_weight: int = 5
    gender_weight: int = 5
    family_relations_weight: int = 0

    # Thresholds (0-100)
    match_threshold: int = 70
    auto_match_threshold: int = 90

    # Candidate pre-filter
    max_birth_year_difference: int = 10

    WEIGHT_FIELDS = (
        'first_name_weight', 'last_name_weight', 'birth_date_weight',
        'birth_place_weight', 'death_date_weight', 'gender_weight',
        'family_relations_weight',
    )

    # Keys used by older JSON configuration files
    CAMEL_CASE_KEYS = {
        'firstNameWeight': 'first_name_weight',
        'lastNameWeight': 'last_name_weight',
        'birthDateWeight': 'birth_date_weight',
        'birthPlaceWeight': 'birth_place_weight',
        'deathDateWeight': 'death_date_weight',
        'genderWeight': 'gender_weight',
        'familyRelationsWeight': 'family_relations_weight',
        'matchThreshold': 'match_threshold',
        'autoMatchThreshold': 'auto_match_threshold',
        'maxBirthYearDifference': 'max_birth_year_difference',
    }

    def __post_init__(self):
        """Validate weights and thresholds."""
        for name in self.WEIGHT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

        for name in ('match_threshold', 'auto_match_threshold'):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")

        if self.max_birth_year_difference < 0:
            raise ValueError(
                f"max_birth_year_difference must be non-negative, got {self.max_birth_year_difference}"
            )

    @property
    def total_weight(self) -> int:
        """Sum of all configured weights."""
        return sum(getattr(self, name) for name in self.WEIGHT_FIELDS)

    @property
    def are_weights_normalized(self) -> bool:
        return self.total_weight == 100

    @property
    def normalization_factor(self) -> float:
        """Factor that scales a raw point sum to the 0-100 range."""
        total = self.total_weight
        if total == 0:
            return 1.0
        return 100.0 / total

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a snake_case dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Self:
        """Create options from a dictionary.

        Accepts snake_case keys and the camelCase keys of older
        configuration files; unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = cls.CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                kwargs[name] = int(value)
        return cls(**kwargs)


# Global configuration instance
default_options = MatchingOptions()
