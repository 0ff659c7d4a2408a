"""Person records exchanged between the name-fix pipeline and the matcher."""

import datetime
import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Optional, Tuple, Dict, Any, Mapping, Self

from ..utils.name_normalizer import NameNormalizer


class Gender(Enum):
    """Recorded gender of a person."""
    MALE = "M"
    FEMALE = "F"
    UNKNOWN = "U"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'Gender':
        """Parse 'M'/'F'/'U' or 'male'/'female'; anything else is UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        if isinstance(value, Gender):
            return value

        text = str(value).strip().lower()
        if text in ('m', 'male'):
            return cls.MALE
        if text in ('f', 'female'):
            return cls.FEMALE
        return cls.UNKNOWN


class DatePrecision(IntEnum):
    """How much of a date is known. Ordered from coarse to fine."""
    YEAR = 1
    MONTH = 2
    DAY = 3


class DateModifier(Enum):
    """GEDCOM date modifiers."""
    EXACT = ""
    ABOUT = "ABT"
    ESTIMATED = "EST"
    CALCULATED = "CAL"
    BEFORE = "BEF"
    AFTER = "AFT"
    BETWEEN = "BET"


MONTHS = ['JAN', 'FEB', 'MAR', 'APR', 'MAY', 'JUN',
          'JUL', 'AUG', 'SEP', 'OCT', 'NOV', 'DEC']

_MODIFIER_WORDS = {
    'ABT': DateModifier.ABOUT,
    'ABOUT': DateModifier.ABOUT,
    'CIRCA': DateModifier.ABOUT,
    'CA': DateModifier.ABOUT,
    'EST': DateModifier.ESTIMATED,
    'CAL': DateModifier.CALCULATED,
    'BEF': DateModifier.BEFORE,
    'BEFORE': DateModifier.BEFORE,
    'AFT': DateModifier.AFTER,
    'AFTER': DateModifier.AFTER,
    'BET': DateModifier.BETWEEN,
    'BETWEEN': DateModifier.BETWEEN,
}

_ISO_DATE = re.compile(r'^(\d{3,4})-(\d{1,2})(?:-(\d{1,2}))?$')


@dataclass(frozen=True, slots=True)
class DateInfo:
    """A possibly partial date as found in a genealogical source.

    Attributes:
        original: Date text as written in the source
        year: Resolved year, if any
        month: Resolved month (1-12), if any
        day: Resolved day of month, if any
        modifier: GEDCOM modifier (about, before, ...)
    """

    original: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    modifier: DateModifier = DateModifier.EXACT

    @property
    def has_value(self) -> bool:
        return self.year is not None

    @property
    def precision(self) -> Optional[DatePrecision]:
        """Precision derived from which date parts are present."""
        if self.year is None:
            return None
        if self.month is not None and self.day is not None:
            return DatePrecision.DAY
        if self.month is not None:
            return DatePrecision.MONTH
        return DatePrecision.YEAR

    @property
    def date(self) -> Optional[datetime.date]:
        """Calendar date with missing month/day defaulted to 1."""
        if self.year is None:
            return None
        try:
            return datetime.date(self.year, self.month or 1, self.day or 1)
        except ValueError:
            return None

    def to_iso(self) -> Optional[str]:
        """Render as YYYY-MM-DD, YYYY-MM or YYYY."""
        if self.year is None:
            return None
        if self.month is not None and self.day is not None:
            return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
        if self.month is not None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}"

    def __str__(self) -> str:
        iso = self.to_iso()
        if iso is None:
            return self.original or ""
        if self.modifier != DateModifier.EXACT:
            return f"{self.modifier.value} {iso}"
        return iso

    @classmethod
    def from_parts(cls, year: Optional[int], month: Optional[int] = None,
                   day: Optional[int] = None) -> Self:
        """Build a date from its numeric parts."""
        return cls(original=None, year=year, month=month, day=day)

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional[Self]:
        """Parse GEDCOM or ISO date text.

        Understands '1950', 'MAR 1950', '12 MAR 1950', '1950-03-12' and the
        ABT/BEF/AFT/CAL/EST/BET..AND modifiers. For ranges the first date is
        kept. Text that cannot be read keeps only `original`.

        Args:
            text: Date text from the source

        Returns:
            DateInfo, or None for blank input
        """
        if not text or not text.strip():
            return None

        original = text.strip()
        working = original.upper().replace('.', ' ')
        tokens = working.split()

        modifier = DateModifier.EXACT
        if tokens and tokens[0] in _MODIFIER_WORDS:
            modifier = _MODIFIER_WORDS[tokens[0]]
            tokens = tokens[1:]

        # Keep the first date of a BET x AND y range
        if 'AND' in tokens:
            tokens = tokens[:tokens.index('AND')]

        if len(tokens) == 1:
            iso = _ISO_DATE.match(tokens[0])
            if iso:
                year = int(iso.group(1))
                month = int(iso.group(2))
                day = int(iso.group(3)) if iso.group(3) else None
                if 1 <= month <= 12 and (day is None or 1 <= day <= 31):
                    return cls(original, year, month, day, modifier)
                return cls(original=original)

        year = month = day = None
        for token in tokens:
            if token[:3] in MONTHS and token.isalpha():
                month = MONTHS.index(token[:3]) + 1
            elif token.isdigit():
                number = int(token)
                if len(token) >= 3:
                    year = number
                elif day is None and 1 <= number <= 31:
                    day = number
            else:
                return cls(original=original)

        if year is None:
            return cls(original=original)
        if month is None:
            day = None

        return cls(original, year, month, day, modifier)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'original': self.original,
            'year': self.year,
            'month': self.month,
            'day': self.day,
            'modifier': self.modifier.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Self:
        """Create a DateInfo from its dictionary representation."""
        modifier = data.get('modifier') or 'EXACT'
        try:
            modifier = DateModifier[modifier]
        except KeyError:
            raise ValueError(f"Unknown date modifier: {modifier!r}")
        return cls(
            original=data.get('original'),
            year=data.get('year'),
            month=data.get('month'),
            day=data.get('day'),
            modifier=modifier,
        )


def _date_field(value: Any) -> Optional[DateInfo]:
    if value is None or isinstance(value, DateInfo):
        return value
    if isinstance(value, str):
        return DateInfo.parse(value)
    if isinstance(value, dict):
        return DateInfo.from_dict(value)
    raise ValueError(f"Cannot read date from {value!r}")


@dataclass(frozen=True, slots=True)
class PersonRecord:
    """Immutable snapshot of one person from a genealogical source.

    Relationship identifiers are opaque keys; they are only resolved through
    lookup tables supplied to the matcher and may be missing or dangling.

    Attributes:
        id: Source-specific identifier (e.g. '@I12@')
        source: Free-text tag naming the source of the record
        first_name / last_name / maiden_name / middle_name: Primary name fields
        suffix: Generational or professional suffix (Jr., III, Ph.D.)
        title: Honorific title (Dr., князь)
        nickname: Nickname or diminutive
        name_variants: Alternate name strings collected from the source
        localized_names: Per-locale name fields, {locale code: {field: value}};
            stored read-only and left out of the hash
        gender: Recorded gender
        birth_date / death_date / burial_date: Event dates
        birth_place / death_place / burial_place: Free-text places
        father_id / mother_id / spouse_ids / children_ids / sibling_ids:
            Keys of related records
    """

    id: str
    source: Optional[str] = None

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    maiden_name: Optional[str] = None
    middle_name: Optional[str] = None
    suffix: Optional[str] = None
    title: Optional[str] = None
    nickname: Optional[str] = None
    name_variants: Tuple[str, ...] = ()
    localized_names: Mapping[str, Mapping[str, str]] = field(default_factory=dict, hash=False)

    gender: Gender = Gender.UNKNOWN

    birth_date: Optional[DateInfo] = None
    death_date: Optional[DateInfo] = None
    burial_date: Optional[DateInfo] = None

    birth_place: Optional[str] = None
    death_place: Optional[str] = None
    burial_place: Optional[str] = None

    father_id: Optional[str] = None
    mother_id: Optional[str] = None
    spouse_ids: Tuple[str, ...] = ()
    children_ids: Tuple[str, ...] = ()
    sibling_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        readonly = MappingProxyType({
            loc: MappingProxyType(dict(fields)) for loc, fields in (self.localized_names or {}).items()
        })
        object.__setattr__(self, 'localized_names', readonly)

    def __str__(self) -> str:
        name = self.full_name or "Unknown"
        birth = f" (*{self.birth_year})" if self.birth_year else ""
        death = f" (+{self.death_year})" if self.death_year else ""
        return f"{name}{birth}{death} [{self.source or '?'}:{self.id}]"

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p and p.strip())

    @property
    def birth_year(self) -> Optional[int]:
        return self.birth_date.year if self.birth_date else None

    @property
    def death_year(self) -> Optional[int]:
        return self.death_date.year if self.death_date else None

    @property
    def normalized_first_name(self) -> Optional[str]:
        """First name transliterated and lowercased with separators removed."""
        return NameNormalizer.normalize(self.first_name)

    @property
    def normalized_last_name(self) -> Optional[str]:
        """Last name transliterated and lowercased with separators removed."""
        return NameNormalizer.normalize(self.last_name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert person to a JSON-compatible dictionary."""
        return {
            'id': self.id,
            'source': self.source,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'maiden_name': self.maiden_name,
            'middle_name': self.middle_name,
            'suffix': self.suffix,
            'title': self.title,
            'nickname': self.nickname,
            'name_variants': list(self.name_variants),
            'localized_names': {loc: dict(fields) for loc, fields in self.localized_names.items()},
            'gender': self.gender.value,
            'birth_date': self.birth_date.to_dict() if self.birth_date else None,
            'death_date': self.death_date.to_dict() if self.death_date else None,
            'burial_date': self.burial_date.to_dict() if self.burial_date else None,
            'birth_place': self.birth_place,
            'death_place': self.death_place,
            'burial_place': self.burial_place,
            'father_id': self.father_id,
            'mother_id': self.mother_id,
            'spouse_ids': list(self.spouse_ids),
            'children_ids': list(self.children_ids),
            'sibling_ids': list(self.sibling_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Self:
        """Create a person from a dictionary.

        Dates may be given as dictionaries (see DateInfo.to_dict) or as
        GEDCOM/ISO text.

        Raises:
            ValueError: If the record has no id or a date cannot be read
        """
        if not data.get('id'):
            raise ValueError("Person record requires an 'id'")

        return cls(
            id=str(data['id']),
            source=data.get('source'),
            first_name=data.get('first_name'),
            last_name=data.get('last_name'),
            maiden_name=data.get('maiden_name'),
            middle_name=data.get('middle_name'),
            suffix=data.get('suffix'),
            title=data.get('title'),
            nickname=data.get('nickname'),
            name_variants=tuple(data.get('name_variants') or ()),
            localized_names={
                loc: dict(fields)
                for loc, fields in (data.get('localized_names') or {}).items()
            },
            gender=Gender.parse(data.get('gender')),
            birth_date=_date_field(data.get('birth_date')),
            death_date=_date_field(data.get('death_date')),
            burial_date=_date_field(data.get('burial_date')),
            birth_place=data.get('birth_place'),
            death_place=data.get('death_place'),
            burial_place=data.get('burial_place'),
            father_id=data.get('father_id'),
            mother_id=data.get('mother_id'),
            spouse_ids=tuple(data.get('spouse_ids') or ()),
            children_ids=tuple(data.get('children_ids') or ()),
            sibling_ids=tuple(data.get('sibling_ids') or ()),
        )
