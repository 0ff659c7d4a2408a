"""Working context for one run of the name-fix pipeline.

A NameFixContext holds a mutable copy of a person's name fields: the
primary fields plus a per-locale map of alternate renderings. Every
mutation goes through the context and is appended to `changes`, so a run
can be reviewed (dry run) or rolled back from the audit trail.

A context is owned by a single pipeline run and must not be shared
between threads.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any, Iterable, Self

from ..core.person import PersonRecord, Gender
from ..utils.script_detector import Script

logger = logging.getLogger(__name__)


class Locale(str, Enum):
    """Locale slots a name can be rendered in."""
    EN_US = "en-US"
    EN = "en"
    RU = "ru"
    UK = "uk"
    BE = "be"
    LT = "lt"
    ET = "et"
    LV = "lv"
    PL = "pl"
    DE = "de"
    FR = "fr"
    ES = "es"
    PT = "pt"
    IT = "it"
    HE = "he"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: Any) -> 'Locale':
        """Parse a locale code such as 'en-US', 'en_us' or 'RU'.

        Raises:
            ValueError: If the code is not a known locale
        """
        if isinstance(code, Locale):
            return code
        if isinstance(code, str):
            wanted = code.strip().replace('_', '-').lower()
            for locale in cls:
                if locale.value.lower() == wanted:
                    return locale
        raise ValueError(f"Unknown locale code: {code!r}")

    @property
    def is_english(self) -> bool:
        return self in (Locale.EN_US, Locale.EN)

    @property
    def is_cyrillic(self) -> bool:
        return self in (Locale.RU, Locale.UK, Locale.BE)

    @property
    def is_latin_language(self) -> bool:
        """Non-English locale written in Latin script."""
        return self in (Locale.LT, Locale.ET, Locale.LV, Locale.PL, Locale.DE,
                        Locale.FR, Locale.ES, Locale.PT, Locale.IT)

    @property
    def script(self) -> Script:
        """Script names in this locale are normally written in."""
        if self.is_cyrillic:
            return Script.CYRILLIC
        if self == Locale.HE:
            return Script.HEBREW
        return Script.LATIN


class NameField(str, Enum):
    """Name fields held per locale and as primary fields."""
    FIRST_NAME = "first_name"
    MIDDLE_NAME = "middle_name"
    LAST_NAME = "last_name"
    MAIDEN_NAME = "maiden_name"
    SUFFIX = "suffix"
    TITLE = "title"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: Any) -> 'NameField':
        """Parse a field name such as 'first_name'.

        Raises:
            ValueError: If the name is not a known field
        """
        if isinstance(name, NameField):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown name field: {name!r}")


# Fields that can carry a surname
SURNAME_FIELDS = (NameField.LAST_NAME, NameField.MAIDEN_NAME)

# Fields holding a personal name (as opposed to suffix/title)
PERSONAL_FIELDS = (NameField.FIRST_NAME, NameField.MIDDLE_NAME,
                   NameField.LAST_NAME, NameField.MAIDEN_NAME)

NICKNAME_FIELD = "nickname"


@dataclass(frozen=True, slots=True)
class NameChange:
    """One audited change (or warning) made during a pipeline run.

    Attributes:
        field: Changed field ('first_name', ..., or 'nickname')
        old_value: Value before the change
        new_value: Value after the change
        reason: Human-readable reason
        handler: Name of the handler that made the change
        is_warning: Suggestion only; nothing was modified
        from_locale: Locale the old value lived in (None for primary fields)
        to_locale: Locale the new value lives in (None for primary fields)
    """

    field: str
    old_value: Optional[str]
    new_value: Optional[str]
    reason: str
    handler: Optional[str] = None
    is_warning: bool = False
    from_locale: Optional[Locale] = None
    to_locale: Optional[Locale] = None

    def __str__(self) -> str:
        src = f"[{self.from_locale.value}]" if self.from_locale else ""
        dst = f"[{self.to_locale.value}]" if self.to_locale else ""
        old = self.old_value if self.old_value is not None else "(null)"
        new = self.new_value if self.new_value is not None else "(null)"
        return f"{self.field}{src} '{old}' -> {self.field}{dst} '{new}': {self.reason}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            'field': self.field,
            'old_value': self.old_value,
            'new_value': self.new_value,
            'reason': self.reason,
            'handler': self.handler,
            'is_warning': self.is_warning,
            'from_locale': self.from_locale.value if self.from_locale else None,
            'to_locale': self.to_locale.value if self.to_locale else None,
        }


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass
class NameFixContext:
    """Mutable working copy of one person's names.

    Attributes:
        person_id: Identifier of the record being processed
        gender: Gender of the person (drives feminine surname handling)
        first_name ... title: Primary name fields
        nicknames: Nicknames collected so far
        names: Per-locale name fields, names[locale][field] = value
        spouse_last_name: Surname of the spouse, when known
        spouse_last_names: Spouse surname per locale, when known
        changes: Append-only audit trail
        person: Record the context was created from, if any
    """

    person_id: str
    gender: Gender = Gender.UNKNOWN
    display_name: Optional[str] = None

    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    maiden_name: Optional[str] = None
    suffix: Optional[str] = None
    title: Optional[str] = None
    nicknames: List[str] = field(default_factory=list)

    names: Dict[Locale, Dict[NameField, str]] = field(default_factory=dict)

    spouse_last_name: Optional[str] = None
    spouse_last_names: Dict[Locale, str] = field(default_factory=dict)

    changes: List[NameChange] = field(default_factory=list)
    person: Optional[PersonRecord] = None

    def __str__(self) -> str:
        name = self.display_name or " ".join(
            p for p in (self.first_name, self.middle_name, self.last_name) if p
        )
        return f"{name or 'Unknown'} [{self.person_id}]"

    # Construction

    @classmethod
    def from_person(cls, person: PersonRecord,
                    spouse_last_name: Optional[str] = None,
                    spouse_last_names: Optional[Dict[Any, str]] = None) -> Self:
        """Create a working context from a person record.

        Args:
            person: Record to copy names from
            spouse_last_name: Spouse surname hint for the primary fields
            spouse_last_names: Spouse surname hints per locale code

        Raises:
            ValueError: If the record carries an unknown locale code or field
        """
        names: Dict[Locale, Dict[NameField, str]] = {}
        for code, fields in (person.localized_names or {}).items():
            locale = Locale.parse(code)
            slot = names.setdefault(locale, {})
            for field_name, value in fields.items():
                if not _blank(value):
                    slot[NameField.parse(field_name)] = value

        hints = {}
        for code, value in (spouse_last_names or {}).items():
            if not _blank(value):
                hints[Locale.parse(code)] = value.strip()

        return cls(
            person_id=person.id,
            gender=person.gender,
            display_name=person.full_name or None,
            first_name=person.first_name,
            middle_name=person.middle_name,
            last_name=person.last_name,
            maiden_name=person.maiden_name,
            suffix=person.suffix,
            title=person.title,
            nicknames=[person.nickname.strip()] if not _blank(person.nickname) else [],
            names=names,
            spouse_last_name=spouse_last_name.strip() if not _blank(spouse_last_name) else None,
            spouse_last_names=hints,
            person=person,
        )

    def to_person(self) -> PersonRecord:
        """Materialize the current names into a new PersonRecord."""
        localized = {
            locale.value: {f.value: v for f, v in fields.items() if not _blank(v)}
            for locale, fields in self.names.items()
        }
        localized = {code: fields for code, fields in localized.items() if fields}

        updates = dict(
            first_name=self.first_name,
            middle_name=self.middle_name,
            last_name=self.last_name,
            maiden_name=self.maiden_name,
            suffix=self.suffix,
            title=self.title,
            nickname=", ".join(self.nicknames) if self.nicknames else None,
            localized_names=localized,
            gender=self.gender,
        )
        if self.person is not None:
            return dataclasses.replace(self.person, **updates)
        return PersonRecord(id=self.person_id, **updates)

    # State

    @property
    def is_dirty(self) -> bool:
        """True once any field was modified (warnings do not count)."""
        return any(not change.is_warning for change in self.changes)

    @property
    def warnings(self) -> List[NameChange]:
        return [c for c in self.changes if c.is_warning]

    @property
    def has_spouse_hint(self) -> bool:
        return self.spouse_last_name is not None or bool(self.spouse_last_names)

    def spouse_last_name_for(self, locale: Optional[Locale] = None) -> Optional[str]:
        """Spouse surname hint for a locale (None means the primary fields).

        Falls back to the primary hint when no locale-specific hint exists.
        """
        if locale is not None and locale in self.spouse_last_names:
            return self.spouse_last_names[locale]
        return self.spouse_last_name

    # Locale fields

    def get_name(self, locale: Locale, name_field: NameField) -> Optional[str]:
        """Value of a field in a locale; blank values read as None."""
        value = self.names.get(locale, {}).get(name_field)
        return None if _blank(value) else value

    def set_name(self, locale: Locale, name_field: NameField, value: Optional[str],
                 reason: str, handler: Optional[str] = None) -> bool:
        """Set a field in a locale and record the change.

        A blank value removes the field. Nothing is recorded when the value
        does not change.

        Returns:
            True if the context was modified
        """
        old_value = self.get_name(locale, name_field)
        if old_value == value or (old_value is None and _blank(value)):
            return False

        slot = self.names.setdefault(locale, {})
        if _blank(value):
            slot.pop(name_field, None)
            value = None
        else:
            slot[name_field] = value

        self.changes.append(NameChange(
            field=name_field.value,
            old_value=old_value,
            new_value=value,
            reason=reason,
            handler=handler,
            from_locale=locale if old_value is not None else None,
            to_locale=locale if value is not None else None,
        ))
        return True

    def move_name(self, from_locale: Locale, to_locale: Locale, name_field: NameField,
                  reason: str, handler: Optional[str] = None) -> bool:
        """Move a field value from one locale to another, overwriting the target."""
        value = self.get_name(from_locale, name_field)
        if value is None or from_locale == to_locale:
            return False

        self.names[from_locale].pop(name_field, None)
        self.names.setdefault(to_locale, {})[name_field] = value

        self.changes.append(NameChange(
            field=name_field.value,
            old_value=value,
            new_value=value,
            reason=reason,
            handler=handler,
            from_locale=from_locale,
            to_locale=to_locale,
        ))
        return True

    def remove_name(self, locale: Locale, name_field: NameField,
                    reason: str, handler: Optional[str] = None) -> bool:
        """Remove a field from a locale."""
        return self.set_name(locale, name_field, None, reason, handler)

    def get_locale_fields(self, locale: Locale) -> Dict[NameField, str]:
        """Copy of the non-blank fields of a locale."""
        return {f: v for f, v in self.names.get(locale, {}).items() if not _blank(v)}

    def has_locale(self, locale: Locale) -> bool:
        """True if the locale has at least one non-blank field."""
        return bool(self.get_locale_fields(locale))

    def active_locales(self) -> List[Locale]:
        """Locales with data, in insertion order."""
        return [locale for locale in list(self.names) if self.has_locale(locale)]

    def values_for(self, name_field: NameField) -> Dict[Locale, str]:
        """Non-blank values of one field across all locales."""
        result = {}
        for locale in self.active_locales():
            value = self.get_name(locale, name_field)
            if value is not None:
                result[locale] = value
        return result

    # Primary fields

    def get_primary(self, name_field: NameField) -> Optional[str]:
        """Value of a primary field; blank values read as None."""
        value = getattr(self, name_field.value)
        return None if _blank(value) else value

    def set_primary(self, name_field: NameField, value: Optional[str],
                    reason: str, handler: Optional[str] = None) -> bool:
        """Set a primary field and record the change.

        Returns:
            True if the context was modified
        """
        old_value = getattr(self, name_field.value)
        if old_value == value or (_blank(old_value) and _blank(value)):
            return False

        if _blank(value):
            value = None
        setattr(self, name_field.value, value)

        self.changes.append(NameChange(
            field=name_field.value,
            old_value=None if _blank(old_value) else old_value,
            new_value=value,
            reason=reason,
            handler=handler,
        ))
        return True

    def add_nickname(self, nickname: str, reason: str, handler: Optional[str] = None) -> bool:
        """Add a nickname unless an equal one (ignoring case) is already known."""
        if _blank(nickname):
            return False
        nickname = nickname.strip()
        if any(n.lower() == nickname.lower() for n in self.nicknames):
            return False

        self.nicknames.append(nickname)
        self.changes.append(NameChange(
            field=NICKNAME_FIELD,
            old_value=None,
            new_value=nickname,
            reason=reason,
            handler=handler,
        ))
        return True

    def add_warning(self, name_field: NameField, old_value: Optional[str], suggestion: Optional[str],
                    reason: str, handler: Optional[str] = None,
                    locale: Optional[Locale] = None) -> bool:
        """Record an advisory suggestion without touching any field.

        A warning identical to one already recorded is ignored.
        """
        warning = NameChange(
            field=name_field.value,
            old_value=old_value,
            new_value=suggestion,
            reason=reason,
            handler=handler,
            is_warning=True,
            from_locale=locale,
            to_locale=locale,
        )
        if warning in self.changes:
            return False
        self.changes.append(warning)
        return True

    def iter_slots(self, fields: Iterable[NameField], include_primary: bool = True):
        """Yield (locale, field, value) for every non-blank slot.

        Primary fields are yielded first with locale None. The slots are
        collected up front so callers may mutate the context while iterating.
        """
        slots = []
        fields = list(fields)
        if include_primary:
            for name_field in fields:
                value = self.get_primary(name_field)
                if value is not None:
                    slots.append((None, name_field, value))
        for locale in self.active_locales():
            for name_field in fields:
                value = self.get_name(locale, name_field)
                if value is not None:
                    slots.append((locale, name_field, value))
        return iter(slots)

    def get_value(self, locale: Optional[Locale], name_field: NameField) -> Optional[str]:
        """Read a slot; locale None addresses the primary field."""
        if locale is None:
            return self.get_primary(name_field)
        return self.get_name(locale, name_field)

    def set_value(self, locale: Optional[Locale], name_field: NameField, value: Optional[str],
                  reason: str, handler: Optional[str] = None) -> bool:
        """Write a slot; locale None addresses the primary field."""
        if locale is None:
            return self.set_primary(name_field, value, reason, handler)
        return self.set_name(locale, name_field, value, reason, handler)
