"""Extraction of titles, suffixes, maiden names, nicknames and patronymics.

These handlers take apart values that carry more than one name component,
such as 'Dr. John', 'Smith Jr.', 'Иванова (урожд. Петрова)',
'Александр (Саша)' or 'Иван Петрович Сидоров'.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..base import NameFixHandler
from ..context import NameFixContext, Locale, NameField


def _alternation(words) -> str:
    """Regex alternation of literal words, longest first."""
    return '|'.join(re.escape(w) for w in sorted(set(words), key=len, reverse=True))


def _normalize_spaces(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


def _fold(text: str) -> str:
    return text.lower().replace('ё', 'е')


def _index_diminutives(*tables: Dict[str, List[str]]) -> Dict[str, set]:
    """Lookup of diminutives keyed by folded full name."""
    index: Dict[str, set] = {}
    for table in tables:
        for full_name, short_forms in table.items():
            index.setdefault(_fold(full_name), set()).update(_fold(s) for s in short_forms)
    return index


class TitleExtractHandler(NameFixHandler):
    """Moves a leading honorific from the first name into the title field."""

    name = "TitleExtract"
    order = 21

    LATIN_TITLES = [
        # Academic and medical
        'Dr.', 'Dr', 'Prof.', 'Prof', 'PhD', 'Ph.D.', 'M.D.', 'MD',
        # Religious
        'Rev.', 'Rev', 'Fr.', 'Fr', 'Sr.', 'Pastor', 'Rabbi', 'Imam',
        # Military
        'Gen.', 'Gen', 'Col.', 'Col', 'Maj.', 'Maj', 'Capt.', 'Capt',
        'Lt.', 'Lt', 'Sgt.', 'Sgt',
        # Nobility
        'Sir', 'Dame', 'Lord', 'Lady', 'Duke', 'Duchess', 'Earl',
        'Count', 'Countess', 'Baron', 'Baroness', 'Prince', 'Princess',
        'King', 'Queen',
        # Professional
        'Atty.', 'Atty', 'Hon.', 'Hon', 'Judge',
    ]

    CYRILLIC_TITLES = [
        # Nobility
        'князь', 'княгиня', 'княжна', 'граф', 'графиня', 'барон', 'баронесса',
        'герцог', 'герцогиня', 'царь', 'царица', 'царевич', 'царевна',
        'император', 'императрица',
        # Clergy
        'отец', 'батюшка', 'матушка', 'протоиерей', 'иерей', 'диакон',
        'митрополит', 'архиепископ', 'епископ', 'архимандрит',
        # Military
        'генерал', 'полковник', 'майор', 'капитан', 'лейтенант',
        # Academic
        'профессор', 'доктор', 'академик',
    ]

    TITLE_PATTERN = re.compile(
        r'^(' + _alternation(LATIN_TITLES + CYRILLIC_TITLES) + r')\s+(.+)$',
        re.IGNORECASE,
    )

    def handle(self, context: NameFixContext):
        for locale, _, value in context.iter_slots([NameField.FIRST_NAME]):
            self._extract(context, locale, value)

    def _extract(self, context: NameFixContext, locale: Optional[Locale], value: str):
        match = self.TITLE_PATTERN.match(value.strip())
        if not match:
            return

        title, rest = match.group(1), match.group(2).strip()
        existing = context.get_value(locale, NameField.TITLE)
        if existing is not None and existing.lower() != title.lower():
            return

        self.set_value(context, locale, NameField.FIRST_NAME, rest,
                       f"Extracted title '{title}' from first name")
        if existing is None:
            self.set_value(context, locale, NameField.TITLE, title,
                           "Title extracted from first name")


class SuffixExtractHandler(NameFixHandler):
    """Moves a trailing generational or professional suffix into the suffix field."""

    name = "SuffixExtract"
    order = 22

    SUFFIXES = [
        'Jr.', 'Jr', 'Junior', 'Sr.', 'Sr', 'Senior',
        'II', 'III', 'IV', 'V', 'VI', 'VII', 'VIII', 'IX', 'X',
        '2nd', '3rd', '4th', '5th',
        'Esq.', 'Esq', 'PhD', 'Ph.D.', 'Ph.D', 'MD', 'M.D.', 'M.D',
        'JD', 'J.D.', 'J.D', 'DDS', 'D.D.S.', 'CPA', 'C.P.A.',
    ]

    SUFFIX_PATTERN = re.compile(
        r'^(.+?)[,\s]+(' + _alternation(SUFFIXES) + r')\.?$',
        re.IGNORECASE,
    )

    CANONICAL = {
        'JR': 'Jr.', 'JUNIOR': 'Jr.',
        'SR': 'Sr.', 'SENIOR': 'Sr.',
        'ESQ': 'Esq.',
        'PHD': 'Ph.D.', 'PH.D': 'Ph.D.',
        'MD': 'M.D.', 'M.D': 'M.D.',
        'JD': 'J.D.', 'J.D': 'J.D.',
    }

    def handle(self, context: NameFixContext):
        scopes: List[Optional[Locale]] = [None] + context.active_locales()
        for locale in scopes:
            if context.get_value(locale, NameField.SUFFIX) is not None:
                continue
            for name_field in (NameField.LAST_NAME, NameField.FIRST_NAME):
                value = context.get_value(locale, name_field)
                if value is not None and self._extract(context, locale, name_field, value):
                    break

    def _extract(self, context: NameFixContext, locale: Optional[Locale],
                 name_field: NameField, value: str) -> bool:
        match = self.SUFFIX_PATTERN.match(value.strip())
        if not match:
            return False

        rest = match.group(1).strip().rstrip(',').strip()
        if not rest:
            return False
        suffix = self.normalize_suffix(match.group(2))

        self.set_value(context, locale, name_field, rest,
                       f"Extracted suffix '{suffix}'")
        self.set_value(context, locale, NameField.SUFFIX, suffix,
                       f"Suffix extracted from {name_field.value}")
        return True

    @classmethod
    def normalize_suffix(cls, suffix: str) -> str:
        """Canonical spelling of a suffix (jr → Jr., phd → Ph.D.); others as written."""
        key = suffix.strip().upper().rstrip('.')
        return cls.CANONICAL.get(key, suffix.strip())


class MaidenNameExtractHandler(NameFixHandler):
    """Splits a maiden name out of a combined last-name value.

    Patterns, most specific first:
    - 'Иванова (урожд. Петрова)' / 'Иванова (урождённая Петрова)'
    - 'Smith née Jones' / 'Smith nee Jones'
    - 'Smith born Jones'
    - 'Smith (Jones)', unless the parentheses hold a note
    - 'Smith/Jones', when both sides look like surnames
    """

    name = "MaidenNameExtract"
    order = 23

    BIRTH_NAME_PATTERNS = [
        (re.compile(r'^(.+?)\s*\(\s*урожд(?:ённая|енная|\.)\s*(.+?)\s*\)\s*$', re.IGNORECASE), "'урожд.'"),
        (re.compile(r'^(.+?)\s+n[eé]e\s+(.+)$', re.IGNORECASE), "'née'"),
        (re.compile(r'^(.+?)\s+born\s+(.+)$', re.IGNORECASE), "'born'"),
    ]
    PAREN_PATTERN = re.compile(r'^(.+?)\s*\(([^)]+)\)\s*$')
    SLASH_PATTERN = re.compile(r'^(.+?)\s*/\s*(.+)$')

    NOTE_KEYWORDS = (
        'aka', 'a.k.a.', 'alias', 'called', 'known as',
        'deceased', 'dead', 'died', 'умер', 'умерла',
        'infant', 'child', 'baby', 'младенец', 'ребёнок',
        'unknown', 'неизвестн',
    )

    def handle(self, context: NameFixContext):
        scopes: List[Optional[Locale]] = [None] + context.active_locales()
        for locale in scopes:
            if context.get_value(locale, NameField.MAIDEN_NAME) is not None:
                continue
            value = context.get_value(locale, NameField.LAST_NAME)
            if value is None:
                continue

            result = self.split(value)
            if result is None:
                continue

            last_name, maiden_name, source = result
            self.set_value(context, locale, NameField.LAST_NAME, last_name,
                           f"Extracted maiden name from {source} pattern")
            self.set_value(context, locale, NameField.MAIDEN_NAME, maiden_name,
                           f"Maiden name extracted from last name ({source} pattern)")

    @classmethod
    def split(cls, value: str) -> Optional[Tuple[str, str, str]]:
        """Split a last-name value into (last name, maiden name, pattern label)."""
        text = value.strip()

        for pattern, label in cls.BIRTH_NAME_PATTERNS:
            match = pattern.match(text)
            if match:
                last, maiden = match.group(1).strip(), match.group(2).strip()
                if last and maiden:
                    return last, maiden, label

        match = cls.PAREN_PATTERN.match(text)
        if match:
            last, inner = match.group(1).strip(), match.group(2).strip()
            if last and not cls.is_note(inner) and cls.looks_like_surname(inner):
                return last, inner, "parentheses"
            return None

        match = cls.SLASH_PATTERN.match(text)
        if match:
            last, maiden = match.group(1).strip(), match.group(2).strip()
            if cls.looks_like_surname(last) and cls.looks_like_surname(maiden):
                return last, maiden, "slash"

        return None

    @classmethod
    def is_note(cls, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in cls.NOTE_KEYWORDS)

    @staticmethod
    def looks_like_surname(text: str) -> bool:
        """Starts with a capital (or Cyrillic) letter, no digits, at most three words."""
        text = text.strip()
        if not text or len(text) > 30:
            return False
        first = text[0]
        if not (first.isupper() or 0x0400 <= ord(first) <= 0x04FF):
            return False
        if any(c.isdigit() for c in text):
            return False
        return text.count(' ') <= 2


class NicknameExtractHandler(NameFixHandler):
    """Moves quoted or parenthesized nicknames out of first names.

    'John "Jack" Smith' always gives the nickname Jack. A parenthesized
    value is taken as nickname(s) only when at least one comma-separated
    item is a known diminutive of the remaining name, or is short and
    shares its first two letters.
    """

    name = "NicknameExtract"
    order = 24

    QUOTED_PATTERN = re.compile(r'(?:^|\s)["\'«„“‘]([^"«»„“”‘’\']+)["\'»“”‘’](?=\s|$)')
    PAREN_PATTERN = re.compile(r'\(([^)]+)\)')

    RUSSIAN_DIMINUTIVES: Dict[str, List[str]] = {
        'Александр': ['Саша', 'Шура', 'Саня', 'Алекс'],
        'Владимир': ['Володя', 'Вова', 'Вовка'],
        'Дмитрий': ['Дима', 'Митя', 'Димон'],
        'Михаил': ['Миша', 'Мишка'],
        'Николай': ['Коля', 'Николаша'],
        'Сергей': ['Серёжа', 'Серёга'],
        'Андрей': ['Андрюша', 'Андрюха'],
        'Иван': ['Ваня', 'Ванька', 'Ванюша'],
        'Пётр': ['Петя', 'Петруша'],
        'Павел': ['Паша', 'Пашка'],
        'Мария': ['Маша', 'Маруся', 'Машенька'],
        'Екатерина': ['Катя', 'Катюша', 'Катенька'],
        'Анна': ['Аня', 'Анечка', 'Нюра'],
        'Елена': ['Лена', 'Леночка'],
        'Ольга': ['Оля', 'Оленька'],
        'Татьяна': ['Таня', 'Танюша'],
        'Наталья': ['Наташа', 'Ната'],
        'Светлана': ['Света', 'Светик'],
        'Ирина': ['Ира', 'Ирочка'],
        'Людмила': ['Люда', 'Мила', 'Люся'],
    }

    ENGLISH_DIMINUTIVES: Dict[str, List[str]] = {
        'William': ['Bill', 'Billy', 'Will', 'Willy', 'Liam'],
        'Robert': ['Bob', 'Bobby', 'Rob', 'Robbie', 'Bert'],
        'Richard': ['Dick', 'Rick', 'Ricky', 'Rich'],
        'Michael': ['Mike', 'Micky', 'Mickey'],
        'James': ['Jim', 'Jimmy', 'Jamie'],
        'John': ['Jack', 'Johnny', 'Jon'],
        'Thomas': ['Tom', 'Tommy'],
        'Charles': ['Charlie', 'Chuck', 'Chas'],
        'Edward': ['Ed', 'Eddie', 'Ted', 'Teddy', 'Ned'],
        'Elizabeth': ['Liz', 'Lizzy', 'Beth', 'Betty', 'Eliza'],
        'Margaret': ['Maggie', 'Meg', 'Peggy', 'Marge'],
        'Katherine': ['Kate', 'Katie', 'Kathy', 'Kay', 'Kit'],
        'Patricia': ['Pat', 'Patty', 'Trish'],
        'Jennifer': ['Jen', 'Jenny', 'Jenn'],
        'Alexandra': ['Alex', 'Alexa', 'Lexi', 'Sandra'],
    }

    _DIMINUTIVES = _index_diminutives(RUSSIAN_DIMINUTIVES, ENGLISH_DIMINUTIVES)

    def handle(self, context: NameFixContext):
        for locale, _, value in context.iter_slots([NameField.FIRST_NAME]):
            result = self.split(value)
            if result is None:
                continue

            clean_name, nicknames = result
            label = ', '.join(nicknames)
            self.set_value(context, locale, NameField.FIRST_NAME, clean_name,
                           f"Extracted nickname '{label}'")
            for nickname in nicknames:
                context.add_nickname(nickname, f"Nickname extracted from first name '{value}'", self.name)

    @classmethod
    def split(cls, value: str) -> Optional[Tuple[str, List[str]]]:
        """Split a first name into (clean name, nicknames), or None."""
        match = cls.QUOTED_PATTERN.search(value)
        if match:
            nickname = match.group(1).strip()
            clean = _normalize_spaces(value[:match.start()] + ' ' + value[match.end():])
            if nickname and clean:
                return clean, [nickname]

        match = cls.PAREN_PATTERN.search(value)
        if match:
            items = [item.strip() for item in match.group(1).split(',') if item.strip()]
            clean = _normalize_spaces(value[:match.start()] + ' ' + value[match.end():])
            if clean and items and any(cls.is_diminutive(clean, item) for item in items):
                return clean, items

        return None

    @classmethod
    def is_diminutive(cls, full_name: str, nickname: str) -> bool:
        """True if nickname is a known or plausible short form of full_name."""
        full_key = _fold(full_name)
        nick_key = _fold(nickname)
        if nick_key in cls._DIMINUTIVES.get(full_key, ()):
            return True

        if len(nickname) < len(full_name) / 2 and len(nickname) <= 6:
            return full_key.startswith(nick_key[:2])
        return False


class PatronymicHandler(NameFixHandler):
    """Separates Slavic patronymics into the middle-name field.

    'Иван Петрович Сидоров' in the first name is split into first, middle
    and last names; 'Иван Петрович' into first and middle. A female
    patronymic (-овна, -евна, -ична) stored as a last name, or a common
    male one (Петрович, Ильич), is moved to the middle name. Other male
    -ович/-евич values are kept as surnames (Рабинович, Шостакович).
    """

    name = "Patronymic"
    order = 25

    MALE_ENDINGS = ('ович', 'евич', 'ёвич', 'ич')
    FEMALE_ENDINGS = ('овна', 'евна', 'ёвна', 'ична', 'инична')

    _ENDINGS = 'ович|евич|ёвич|ич|овна|евна|ёвна|ична|инична'
    FULL_NAME_PATTERN = re.compile(rf'^(\S+)\s+(\S+(?:{_ENDINGS}))\s+(\S+)$', re.IGNORECASE)
    FIRST_AND_PATRONYMIC_PATTERN = re.compile(rf'^(\S+)\s+(\S+(?:{_ENDINGS}))$', re.IGNORECASE)

    COMMON_MALE_PATRONYMICS = frozenset((
        'александрович', 'алексеевич', 'анатольевич', 'андреевич', 'антонович',
        'аркадьевич', 'борисович', 'васильевич', 'викторович', 'владимирович',
        'георгиевич', 'григорьевич', 'дмитриевич', 'евгеньевич', 'егорович',
        'иванович', 'игоревич', 'ильич', 'константинович', 'кузьмич', 'леонидович',
        'лукич', 'львович', 'матвеевич', 'михайлович', 'никитич', 'николаевич',
        'олегович', 'павлович', 'петрович', 'романович', 'семенович', 'сергеевич',
        'степанович', 'тимофеевич', 'федорович', 'фомич', 'юрьевич', 'яковлевич',
    ))

    LOCALES = (Locale.RU, Locale.UK)

    def handle(self, context: NameFixContext):
        self._process(context, None)
        for locale in self.LOCALES:
            if context.has_locale(locale):
                self._process(context, locale)

    def _process(self, context: NameFixContext, locale: Optional[Locale]):
        first = context.get_value(locale, NameField.FIRST_NAME)
        middle = context.get_value(locale, NameField.MIDDLE_NAME)
        last = context.get_value(locale, NameField.LAST_NAME)

        if first is not None and middle is None:
            full = self.FULL_NAME_PATTERN.match(first.strip())
            partial = self.FIRST_AND_PATRONYMIC_PATTERN.match(first.strip())
            if full and last is None:
                self.set_value(context, locale, NameField.FIRST_NAME, full.group(1),
                               "Split full name into components")
                self.set_value(context, locale, NameField.MIDDLE_NAME, full.group(2),
                               "Patronymic extracted from full name")
                self.set_value(context, locale, NameField.LAST_NAME, full.group(3),
                               "Last name extracted from full name")
                return
            if partial and self.is_patronymic(partial.group(2)):
                self.set_value(context, locale, NameField.FIRST_NAME, partial.group(1),
                               "Split patronymic from first name")
                self.set_value(context, locale, NameField.MIDDLE_NAME, partial.group(2),
                               "Patronymic extracted from first name")
                return

        if last is not None and middle is None and self.is_misplaced_patronymic(last):
            self.set_value(context, locale, NameField.MIDDLE_NAME, last,
                           "Patronymic moved from last name")
            self.set_value(context, locale, NameField.LAST_NAME, None,
                           "Cleared, value was a patronymic")

    @classmethod
    def is_patronymic(cls, value: Optional[str]) -> bool:
        """True when value ends with a patronymic ending after a stem of 3+ letters."""
        if not value or not value.strip():
            return False
        lower = value.strip().lower()
        return any(
            lower.endswith(ending) and len(lower) > len(ending) + 2
            for ending in cls.MALE_ENDINGS + cls.FEMALE_ENDINGS
        )

    @classmethod
    def is_misplaced_patronymic(cls, value: str) -> bool:
        """Patronymic that cannot also be a surname."""
        if not cls.is_patronymic(value):
            return False
        lower = value.strip().lower()
        if lower.endswith(cls.FEMALE_ENDINGS):
            return True
        return _fold(lower) in cls.COMMON_MALE_PATRONYMICS


__all__ = [
    'TitleExtractHandler', 'SuffixExtractHandler', 'MaidenNameExtractHandler',
    'NicknameExtractHandler', 'PatronymicHandler',
]
