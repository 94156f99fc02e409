# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Base definitions for exchange fields"""

import os
import re
import logging
from enum import Enum, auto
from collections.abc import Iterable

from rxexchange.RegEx import check_format, process_cut_digits, DEFAULT_FIELD_PATTERNS

CHOICE_SEPARATOR = '+'


class FieldKind(Enum):
    """How the legal values of a field are defined"""
    NOTHING = auto()
    PATTERN = auto()
    ENUMERATED = auto()
    PATTERN_ENUMERATED = auto()
    CHOICE = auto()


class UnknownFieldException(KeyError):
    pass


class FieldCountMismatchException(Exception):
    """Less exchange values received than required fields"""

    def __init__(self, expected: int, found: int):
        super().__init__(f'Expected {expected} exchange fields, found {found}')
        self.expected = expected
        self.found = found


def is_choice_name(name: str) -> bool:
    """Test if a field name describes a choice like ITUZONE+SOCIETY"""
    return CHOICE_SEPARATOR in name


def split_choice(name: str) -> tuple[str, ...]:
    """The member names of a choice in declaration order"""
    return tuple(n.strip() for n in name.split(CHOICE_SEPARATOR) if n.strip())


def find_file(path: Iterable[str], filename: str) -> str | None:
    """Search a file along a list of directories
    :param path: the directories in search order
    :param filename: the file name
    :return: the full file name of the first match or None"""

    for p in path:
        candidate = os.path.join(p, filename)
        if os.path.isfile(candidate):
            return candidate
    return None


def read_regex_definitions(path: Iterable[str], filename: str) -> dict[str, str]:
    """Read a file with lines of the form FIELD_NAME: regex
    Only the first colon separates name and expression, the first entry of a name wins
    :param path: the directories to search the file in
    :param filename: the file name
    :return: the regular expressions by field name"""

    full_name = find_file(path, filename)
    if not full_name:
        raise FileNotFoundError(f'"{filename}" not found in {list(path)}')

    definitions = {}
    with open(full_name, encoding='utf-8') as rf:
        for line in rf:
            line = line.strip()
            if not line or ':' not in line:
                continue

            field_name, regex_str = line.split(':', 1)
            field_name = field_name.strip()
            regex_str = regex_str.strip()
            if field_name and regex_str and field_name not in definitions:
                definitions[field_name] = regex_str
    return definitions


class FieldSpec:
    """Grammar and canonical values of a single exchange field

    A value is legal if it matches the regular expression or if it is one of the
    enumerated values. Enumerated values are grouped in classes of equivalent values,
    each class represented by its canonical value. A regex match is canonical by itself."""

    def __init__(self, name: str, pattern: str | re.Pattern | None = None, is_mult: bool = False,
                 cut_numbers: bool = False, logger=None):
        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)

        self.__field_name__ = name
        self.__mult__ = is_mult
        self.__cut_numbers__ = cut_numbers
        self.__pattern__: re.Pattern | None = None
        self.__values__: dict[str, set[str]] = {}
        self.__value_to_canonical__: dict[str, str] = {}

        if pattern:
            self.set_pattern(pattern)

    @classmethod
    def from_sources(cls, name: str, path: Iterable[str] = ('.',), regex_filename: str = '',
                     exchange_mults: Iterable[str] = (), qthx: dict[str, Iterable[str]] | None = None,
                     cty=None, cut_numbers: bool = False, regex_definitions: dict[str, str] | None = None,
                     default_grammar: bool = True, logger=None) -> 'FieldSpec':
        """Build a field from the regex definitions, its .values file and the QTHX overrides
        :param name: the field name
        :param path: directories to search for the regex and values files
        :param regex_filename: file with regex definitions, ignored if regex_definitions is given
        :param exchange_mults: names of all fields which are multipliers
        :param qthx: legal values per country prefix for QTHX[] fields
        :param cty: country data to map prefixes to countries
        :param cut_numbers: the field is digit-like and accepts cut numbers
        :param regex_definitions: already read regex definitions
        :param default_grammar: use a built-in grammar for well known fields without any definition
        :param logger: a logger handler
        :return: the field"""

        spec = cls(name, is_mult=name in list(exchange_mults), cut_numbers=cut_numbers, logger=logger)

        # Built-in grammars only stand in for fields nobody defined, never for broken definitions
        sources_ok = default_grammar
        if regex_definitions is not None:
            if name in regex_definitions:
                sources_ok &= spec.set_pattern(regex_definitions[name])
        else:
            sources_ok &= spec.read_regex_expression_file(path, regex_filename)
        sources_ok &= spec.read_values_file(path, name)
        spec.parse_qthx(qthx, cty)

        if sources_ok and spec.kind is FieldKind.NOTHING and name in DEFAULT_FIELD_PATTERNS:
            spec.log.debug(f'Using default grammar for "{name}"')
            spec.set_pattern(DEFAULT_FIELD_PATTERNS[name])

        return spec

    @property
    def name(self) -> str:
        return self.__field_name__

    @property
    def is_mult(self) -> bool:
        """Is this field a multiplier?"""
        return self.__mult__

    @is_mult.setter
    def is_mult(self, value: bool):
        self.__mult__ = bool(value)

    @property
    def cut_numbers(self) -> bool:
        """Does this field accept cut numbers (T, N, A for 0, 9, 1)?"""
        return self.__cut_numbers__

    @property
    def pattern(self) -> re.Pattern | None:
        return self.__pattern__

    @property
    def values(self) -> dict[str, set[str]]:
        """All equivalent values by canonical value"""
        return {cv: set(vs) for cv, vs in self.__values__.items()}

    @property
    def value_to_canonical(self) -> dict[str, str]:
        """The canonical value for each enumerated value"""
        return dict(self.__value_to_canonical__)

    @property
    def kind(self) -> FieldKind:
        if self.__pattern__ and self.__values__:
            return FieldKind.PATTERN_ENUMERATED
        if self.__pattern__:
            return FieldKind.PATTERN
        if self.__values__:
            return FieldKind.ENUMERATED
        return FieldKind.NOTHING

    def set_pattern(self, pattern: str | re.Pattern | None) -> bool:
        """Set the regular expression, an invalid expression leaves the field without one
        :return: False if the expression is invalid"""

        if not pattern:
            self.__pattern__ = None
            return True

        try:
            self.__pattern__ = re.compile(pattern) if isinstance(pattern, str) else pattern
        except re.error as exc:
            self.log.error(f'Invalid regular expression for "{self.name}": {exc}')
            self.__pattern__ = None
            return False
        return True

    def read_regex_expression_file(self, path: Iterable[str], filename: str) -> bool:
        """Get the regular expression from a regex definition file
        A field without an entry keeps its pattern
        :return: False if the file could not be read or the expression is invalid"""

        if not filename:
            return True

        try:
            definitions = read_regex_definitions(path, filename)
        except (OSError, UnicodeDecodeError) as exc:
            self.log.error(f'Error reading exchange field definitions "{filename}": {exc}')
            return False

        if self.name in definitions:
            return self.set_pattern(definitions[self.name])
        return True

    def read_values_file(self, path: Iterable[str], filename: str) -> bool:
        """Get the canonical and equivalent values from <filename>.values
        A missing file is fine, the field simply has no enumerated values
        :return: False if the file exists but could not be read"""

        full_name = find_file(path, filename + '.values')
        if not full_name:
            self.log.debug(f'No values file for "{filename}"')
            return True

        try:
            with open(full_name, encoding='utf-8') as vf:
                lines = vf.readlines()
        except (OSError, UnicodeDecodeError) as exc:
            self.log.error(f'Error reading values file "{full_name}": {exc}')
            return False

        for line in lines:
            line = line.strip()
            if not line or line.startswith(';') or line.startswith('//'):
                continue

            if '=' in line:
                lhs, rhs = line.split('=', 1)
                lhs = lhs.strip()
                if lhs:
                    self.add_legal_values(lhs, [v.strip() for v in rhs.split(',')])
            else:
                self.add_canonical_value(line)

        return True

    def parse_qthx(self, qthx: dict[str, Iterable[str]] | None, cty=None):
        """Incorporate configured values for a QTHX[<prefix>] field
        A value of the form first|second|... describes equivalent values with first as canonical value"""

        if not qthx or not self.name.startswith('QTHX['):
            return

        def canonical_prefix(pfx: str) -> str:
            return (cty.canonical_prefix(pfx) if cty else '') or pfx.strip().upper()

        target = canonical_prefix(self.name[5:].split(']', 1)[0])

        for pfx, values in qthx.items():
            if canonical_prefix(pfx) != target:
                continue

            for value in (values if isinstance(values, (list, tuple)) else sorted(values)):
                equivalent_values = [v.strip() for v in value.split('|') if v.strip()]
                if not equivalent_values:
                    continue

                self.add_canonical_value(equivalent_values[0])
                for alt in equivalent_values[1:]:
                    self.add_legal_value(equivalent_values[0], alt)

    def add_canonical_value(self, value: str):
        """Add a canonical value, does nothing if the value is already known"""

        if value in self.__value_to_canonical__:
            return

        self.__values__[value] = {value}
        self.__value_to_canonical__[value] = value

    def add_legal_value(self, canonical: str, value: str):
        """Add a value equivalent to a canonical value
        The canonical value is created if necessary. A value already equivalent to
        another canonical value is left unchanged."""

        canonical = self.__value_to_canonical__.get(canonical, canonical)
        self.add_canonical_value(canonical)

        known = self.__value_to_canonical__.get(value)
        if known is None:
            self.__values__[canonical].add(value)
            self.__value_to_canonical__[value] = canonical
        elif known != canonical:
            self.log.debug(f'"{value}" is already equivalent to "{known}" for "{self.name}"')

    def add_legal_values(self, canonical: str, values: Iterable[str]):
        self.add_canonical_value(canonical)
        for v in values:
            if v:
                self.add_legal_value(canonical, v)

    def _is_legal_(self, value: str) -> bool:
        if self.__pattern__ and check_format(self.__pattern__, value):
            return True
        return value in self.__value_to_canonical__

    def _canonical_(self, value: str) -> str | None:
        if value in self.__value_to_canonical__:
            return self.__value_to_canonical__[value]
        if self.__pattern__ and check_format(self.__pattern__, value):
            return value
        return None

    def is_legal_value(self, value: str) -> bool:
        """Test if a received value is legal for this field"""

        if self._is_legal_(value):
            return True
        if self.__cut_numbers__:
            cut = process_cut_digits(value)
            return cut != value and self._is_legal_(cut)
        return False

    def canonical_value(self, value: str) -> str | None:
        """The canonical value for a received value or None if the value is not legal"""

        canonical = self._canonical_(value)
        if canonical is None and self.__cut_numbers__:
            cut = process_cut_digits(value)
            if cut != value:
                canonical = self._canonical_(cut)
        return canonical

    def value_to_log(self, value: str) -> str:
        """The value which should actually be logged for a received value"""

        canonical = self.canonical_value(value)
        return value if canonical is None else canonical

    def canonical_values(self) -> list[str]:
        return sorted(self.__values__)

    def __repr__(self):
        return (f'FieldSpec({self.name!r}, kind={self.kind.name}, is_mult={self.is_mult}, '
                f'pattern={self.__pattern__.pattern if self.__pattern__ else None!r}, '
                f'values={len(self.__values__)})')


class ChoiceSpec:
    """A choice of several fields, e.g. ITUZONE+SOCIETY, of which exactly one applies"""

    is_mult = False
    kind = FieldKind.CHOICE

    def __init__(self, name: str, specs: Iterable[FieldSpec]):
        self.__choice_name__ = name
        self.__specs__: tuple[FieldSpec, ...] = tuple(specs)

    @property
    def name(self) -> str:
        return self.__choice_name__

    @property
    def members(self) -> tuple[str, ...]:
        """The member names in declaration order"""
        return tuple(s.name for s in self.__specs__)

    @property
    def specs(self) -> tuple[FieldSpec, ...]:
        return self.__specs__

    def resolve(self, value: str) -> FieldSpec | None:
        """The first member for which the value is legal"""

        for spec in self.__specs__:
            if spec.is_legal_value(value):
                return spec
        return None

    def is_legal_value(self, value: str) -> bool:
        return self.resolve(value) is not None

    def canonical_value(self, value: str) -> str | None:
        spec = self.resolve(value)
        return spec.canonical_value(value) if spec else None

    def value_to_log(self, value: str) -> str:
        canonical = self.canonical_value(value)
        return value if canonical is None else canonical

    def __repr__(self):
        return f'ChoiceSpec({self.name!r}, members={self.members})'
