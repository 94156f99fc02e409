# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Registry of all exchange fields of a contest"""

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping

from .base import (FieldSpec, ChoiceSpec, UnknownFieldException, is_choice_name, split_choice,
                   read_regex_definitions)

DEFAULT_CUT_NUMBER_FIELDS = ('RST', 'RS', 'SERNO', 'CQZONE', 'ITUZONE', 'CHECK')


class FieldSpecRegistry(Mapping):
    """All exchange fields of a contest by name

    Choice groups are registered under their compound name, each member also gets its own field."""

    def __init__(self, field_names: Iterable[str], path: Iterable[str] = ('.',), regex_filename: str = '',
                 exchange_mults: Iterable[str] = (), qthx: dict[str, Iterable[str]] | None = None,
                 cty=None, cut_number_fields: Iterable[str] | None = None, logger=None):
        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)
        self.log.debug('Initialising...')

        self.__lock__ = threading.RLock()
        self.__path__ = list(path)
        self.__mults__: list[str] = list(exchange_mults)
        self.__cut_number_fields__ = set(DEFAULT_CUT_NUMBER_FIELDS if cut_number_fields is None
                                         else cut_number_fields)
        self.__specs__: dict[str, FieldSpec | ChoiceSpec] = {}

        regex_definitions = {}
        regex_file_ok = True
        if regex_filename:
            try:
                regex_definitions = read_regex_definitions(self.__path__, regex_filename)
            except (OSError, UnicodeDecodeError) as exc:
                self.log.error(f'Error reading exchange field definitions "{regex_filename}": {exc}')
                regex_file_ok = False

        for name in field_names:
            members = split_choice(name) if is_choice_name(name) else (name,)
            for m in members:
                if m not in self.__specs__:
                    self.__specs__[m] = FieldSpec.from_sources(m, self.__path__,
                                                               exchange_mults=self.__mults__,
                                                               qthx=qthx, cty=cty,
                                                               cut_numbers=m in self.__cut_number_fields__,
                                                               regex_definitions=regex_definitions,
                                                               default_grammar=regex_file_ok,
                                                               logger=logger)
                    self.log.debug(f'Field {self.__specs__[m]}')

            if len(members) > 1 and name not in self.__specs__:
                self.__specs__[name] = ChoiceSpec(name, [self.__specs__[m] for m in members])

    def __getitem__(self, name: str) -> FieldSpec | ChoiceSpec:
        try:
            return self.__specs__[name]
        except KeyError:
            raise UnknownFieldException(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self.__specs__)

    def __len__(self) -> int:
        return len(self.__specs__)

    def __contains__(self, name) -> bool:
        return name in self.__specs__

    @property
    def exchange_mults(self) -> list[str]:
        return list(self.__mults__)

    @property
    def cut_number_fields(self) -> set[str]:
        return set(self.__cut_number_fields__)

    def field_specs(self) -> list[FieldSpec]:
        """All single fields, without choice groups"""
        return [s for s in self.__specs__.values() if isinstance(s, FieldSpec)]

    def is_mult(self, name: str) -> bool:
        return self[name].is_mult

    def is_legal_value(self, name: str, value: str) -> bool:
        return self[name].is_legal_value(value)

    def canonical_value(self, name: str, value: str) -> str | None:
        return self[name].canonical_value(value)

    def resolve_choice(self, name: str, value: str) -> str:
        """The field name which actually applies to a value
        :param name: a field or choice group name
        :param value: the received value
        :return: the first member of a choice group the value is legal for, the name itself otherwise"""

        spec = self[name]
        if isinstance(spec, ChoiceSpec):
            resolved = spec.resolve(value)
            if resolved:
                return resolved.name
        return name

    def add_canonical_value(self, name: str, value: str):
        """Learn a new canonical value for a field"""

        with self.__lock__:
            self.__field__(name).add_canonical_value(value)
        self.log.debug(f'Learned canonical value "{value}" for "{name}"')

    def add_legal_value(self, name: str, canonical: str, value: str):
        with self.__lock__:
            self.__field__(name).add_legal_value(canonical, value)
        self.log.debug(f'Learned value "{value}" as "{canonical}" for "{name}"')

    def set_mult(self, name: str, is_mult: bool):
        with self.__lock__:
            self.__field__(name).is_mult = is_mult
            if is_mult and name not in self.__mults__:
                self.__mults__.append(name)
            elif not is_mult and name in self.__mults__:
                self.__mults__.remove(name)

    def set_exchange_mults(self, names: Iterable[str]):
        """Replace the list of multiplier fields and recompute the mult status of every field"""

        with self.__lock__:
            self.__mults__ = list(names)
            for spec in self.field_specs():
                spec.is_mult = spec.name in self.__mults__
        self.log.info(f'Exchange mults: {", ".join(self.__mults__) or "-"}')

    def __field__(self, name: str) -> FieldSpec:
        spec = self[name]
        if not isinstance(spec, FieldSpec):
            raise UnknownFieldException(f'"{name}" is not a single field')
        return spec
