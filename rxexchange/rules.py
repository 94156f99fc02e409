# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Contest rules: the expected exchanges and where to find the field definitions"""

import os
import logging
from collections.abc import Iterable

from PyQt6 import QtCore

from .exchange import ExchangeTemplate, FieldSpecRegistry, ExchangeMatcher, GuessCache

DEFAULT_EXCHANGE = ''


class ContestRulesException(Exception):
    pass


def _as_list(value) -> list[str]:
    """Qt returns a comma separated INI value as string list and a single value as string"""

    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [str(v).strip() for v in value if str(v).strip()]


class ContestRules:
    """The exchange definitions of a contest"""

    def __init__(self, exchanges: dict[str, str | Iterable[str] | ExchangeTemplate], name: str = '',
                 path: Iterable[str] = ('.',), regex_filename: str = '', exchange_mults: Iterable[str] = (),
                 qthx: dict[str, Iterable[str]] | None = None, cut_number_fields: Iterable[str] | None = None,
                 cty=None, logger=None):
        """
        :param exchanges: the exchange per country prefix, an empty prefix for the default exchange
        :param name: the contest name
        :param path: directories to search for field definitions
        :param regex_filename: the file with the regular expressions for the fields
        :param exchange_mults: names of all fields which are multipliers
        :param qthx: legal values of QTHX[] fields per country prefix
        :param cut_number_fields: fields which accept cut numbers, None for the default fields
        :param cty: country data
        :param logger: a logger handler"""

        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)
        self.log.debug('Initialising...')

        self.__logger__ = logger
        self.__contest_name__ = name
        self.__path__ = list(path)
        self.__regex_filename__ = regex_filename
        self.__mults__ = [m.upper() for m in exchange_mults]
        self.__qthx__ = {k.upper(): list(v) for k, v in (qthx or {}).items()}
        self.__cut_number_fields__ = None if cut_number_fields is None else [f.upper() for f in cut_number_fields]
        self.__cty__ = cty
        self.__registry__: FieldSpecRegistry | None = None

        if not exchanges:
            raise ContestRulesException(f'No exchange defined for contest "{name}"')

        self.__exchanges__: dict[str, ExchangeTemplate] = {}
        for pfx, exch in exchanges.items():
            template = exch if isinstance(exch, ExchangeTemplate) else ExchangeTemplate.from_string(exch, self.__mults__)
            if not len(template):
                raise ContestRulesException(f'Empty exchange for "{pfx or "default"}"')
            self.__exchanges__[self.__country_key__(pfx)] = template

        self.log.info(f'Contest "{name}" with {len(self.__exchanges__)} exchange definition(s)')

    @classmethod
    def from_settings(cls, ini_file: str, cty=None, logger=None) -> 'ContestRules':
        """Read the contest rules from an INI file
        Relative directories of the search path are relative to the INI file"""

        if not os.path.isfile(ini_file):
            raise ContestRulesException(f'Contest definition "{ini_file}" not found')

        settings = QtCore.QSettings(ini_file, QtCore.QSettings.Format.IniFormat)
        if settings.status() != QtCore.QSettings.Status.NoError:
            raise ContestRulesException(f'Contest definition "{ini_file}" could not be read')

        base_dir = os.path.dirname(os.path.abspath(ini_file))
        path = [p if os.path.isabs(p) else os.path.join(base_dir, p)
                for p in _as_list(settings.value('contest/path', '.'))]

        exchanges = {}
        settings.beginGroup('exchange')
        # Default exchange first, country specific ones in alphabetical order
        for key in sorted(settings.childKeys(), key=lambda k: (k.lower() != 'default', k)):
            exchanges[DEFAULT_EXCHANGE if key.lower() == 'default' else key] = _as_list(settings.value(key))
        settings.endGroup()

        qthx = {}
        settings.beginGroup('qthx')
        for key in settings.childKeys():
            qthx[key] = _as_list(settings.value(key))
        settings.endGroup()

        cut_number_fields = settings.value('contest/cut_number_fields', None)

        return cls(exchanges,
                   name=str(settings.value('contest/name', os.path.splitext(os.path.basename(ini_file))[0])),
                   path=path,
                   regex_filename=str(settings.value('contest/exchange_fields', '')),
                   exchange_mults=_as_list(settings.value('contest/exchange_mults', '')),
                   qthx=qthx,
                   cut_number_fields=None if cut_number_fields is None else _as_list(cut_number_fields),
                   cty=cty,
                   logger=logger)

    def __country_key__(self, callsign_or_prefix: str) -> str:
        if not callsign_or_prefix:
            return DEFAULT_EXCHANGE
        if self.__cty__:
            return self.__cty__.canonical_prefix(callsign_or_prefix) or callsign_or_prefix.upper()
        return callsign_or_prefix.upper()

    @property
    def name(self) -> str:
        return self.__contest_name__

    @property
    def exchange_mults(self) -> list[str]:
        return self.registry.exchange_mults

    @property
    def qthx(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self.__qthx__.items()}

    def exchange_template(self, callsign_or_prefix: str = '', mode: str = 'CW') -> ExchangeTemplate:
        """The expected exchange of a station
        :param callsign_or_prefix: the callsign or prefix of the station, empty for the default exchange
        :param mode: the mode of the QSO
        :return: the exchange"""

        key = self.__country_key__(callsign_or_prefix)
        if key not in self.__exchanges__:
            key = DEFAULT_EXCHANGE
        if key not in self.__exchanges__:
            raise ContestRulesException(f'No exchange defined for "{callsign_or_prefix}"')

        return self.__exchanges__[key].adjusted_for_mode(mode)

    @property
    def field_names(self) -> list[str]:
        """All slot names of all exchanges in all modes, choice groups with their compound name"""

        names = []
        for template in self.__exchanges__.values():
            for mode in ('CW', 'SSB'):
                for n in template.adjusted_for_mode(mode).names:
                    if n not in names:
                        names.append(n)
        return names

    @property
    def registry(self) -> FieldSpecRegistry:
        if self.__registry__ is None:
            self.__registry__ = FieldSpecRegistry(self.field_names, self.__path__, self.__regex_filename__,
                                                  self.__mults__, self.__qthx__, self.__cty__,
                                                  self.__cut_number_fields__, self.__logger__)
        return self.__registry__

    def is_exchange_mult(self, name: str) -> bool:
        return name in self.registry and self.registry.is_mult(name)

    def canonical_value(self, name: str, value: str) -> str | None:
        return self.registry.canonical_value(name, value)

    def matcher(self) -> ExchangeMatcher:
        return ExchangeMatcher(self.registry, self.__logger__)

    def guess_cache(self, history=None) -> GuessCache:
        return GuessCache(self.registry, history, self.__cty__, self.__logger__)
