# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Guesses of exchange values from historical station data"""

import logging
import threading

from rxexchange.RegEx import wpx_prefix
from .base import is_choice_name, split_choice
from .matcher import ParsedExchange

# Members of a choice group are guessed in this order, others in declaration order
CHOICE_PRIORITIES: dict[str, tuple[str, ...]] = {
    'ITUZONE+SOCIETY': ('SOCIETY', 'ITUZONE'),
}

# Field names read directly from an attribute of the history record
HISTORY_ATTRIBUTES: dict[str, str] = {
    'CHECK': 'check',
    'CWPOWER': 'cw_power',
    'SSBPOWER': 'ssb_power',
    'PREC': 'precedence',
    'SOCIETY': 'society',
    'SECTION': 'section',
    'NAME': 'name',
    'FDEPT': 'qth',
    'HADXC': 'qth',
}

VE_PROVINCES: dict[str, str] = {
    '1': 'NS',
    '2': 'PQ',
    '3': 'ON',
    '4': 'MB',
    '5': 'SK',
    '6': 'MB',
    '7': 'BC',
    '9': 'NB',
}

RDA_COUNTRIES = ('R1FJ', 'UA', 'UA2', 'UA9')


class GuessCache:
    """Thread safe memo of the expected exchange value per callsign and field

    A guess is computed once from the history and the country data, an empty guess is
    remembered as well. Values from logged QSOs overwrite guesses."""

    def __init__(self, registry, history=None, cty=None, logger=None):
        """
        :param registry: the exchange fields to canonicalise the guesses with
        :param history: historical station data providing get(callsign) -> record or None
        :param cty: country data for zones and country specific fields
        :param logger: a logger handler"""

        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)
        self.log.debug('Initialising...')

        self.__registry__ = registry
        self.__history__ = history
        self.__cty__ = cty
        self.__lock__ = threading.Lock()
        self.__cache__: dict[tuple[str, str], str] = {}

    def guess_value(self, callsign: str, field_name: str) -> str:
        """The expected value of a field for a callsign
        :param callsign: the callsign
        :param field_name: a field or choice group name
        :return: the canonical value or an empty string if nothing is known"""

        key = (callsign.upper(), field_name)
        with self.__lock__:
            if key in self.__cache__:
                return self.__cache__[key]

            value = self.__guess__(key[0], field_name)
            self.__cache__[key] = value

        if value:
            self.log.debug(f'Guessed {field_name}="{value}" for {key[0]}')
        return value

    def set_value(self, callsign: str, field_name: str, value: str):
        """Remember a value actually received from a station"""

        with self.__lock__:
            self.__cache__[(callsign.upper(), field_name)] = value

    def set_values_from_file(self, filename: str, field_name: str) -> int:
        """Preset values for a field from a file with lines of callsign and value
        A first line with the callsign CALL is a header
        :return: the number of values set"""

        try:
            with open(filename, encoding='utf-8') as vf:
                lines = vf.readlines()
        except (OSError, UnicodeDecodeError) as exc:
            self.log.error(f'Error reading "{filename}": {exc}')
            return 0

        count = 0
        for i, line in enumerate(lines):
            tokens = line.upper().replace('\t', ' ').split()
            if len(tokens) < 2 or (i == 0 and tokens[0] == 'CALL'):
                continue

            self.set_value(tokens[0], field_name, tokens[1])
            count += 1

        self.log.info(f'Set {count} values for {field_name} from "{filename}"')
        return count

    def record_qso(self, callsign: str, exchange: ParsedExchange):
        """Remember all values of a logged QSO, under the resolved and the template field name"""

        if not exchange.valid:
            return

        callsign = exchange.replacement_call or callsign
        for f in exchange.fields:
            if not f.value:
                continue
            self.set_value(callsign, f.name, f.value)
            if f.template_name and f.template_name != f.name:
                self.set_value(callsign, f.template_name, f.value)

    def __len__(self) -> int:
        return len(self.__cache__)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return (key[0].upper(), key[1]) in self.__cache__

    def __guess__(self, callsign: str, field_name: str) -> str:
        if is_choice_name(field_name):
            for name in CHOICE_PRIORITIES.get(field_name, split_choice(field_name)):
                value = self.__guess__(callsign, name)
                if value:
                    return value
            return ''

        value = self.__extract__(callsign, field_name)
        if not value:
            return ''

        spec = self.__registry__.get(field_name) if self.__registry__ is not None else None
        return spec.value_to_log(value) if spec is not None else value

    def __country__(self, callsign: str) -> str:
        return self.__cty__.canonical_prefix(callsign) if self.__cty__ else ''

    def __extract__(self, callsign: str, field_name: str) -> str:
        """The raw value of a field from the history record and the country data"""

        rec = self.__history__.get(callsign) if self.__history__ is not None else None

        def attr(name: str) -> str:
            return str(getattr(rec, name, '') or '') if rec else ''

        if field_name in HISTORY_ATTRIBUTES:
            return attr(HISTORY_ATTRIBUTES[field_name])

        if field_name.startswith('QTHX['):
            return attr('qth')

        match field_name:
            case '10MSTATE':
                value = attr('state_10') or attr('qth')
                if not value and self.__country__(callsign) == 'VE':
                    value = self.ve_province(callsign)
                return value
            case 'CQZONE':
                return attr('cq_zone') or (self.__cty__.cq_zone(callsign) if self.__cty__ else '')
            case 'ITUZONE':
                return attr('itu_zone') or (self.__cty__.itu_zone(callsign) if self.__cty__ else '')
            case 'DOK':
                return attr('qth') if self.__country__(callsign) == 'DL' else ''
            case 'JAPREF':
                return attr('qth') if self.__country__(callsign) == 'JA' else ''
            case 'RDA' | 'RD2':
                if self.__country__(callsign) in RDA_COUNTRIES or callsign.startswith('RI1AN'):
                    value = attr('qth')
                    return value[:2] if field_name == 'RD2' else value
                return ''

        return ''

    @staticmethod
    def ve_province(callsign: str) -> str:
        """The canadian province from the prefix of a VE callsign"""

        pfx = wpx_prefix(callsign)
        if not pfx:
            return ''
        if pfx == 'VY2':
            return 'PE'
        if pfx == 'VO1':
            return 'NF'
        return VE_PROVINCES.get(pfx[-1], '')
