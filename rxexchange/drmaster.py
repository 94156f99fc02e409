# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Historical station data from drmaster files and previous ADIF logs"""

import logging
from dataclasses import dataclass, asdict, replace

from adif_file import adi

# drmaster field indicators, in the order they are written
INDICATORS: dict[str, str] = {
    'section': '=A',
    'cq_zone': '=C',
    'foc': '=F',
    'grid': '=G',
    'hit_count': '=H',
    'itu_zone': '=I',
    'check': '=K',
    'name': '=N',
    'qth': '=Q',
    'ten_ten': '=T',
    'user_1': '=U',
    'user_2': '=V',
    'user_3': '=W',
    'user_4': '=X',
    'user_5': '=Y',
    'cw_power': '=y',
    'date': '=z',
    'iota': '=w',
    'precedence': '=u',
    'society': '=v',
    'ssb_power': '=x',
    'state_160': '=s',
    'state_10': '=t',
}

ADIF_MAP: dict[str, str] = {
    'CQZ': 'cq_zone',
    'ITUZ': 'itu_zone',
    'GRIDSQUARE': 'grid',
    'NAME': 'name',
    'ARRL_SECT': 'section',
    'CHECK': 'check',
    'PRECEDENCE': 'precedence',
}


class HistoryDatabaseException(Exception):
    pass


@dataclass(frozen=True)
class HistoryRecord:
    """Historical data for a callsign as found in a drmaster line"""
    call: str
    section: str = ''
    cq_zone: str = ''
    foc: str = ''
    grid: str = ''
    hit_count: str = ''
    itu_zone: str = ''
    check: str = ''
    name: str = ''
    qth: str = ''
    ten_ten: str = ''
    user_1: str = ''
    user_2: str = ''
    user_3: str = ''
    user_4: str = ''
    user_5: str = ''
    cw_power: str = ''
    date: str = ''
    iota: str = ''
    precedence: str = ''
    society: str = ''
    ssb_power: str = ''
    state_160: str = ''
    state_10: str = ''

    @classmethod
    def from_line(cls, line: str) -> 'HistoryRecord | None':
        """Build a record from a drmaster line
        :param line: callsign followed by blank separated =X<value> fields
        :return: the record or None for an empty line"""

        tokens = line.split()
        if not tokens:
            return None

        data = {}
        for attr, indicator in INDICATORS.items():
            for t in tokens[1:]:
                if t.startswith(indicator):
                    data[attr] = t[len(indicator):]
                    break

        return cls(tokens[0].upper(), **data)

    def to_line(self) -> str:
        """Serialise the record as a drmaster line"""

        line = self.call
        for attr, indicator in INDICATORS.items():
            value = getattr(self, attr)
            if value:
                line += f' {indicator}{value}'
        return line

    def __add__(self, other: 'HistoryRecord') -> 'HistoryRecord':
        """Merge with another record, non-empty values of the other record take precedence"""

        if not isinstance(other, HistoryRecord):
            return NotImplemented

        data = {k: v for k, v in asdict(other).items() if v and k != 'call'}
        return replace(self, **data)


class HistoryDatabase:
    """Read-only access to historical station data by callsign"""

    def __init__(self, filename: str | None = None, logger=None):
        self.log = logging.getLogger(type(self).__name__)
        if logger:
            self.log.setLevel(logger.loglevel)
            self.log.addHandler(logger)
        self.log.debug('Initialising...')

        self.__records__: dict[str, HistoryRecord] = {}

        if filename:
            self.load(filename)

    def load(self, filename: str):
        """Load a drmaster file, records for calls already known are merged"""

        self.log.info(f'Loading drmaster file "{filename}"...')
        try:
            with open(filename, encoding='utf-8', errors='replace') as df:
                for line in df:
                    rec = HistoryRecord.from_line(line)
                    if rec:
                        self.add(rec)
        except OSError as exc:
            raise HistoryDatabaseException(str(exc)) from None
        self.log.info(f'{len(self)} calls in history')

    def import_adif(self, filename: str):
        """Import historical data from a previous log in ADIF format
        Later QSOs take precedence over earlier ones"""

        self.log.info(f'Importing history from ADIF "{filename}"...')
        try:
            records: list = adi.load(filename)['RECORDS']
        except OSError as exc:
            raise HistoryDatabaseException(str(exc)) from None

        imported = 0
        for i, r in enumerate(records, 1):
            if 'CALL' not in r:
                self.log.warning(f'ADIF import, callsign missing in record {i}. Skipped record.')
                continue

            data = {attr: str(r[tag]).strip().upper() for tag, attr in ADIF_MAP.items() if r.get(tag)}
            qth = r.get('STATE', r.get('DARC_DOK', ''))
            if qth:
                data['qth'] = str(qth).strip().upper()

            self.add(HistoryRecord(str(r['CALL']).upper(), **data))
            imported += 1

        self.log.info(f'Imported {imported} records from "{filename}"')

    def save(self, filename: str):
        """Write all records as a drmaster file"""

        try:
            with open(filename, 'w', encoding='utf-8') as df:
                for call in self.calls:
                    df.write(self.__records__[call].to_line() + '\n')
        except OSError as exc:
            raise HistoryDatabaseException(str(exc)) from None

    def add(self, record: HistoryRecord):
        """Add a record, an existing record for the same call is merged"""

        if record.call in self.__records__:
            self.__records__[record.call] = self.__records__[record.call] + record
        else:
            self.__records__[record.call] = record

    def get(self, call: str) -> HistoryRecord | None:
        return self.__records__.get(call.upper())

    def __getitem__(self, call: str) -> HistoryRecord:
        return self.__records__[call.upper()]

    def __contains__(self, call: str) -> bool:
        return call.upper() in self.__records__

    def __len__(self) -> int:
        return len(self.__records__)

    @property
    def calls(self) -> list[str]:
        """All calls in alphabetical order"""
        return sorted(self.__records__)
