from pathlib import Path

import pytest

from rxexchange.cty import CountryData
from rxexchange.drmaster import HistoryDatabase
from rxexchange.exchange import FieldSpecRegistry

EXCHANGE_FIELDS = '''RST: [1-5][1-9][1-9]
CQZONE: 0*([1-9]|[1-3][0-9]|40)

ITUZONE: 0*([1-9]|[1-8][0-9]|90)
SERNO: [0-9]+
SERNO: .+
TIME: [0-2][0-9]:[0-5][0-9]
BAD: [A-
'''

SOCIETY_VALUES = '''; IARU member societies and officials
// regional officials
HQ
AC
 R1 = R1 , REG1 , ,
R2=REG2
'''

SECTION_VALUES = '''ON
QC=PQ, QUE
BC
'''

CTY_CSV = '''VE,Canada,1,NA,5,9,44.35,78.75,5.0,VA VE VE3(4)[4] VO1 VY2 =VER20250101;
DL,Fed. Rep. of Germany,230,EU,14,28,51.0,-10.0,-1.0,DA DB DC DD DF DJ DK DL DM DO;
K,United States,291,NA,5,8,37.53,91.67,5.0,AA K N W =W1AW(6)[7];
JA,Japan,339,AS,25,45,36.4,-138.38,-9.0,JA JE JF JG JH JR;
UA,European Russia,54,EU,16,29,53.65,-41.37,-4.0,R U UA;
'''

DRMASTER = '''VE3ABC =C4 =I4 =NJOHN =QON
DL1ABC =C14 =I28 =QB01 =NHANS =vDARC
RA3ABC =C16 =QMA01
JA1ABC =QJA01
W1AW =KHQ =y100 =x1500 =uA

VE3ABC =AON
'''


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / 'exchange_fields.txt').write_text(EXCHANGE_FIELDS, encoding='utf-8')
    (tmp_path / 'SOCIETY.values').write_text(SOCIETY_VALUES, encoding='utf-8')
    (tmp_path / 'SECTION.values').write_text(SECTION_VALUES, encoding='utf-8')
    return tmp_path


@pytest.fixture
def cty_file(tmp_path: Path) -> Path:
    cty = tmp_path / 'cty.csv'
    cty.write_text(CTY_CSV, encoding='utf-8')
    return cty


@pytest.fixture
def cty(cty_file: Path) -> CountryData:
    return CountryData(str(cty_file))


@pytest.fixture
def drmaster_file(tmp_path: Path) -> Path:
    drmaster = tmp_path / 'drmaster'
    drmaster.write_text(DRMASTER, encoding='utf-8')
    return drmaster


@pytest.fixture
def history(drmaster_file: Path) -> HistoryDatabase:
    return HistoryDatabase(str(drmaster_file))


@pytest.fixture
def registry(data_dir: Path) -> FieldSpecRegistry:
    return FieldSpecRegistry(['RST', 'CQZONE', 'ITUZONE', 'ITUZONE+SOCIETY', 'SECTION', 'SERNO'],
                             path=[str(data_dir)],
                             regex_filename='exchange_fields.txt',
                             exchange_mults=['ITUZONE', 'SOCIETY'])
