from pathlib import Path

import pytest

from rxexchange.rules import ContestRules, ContestRulesException
from rxexchange.exchange import ExchangeTemplate, FieldSpecRegistry, ExchangeMatcher, GuessCache

CONTEST_INI = '''[contest]
name=TEST-HF
path=..
exchange_fields=exchange_fields.txt
exchange_mults=ITUZONE, SOCIETY, QTHX[VE]

[exchange]
default=RST, CHOICE:ITUZONE/SOCIETY
VE=RST, QTHX[VE], OPT:NAME

[qthx]
VE=ON, QC|PQ, BC
'''


@pytest.fixture
def contest_ini(tmp_path: Path, data_dir: Path) -> Path:
    contest_dir = tmp_path / 'contest'
    contest_dir.mkdir()
    ini = contest_dir / 'test.ini'
    ini.write_text(CONTEST_INI, encoding='utf-8')
    return ini


def test_from_settings(contest_ini: Path, cty):
    rules = ContestRules.from_settings(str(contest_ini), cty)

    assert rules.name == 'TEST-HF'
    assert rules.exchange_template() == ExchangeTemplate.from_string('RST, CHOICE:ITUZONE/SOCIETY')
    assert rules.exchange_template('VE3ABC').names == ['RST', 'QTHX[VE]', 'NAME']
    assert rules.exchange_template('DL1ABC').names == ['RST', 'ITUZONE+SOCIETY']
    assert rules.exchange_template('VE3ABC', 'SSB').names == ['RS', 'QTHX[VE]', 'NAME']
    assert rules.exchange_mults == ['ITUZONE', 'SOCIETY', 'QTHX[VE]']
    assert rules.qthx == {'VE': ['ON', 'QC|PQ', 'BC']}


def test_field_names(contest_ini: Path):
    rules = ContestRules.from_settings(str(contest_ini))

    assert rules.field_names == ['RST', 'ITUZONE+SOCIETY', 'RS', 'QTHX[VE]', 'NAME']

    registry = rules.registry
    assert isinstance(registry, FieldSpecRegistry)
    assert registry is rules.registry
    assert list(registry) == ['RST', 'ITUZONE', 'SOCIETY', 'ITUZONE+SOCIETY', 'RS', 'QTHX[VE]', 'NAME']


def test_registry_from_settings(contest_ini: Path):
    rules = ContestRules.from_settings(str(contest_ini))

    assert rules.is_exchange_mult('SOCIETY')
    assert rules.is_exchange_mult('QTHX[VE]')
    assert not rules.is_exchange_mult('RST')
    assert not rules.is_exchange_mult('CQZONE')
    assert rules.canonical_value('QTHX[VE]', 'PQ') == 'QC'
    assert rules.canonical_value('SOCIETY', 'REG1') == 'R1'
    assert rules.canonical_value('RS', '5N') == '59'


def test_parse(contest_ini: Path, cty):
    rules = ContestRules.from_settings(str(contest_ini), cty)
    matcher = rules.matcher()

    assert isinstance(matcher, ExchangeMatcher)

    exchange = matcher.parse('pq 5nn', rules.exchange_template('VE3ABC'))
    assert exchange.valid
    assert exchange.as_dict() == {'RST': '599', 'QTHX[VE]': 'QC', 'NAME': ''}
    assert [f.name for f in exchange.mult_fields()] == ['QTHX[VE]']

    exchange = matcher.parse('59 R1', rules.exchange_template('DL1ABC', 'SSB'))
    assert exchange.valid
    assert exchange.as_dict() == {'RS': '59', 'SOCIETY': 'R1'}


def test_guess_cache(contest_ini: Path, cty, history):
    rules = ContestRules.from_settings(str(contest_ini), cty)
    guesses = rules.guess_cache(history)

    assert isinstance(guesses, GuessCache)
    assert guesses.guess_value('VE3ABC', 'QTHX[VE]') == 'ON'
    assert guesses.guess_value('DL1ABC', 'ITUZONE+SOCIETY') == 'DARC'


def test_cut_number_fields(contest_ini: Path):
    contest_ini.write_text(CONTEST_INI.replace('[exchange]', 'cut_number_fields=RST\n\n[exchange]'),
                           encoding='utf-8')
    rules = ContestRules.from_settings(str(contest_ini))

    assert rules.registry.cut_number_fields == {'RST'}
    assert rules.canonical_value('RS', '5N') is None


def test_missing_ini(tmp_path: Path):
    with pytest.raises(ContestRulesException):
        ContestRules.from_settings(str(tmp_path / 'missing.ini'))


def test_no_exchange(tmp_path: Path):
    ini = tmp_path / 'empty.ini'
    ini.write_text('[contest]\nname=EMPTY\n', encoding='utf-8')

    with pytest.raises(ContestRulesException):
        ContestRules.from_settings(str(ini))


def test_no_default_exchange(data_dir: Path):
    rules = ContestRules({'DL': 'RST, SERNO'}, path=[str(data_dir)], regex_filename='exchange_fields.txt')

    assert rules.exchange_template('dl').names == ['RST', 'SERNO']
    with pytest.raises(ContestRulesException):
        rules.exchange_template('K')


def test_from_keywords(data_dir: Path):
    template = ExchangeTemplate.from_string('RST, SERNO')
    rules = ContestRules({'': template}, name='DARC-XMAS', path=[str(data_dir)],
                         regex_filename='exchange_fields.txt', exchange_mults=['serno'])

    assert rules.exchange_template('K1ABC') == template
    assert rules.is_exchange_mult('SERNO')
    assert rules.matcher().parse('1T 599', rules.exchange_template()).as_dict() == {'RST': '599', 'SERNO': '10'}
