import pytest

from rxexchange.RegEx import (check_call, check_format, looks_like_callsign, process_cut_digits, wpx_prefix,
                              REGEX_LOCATOR)


@pytest.mark.parametrize('txt,expected', [
    ('W1AW', True),
    ('DL/PA1ABC', True),
    ('599', False),
    ('HQ', False),
    ('R1', False),
    ('A1', False),
    ('REG1', True),
])
def test_looks_like_callsign(txt: str, expected: bool):
    assert looks_like_callsign(txt) is expected


def test_cut_digits():
    assert process_cut_digits('5NN') == '599'
    assert process_cut_digits('1T') == '10'
    assert process_cut_digits('ann') == '199'
    assert process_cut_digits('ON') == 'O9'


def test_check_call():
    assert check_call('DL/PA1ABC/P') == ('DL/', 'PA1ABC', '/P')
    assert check_call('599') is None


def test_wpx_prefix():
    assert wpx_prefix('ve3abc') == 'VE3'
    assert wpx_prefix('DL/PA1ABC/P') == 'PA1'
    assert wpx_prefix('JA') == ''


def test_check_format():
    assert check_format(REGEX_LOCATOR, 'JO40AA')
    assert not check_format(REGEX_LOCATOR, 'JO4')
