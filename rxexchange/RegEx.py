"""Module contains the regular expressions for callsign and exchange field validation"""
import re

REGEX_CALL = re.compile(r'([a-zA-Z0-9]{1,3}?/)?([a-zA-Z0-9]{1,3}?[0-9][a-zA-Z0-9]{0,3}?[a-zA-Z])(/[aAmMpPrRtT]{1,2}?)?')
REGEX_LOCATOR = re.compile(r'[a-rA-R]{2}[0-9]{2}([a-xA-X]{2}([0-9]{2})?)?')
REGEX_WPX = re.compile(r'([A-Z0-9]+?[0-9]+)[A-Z]+')

# Grammars for well known exchange fields if a contest does not define them
REGEX_CQZONE = re.compile(r'0*([1-9]|[1-3][0-9]|40)')
REGEX_ITUZONE = re.compile(r'0*([1-9]|[1-8][0-9]|90)')
REGEX_SERNO = re.compile(r'[0-9]+')
REGEX_RST = re.compile(r'[1-5][1-9][1-9]')
REGEX_RS = re.compile(r'[1-5][1-9]')
REGEX_RDA = re.compile(r'[A-Z]{2}[0-9]{2}')
REGEX_SOCIETY = re.compile(r'R[1-3]|[A-Z]+')

DEFAULT_FIELD_PATTERNS: dict[str, re.Pattern] = {
    'CALLSIGN': REGEX_CALL,
    'CQZONE': REGEX_CQZONE,
    'GRID': REGEX_LOCATOR,
    'ITUZONE': REGEX_ITUZONE,
    'RDA': REGEX_RDA,
    'RS': REGEX_RS,
    'RST': REGEX_RST,
    'SERNO': REGEX_SERNO,
    'SOCIETY': REGEX_SOCIETY,
}

# Morse operators send cut numbers for some digits
CUT_DIGITS = str.maketrans('TtNnAa', '009911')


def check_format(exp: re.Pattern, txt: str) -> bool:
    """Test the given text against a regular expression
    :param exp: a compiled pattern
    :param txt: a text
    :return: true if pattern matches"""
    return bool(re.fullmatch(exp, txt))


def check_call(call: str) -> None | tuple:
    """Test a call sign against a regular expression
    :param call: a call sign
    :return: tuple of parts ('Country prefix/', 'Call sign', '/Operation suffix')"""

    m = re.fullmatch(REGEX_CALL, call)
    if m:
        return m.groups()


def looks_like_callsign(txt: str) -> bool:
    """A loose test if a text could be a callsign at all
    :param txt: the text to test
    :return: true if the text has at least 3 chars and contains a letter and a digit"""

    if len(txt) < 3:
        return False

    return any(c.isdigit() for c in txt) and any(c.isalpha() for c in txt)


def process_cut_digits(txt: str) -> str:
    """Replace cut numbers with real digits (T -> 0, N -> 9, A -> 1)
    :param txt: a text possibly containing cut numbers
    :return: the text with cut numbers replaced"""
    return txt.translate(CUT_DIGITS)


def wpx_prefix(call: str) -> str:
    """Get the WPX style prefix of a callsign, e.g. VE3 for VE3ABC
    :param call: the callsign
    :return: the prefix or an empty string"""

    parts = check_call(call.upper())
    if not parts:
        return ''

    m = re.fullmatch(REGEX_WPX, parts[1])
    if m:
        return m.group(1)
    return ''
