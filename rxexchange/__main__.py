# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Parses a received exchange with the rules of a contest definition and prints the result.
Prints the field list of the contest as Markdown with --fields."""

import os
import sys
from argparse import ArgumentParser

from PyQt6 import QtCore

from . import __prog_name__, __prog_desc__, __version__
from .Logger import Logger
from .cty import CountryData
from .drmaster import HistoryDatabase, HistoryDatabaseException
from .rules import ContestRules, ContestRulesException
from .exchange import build_field_list

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2


def build_parser() -> ArgumentParser:
    cmd = ArgumentParser(prog=__prog_name__.lower(), description=__prog_desc__)
    cmd.add_argument('config', help='Contest definition in INI format')
    cmd.add_argument('exchange', nargs='*', help='The received exchange')
    cmd.add_argument('-c', '--call', default='', help='Callsign of the station worked')
    cmd.add_argument('-m', '--mode', default='CW', help='Mode of the QSO, default=%(default)s')
    cmd.add_argument('--cty', help='Country data in cty CSV format')
    cmd.add_argument('--history', help='Historical station data in drmaster format')
    cmd.add_argument('--adif', action='append', default=[], help='Previous log in ADIF format, may be repeated')
    cmd.add_argument('--fields', action='store_true', help='Print the exchange fields as Markdown')
    cmd.add_argument('--log-level', help='Log level, overrides log/level of the contest definition')
    cmd.add_argument('--version', action='version', version=f'{__prog_name__} {__version__}')
    return cmd


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if not os.path.isfile(args.config):
        print(f'Contest definition "{args.config}" not found', file=sys.stderr)
        return EXIT_CONFIG

    logger = Logger(QtCore.QSettings(args.config, QtCore.QSettings.Format.IniFormat), args.log_level)

    try:
        cty = CountryData(args.cty) if args.cty else None
        if cty:
            logger.info(f'Using country data {cty.version}')
        rules = ContestRules.from_settings(args.config, cty, logger)

        history = None
        if args.history or args.adif:
            history = HistoryDatabase(args.history, logger)
            for adif in args.adif:
                history.import_adif(adif)

        template = rules.exchange_template(args.call, args.mode)
    except (ContestRulesException, HistoryDatabaseException, OSError) as exc:
        logger.error(str(exc))
        logger.close()
        return EXIT_CONFIG

    if args.fields:
        print(build_field_list(rules.registry))

    if args.call and (history is not None or cty is not None):
        guesses = rules.guess_cache(history)
        print(f'Guesses for {args.call.upper()}:')
        for name in template.names:
            print(f'  {name:<16} {guesses.guess_value(args.call, name)}')

    result = EXIT_VALID
    if args.exchange:
        exchange = rules.matcher().parse(args.exchange, template)

        for f in exchange.fields:
            print(f'{f.name:<16} {f.value:<10} {"MULT" if f.is_mult else ""}'.rstrip())
        if exchange.replacement_call:
            print(f'Callsign: {exchange.replacement_call}')

        if exchange.valid:
            print('Valid exchange')
        else:
            print(exchange.alert, file=sys.stderr)
            result = EXIT_INVALID

    logger.close()
    return result


if __name__ == '__main__':
    sys.exit(main())
