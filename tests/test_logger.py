from pathlib import Path

import pytest
from PyQt6 import QtCore

from rxexchange.Logger import Logger


@pytest.fixture
def settings(tmp_path: Path) -> QtCore.QSettings:
    ini = tmp_path / 'log.ini'
    ini.write_text(f'[log]\nlevel=debug\nfile={(tmp_path / "rxexchange.log").as_posix()}\n', encoding='utf-8')
    return QtCore.QSettings(str(ini), QtCore.QSettings.Format.IniFormat)


def test_log_file(settings: QtCore.QSettings, tmp_path: Path, capsys: pytest.CaptureFixture):
    logger = Logger(settings)
    logger.debug('Debug message')
    logger.warning('Warning message')
    logger.close()

    assert logger.loglevel == 'DEBUG'
    text = (tmp_path / 'rxexchange.log').read_text(encoding='utf-8')
    assert 'DEBUG   : RxExchange - Debug message' in text
    assert 'WARNING : RxExchange - Warning message' in text

    captured = capsys.readouterr()
    assert 'Debug message' in captured.out
    assert 'Warning message' in captured.err


def test_level_override(settings: QtCore.QSettings):
    logger = Logger(settings, 'warning')
    logger.close()

    assert logger.loglevel == 'WARNING'
