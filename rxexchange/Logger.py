import os.path
import sys
import time
import logging

from PyQt6 import QtCore


class BaseLogger(logging.Handler):
    def __init__(self, loggername: str | None = None, loglevel: str = 'INFO'):
        super().__init__()

        self.__loglevel__ = loglevel
        logging.Formatter.converter = time.gmtime
        self.setFormatter(logging.Formatter('%(asctime)s %(levelname)-8s: %(name)s - %(message)s'))
        self.__log__ = logging.getLogger(loggername)
        self.__log__.setLevel(self.__loglevel__)
        self.__log__.addHandler(self)

    @property
    def loglevel(self) -> str:
        return self.__loglevel__

    def emit(self, record):
        log_msg = self.format(record)

        if record.levelno >= 30:  # warning, error, critical
            print(log_msg, file=sys.stderr)
        else:  # info, debug
            print(log_msg)

    def debug(self, message):
        self.__log__.debug(message)

    def info(self, message):
        self.__log__.info(message)

    def warning(self, message):
        self.__log__.warning(message)

    def error(self, message):
        self.__log__.error(message)

    def critical(self, message):
        self.__log__.critical(message)

    def exception(self, message):
        self.__log__.exception(message)


class Logger(BaseLogger):
    """Logger configured from the settings, optionally appending to a log file"""

    def __init__(self, settings: QtCore.QSettings, loglevel: str | None = None):
        super().__init__('RxExchange', (loglevel or str(settings.value('log/level', 'INFO'))).upper())

        self.__log_file__ = None
        log_file = settings.value('log/file', '')
        if log_file:
            try:
                self.__log_file__ = open(os.path.expanduser(log_file), 'a', buffering=1, encoding='utf8')
            except OSError as exc:
                self.error(f'Log file "{log_file}" could not be opened')
                self.exception(exc)

    def emit(self, record):
        super().emit(record)

        if self.__log_file__:
            self.__log_file__.write(self.format(record) + '\n')

    def close(self):
        if self.__log_file__:
            self.__log_file__.close()
            self.__log_file__ = None
        super().close()
