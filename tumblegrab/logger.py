""" This module contains custom logging classes for Tumblegrab. """

import logging
from copy import copy
from datetime import datetime
import os

from tumblegrab.session import ScrapeSession


class TumblegrabFormatter(logging.Formatter):
    """ Custom formatter for TumblegrabLogger """
    _COLORS = {
        logging.DEBUG: "\x1b[34m",  # Blue
        logging.INFO: "\x1b[32m",  # Green
        logging.WARNING: "\x1b[33m",  # Yellow
        logging.ERROR: "\x1b[31m",  # Red
        logging.CRITICAL: "\x1b[31m"  # Red
    }
    _RESET = "\x1b[0m"
    _FORMAT = '%(asctime)s [P: %(pages)d][M: %(media)d][%(levelname)s]: %(message)s'

    _use_color: bool

    def __init__(self, use_color: bool = True):
        super().__init__(self._FORMAT)
        self._use_color = use_color

    def format(self, record: logging.LogRecord):
        record_copy = copy(record)
        # Records logged through a plain Logger carry no counters
        for counter in ("pages", "media"):
            if not hasattr(record_copy, counter):
                setattr(record_copy, counter, 0)
        if self._use_color:
            color = self._COLORS.get(record.levelno)
            record_copy.levelname = f"{color}{record.levelname}{self._RESET}"
        return super().format(record_copy)


class TumblegrabLogger(logging.Logger):
    """ Custom logger for Tumblegrab """
    _session: ScrapeSession = None

    def __init__(self, level=logging.INFO, log_dir: str = "logs"):
        super().__init__("TumblegrabLogger", level)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(TumblegrabFormatter())
        self.addHandler(console_handler)

        # Ensure the logs directory exists
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # File handler
        log_filename = f"{log_dir}/{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_filename)
        file_handler.setFormatter(TumblegrabFormatter(use_color=False))
        file_handler.setLevel(logging.DEBUG)
        self.addHandler(file_handler)

    def set_session(self, session: ScrapeSession):
        """ Set the ScrapeSession instance to get the counters from """
        self._session = session

    def _get_extra(self):
        if self._session is None:
            return {
                "pages": 0,
                "media": 0
            }

        return {
            "pages": self._session.total_pages(),
            "media": self._session.total_media()
        }

    def critical(self, msg, *args, **kwargs):
        super().log(logging.CRITICAL, msg, *args, extra=self._get_extra(), **kwargs)

    def error(self, msg, *args, **kwargs):
        super().log(logging.ERROR, msg, *args, extra=self._get_extra(), **kwargs)

    def warning(self, msg, *args, **kwargs):
        super().log(logging.WARNING, msg, *args, extra=self._get_extra(), **kwargs)

    def info(self, msg, *args, **kwargs):
        super().log(logging.INFO, msg, *args, extra=self._get_extra(), **kwargs)

    def debug(self, msg, *args, **kwargs):
        super().log(logging.DEBUG, msg, *args, extra=self._get_extra(), **kwargs)
