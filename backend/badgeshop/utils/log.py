import logging
import sys

from badgeshop.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger writing to stdout with the shop prefix.
    Handlers are attached once per logger so repeated imports don't duplicate output.
    """
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("[BADGESHOP] %(name)s: %(message)s"))
        log.addHandler(h)
        log.propagate = False
    return log
