# Logging for the readers, generators and the command line driver.
#
# All modules log to children of the "deviceheaders" logger. Only that logger gets a handler, so an
# application embedding the generators keeps control of the root logger.

import logging
import sys

PACKAGE_LOGGER = 'deviceheaders'

def logLevel(verbose:bool = False, quiet:bool = False) -> int:
    """ -q wins over -v """
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO

def setup_logging(verbose:bool = False, quiet:bool = False) -> logging.Logger:
    """ Give the package logger one stderr handler at the level chosen by the -v/-q options.
        Calling it again replaces the handler. Quiet output drops the level and module prefix. """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logLevel(verbose, quiet))
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    fmt = "%(message)s" if quiet else "%(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return logger

def get_logger(name:str) -> logging.Logger:
    """ 'name' is a module's __name__; anything outside the package is put under it """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f'{PACKAGE_LOGGER}.{name}'
    return logging.getLogger(name)
