from __future__ import annotations

import logging
import sys

LOGGER_NAME = "brslint"

_FORMAT = "brslint: %(message)s"
_VERBOSE_FORMAT = "brslint [%(levelname)s] %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever `sys.stderr` is when the record is emitted."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def resolve_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        # The CLI rejects --verbose with --quiet; programmatic callers get DEBUG.
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(*, verbose: bool, quiet: bool) -> logging.Logger:
    """
    Route the `brslint.*` loggers (scanner, inspector, CLI) to stderr.

    Only the package logger is touched, so embedding applications keep their
    own root configuration. Calling this again replaces the handler installed
    by the previous call. JSON on stdout stays machine-readable.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _StderrHandler):
            logger.removeHandler(handler)

    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(verbose=verbose, quiet=quiet))
    return logger
