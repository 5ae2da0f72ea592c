"""Structured logging sink shared by every component.

The logger is built once by the entry point and handed to whoever needs it,
nothing here touches structlog's global configuration. Records are written
as logfmt lines, e.g.::

    ts=2016-05-10T11:02:01.312Z level=info caller=middleware.py:33 event=send method=send input=abc123 ...
"""

import logging
import sys

import structlog
from structlog.processors import CallsiteParameter

_CALLSITE = {CallsiteParameter.FILENAME, CallsiteParameter.LINENO}


def _add_caller(logger, method_name, event_dict):
    filename = event_dict.pop("filename", None)
    lineno = event_dict.pop("lineno", None)
    if filename is not None:
        event_dict.setdefault("caller", f"{filename}:{lineno}")
    return event_dict


def new_logger(file=None, level: int = logging.DEBUG, processors=None):
    """Return a logfmt logger writing to `file` (stderr by default).

    `processors` replaces the whole chain; tests pass a LogCapture here.
    """
    if processors is None:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.CallsiteParameterAdder(_CALLSITE, additional_ignores=["logging"]),
            _add_caller,
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(key_order=["ts", "level", "caller", "event"], drop_missing=True),
        ]
    return structlog.wrap_logger(
        structlog.PrintLogger(file if file is not None else sys.stderr),
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


class StdlibHandler(logging.Handler):
    """Forwards stdlib logging records (uvicorn's among them) to a structlog logger."""

    def __init__(self, logger, level=logging.NOTSET):
        super().__init__(level)
        self.logger = logger

    def emit(self, record):
        try:
            log = getattr(self.logger, record.levelname.lower(), self.logger.info)
            fields = {"logger": record.name, "caller": f"{record.filename}:{record.lineno}"}
            if record.exc_info:
                fields["exc_info"] = record.exc_info
            log(record.getMessage(), **fields)
        except Exception:
            self.handleError(record)


def redirect_stdlib(logger, level: int = logging.INFO) -> StdlibHandler:
    """Make the root stdlib logger write through `logger` only."""
    handler = StdlibHandler(logger)
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
    return handler
