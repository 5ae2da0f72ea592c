import io
import logging

from gcmstub.logs import StdlibHandler, new_logger


def test_logfmt_line():
    out = io.StringIO()
    logger = new_logger(out)

    logger.info("send", method="send", input="abc123", err=None)

    line = out.getvalue()
    assert line.startswith("ts=")
    assert "level=info" in line
    assert "caller=test_logs.py:" in line
    assert "event=send" in line
    assert "input=abc123" in line
    assert line.endswith("\n")
    assert line.count("\n") == 1


def test_level_filter():
    out = io.StringIO()
    logger = new_logger(out, level=logging.WARNING)

    logger.info("quiet")
    logger.critical("fatal", err="received SIGTERM")

    assert "quiet" not in out.getvalue()
    assert "level=critical" in out.getvalue()


def test_stdlib_records_are_forwarded(logger, capture):
    std = logging.getLogger("gcmstub.tests.stdlib")
    handler = StdlibHandler(logger)
    std.addHandler(handler)
    std.propagate = False
    try:
        std.warning("disk %s", "full")
    finally:
        std.removeHandler(handler)
        std.propagate = True

    entry = capture.entries[0]
    assert entry["event"] == "disk full"
    assert entry["log_level"] == "warning"
    assert entry["logger"] == "gcmstub.tests.stdlib"
    assert entry["caller"].startswith("test_logs.py:")


def test_stdlib_exception_keeps_traceback(logger, capture):
    std = logging.getLogger("gcmstub.tests.exc")
    handler = StdlibHandler(logger)
    std.addHandler(handler)
    std.propagate = False
    try:
        try:
            raise ValueError("bad app")
        except ValueError:
            std.exception("Exception in ASGI application")
    finally:
        std.removeHandler(handler)
        std.propagate = True

    entry = capture.entries[0]
    assert entry["log_level"] == "error"
    assert entry["exc_info"][0] is ValueError


def test_traceback_is_rendered():
    out = io.StringIO()
    logger = new_logger(out)
    std = logging.getLogger("gcmstub.tests.render")
    handler = StdlibHandler(logger)
    std.addHandler(handler)
    std.propagate = False
    try:
        try:
            raise ValueError("bad app")
        except ValueError:
            std.exception("Exception in ASGI application")
    finally:
        std.removeHandler(handler)
        std.propagate = True

    line = out.getvalue()
    assert "Traceback" in line
    assert "ValueError: bad app" in line
    assert "logger=gcmstub.tests.render" in line
