import logging

from warden.util.logger import (
    NOISY_LOGGERS,
    ColorFormatter,
    get_log_filepath,
    get_logger,
    handle_exception,
    setup_logger,
    should_use_color,
)


class DummyStream:
    def __init__(self):
        self.written = []
    def write(self, msg):
        self.written.append(msg)
    def isatty(self):
        return True


def test_get_logger_returns_logger():
    logger = get_logger("test_logger")
    assert isinstance(logger, logging.Logger)
    assert any(isinstance(h, logging.Handler) for h in logger.handlers)


def test_setup_logger_idempotent():
    logger1 = setup_logger("test_logger_idem")
    logger2 = setup_logger("test_logger_idem")
    assert logger1 is logger2
    assert len(logger1.handlers) == 2


def test_color_formatter_applies_color():
    formatter = ColorFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("test", logging.ERROR, "", 0, "error occurred", None, None)
    formatted = formatter.format(record)
    assert "\033[31m" in formatted and "error occurred" in formatted


def test_should_use_color_true(monkeypatch):
    monkeypatch.setattr("sys.stderr", DummyStream())
    assert should_use_color() is True


def test_get_log_filepath_is_stable():
    path = get_log_filepath()
    assert path.suffix == ".log"
    assert get_log_filepath() == path


def test_noisy_loggers_silenced():
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.ERROR


def test_handle_exception_logs(monkeypatch):
    recorded = []
    monkeypatch.setattr(logging, "error", lambda *args, **kwargs: recorded.append((args, kwargs)))

    try:
        raise ValueError("boom")
    except ValueError as exc:
        handle_exception(type(exc), exc, exc.__traceback__)

    assert recorded and recorded[0][0][0] == "Uncaught exception"
