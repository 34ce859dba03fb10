from __future__ import annotations

import logging
import sys

import pytest

from matte_maker.logger import get_logger, setup_logger


@pytest.fixture(autouse=True)
def _reset_logger(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("MATTE_MAKER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MATTE_MAKER_LOG_CATS", raising=False)
    yield
    monkeypatch.delenv("MATTE_MAKER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MATTE_MAKER_LOG_CATS", raising=False)
    setup_logger()


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr]


def test_single_stderr_handler_after_repeated_setup():
    setup_logger()
    logger = setup_logger()
    assert len(_stderr_handlers(logger)) == 1
    assert logger.propagate is False


def test_child_loggers_share_base():
    child = get_logger("convert_command")
    assert child.name == "matte_maker.convert_command"
    assert get_logger().name == "matte_maker"


def test_env_level_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MATTE_MAKER_LOG_LEVEL", "debug")
    assert setup_logger().level == logging.DEBUG
    monkeypatch.setenv("MATTE_MAKER_LOG_LEVEL", "bogus")
    assert setup_logger(level=logging.WARNING).level == logging.WARNING


def test_category_filter(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MATTE_MAKER_LOG_CATS", "fonts, backend")
    (handler,) = _stderr_handlers(setup_logger())

    def record(name: str) -> logging.LogRecord:
        return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

    assert handler.filter(record("matte_maker.fonts"))
    assert handler.filter(record("matte_maker.backend"))
    assert not handler.filter(record("matte_maker.render_worker"))


def test_category_filter_cleared(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MATTE_MAKER_LOG_CATS", "fonts")
    setup_logger()
    monkeypatch.delenv("MATTE_MAKER_LOG_CATS")
    (handler,) = _stderr_handlers(setup_logger())
    assert handler.filters == []
