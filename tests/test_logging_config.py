import logging
import os
from datetime import datetime

import pytest

from text_eraser.logging_config import LoggerMixin, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_daily_log_files(tmp_path):
    setup_logging(log_level="DEBUG", log_to_console=False, log_dir=str(tmp_path))
    logging.getLogger("text_eraser.test").error("boom")

    day = datetime.now().strftime("%Y%m%d")
    assert os.path.exists(tmp_path / f"text_eraser_{day}.log")
    assert os.path.exists(tmp_path / f"text_eraser_error_{day}.log")
    assert logging.getLogger().level == logging.DEBUG


def test_third_party_loggers_capped():
    setup_logging(log_to_file=False)
    for name in ("PIL", "ppocr", "fitz"):
        assert logging.getLogger(name).level == logging.WARNING


def test_logger_mixin_name():
    class Worker(LoggerMixin):
        pass

    assert Worker().logger.name == f"{__name__}.Worker"
    assert get_logger("x") is logging.getLogger("x")
