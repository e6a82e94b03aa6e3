"""
tests/test_logger.py

Unit tests for run logger setup.
"""
import logging

from pynemo.logs import get_logger


def test_logger_creates_log_file(tmp_path):
    logger = get_logger(run_name="testrun", scenario="testscen", log_dir=str(tmp_path))
    logger.info("Test log entry")
    log_files = list(tmp_path.glob("*.log"))
    assert len(log_files) == 1
    assert log_files[0].name == "testscen_testrun.log"
    with open(log_files[0], "r") as f:
        content = f.read()
    assert "Test log entry" in content


def test_logger_no_duplicate_handlers(tmp_path):
    first = get_logger(run_name="again", scenario="testscen", log_dir=str(tmp_path))
    second = get_logger(run_name="again", scenario="testscen", log_dir=str(tmp_path))
    assert first is second
    assert len(second.handlers) == 2


def test_quiet_logger_file_only(tmp_path):
    logger = get_logger(run_name="quiet", scenario="testscen", log_dir=str(tmp_path), quiet=True)
    assert [type(h) for h in logger.handlers] == [logging.FileHandler]
    assert not logger.propagate


def test_logger_creates_directory(tmp_path):
    log_dir = tmp_path / "logs" / "nested"
    get_logger(run_name="dir", scenario="testscen", log_dir=str(log_dir), level="DEBUG")
    assert log_dir.is_dir()
