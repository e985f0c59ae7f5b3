"""
tests/test_logger.py

Unit tests for the per-run logger setup.
"""
import logging
from energyhub.logs.logger import get_logger, close_logger


def test_logger_creates_log_file(tmp_path):
    logger = get_logger(run_name="testrun", scenario="testscen", log_dir=str(tmp_path))
    logger.info("Test log entry")
    log_files = list(tmp_path.glob("*.log"))
    assert len(log_files) == 1
    assert log_files[0].name == "testrun_testscen.log"
    assert "Test log entry" in log_files[0].read_text()


def test_logger_has_no_duplicate_handlers(tmp_path):
    first = get_logger(run_name="repeat", scenario="scen", log_dir=str(tmp_path))
    second = get_logger(run_name="repeat", scenario="scen", log_dir=str(tmp_path))
    assert first is second
    assert len(second.handlers) == 2
    assert not second.propagate


def test_logger_level_by_name(tmp_path):
    logger = get_logger(run_name="quiet", scenario="scen", log_dir=str(tmp_path), level="warning")
    assert logger.level == logging.WARNING
    logger.info("hidden")
    logger.warning("shown")
    content = (tmp_path / "quiet_scen.log").read_text()
    assert "shown" in content
    assert "hidden" not in content


def test_close_logger_releases_file(tmp_path):
    logger = get_logger(run_name="closing", scenario="scen", log_dir=str(tmp_path))
    logger.info("before close")
    file_handler = next(h for h in logger.handlers if isinstance(h, logging.FileHandler))
    close_logger(logger)
    assert logger.handlers == []
    assert file_handler.stream is None
    assert "before close" in (tmp_path / "closing_scen.log").read_text()


def test_logger_reopens_after_close(tmp_path):
    logger = get_logger(run_name="reopen", scenario="scen", log_dir=str(tmp_path))
    close_logger(logger)
    logger = get_logger(run_name="reopen", scenario="scen", log_dir=str(tmp_path))
    logger.info("second pass")
    assert len(logger.handlers) == 2
    assert "second pass" in (tmp_path / "reopen_scen.log").read_text()
    close_logger(logger)
