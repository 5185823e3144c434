"""
Tests for the package logging setup.
"""

import logging

import pytest

from structured_markup.config import ExtractorSettings
from structured_markup.logger import get_module_logger, setup_logger


@pytest.fixture
def fresh_logger():
    name = "structured_markup.test_setup"
    yield name
    log = logging.getLogger(name)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()


def test_repeated_setup_keeps_one_console_handler(fresh_logger):
    setup_logger(fresh_logger)
    log = setup_logger(fresh_logger, level=logging.INFO)

    consoles = [h for h in log.handlers if getattr(h, "_structured_markup_console", False)]
    assert len(consoles) == 1
    assert consoles[0].level == logging.INFO
    assert log.level == logging.INFO


def test_level_names_are_accepted(fresh_logger):
    assert setup_logger(fresh_logger, level="debug").level == logging.DEBUG
    assert setup_logger(fresh_logger, level=" Error ").level == logging.ERROR
    assert setup_logger(fresh_logger, level="chatty").level == logging.WARNING


def test_log_file_attached_once(fresh_logger, tmp_path):
    path = tmp_path / "extract.log"
    setup_logger(fresh_logger, log_file=str(path))
    log = setup_logger(fresh_logger, log_file=str(path))

    files = [h for h in log.handlers if isinstance(h, logging.FileHandler)]
    assert len(files) == 1

    log.warning("rdfa context unresolved")
    files[0].flush()
    assert "rdfa context unresolved" in path.read_text(encoding="utf-8")


def test_module_logger_is_package_child():
    log = get_module_logger("rdfa")
    assert log.name == "structured_markup.rdfa"
    assert log.parent is logging.getLogger("structured_markup")


def test_log_file_setting_from_env(tmp_path):
    path = tmp_path / "run.log"
    settings = ExtractorSettings.from_env({"STRUCTURED_MARKUP_LOG_FILE": f"  {path}  "})
    assert settings.log_file == str(path)
    assert ExtractorSettings.from_env({}).log_file is None
