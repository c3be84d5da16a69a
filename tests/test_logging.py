import logging

from inflation_chart.config import load_settings
from inflation_chart.logging_config import LOGGER_NAME, setup_logging
from inflation_chart.main import create_app
from inflation_chart.state import ChartController


def _close_handlers():
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_log_file(tmp_path):
    log_file = tmp_path / "chart.log"
    try:
        logger = setup_logging("INFO", log_file=str(log_file))
        logging.getLogger("inflation_chart.loader").info("Loaded 3 records")
        for handler in logger.handlers:
            handler.flush()
    finally:
        _close_handlers()

    text = log_file.read_text(encoding="utf-8")
    assert "inflation_chart.loader - INFO - Loaded 3 records" in text


def test_setup_replaces_previous_handlers(tmp_path):
    try:
        setup_logging("INFO", log_file=str(tmp_path / "a.log"))
        logger = setup_logging("WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        _close_handlers()


def test_app_uses_log_file_setting(tmp_path):
    log_file = tmp_path / "app.log"
    settings = load_settings({"INFLATION_CHART_LOG_FILE": str(log_file)})
    assert settings.log_file == str(log_file)

    try:
        create_app(controller=ChartController(settings))
        logger = logging.getLogger(LOGGER_NAME)
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        logger.warning("ready")
        for handler in logger.handlers:
            handler.flush()
    finally:
        _close_handlers()

    assert "ready" in log_file.read_text(encoding="utf-8")
