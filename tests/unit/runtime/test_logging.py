"""Tests for logging setup."""

import logging

import pytest

from dualserve.config.uvicorn import UvicornConfig
from dualserve.runtime.logging import LOG_FORMAT, build_uvicorn_log_config, configure_logging


@pytest.mark.unit
class TestBuildUvicornLogConfig:
    """Tests for build_uvicorn_log_config()."""

    def test_levels(self):
        config = build_uvicorn_log_config(UvicornConfig(log_level="info"))

        assert config["loggers"]["uvicorn"]["level"] == "INFO"
        assert config["loggers"]["uvicorn.error"]["level"] == "INFO"
        assert config["loggers"]["uvicorn.access"]["level"] == "WARNING"

    def test_access_log_enabled(self):
        config = build_uvicorn_log_config(UvicornConfig(access_log=True))

        assert config["loggers"]["uvicorn.access"]["level"] == "INFO"

    def test_keeps_existing_loggers(self):
        config = build_uvicorn_log_config(UvicornConfig())

        assert config["disable_existing_loggers"] is False
        assert config["handlers"] == {}


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logging")
class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_handler(self):
        logger = configure_logging("debug")

        assert logger.name == "dualserve"
        assert logging.root.level == logging.DEBUG
        [handler] = logging.root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.formatter._fmt == LOG_FORMAT

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "server.log"

        configure_logging("info", str(log_file))
        logging.getLogger("dualserve.test").info("written")
        logging.root.handlers[0].flush()

        assert "written" in log_file.read_text()

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")

        assert logging.root.level == logging.INFO
