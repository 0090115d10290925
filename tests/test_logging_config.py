"""
Tests for logging setup.
"""

import logging

from logging_config import setup_logging


class TestSetupLogging:
    """Tests for handler configuration."""

    def teardown_method(self):
        for name in ("sideout", "engine", "models", "services", "app"):
            logger = logging.getLogger(name)
            for handler in logger.handlers:
                handler.close()
            logger.handlers = []

    def test_file_logging(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path, log_to_console=False)

        logging.getLogger("engine.match").info("rally settled")
        for handler in logger.handlers:
            handler.flush()

        log_files = list(tmp_path.glob("sideout_*.log"))
        assert len(log_files) == 1
        assert "rally settled" in log_files[0].read_text()

    def test_console_only(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path, log_to_file=False, level=logging.DEBUG)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert list(tmp_path.iterdir()) == []
