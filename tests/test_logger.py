# tests/test_logger.py
"""Log file location and rotation come from settings."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from unittest.mock import patch
from hostel_gate.config import settings
from hostel_gate.utils import logger as gate_logger


class TestLogger:
    def test_file_handler_uses_settings(self, tmp_path):
        with patch.object(settings, "LOG_DIR", str(tmp_path)), \
                patch.object(settings, "LOG_FILE", "kiosk.log"), \
                patch.object(settings, "LOG_BACKUP_COUNT", 3):
            handler = gate_logger._file_handler("INFO", logging.Formatter())
        try:
            assert handler.baseFilename == os.path.join(str(tmp_path), "kiosk.log")
            assert handler.backupCount == 3
            assert handler.maxBytes == settings.LOG_MAX_BYTES
        finally:
            handler.close()

    def test_get_logger_is_named(self):
        assert gate_logger.get_logger("hostel_gate.test").name == "hostel_gate.test"
