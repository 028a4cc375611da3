# ============================================
# Unit Tests for Logging Setup
# ============================================
"""
Tests for loguru sink configuration.
"""

import sys

import pytest
from loguru import logger

from clinical_documentation.logging_setup import configure_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestConfigureLogging:
    def test_file_sink_receives_messages(self, tmp_path, restore_logger):
        log_file = tmp_path / "docgen.log"

        configure_logging("DEBUG", str(log_file))
        logger.debug("Generated case_sheet | Length: 120 chars")
        logger.remove()

        assert "Generated case_sheet | Length: 120 chars" in log_file.read_text()

    def test_level_filters_file_sink(self, tmp_path, restore_logger):
        log_file = tmp_path / "docgen.log"

        configure_logging("WARNING", str(log_file))
        logger.info("below threshold")
        logger.warning("Rate limit exceeded | Key: docgen:doctor-1")
        logger.remove()

        content = log_file.read_text()
        assert "below threshold" not in content
        assert "Rate limit exceeded" in content
