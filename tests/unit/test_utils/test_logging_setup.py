"""
Tests for logging utilities
"""

import json
import logging
import logging.handlers
import sys

import pytest

from markwise.core.config import AppConfig, LoggingConfig
from markwise.utils.logging import (
    ContextFormatter,
    JSONFormatter,
    PerformanceTimer,
    _parse_size,
    get_evaluation_logger,
    setup_logging,
)


class TestParseSize:
    """Test cases for _parse_size()."""

    @pytest.mark.parametrize("size,expected", [
        ("10MB", 10 * 1024 ** 2),
        ("1GB", 1024 ** 3),
        ("512KB", 512 * 1024),
        ("100B", 100),
        (" 2mb ", 2 * 1024 ** 2),
    ])
    def test_sizes(self, size, expected):
        assert _parse_size(size) == expected

    def test_unparseable_defaults_to_10mb(self):
        assert _parse_size("lots") == 10 * 1024 * 1024


class TestJSONFormatter:
    """Test cases for JSONFormatter."""

    def test_includes_evaluation_context(self):
        record = logging.LogRecord("markwise.evaluation", logging.INFO, __file__, 10,
                                   "scored %s", ("Q1",), None)
        record.student = "Asha (101)"
        record.question_label = "Q.01"

        data = json.loads(JSONFormatter().format(record))

        assert data['message'] == "scored Q1"
        assert data['level'] == "INFO"
        assert data['student'] == "Asha (101)"
        assert data['question_label'] == "Q.01"
        assert 'session_id' not in data

    def test_exception_info(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in data['exception']


class TestContextFormatter:
    """Test cases for ContextFormatter."""

    def test_appends_context(self):
        record = logging.LogRecord("markwise.evaluation", logging.INFO, __file__, 10,
                                   "scored", (), None)
        record.session_id = "physics"
        record.student = "Asha (101)"

        text = ContextFormatter("%(levelname)s %(message)s").format(record)

        assert text == "INFO scored [session_id=physics student=Asha (101)]"

    def test_no_context(self):
        record = logging.LogRecord("markwise", logging.WARNING, __file__, 1, "plain", (), None)

        assert ContextFormatter("%(message)s").format(record) == "plain"


class TestEvaluationLogger:
    """Test cases for get_evaluation_logger()."""

    def test_context_added(self, caplog):
        log = get_evaluation_logger(student="Ben", session_id="physics")

        with caplog.at_level(logging.INFO, logger="markwise.evaluation"):
            log.info("evaluated", extra={'question_label': 'Q2'})

        record = caplog.records[-1]
        assert record.student == "Ben"
        assert record.session_id == "physics"
        assert record.question_label == "Q2"


class TestSetupLogging:
    """Test cases for setup_logging()."""

    def setup_method(self):
        """Remember the root logger state."""
        root = logging.getLogger()
        self.saved_handlers = list(root.handlers)
        self.saved_level = root.level

    def teardown_method(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler not in self.saved_handlers:
                handler.close()
                root.removeHandler(handler)
        for handler in self.saved_handlers:
            if handler not in root.handlers:
                root.addHandler(handler)
        root.setLevel(self.saved_level)

    def test_handlers(self, temp_dir):
        config = AppConfig(logging=LoggingConfig(level="DEBUG", console_level="ERROR",
                                                 file=str(temp_dir / "logs" / "run.log"),
                                                 max_size="1MB", backup_count=2))

        setup_logging(config, enable_json=True)

        root = logging.getLogger()
        file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024 * 1024
        assert file_handlers[0].backupCount == 2
        assert isinstance(file_handlers[0].formatter, JSONFormatter)
        assert (temp_dir / "logs").is_dir()

    def test_text_handlers_use_context_formatter(self, temp_dir):
        config = AppConfig(logging=LoggingConfig(file=str(temp_dir / "run.log")))

        setup_logging(config)

        assert all(isinstance(h.formatter, ContextFormatter) for h in logging.getLogger().handlers)


class TestPerformanceTimer:
    """Test cases for PerformanceTimer."""

    def test_records_duration(self):
        with PerformanceTimer("work") as timer:
            pass

        assert timer.duration is not None
        assert timer.duration >= 0

    def test_logs_failure(self, caplog):
        logger = logging.getLogger("markwise.test.timer")

        with caplog.at_level(logging.ERROR, logger="markwise.test.timer"):
            with pytest.raises(RuntimeError):
                with PerformanceTimer("doomed", logger):
                    raise RuntimeError("nope")

        assert "Failed doomed" in caplog.text
