"""Unit tests for logging configuration, formatters and file context."""

import json
import logging
import sys
from pathlib import Path

from batch_encoder.config.models import LoggingConfig
from batch_encoder.logging import (
    FileContextFilter,
    JSONFormatter,
    configure_logging,
    file_context,
    get_file_context,
)


def make_record(message: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="batch_encoder.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_configure_level(self) -> None:
        """Should set the root level from the config."""
        configure_logging(LoggingConfig(level="debug"))
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(LoggingConfig(level="ERROR"))
        assert logging.getLogger().level == logging.ERROR

    def test_stderr_handler_by_default(self) -> None:
        """Should log to stderr when no file is configured."""
        configure_logging(LoggingConfig())
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_file_handler(self, temp_dir: Path) -> None:
        """Should write to the configured log file, creating parents."""
        log_file = temp_dir / "logs" / "run.log"
        configure_logging(LoggingConfig(file=log_file))

        logging.getLogger("batch_encoder.test").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_file_and_stderr(self, temp_dir: Path) -> None:
        """Should add a stderr handler too when include_stderr is set."""
        configure_logging(
            LoggingConfig(file=temp_dir / "run.log", include_stderr=True)
        )
        assert len(logging.getLogger().handlers) == 2

    def test_unwritable_file_falls_back(self, temp_dir: Path, capsys) -> None:
        """Should fall back to stderr when the log file cannot be opened."""
        blocker = temp_dir / "blocker"
        blocker.write_text("", encoding="utf-8")

        configure_logging(LoggingConfig(file=blocker / "run.log"))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert "Could not open log file" in capsys.readouterr().err

    def test_json_format_selected(self) -> None:
        configure_logging(LoggingConfig(format="json"))
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_text_format_includes_file_tag(self, temp_dir: Path) -> None:
        """Records emitted inside a file context carry the file tag."""
        log_file = temp_dir / "run.log"
        configure_logging(LoggingConfig(file=log_file))

        with file_context(3, "/in/movie.mkv"):
            logging.getLogger("batch_encoder.test").info("Queuing")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "[F003] batch_encoder.test - INFO - Queuing" in log_file.read_text(
            encoding="utf-8"
        )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self) -> None:
        """Should emit timestamp, level, logger and message."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "batch_encoder.test"
        assert data["timestamp"].endswith("+00:00")

    def test_file_context_object(self) -> None:
        """Records from a planned file carry its number and path."""
        record = make_record(
            file_tag="[F001] ", file_number=1, file_path="/in/movie.mkv"
        )
        data = json.loads(JSONFormatter().format(record))

        assert data["file"] == {"number": 1, "path": "/in/movie.mkv"}
        assert "file_tag" not in data

    def test_no_file_context_omitted(self) -> None:
        record = make_record(file_tag="", file_number=None, file_path=None)
        data = json.loads(JSONFormatter().format(record))
        assert "file" not in data

    def test_end_to_end_json_line(self, temp_dir: Path) -> None:
        """configure_logging wires the filter so JSON lines carry the file."""
        log_file = temp_dir / "run.json"
        configure_logging(LoggingConfig(file=log_file, format="json"))

        with file_context(2, "/in/show.mp4"):
            logging.getLogger("batch_encoder.test").info("Queuing")
        for handler in logging.getLogger().handlers:
            handler.flush()

        data = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert data["message"] == "Queuing"
        assert data["file"] == {"number": 2, "path": "/in/show.mp4"}

    def test_exception_included(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestFileContext:
    """Tests for file_context and FileContextFilter."""

    def test_default_is_none(self) -> None:
        assert get_file_context() is None

    def test_context_manager_sets_and_resets(self) -> None:
        with file_context(12, "/in/a.mkv") as ctx:
            assert get_file_context() == ctx
            assert ctx.tag == "[F012] "
        assert get_file_context() is None

    def test_nested_contexts_restore(self) -> None:
        with file_context(1, "/in/a.mkv"):
            with file_context(2, "/in/b.mkv"):
                assert get_file_context().file_number == 2
            assert get_file_context().file_number == 1

    def test_filter_injects_attributes(self) -> None:
        record = make_record()
        log_filter = FileContextFilter()

        assert log_filter.filter(record) is True
        assert record.file_tag == ""
        assert record.file_number is None
        assert record.file_path is None

        with file_context(4, "/in/d.mkv"):
            log_filter.filter(record)
        assert record.file_tag == "[F004] "
        assert record.file_number == 4
        assert record.file_path == "/in/d.mkv"
