"""Tests for JSONL logging."""

import json
import tempfile
from pathlib import Path

import pytest

from factup.logging import JSONLLogger, LogEntry, configure_logger, get_logger


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger(temp_log_dir: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=temp_log_dir)


def _read_entries(logger: JSONLLogger) -> list[dict]:
    with open(logger.log_path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "session_id" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_creates_file(logger: JSONLLogger):
    """Test that logging creates the log file."""
    logger.log("test_event")

    assert logger.log_path.exists()


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("event1", session_id="123")
    logger.log("event2", session_id="456")

    entries = _read_entries(logger)
    assert len(entries) == 2
    assert entries[0]["event"] == "event1"
    assert entries[0]["session_id"] == "123"
    assert entries[1]["event"] == "event2"


def test_log_fact_loaded(logger: JSONLLogger):
    """Test logging a loaded fact."""
    logger.log_fact_loaded("Science", "Atoms are mostly empty space.", prefetched=True, duration_ms=12.5)

    entry = _read_entries(logger)[0]
    assert entry["event"] == "fact_loaded"
    assert entry["category"] == "Science"
    assert entry["fact"] == "Atoms are mostly empty space."
    assert entry["duration_ms"] == 12.5
    assert entry["extra"]["prefetched"] is True


def test_log_fetch_failed(logger: JSONLLogger):
    """Test logging a failed fetch."""
    logger.log_fetch_failed("Animals", "HTTP 503")

    entry = _read_entries(logger)[0]
    assert entry["event"] == "fetch_failed"
    assert entry["error"] == "HTTP 503"


def test_log_translation(logger: JSONLLogger):
    """Test logging a translation with its cache and fallback flags."""
    logger.log_translation("Hello", "es", cached=True)

    entry = _read_entries(logger)[0]
    assert entry["event"] == "translation"
    assert entry["language"] == "es"
    assert entry["extra"] == {"cached": True, "fallback": False}


def test_non_ascii_is_preserved(logger: JSONLLogger):
    """Translated text is written unescaped."""
    logger.log("translation", fact="Пчёлы танцуют")

    with open(logger.log_path, encoding="utf-8") as f:
        assert "Пчёлы танцуют" in f.read()


def test_set_session_id(logger: JSONLLogger):
    """Test that set_session_id applies to subsequent logs."""
    logger.set_session_id("session-42")
    logger.log("event1")
    logger.log("event2")

    for entry in _read_entries(logger):
        assert entry["session_id"] == "session-42"


def test_rotation(temp_log_dir: Path):
    """Test log rotation when max size is exceeded."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.001)  # ~1KB

    for i in range(100):
        logger.log(f"event_{i}", data="x" * 100)

    log_files = list(temp_log_dir.glob("events*.jsonl"))
    assert len(log_files) >= 2


def test_extra_fields(logger: JSONLLogger):
    """Test that extra fields are included."""
    logger.log("custom", custom_field="value", another=123)

    entry = _read_entries(logger)[0]
    assert entry["extra"]["custom_field"] == "value"
    assert entry["extra"]["another"] == 123


def test_configure_logger_replaces_global(temp_log_dir: Path):
    """configure_logger swaps the process-wide logger."""
    configured = configure_logger(temp_log_dir)
    assert get_logger() is configured
    assert configured.log_dir == temp_log_dir
