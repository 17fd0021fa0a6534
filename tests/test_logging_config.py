"""
Tests for logging setup.
"""

import json
import logging

import pytest

from secure_mirror.logging_config import HumanFormatter, JSONFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg="Untrusted change", **extra):
    record = logging.LogRecord("secure_mirror.engine.hook", logging.WARNING, __file__, 1, msg, None, None)
    for name, value in extra.items():
        setattr(record, name, value)
    return record


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_includes_context_fields(self):
        line = JSONFormatter().format(_record(phase="update", repo_name="LLNL/Umpire"))

        data = json.loads(line)
        assert data["level"] == "WARNING"
        assert data["message"] == "Untrusted change"
        assert data["phase"] == "update"
        assert data["repo_name"] == "LLNL/Umpire"
        assert "ref_name" not in data

    def test_human_format(self):
        line = HumanFormatter().format(_record())

        assert "WARNING" in line
        assert "[hook" in line
        assert line.endswith("Untrusted change")


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("SM_LOG_LEVEL", "debug")

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("SM_LOG_LEVEL", "DEBUG")

        setup_logging(level="error")

        assert logging.getLogger().level == logging.ERROR

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "hook.log"

        setup_logging(level="INFO", format_type="json", log_file=str(log_file))
        logging.getLogger("secure_mirror.test").info("hello", extra={"phase": "update"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["message"] == "hello"
        assert data["phase"] == "update"

    def test_quiets_http_loggers(self):
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
