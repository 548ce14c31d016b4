import json
import logging

import pytest
import structlog
from davops import logs


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger("davops").handlers.clear()
    logs.SUPPRESSED_EVENTS = set()


class TestEventFilter:

    def test_suppressed_event_dropped(self, monkeypatch, reset_logging):
        monkeypatch.setenv("DAVOPS_SUPPRESS_EVENTS", "rename_resolved, existence_checked")
        logs._load_suppressed_events()

        assert logs.SUPPRESSED_EVENTS == {"rename_resolved", "existence_checked"}
        with pytest.raises(structlog.DropEvent):
            logs._event_filter(None, "info", {"event": "rename_resolved"})

    def test_other_events_kept(self, monkeypatch, reset_logging):
        monkeypatch.setenv("DAVOPS_SUPPRESS_EVENTS", "rename_resolved")
        logs._load_suppressed_events()

        event_dict = {"event": "rename_failed"}
        assert logs._event_filter(None, "error", event_dict) is event_dict


class TestSetupLogging:

    def test_level_from_env(self, monkeypatch, reset_logging):
        monkeypatch.setenv("DAVOPS_LOG_LEVEL", "WARNING")
        logs.setup_logging()

        logger = logging.getLogger("davops")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_repeated_setup_keeps_one_handler(self, monkeypatch, reset_logging):
        monkeypatch.setenv("DAVOPS_LOG_FORMAT", "dev")
        logs.setup_logging()
        logs.setup_logging()

        assert len(logging.getLogger("davops").handlers) == 1

    def test_explicit_level_wins(self, monkeypatch, reset_logging):
        monkeypatch.setenv("DAVOPS_LOG_LEVEL", "WARNING")
        logs.setup_logging(level="DEBUG")
        assert logging.getLogger("davops").level == logging.DEBUG

    def test_json_lines_with_exception(self, monkeypatch, capsys, reset_logging):
        monkeypatch.delenv("DAVOPS_SUPPRESS_EVENTS", raising=False)
        logs.setup_logging(level="INFO", log_format="json")
        logger = structlog.get_logger("davops.tests.json")

        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("rename_failed", old_path="/docs/report.txt", exc_info=True)

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "rename_failed"
        assert record["level"] == "error"
        assert record["logger"] == "davops.tests.json"
        assert record["old_path"] == "/docs/report.txt"
        assert "ValueError: boom" in record["exception"]

    def test_suppressed_event_not_written(self, monkeypatch, capsys, reset_logging):
        monkeypatch.setenv("DAVOPS_SUPPRESS_EVENTS", "rename_resolved")
        logs.setup_logging(level="INFO", log_format="json")
        logger = structlog.get_logger("davops.tests.suppressed")

        logger.info("rename_resolved", old_path="/docs/report.txt")
        logger.info("existence_checked", path="/docs/")

        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["existence_checked"]
