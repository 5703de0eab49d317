import logging

from dynamic_island.watchers.logger import LOG_FILE, build_logger


def test_writes_to_log_dir(tmp_path):
    log_dir = tmp_path / "nested" / "log"
    log = build_logger("dynamic_island.test_file", log_dir, "debug")
    try:
        log.debug("poller tick")
        for handler in log.handlers:
            handler.flush()

        assert log.level == logging.DEBUG
        content = (log_dir / LOG_FILE).read_text(encoding="utf-8")
        assert "[DEBUG] dynamic_island.test_file: poller tick" in content
    finally:
        for handler in list(log.handlers):
            handler.close()
            log.removeHandler(handler)


def test_configured_logger_is_reused(tmp_path):
    first = build_logger("dynamic_island.test_reuse", tmp_path / "a")
    try:
        second = build_logger("dynamic_island.test_reuse", tmp_path / "b", "ERROR")

        assert second is first
        assert len(second.handlers) == 1
        assert second.level == logging.INFO
        assert not (tmp_path / "b").exists()
    finally:
        for handler in list(first.handlers):
            handler.close()
            first.removeHandler(handler)
