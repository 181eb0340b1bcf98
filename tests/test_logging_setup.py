"""Tests for the JSONL logging sink."""

import json
import logging

import pytest

from modresolve.logging_setup import JsonlHandler
from modresolve.logging_setup import init_json_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_init_writes_jsonl(tmp_path, restore_root_logger):
    log_path = tmp_path / "logs" / "resolve.jsonl"
    init_json_logging(str(log_path), "debug")

    logging.getLogger("modresolve.test").debug("resolved %s", "left-pad", extra={"event": "resolve:done"})

    lines = log_path.read_text().splitlines()
    record = json.loads(lines[-1])
    assert record["lvl"] == "DEBUG"
    assert record["logger"] == "modresolve.test"
    assert record["message"] == "resolved left-pad"
    assert record["event"] == "resolve:done"
    assert record["schema"]["name"] == "modresolve.log"


def test_init_replaces_previous_handler(tmp_path, restore_root_logger):
    init_json_logging(str(tmp_path / "a.jsonl"))
    init_json_logging(str(tmp_path / "b.jsonl"))

    handlers = [h for h in restore_root_logger.handlers if isinstance(h, JsonlHandler)]
    assert len(handlers) == 1
    assert handlers[0].path == tmp_path / "b.jsonl"


def test_env_configures_path_and_level(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.setenv("MODRESOLVE_LOG_PATH", str(tmp_path / "env.jsonl"))
    monkeypatch.setenv("MODRESOLVE_LOG_LEVEL", "warning")

    handler = init_json_logging()

    assert handler.path == tmp_path / "env.jsonl"
    assert restore_root_logger.level == logging.WARNING


def test_dict_messages_are_merged(tmp_path):
    handler = JsonlHandler(str(tmp_path / "x.jsonl"))
    record = logging.LogRecord("m", logging.INFO, "f.py", 1, {"module_id": "dep"}, (), None)
    payload = handler.format_record(record)
    assert payload["module_id"] == "dep"
