import logging

import pytest

from osmfetch.util.logging import resolve_level, setup_logging


def test_resolve_level_accepts_names_and_numbers():
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(" DEBUG ") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        resolve_level("verbose")


def test_setup_logging_writes_to_rotating_file(tmp_path, restore_root_logging):
    log_path = setup_logging(tmp_path / "logs", "WARNING")
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 2

    logging.getLogger("osmfetch.test").info("hidden")
    logging.getLogger("osmfetch.test").warning("cache root unavailable")
    for handler in root.handlers:
        handler.flush()

    text = log_path.read_text()
    assert log_path == tmp_path / "logs" / "osmfetch.log"
    assert "WARNING | osmfetch.test | cache root unavailable" in text
    assert "hidden" not in text
