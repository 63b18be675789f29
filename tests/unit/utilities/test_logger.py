"""Tests for utilities/logger.py module."""

import logging

from store_effects import matches
from store_effects.utilities.logger import DEFAULT_FORMAT, configure_library_logging


class TestConfigureLibraryLogging:
    """configure_library_logging only acts on an unconfigured root logger."""

    def test_installs_basic_config_on_bare_root(self, monkeypatch):
        root_logger = logging.getLogger()
        monkeypatch.setattr(root_logger, "handlers", [])

        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

        configure_library_logging(level=logging.WARNING, datefmt="%H:%M")

        assert captured == {
            "level": logging.WARNING,
            "format": DEFAULT_FORMAT,
            "datefmt": "%H:%M",
        }

    def test_leaves_existing_configuration_alone(self, monkeypatch):
        root_logger = logging.getLogger()
        monkeypatch.setattr(root_logger, "handlers", [logging.NullHandler()])

        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_library_logging(level=logging.DEBUG)

        assert calls == []


def test_match_diagnostics_use_library_logger_hierarchy(caplog):
    with caplog.at_level(logging.ERROR, logger="store_effects"):
        matches(["id"], {"id": 1}, None)

    assert [record.name for record in caplog.records] == ["store_effects.core.matching"]
    assert caplog.records[0].levelno == logging.ERROR
