"""Tests for artshelf.config and the logging helpers in artshelf.utils."""

from __future__ import annotations

import logging
from pathlib import Path

from artshelf.config import Settings
from artshelf.log_level import LogLevel
from artshelf.utils import PROGRESS, QUERY, setup_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        cfg = Settings(_env_file=None)
        assert cfg.api_prefix == "/api/v1"
        assert cfg.default_page_size == 24
        assert cfg.related_fetch_workers == 2
        assert cfg.log_level == LogLevel.PROGRESS

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "12")
        monkeypatch.setenv("LOG_LEVEL", "query")
        cfg = Settings(_env_file=None)
        assert cfg.default_page_size == 12
        assert cfg.log_level == LogLevel.QUERY

    def test_initialize_paths_creates_directories(self, tmp_path: Path):
        cfg = Settings(_env_file=None)
        cfg.initialize_paths(tmp_path)
        assert cfg.data_dir == tmp_path / "data"
        assert cfg.logs_dir.is_dir()
        assert cfg.database_path == tmp_path / "data" / "gallery.db"

    def test_database_url_prefers_explicit_value(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/gallery")
        cfg = Settings(_env_file=None)
        assert cfg.get_database_url() == "postgresql://u:p@localhost/gallery"

    def test_database_url_defaults_to_sqlite_file(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        cfg = Settings(_env_file=None)
        cfg.initialize_paths(tmp_path)
        assert cfg.get_database_url() == f"sqlite:///{tmp_path / 'data' / 'gallery.db'}"


class TestLogging:
    def test_custom_levels_registered(self):
        assert logging.getLevelName(QUERY) == "QUERY"
        assert logging.getLevelName(PROGRESS) == "PROGRESS"

    def test_program_logger_writes_file(self, tmp_path: Path):
        logger = setup_logging(tmp_path, LogLevel.PROGRESS)
        logger.progress("hello gallery")
        logger.query("hidden at progress level")
        for handler in logger.handlers:
            handler.flush()
        text = (tmp_path / "artshelf.log").read_text()
        assert "hello gallery" in text
        assert "hidden at progress level" not in text

    def test_component_logger(self, tmp_path: Path):
        logger = setup_logging(tmp_path, LogLevel.QUERY, "api")
        assert logger.name == "artshelf.api"
        assert logger.propagate
        assert logger.level == QUERY
        assert (tmp_path / "api.log").exists()

    def test_none_level_adds_no_handlers(self, tmp_path: Path):
        logger = setup_logging(tmp_path, LogLevel.NONE, "quiet")
        assert logger.handlers == []
