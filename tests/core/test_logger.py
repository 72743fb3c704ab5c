import sys

import pytest
from loguru import logger

from looptimer.config.settings import Settings
from looptimer.core.logger import setup_logger


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.configure(extra={})
    logger.add(sys.stderr)


def _settings(monkeypatch, **env: str) -> Settings:
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.delenv("APP_NAME", raising=False)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings()


def test_file_sink_tags_records_with_app_name(monkeypatch, tmp_path, restore_logger):
    log_file = tmp_path / "logs" / "looptimer.log"
    config = _settings(monkeypatch, LOG_FILE=str(log_file), APP_NAME="looptimer-test", LOG_LEVEL="info")

    setup_logger(config)
    logger.info("timer saved")
    logger.debug("not written at INFO")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert "| looptimer-test | INFO" in lines[0]
    assert lines[0].endswith("timer saved")


def test_level_argument_overrides_configured_level(monkeypatch, tmp_path, restore_logger):
    log_file = tmp_path / "cli.log"
    config = _settings(monkeypatch, LOG_FILE=str(log_file), LOG_LEVEL="WARNING")

    setup_logger(config, level="DEBUG")
    logger.debug("playback built")

    assert "| looptimer | DEBUG" in log_file.read_text(encoding="utf-8")
