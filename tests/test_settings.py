import logging
import os

import pytest

from lica.settings import configure_logging, load_env, slog_level_to_logging


@pytest.fixture(autouse=True)
def restore_root_level():
    root = logging.getLogger()
    saved = root.level
    yield
    root.setLevel(saved)


@pytest.mark.parametrize(
    "slog_level, expected",
    [(-4, logging.DEBUG), (0, logging.INFO), (4, logging.WARNING), (8, logging.ERROR)],
)
def test_slog_levels(slog_level, expected):
    assert slog_level_to_logging(slog_level) == expected


def test_slog_levels_monotonic():
    levels = [slog_level_to_logging(value) for value in range(-12, 12)]
    assert levels == sorted(levels)
    assert min(levels) >= 1


def test_configure_logging_default_debug():
    assert configure_logging({}) == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_parses_level():
    assert configure_logging({"LICA_LOG_LEVEL": "8"}) == logging.ERROR
    assert logging.getLogger().level == logging.ERROR


def test_configure_logging_negative_level():
    assert configure_logging({"LICA_LOG_LEVEL": "-4"}) == logging.DEBUG


@pytest.mark.parametrize("raw", ["abc", "", "1.5", " 4"])
def test_configure_logging_bad_value_leaves_level(raw):
    logging.getLogger().setLevel(logging.WARNING)
    assert configure_logging({"LICA_LOG_LEVEL": raw}) is None
    assert logging.getLogger().level == logging.WARNING


def test_load_env_reads_file(tmp_path, monkeypatch):
    monkeypatch.delenv("LICA_TEST_SETTING", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("LICA_TEST_SETTING=hello\n")
    try:
        assert load_env(env_file) is True
        assert os.environ["LICA_TEST_SETTING"] == "hello"
    finally:
        os.environ.pop("LICA_TEST_SETTING", None)


def test_load_env_does_not_override(tmp_path, monkeypatch):
    monkeypatch.setenv("LICA_TEST_SETTING", "kept")
    env_file = tmp_path / ".env"
    env_file.write_text("LICA_TEST_SETTING=changed\n")
    assert load_env(env_file) is True
    assert os.environ["LICA_TEST_SETTING"] == "kept"


def test_load_env_missing_file(tmp_path):
    assert load_env(tmp_path / "missing.env") is False


def test_load_env_default_is_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_env() is False
    (tmp_path / ".env").write_text("")
    assert load_env() is True