"""
Tests for the main.py bootstrap.
"""

import logging

import pytest

import main as bootstrap
from mapping_env.config.settings import reset_settings
from mapping_env.env.loader import env_vars
from mapping_env.env.mappings import RawMappingEnvVars


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for var in env_vars(RawMappingEnvVars):
        monkeypatch.delenv(var.name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_main_succeeds_and_logs_placeholder(monkeypatch, caplog):
    monkeypatch.setenv("GRAPH_MAX_IPFS_FILE_BYTES", "424242")
    monkeypatch.setenv("LOG_FORCE", "0")

    with caplog.at_level(logging.INFO):
        assert bootstrap.main() == 0

    assert "Configuration loaded: env vars" in caplog.text
    assert "424242" not in caplog.text


def test_main_fails_on_invalid_configuration(monkeypatch, caplog):
    monkeypatch.setenv("GRAPH_MAX_API_VERSION", "latest")
    monkeypatch.setenv("LOG_FORCE", "0")

    with caplog.at_level(logging.INFO):
        assert bootstrap.main() == 1

    assert "GRAPH_MAX_API_VERSION" in caplog.text
