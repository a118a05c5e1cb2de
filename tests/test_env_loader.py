"""
Tests for mapping_env/env/loader.py

Uses a small purpose-built configuration class so the resolution rules
(literal defaults, required fields, optional fields, first-failure ordering)
can be checked without the full mapping table.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import pytest

from mapping_env.env.errors import EnvVarError, InvalidFormat, MissingVariable
from mapping_env.env.loader import describe_env, env_var, env_vars, load_from_env
from mapping_env.env.parsers import BOOLEAN, USIZE, NoUnderscores, optional, with_default


@dataclass(frozen=True)
class SampleEnv:
    required_count: int = env_var("SAMPLE_REQUIRED", USIZE)
    blocks: int = env_var("SAMPLE_BLOCKS", NoUnderscores(USIZE), default="2")
    budget: Optional[int] = env_var("SAMPLE_BUDGET", optional(USIZE))
    stack: int = env_var("SAMPLE_STACK", with_default(USIZE, 4096))
    enabled: bool = env_var("SAMPLE_ENABLED", BOOLEAN, default="false")


@dataclass(frozen=True)
class BrokenDefaultEnv:
    value: int = env_var("BROKEN_VALUE", USIZE, default="not-a-number")


def test_load_uses_literal_defaults_when_absent():
    """Only the required variable is set; everything else falls back."""
    loaded = load_from_env(SampleEnv, {"SAMPLE_REQUIRED": "1"})

    assert loaded == SampleEnv(
        required_count=1,
        blocks=2,
        budget=None,
        stack=4096,
        enabled=False,
    )


def test_load_prefers_environment_over_defaults():
    env = {
        "SAMPLE_REQUIRED": "1",
        "SAMPLE_BLOCKS": "5",
        "SAMPLE_BUDGET": "100",
        "SAMPLE_STACK": "8192",
        "SAMPLE_ENABLED": "TRUE",
    }
    loaded = load_from_env(SampleEnv, env)

    assert loaded.blocks == 5
    assert loaded.budget == 100
    assert loaded.stack == 8192
    assert loaded.enabled is True


def test_load_missing_required_variable_names_it():
    with pytest.raises(MissingVariable) as excinfo:
        load_from_env(SampleEnv, {})

    assert excinfo.value.name == "SAMPLE_REQUIRED"
    assert "SAMPLE_REQUIRED" in str(excinfo.value)


def test_load_invalid_value_reports_name_and_text():
    with pytest.raises(InvalidFormat) as excinfo:
        load_from_env(SampleEnv, {"SAMPLE_REQUIRED": "1", "SAMPLE_BLOCKS": "5_0"})

    assert excinfo.value.name == "SAMPLE_BLOCKS"
    assert excinfo.value.raw_text == "5_0"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_load_empty_text_is_present_not_absent():
    """An empty variable does not fall back to a literal default."""
    with pytest.raises(InvalidFormat) as excinfo:
        load_from_env(SampleEnv, {"SAMPLE_REQUIRED": "1", "SAMPLE_BLOCKS": ""})
    assert excinfo.value.name == "SAMPLE_BLOCKS"


def test_load_empty_text_uses_with_default_constant():
    loaded = load_from_env(SampleEnv, {"SAMPLE_REQUIRED": "1", "SAMPLE_STACK": ""})
    assert loaded.stack == 4096


def test_load_reports_first_failure_in_declaration_order():
    """Several bad variables: the earliest declared field wins, every run."""
    env = {"SAMPLE_BLOCKS": "x", "SAMPLE_ENABLED": "maybe"}
    for _ in range(3):
        with pytest.raises(EnvVarError) as excinfo:
            load_from_env(SampleEnv, env)
        assert isinstance(excinfo.value, MissingVariable)
        assert excinfo.value.name == "SAMPLE_REQUIRED"

    env["SAMPLE_REQUIRED"] = "1"
    with pytest.raises(InvalidFormat) as excinfo:
        load_from_env(SampleEnv, env)
    assert excinfo.value.name == "SAMPLE_BLOCKS"


def test_load_errors_are_value_errors():
    """Callers guarding settings with `except ValueError` still catch these."""
    with pytest.raises(ValueError):
        load_from_env(SampleEnv, {})


def test_load_invalid_literal_default_is_invalid_format():
    with pytest.raises(InvalidFormat) as excinfo:
        load_from_env(BrokenDefaultEnv, {})
    assert excinfo.value.raw_text == "not-a-number"


def test_load_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("SAMPLE_REQUIRED", "9")
    monkeypatch.delenv("SAMPLE_BLOCKS", raising=False)
    assert load_from_env(SampleEnv).required_count == 9


def test_load_does_not_mutate_snapshot():
    env = {"SAMPLE_REQUIRED": "1"}
    load_from_env(SampleEnv, env)
    assert env == {"SAMPLE_REQUIRED": "1"}


def test_load_logs_defaulted_names_without_values(caplog):
    with caplog.at_level(logging.DEBUG, logger="mapping_env.env.loader"):
        load_from_env(SampleEnv, {"SAMPLE_REQUIRED": "12345"})

    assert "SAMPLE_BLOCKS" in caplog.text
    assert "12345" not in caplog.text


def test_env_vars_lists_declarations_in_order():
    names = [var.name for var in env_vars(SampleEnv)]
    assert names == ["SAMPLE_REQUIRED", "SAMPLE_BLOCKS", "SAMPLE_BUDGET", "SAMPLE_STACK", "SAMPLE_ENABLED"]


def test_describe_env_reports_every_field_without_raising():
    reports = describe_env(SampleEnv, {"SAMPLE_BLOCKS": "5_0", "SAMPLE_ENABLED": "1"})
    by_name = {r.name: r for r in reports}

    assert isinstance(by_name["SAMPLE_REQUIRED"].error, MissingVariable)
    assert by_name["SAMPLE_REQUIRED"].source == "unset"

    assert isinstance(by_name["SAMPLE_BLOCKS"].error, InvalidFormat)
    assert by_name["SAMPLE_BLOCKS"].source == "env"
    assert by_name["SAMPLE_BLOCKS"].raw_text == "5_0"

    assert by_name["SAMPLE_BUDGET"].ok
    assert by_name["SAMPLE_BUDGET"].source == "unset"
    assert by_name["SAMPLE_BUDGET"].value is None

    assert by_name["SAMPLE_STACK"].value == 4096
    assert by_name["SAMPLE_ENABLED"].source == "env"
    assert by_name["SAMPLE_ENABLED"].value is True


def test_describe_env_marks_literal_defaults():
    reports = describe_env(SampleEnv, {"SAMPLE_REQUIRED": "1"})
    blocks = next(r for r in reports if r.name == "SAMPLE_BLOCKS")
    assert blocks.source == "default"
    assert blocks.raw_text == "2"
    assert blocks.value == 2
