"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from estiba_wages.config import Settings


def test_default_settings(monkeypatch):
    for name in ("ESTIBA_DEFAULT_GROUP", "ESTIBA_IRPF_PERCENT", "ESTIBA_SALARY_TABLE_PATH"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.default_group == "II"
    assert settings.irpf_percent == 15.0
    assert settings.salary_table_path is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ESTIBA_DEFAULT_GROUP", "IV")
    monkeypatch.setenv("ESTIBA_IRPF_PERCENT", "2")
    monkeypatch.setenv("ESTIBA_SALARY_TABLE_PATH", "/tmp/table.csv")
    settings = Settings()
    assert settings.default_group == "IV"
    assert settings.irpf_percent == 2.0
    assert settings.salary_table_path == Path("/tmp/table.csv")


def test_unknown_group_rejected(monkeypatch):
    monkeypatch.setenv("ESTIBA_DEFAULT_GROUP", "V")
    with pytest.raises(ValidationError):
        Settings()
