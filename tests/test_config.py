import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "value,expected",
    [
        ("prod", "config.production"),
        ("Production", "config.production"),
        ("test", "config.testing"),
        (" testing ", "config.testing"),
        ("dev", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_settings_module() == expected


def test_missing_app_env_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_testing_settings_carry_leave_and_auto_clock_out_defaults(monkeypatch):
    for name in ("LEAVE_DEFAULT_PTO_UNITS", "LEAVE_DEFAULT_SICK_UNITS", "AUTO_CLOCK_OUT_TIME", "AUTO_CLOCK_OUT_RUN_AT"):
        monkeypatch.delenv(name, raising=False)
    settings = importlib.reload(importlib.import_module(get_settings_module("testing")))

    assert settings.LEAVE["default_pto_units"] == 10
    assert settings.LEAVE["default_sick_units"] == 5
    assert settings.AUTO_CLOCK_OUT["default_time"] == "17:30"
    assert settings.AUTO_CLOCK_OUT["run_at"] == "23:59"
