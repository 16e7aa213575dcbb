"""
Tests for environment parsing helpers in config.
"""

from datetime import datetime, timezone

import config


def test_parse_int(monkeypatch):
    monkeypatch.setenv("BET_TEST_INT", "7")
    assert config._parse_int("BET_TEST_INT", 1) == 7

    monkeypatch.setenv("BET_TEST_INT", "seven")
    assert config._parse_int("BET_TEST_INT", 1) == 1

    monkeypatch.delenv("BET_TEST_INT")
    assert config._parse_int("BET_TEST_INT", 1) == 1


def test_parse_float(monkeypatch):
    monkeypatch.setenv("BET_TEST_FLOAT", "1.6")
    assert config._parse_float("BET_TEST_FLOAT", 2.0) == 1.6

    monkeypatch.setenv("BET_TEST_FLOAT", "fast")
    assert config._parse_float("BET_TEST_FLOAT", 2.0) == 2.0


def test_parse_optional_int(monkeypatch):
    monkeypatch.delenv("BET_TEST_ID", raising=False)
    assert config._parse_optional_int("BET_TEST_ID") is None

    monkeypatch.setenv("BET_TEST_ID", " 123456789012345678 ")
    assert config._parse_optional_int("BET_TEST_ID") == 123456789012345678

    monkeypatch.setenv("BET_TEST_ID", "")
    assert config._parse_optional_int("BET_TEST_ID") is None


def test_parse_datetime_handles_z_suffix(monkeypatch):
    monkeypatch.setenv("BET_TEST_START", "2025-11-01T00:00:00Z")
    assert config._parse_datetime("BET_TEST_START", "2020-01-01T00:00:00Z") == datetime(
        2025, 11, 1, tzinfo=timezone.utc
    )


def test_parse_datetime_naive_is_utc(monkeypatch):
    monkeypatch.setenv("BET_TEST_START", "2025-12-01T12:00:00")
    parsed = config._parse_datetime("BET_TEST_START", "2020-01-01T00:00:00Z")
    assert parsed.tzinfo is not None
    assert parsed == datetime(2025, 12, 1, 12, tzinfo=timezone.utc)


def test_parse_datetime_bad_value_uses_default(monkeypatch):
    monkeypatch.setenv("BET_TEST_START", "november")
    assert config._parse_datetime("BET_TEST_START", "2025-11-01T00:00:00Z") == datetime(
        2025, 11, 1, tzinfo=timezone.utc
    )


def test_defaults_are_sane():
    assert config.VOTE_PASS_THRESHOLD >= 1
    assert config.VOTE_REJECT_THRESHOLD >= 1
    assert config.REPORT_MAX_ATTEMPTS >= 1
    assert config.LOGGING_START.tzinfo is not None
