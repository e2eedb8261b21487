"""Unit tests for config.py environment parsing."""

import pytest

import config
from errors import InvalidConfigurationValueError


def test_defaults_are_consistent():
    assert config.DB_POOL_MIN_CONN <= config.DB_POOL_MAX_CONN
    assert config.SQL_DIALECT in config.SUPPORTED_DIALECTS
    assert config.DATABASE_URL


def test_get_int_reads_environment(monkeypatch):
    monkeypatch.setenv("FLOWSTORE_TEST_INT", " 25 ")
    assert config._get_int("FLOWSTORE_TEST_INT", 1) == 25


def test_get_int_uses_default_when_unset(monkeypatch):
    monkeypatch.delenv("FLOWSTORE_TEST_INT", raising=False)
    assert config._get_int("FLOWSTORE_TEST_INT", 7) == 7


def test_get_int_rejects_non_integers(monkeypatch):
    monkeypatch.setenv("FLOWSTORE_TEST_INT", "ten")
    with pytest.raises(InvalidConfigurationValueError) as info:
        config._get_int("FLOWSTORE_TEST_INT", 1)
    assert info.value.context["variable"] == "FLOWSTORE_TEST_INT"


def test_get_int_enforces_minimum(monkeypatch):
    monkeypatch.setenv("FLOWSTORE_TEST_INT", "0")
    with pytest.raises(InvalidConfigurationValueError):
        config._get_int("FLOWSTORE_TEST_INT", 1, minimum=1)
