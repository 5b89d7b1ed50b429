"""Tests for env_loader"""
import pytest

from env_loader import get_key


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / "helios-env"
    path.write_text(
        "# comment\n"
        "export HELIOS_TEST_A=alpha\n"
        "HELIOS_TEST_B=\"quoted value\"\n"
        "not a setting\n"
        "HELIOS_TEST_C='single'\n"
    )
    return str(path)


def test_reads_env_file(env_file, monkeypatch):
    for name in ("HELIOS_TEST_A", "HELIOS_TEST_B", "HELIOS_TEST_C"):
        monkeypatch.delenv(name, raising=False)
    assert get_key("HELIOS_TEST_A", path=env_file) == "alpha"
    assert get_key("HELIOS_TEST_B", path=env_file) == "quoted value"
    assert get_key("HELIOS_TEST_C", path=env_file) == "single"


def test_environment_wins(env_file, monkeypatch):
    monkeypatch.setenv("HELIOS_TEST_A", "from-env")
    assert get_key("HELIOS_TEST_A", path=env_file) == "from-env"


def test_missing_key(env_file, monkeypatch):
    monkeypatch.delenv("HELIOS_TEST_MISSING", raising=False)
    with pytest.raises(RuntimeError, match="HELIOS_TEST_MISSING"):
        get_key("HELIOS_TEST_MISSING", path=env_file)
    assert get_key("HELIOS_TEST_MISSING", required=False, path=env_file) is None
    assert get_key("HELIOS_TEST_MISSING", required=False, default="x", path=env_file) == "x"
