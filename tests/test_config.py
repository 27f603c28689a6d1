"""Test configuration loading."""

import pytest

from platerelay.config import RelayConfig, _flatten_yaml
from platerelay.types import RecordFormat


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PORT", "OPENAI_MODEL", "RECORD_FORMAT", "ANNOTATE_TIMEOUT", "FORMAT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_default_config():
    config = RelayConfig()
    assert config.port == 3000
    assert config.openai_model == "gpt-4o-mini"
    assert config.record_format == RecordFormat.JSON
    assert config.annotate_timeout == 10.0
    assert config.format_timeout == 20.0
    assert config.evidence_labels == ["label", "nameplate", "signage", "material property"]


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("RECORD_FORMAT", "yaml")
    config = RelayConfig()
    assert config.port == 8080
    assert config.record_format == RecordFormat.YAML


def test_from_yaml_flattens_sections(tmp_path):
    path = tmp_path / "platerelay.yaml"
    path.write_text(
        "platerelay:\n"
        "  port: 4000\n"
        "  openai:\n"
        "    model: gpt-4o\n"
        "  google:\n"
        "    credentials_file: ./key.json\n"
        "  evidence_labels: [nameplate]\n",
        encoding="utf-8",
    )
    config = RelayConfig.from_yaml(path)
    assert config.port == 4000
    assert config.openai_model == "gpt-4o"
    assert config.google_credentials_file == "./key.json"
    assert config.evidence_labels == ["nameplate"]


def test_env_wins_over_yaml(tmp_path, monkeypatch):
    path = tmp_path / "platerelay.yaml"
    path.write_text("platerelay:\n  port: 4000\n", encoding="utf-8")
    monkeypatch.setenv("PORT", "5000")
    assert RelayConfig.from_yaml(path).port == 5000


def test_missing_yaml_uses_defaults(tmp_path):
    assert RelayConfig.from_yaml(tmp_path / "absent.yaml").port == 3000


def test_flatten_yaml():
    assert _flatten_yaml({"a": {"b": 1, "c": {"d": 2}}, "e": [1]}) == {"a_b": 1, "a_c_d": 2, "e": [1]}


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("OPENAI_MODEL=gpt-4o\nUNRELATED_SETTING=1\n", encoding="utf-8")
    assert RelayConfig().openai_model == "gpt-4o"


def test_dotenv_wins_over_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("PORT=5500\n", encoding="utf-8")
    path = tmp_path / "platerelay.yaml"
    path.write_text("platerelay:\n  port: 4000\n  unknown_key: 1\n", encoding="utf-8")
    assert RelayConfig.from_yaml(path).port == 5500
