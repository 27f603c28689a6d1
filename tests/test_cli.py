"""Test the command line entry point."""

import json

import pytest

from platerelay import cli
from platerelay.formatter import StructuredFormatter
from platerelay.relay import Relay
from platerelay.vision.client import AnnotationClient
from stubs import RECORD_JSON, StubLLMProvider, StubVisionProvider


@pytest.fixture
def stub_relay(monkeypatch):
    vision, llm = StubVisionProvider(), StubLLMProvider()
    monkeypatch.setattr(
        cli, "build_relay",
        lambda config: Relay(AnnotationClient(vision), StructuredFormatter(llm)),
    )
    return vision, llm


def test_process_prints_envelope(tmp_path, capsys, stub_relay):
    image = tmp_path / "plate.jpg"
    image.write_bytes(b"\xff\xd8jpeg")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(tmp_path / "none.yaml"), "process", str(image)])

    assert exc_info.value.code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["success"] is True
    assert body["data"] == RECORD_JSON
    assert stub_relay[0].calls == [b"\xff\xd8jpeg"]


def test_process_reports_rejection(tmp_path, capsys, stub_relay):
    stub_relay[0].labels = ["tree"]
    image = tmp_path / "tree.jpg"
    image.write_bytes(b"jpeg")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(tmp_path / "none.yaml"), "process", str(image)])

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out) == {"error": "Invalid image content"}


def test_process_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(tmp_path / "none.yaml"), "process", str(tmp_path / "nope.jpg")])
    assert exc_info.value.code == 1
    assert "Image not found" in capsys.readouterr().err


def test_process_reports_unexpected_failure(tmp_path, capsys, monkeypatch):
    def broken_relay(config):
        raise ValueError("malformed service account file")

    monkeypatch.setattr(cli, "build_relay", broken_relay)
    image = tmp_path / "plate.jpg"
    image.write_bytes(b"jpeg")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(tmp_path / "none.yaml"), "process", str(image)])

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out) == {
        "error": "Error processing image",
        "details": "malformed service account file",
    }


def test_process_reports_pipeline_crash(tmp_path, capsys, stub_relay):
    stub_relay[1].error = KeyError("choices")
    image = tmp_path / "plate.jpg"
    image.write_bytes(b"jpeg")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(tmp_path / "none.yaml"), "process", str(image)])

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "Error processing image"
