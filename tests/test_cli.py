"""CLI command tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from careerflow import cli
from careerflow.cli import build_parser, load_content, main
from careerflow.providers import LLMResponse


class StubProvider:
    model = "stub-model"

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error

    async def generate(self, messages, config) -> LLMResponse:
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.text)


@pytest.fixture
def form_file(tmp_path: Path, sample_resume) -> Path:
    path = tmp_path / "form.json"
    path.write_text(json.dumps(sample_resume.to_dict()), encoding="utf-8")
    return path


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_preview_prints_markdown(form_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["preview", str(form_file), "--name", "Jane Doe"]) == 0
    out = capsys.readouterr().out
    assert "Jane Doe" in out
    assert "## Professional Summary" in out
    assert "Acme | Engineer" in out


def test_preview_reports_invalid_form(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"contactInfo": {"email": "nope"}}), encoding="utf-8")
    assert main(["preview", str(path)]) == 1
    assert "Invalid email" in capsys.readouterr().out


def test_export_writes_pdf(form_file: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "exports"
    assert main(["export", str(form_file), "-o", str(out_dir)]) == 0
    assert (out_dir / "resume.pdf").read_bytes().startswith(b"%PDF")


def test_export_markdown_input(tmp_path: Path) -> None:
    md = tmp_path / "resume.md"
    md.write_text("Jane\nDev\nCity\n\n## Skills\n\n- Go\n\n---", encoding="utf-8")
    assert main(["export", str(md), "-o", str(tmp_path)]) == 0
    assert (tmp_path / "resume.pdf").exists()


def test_export_empty_input(tmp_path: Path) -> None:
    md = tmp_path / "empty.md"
    md.write_text("  \n", encoding="utf-8")
    assert main(["export", str(md), "-o", str(tmp_path)]) == 1


def test_score_heuristic_only(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    md = tmp_path / "resume.md"
    md.write_text("📧 me@example.com\n\n## Professional Summary\n\nHi", encoding="utf-8")
    assert main(["score", str(md), "--heuristic-only"]) == 0
    out = capsys.readouterr().out
    assert "Heuristic score: 50/100" in out


def test_score_without_job_description(form_file: Path) -> None:
    assert main(["score", str(form_file)]) == 1


def test_score_without_api_key(form_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["score", str(form_file), "-j", "Python role"]) == 1
    assert "GEMINI_API_KEY" in capsys.readouterr().out


def test_score_with_model(form_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    provider = StubProvider('{"keywordScore": 80, "keywordFeedback": "Add Go."}')
    monkeypatch.setattr(cli, "create_provider", lambda *a, **k: provider)
    assert main(["score", str(form_file), "-j", "Python role"]) == 0
    assert "ATS Score: 90/100" in capsys.readouterr().out


def test_score_reports_model_failure(
    form_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    provider = StubProvider(error=RuntimeError("network down"))
    monkeypatch.setattr(cli, "create_provider", lambda *a, **k: provider)
    assert main(["score", str(form_file), "-j", "Python role"]) == 1
    assert "Failed to calculate ATS score: network down" in capsys.readouterr().out


def test_missing_input_file(tmp_path: Path) -> None:
    assert main(["export", str(tmp_path / "missing.json")]) == 1


def test_config_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["config"]) == 0
    assert "gemini.api_key" in capsys.readouterr().out


def test_load_content_projects_json(form_file: Path) -> None:
    assert load_content(form_file, name="Jane Doe").startswith("Jane Doe\nBackend Engineer")
