from pathlib import Path

from typer.testing import CliRunner

from hyperflow.cli import app

runner = CliRunner()


def _generate(tmp_path: Path, template: str) -> Path:
    result = runner.invoke(app, ["generate", "--template", template, "--outdir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    return tmp_path / f"{template}.yaml"


def test_generate_and_validate(tmp_path: Path):
    path = _generate(tmp_path, "echo")
    assert path.exists()
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 0
    assert "Validation Report" in result.output


def test_generate_unknown_template(tmp_path: Path):
    result = runner.invoke(app, ["generate", "--template", "nope", "--outdir", str(tmp_path)])
    assert result.exit_code == 1


def test_validate_reports_dangling_edge(tmp_path: Path):
    path = _generate(tmp_path, "echo")
    path.write_text(path.read_text().replace("target: node-2", "target: ghost"))
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "ghost" in result.output


def test_validate_rejects_malformed_file(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("id: g\nnodes: 3\n")
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "Invalid graph" in result.output


def test_explain(tmp_path: Path):
    path = _generate(tmp_path, "etl")
    result = runner.invoke(app, ["explain", str(path)])
    assert result.exit_code == 0
    assert "01. csv [csvInput] CSV" in result.output
    assert "(rows->input)" in result.output


def test_types():
    result = runner.invoke(app, ["types"])
    assert result.exit_code == 0
    assert "composite" in result.output


def test_run_echo(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("HYPERFLOW_PROCESSOR_DELAY", "0")
    path = _generate(tmp_path, "echo")
    result = runner.invoke(app, ["run", str(path)])
    assert result.exit_code == 0, result.output
    assert '"result": "HYPERFLOW IS ALIVE"' in result.output


def test_run_topological(tmp_path: Path):
    path = _generate(tmp_path, "etl")
    result = runner.invoke(app, ["run", str(path), "--mode", "topological"])
    assert result.exit_code == 0, result.output
    assert '"ADA"' in result.output


def test_run_bad_mode(tmp_path: Path):
    path = _generate(tmp_path, "etl")
    result = runner.invoke(app, ["run", str(path), "--mode", "sideways"])
    assert result.exit_code == 1
