from pathlib import Path

from typer.testing import CliRunner

from formula_charts import __version__
from formula_charts.cli.main import app
from formula_charts.core.config import Settings

runner = CliRunner()


def _write(tmp_path: Path, text: str, name: str = "chart.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_version(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_validate_ok(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(
        tmp_path,
        """
chart: bar
data:
  - [Jan, 1, 2]
  - [Feb, 3, 4]
options:
  series names: [North, South]
  background color: {red: 1, green: 0, blue: 0.5}
""",
    )
    result = runner.invoke(app, ["validate", str(spec)])
    assert result.exit_code == 0, result.stdout
    assert "Valid bar chart" in result.stdout
    assert "2 rows, 3 columns" in result.stdout
    assert "'North'" in result.stdout


def test_validate_reports_diagnostics(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(tmp_path, "chart: pie\ndata: [[1, 2], [3, 4]]\n")
    result = runner.invoke(app, ["validate", str(spec)])
    assert result.exit_code == 1
    assert "Pie chart must have non-numerical categories" in result.output


def test_validate_rejects_unknown_chart(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(tmp_path, "chart: radar\ndata: [1, 2]\n")
    result = runner.invoke(app, ["validate", str(spec)])
    assert result.exit_code == 1
    assert "Unknown chart type" in result.output


def test_render_writes_png(tmp_path, monkeypatch):
    from formula_charts import cli as fc_cli

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(fc_cli.main, "get_settings", lambda: Settings(render_timeout=None))
    spec = _write(
        tmp_path,
        """
chart: line
data: [1, 4, 9, 16]
options:
  size: [300, 200]
  title: Squares
""",
    )
    out = tmp_path / "squares.png"
    result = runner.invoke(app, ["render", str(spec), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_bytes().startswith(b"\x89PNG")
    assert "300x200" in result.stdout


def test_render_default_output_dir(tmp_path, monkeypatch):
    from formula_charts import cli as fc_cli

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        fc_cli.main, "get_settings", lambda: Settings(output_dir=tmp_path / "charts")
    )
    spec = _write(tmp_path, "chart: dot\ndata: [[1, 2], [2, 3]]\n", name="points.yaml")
    result = runner.invoke(app, ["render", str(spec)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "charts" / "points.png").exists()


def test_render_invalid_option(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(tmp_path, "chart: bar\ndata: [1, 2]\noptions:\n  slice text: value\n")
    result = runner.invoke(app, ["render", str(spec)])
    assert result.exit_code == 1
    assert "Invalid option for the type of chart" in result.output
    assert not (tmp_path / "chart.png").exists()


def test_validate_rejects_unconvertible_option_value(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(tmp_path, "chart: bar\ndata: [1, 2]\noptions:\n  title: 2024-01-01\n")
    result = runner.invoke(app, ["validate", str(spec)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, TypeError)
    assert "Invalid option value" in result.output


def test_validate_rejects_color_with_missing_channel(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(
        tmp_path,
        "chart: bar\ndata: [1, 2]\noptions:\n  background color: {red: 1, green: 0, blue: null}\n",
    )
    result = runner.invoke(app, ["validate", str(spec)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, TypeError)
    assert "Color channel 'blue' must be a number" in result.output


def test_render_rejects_unconvertible_data(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    spec = _write(tmp_path, "chart: line\ndata: [2024-01-01, 2024-01-02]\n")
    result = runner.invoke(app, ["render", str(spec)])
    assert result.exit_code == 1
    assert "Invalid data" in result.output
