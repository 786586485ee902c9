"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from trend_overlay import __version__
from trend_overlay.cli import cli

CHART = """\
scales:
  x: {min: 0, max: 10}
  y: {min: 0, max: 100}
datasets:
  - label: Sales
    data: [10, 20, 30, 40, 50]
    trendlineLinear:
      colorMin: red
      label: {}
      legend: {text: Sales trend}
  - label: Single
    data: [5]
    trendlineLinear: {}
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def chart_file(tmp_path):
    path = tmp_path / "chart.yaml"
    path.write_text(CHART)
    return str(path)


class TestFitCommand:
    """Tests for `trend-overlay fit`."""

    def test_linear_fit(self, runner):
        result = runner.invoke(cli, ["fit", "10", "20", "30", "40", "50"])

        assert result.exit_code == 0
        assert "Slope" in result.output
        assert "10.0000" in result.output

    def test_comma_separated_with_gaps(self, runner):
        result = runner.invoke(cli, ["fit", "1,null,3", "--at", "10"])

        assert result.exit_code == 0
        assert "f(10)" in result.output
        assert "11.0000" in result.output

    def test_exponential_fit(self, runner):
        result = runner.invoke(cli, ["fit", "--kind", "exponential", "1", "2", "4", "8"])

        assert result.exit_code == 0
        assert "Growth rate" in result.output
        assert "0.6931" in result.output

    def test_too_few_points_warns(self, runner):
        result = runner.invoke(cli, ["fit", "5", "--offset", "0"])

        assert result.exit_code == 0
        assert "no trendline" in result.output

    def test_unknown_kind_rejected(self, runner):
        result = runner.invoke(cli, ["fit", "--kind", "cubic", "1", "2"])
        assert result.exit_code != 0


class TestResolveCommand:
    """Tests for `trend-overlay resolve`."""

    def test_json_output(self, runner, chart_file):
        result = runner.invoke(cli, ["resolve", chart_file, "--format", "json", "--legend"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        (trendline,) = payload["trendlines"]
        assert trendline["kind"] == "linear"
        assert trendline["count"] == 5
        assert trendline["scale"] == pytest.approx(10)
        assert trendline["segment"] == pytest.approx([50, 410, 330, 250])
        assert trendline["label"] == "Trendline (Slope: 10.00)"
        assert payload["commands"] == 2
        assert payload["legend"][0]["text"] == "Sales trend"

    def test_table_output(self, runner, chart_file):
        result = runner.invoke(cli, ["resolve", chart_file, "--legend"])

        assert result.exit_code == 0
        assert "Trendlines (1)" in result.output
        assert "Sales trend" in result.output

    def test_invalid_chart(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("datasets: []\n")

        result = runner.invoke(cli, ["resolve", str(path)])

        assert result.exit_code == 1
        assert "scales" in result.output


    def test_dataset_not_a_mapping(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("scales:\n  x: {min: 0, max: 10}\n  y: {min: 0, max: 100}\ndatasets:\n  - [1, 2, 3]\n")

        result = runner.invoke(cli, ["resolve", str(path)])

        assert result.exit_code == 1
        assert "Dataset 0 must be a mapping" in result.output


class TestGroupOptions:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output

    def test_config_file(self, runner, tmp_path, chart_file):
        config = tmp_path / "settings.yaml"
        config.write_text("style:\n  default_width: 9\n")

        result = runner.invoke(cli, ["--config", str(config), "resolve", chart_file, "--format", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["trendlines"][0]["drawn"]
