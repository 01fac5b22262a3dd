"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from sklearn.tree import DecisionTreeClassifier
from typer.testing import CliRunner

from rdfserving.cli import app
from rdfserving.example import CategoryMapping
from rdfserving.generation import save_generation

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, category_mappings: dict[int, CategoryMapping]) -> Path:
    """Config pointing at a saved generation with a fitted tree."""
    X = [[0, 1.0, 1.0], [1, 5.0, 4.0], [0, 1.2, 0.8], [2, 6.0, 5.0]]
    y = [0, 1, 0, 1]
    tree = DecisionTreeClassifier(random_state=1337).fit(X, y)
    save_generation(tmp_path / "00003", tree, category_mappings, target_column=3)

    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
project: cli-test
inbound:
  column_names: [color, size, weight, label]
  categorical_columns: [color, label]
  target_column: label
model:
  path: {tmp_path / "00003"}
"""
    )
    return path


class TestCli:
    """Tests for CLI commands."""

    def test_classify_distribution(self, config_path: Path) -> None:
        result = runner.invoke(app, ["classify", "-c", str(config_path), "-l", "red,1.1,1.0,"])
        assert result.exit_code == 0
        assert result.stdout.endswith("yes,1.0\nno,0.0\n")

    def test_classify_best(self, config_path: Path) -> None:
        result = runner.invoke(
            app, ["classify", "-c", str(config_path), "-l", "blue,6.0,5.0,", "--best"]
        )
        assert result.exit_code == 0
        assert result.stdout.endswith("no\n")

    def test_classify_bad_input(self, config_path: Path) -> None:
        result = runner.invoke(app, ["classify", "-c", str(config_path), "-l", "red,1.1"])
        assert result.exit_code == 1
        assert "Wrong column count" in result.stdout

    def test_inspect(self, config_path: Path) -> None:
        result = runner.invoke(app, ["inspect", "-c", str(config_path)])
        assert result.exit_code == 0
        assert "categorical" in result.stdout
        assert "yes" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "rdf-serving version" in result.stdout
