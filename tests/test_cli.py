"""
Tests for the command-line front end.
"""

import json
import logging

import pytest

from review_sentiment import cli
from review_sentiment.app import TOKEN_ENV_VAR
from review_sentiment.classifier import LocalPipelineClassifier
from review_sentiment.token_store import STORAGE_ENV_VAR
from review_sentiment.utils import LOGGER_NAME

from conftest import FakePipeline, FakePipelineFactory


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)
    monkeypatch.setenv(STORAGE_ENV_VAR, str(tmp_path / "default_storage.json"))
    yield
    # main() attaches handlers bound to the captured stdout
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.fixture
def fake_classifier(monkeypatch):
    """Replace classifier creation with a fake local pipeline."""
    pipeline = FakePipeline(output=[{"label": "NEGATIVE", "score": 0.93}])

    def create(config, api_token=""):
        return LocalPipelineClassifier(pipeline_factory=FakePipelineFactory(pipeline))

    monkeypatch.setattr("review_sentiment.app.create_classifier_from_config", create)
    return pipeline


def base_args(tsv_file, tmp_path):
    return ["--dataset", str(tsv_file), "--storage", str(tmp_path / "storage.json"), "--seed", "1"]


class TestBuildConfig:
    """Tests for command-line overrides."""

    def test_overrides(self, tmp_path):
        """Test that flags override config values."""
        args = cli.parse_args(
            ["--dataset", "d.tsv", "--classifier", "remote", "--model", "m", "--verbose", "stats"]
        )
        config = cli.build_config(args)

        assert config["data"]["path"] == "d.tsv"
        assert config["classifier"]["type"] == "remote"
        assert config["classifier"]["model"] == "m"
        assert config["logging"]["level"] == "DEBUG"

    def test_reads_yaml(self, tmp_path):
        """Test loading an explicit config file."""
        config_path = tmp_path / "app.yaml"
        config_path.write_text("classifier:\n  type: remote\n", encoding="utf-8")

        config = cli.build_config(cli.parse_args(["--config", str(config_path), "stats"]))

        assert config["classifier"]["type"] == "remote"
        assert config["data"]["text_column"] == "text"


class TestStatsCommand:
    """Tests for the stats command."""

    def test_prints_statistics(self, tsv_file, tmp_path, capsys):
        """Test statistics output."""
        assert cli.main(base_args(tsv_file, tmp_path) + ["stats"]) == 0

        assert "Total reviews: 5" in capsys.readouterr().out

    def test_missing_dataset(self, tmp_path, capsys):
        """Test error exit for a missing dataset."""
        code = cli.main(["--dataset", str(tmp_path / "missing.tsv"), "stats"])

        assert code == 1
        assert "Failed to load TSV file" in capsys.readouterr().out


class TestTokenCommand:
    """Tests for the token command."""

    def test_set_show_clear(self, tsv_file, tmp_path, capsys):
        """Test the token lifecycle."""
        args = base_args(tsv_file, tmp_path)

        assert cli.main(args + ["token", "set", "hf_secret"]) == 0
        assert cli.main(args + ["token", "show"]) == 0
        assert "hf_s*****" in capsys.readouterr().out

        assert cli.main(args + ["token", "clear"]) == 0
        assert cli.main(args + ["token", "show"]) == 0
        assert "No token saved" in capsys.readouterr().out

    def test_set_requires_value(self, tsv_file, tmp_path):
        """Test that 'set' without a value fails."""
        assert cli.main(base_args(tsv_file, tmp_path) + ["token", "set"]) == 1


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_analyze_prints_result(self, tsv_file, tmp_path, sample_reviews, fake_classifier, capsys):
        """Test a single analysis."""
        assert cli.main(base_args(tsv_file, tmp_path) + ["analyze"]) == 0

        output = capsys.readouterr().out
        assert "NEGATIVE (93.0% confidence)" in output
        assert any(review in output for review in sample_reviews)

    def test_analyze_count(self, tsv_file, tmp_path, fake_classifier):
        """Test several analyses in one run."""
        assert cli.main(base_args(tsv_file, tmp_path) + ["analyze", "--count", "3"]) == 0

        assert len(fake_classifier.calls) == 3

    def test_analyze_missing_dataset_fails(self, tmp_path, fake_classifier, capsys):
        """Test exit status when no reviews are available."""
        code = cli.main(["--dataset", str(tmp_path / "missing.tsv"), "analyze"])

        assert code == 1
        assert "No reviews available" in capsys.readouterr().out

    def test_interactive(self, tsv_file, tmp_path, fake_classifier, monkeypatch):
        """Test the prompt loop until 'q'."""
        answers = iter(["", "", "q"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

        assert cli.main(base_args(tsv_file, tmp_path) + ["analyze", "--interactive"]) == 0

        assert len(fake_classifier.calls) == 2

    def test_startup_error_is_shown(self, tmp_path, fake_classifier, capsys):
        """Test that a dataset load failure at startup reaches the user."""
        code = cli.main(["--dataset", str(tmp_path / "missing.tsv"), "analyze"])

        output = capsys.readouterr().out
        assert code == 1
        assert "Error: Failed to load TSV file" in output
        assert output.index("Error: Failed to load TSV file") < output.index("Error: No reviews available")

    def test_interactive_end_of_input(self, tsv_file, tmp_path, fake_classifier, monkeypatch):
        """Test that closed stdin ends the prompt loop like 'q'."""
        answers = iter([""])

        def fake_input(prompt=""):
            try:
                return next(answers)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

        assert cli.main(base_args(tsv_file, tmp_path) + ["analyze", "--interactive"]) == 0

        assert len(fake_classifier.calls) == 1

    def test_json_output(self, tsv_file, tmp_path, sample_reviews, fake_classifier, capsys):
        """Test one JSON line per successful result."""
        assert cli.main(base_args(tsv_file, tmp_path) + ["analyze", "--count", "2", "--json"]) == 0

        lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
        assert len(lines) == 2

        record = json.loads(lines[0])
        assert record["review"] in sample_reviews
        assert record["label"] == "NEGATIVE"
        assert record["score"] == 0.93
        assert record["bucket"] == "negative"
        assert record["inference_type"] == "local_pipeline"
