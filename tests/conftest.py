"""
Pytest configuration and fixtures for review sentiment tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from review_sentiment.classifier import LocalPipelineClassifier
from review_sentiment.token_store import TokenStore
from review_sentiment.usage_logger import UsageLogger
from review_sentiment.utils import load_config


@pytest.fixture
def sample_reviews() -> list[str]:
    """Sample reviews for testing."""
    return [
        "This blender is absolutely fantastic! I use it every day.",
        "Terrible quality. Broke after one week.",
        "It does the job, nothing special.",
        "Best purchase I made this year. Highly recommended!",
        "Packaging was damaged and the manual was missing.",
    ]


@pytest.fixture
def tsv_file(tmp_path, sample_reviews) -> Path:
    """TSV dataset with the sample reviews plus three invalid rows."""
    lines = ["id\ttext\tlabel"]
    for i, review in enumerate(sample_reviews):
        lines.append(f"{i}\t{review}\tpos")
    lines.append("90\t\tneg")
    lines.append("91\t   \tneg")
    lines.append("92")
    path = tmp_path / "reviews_test.tsv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class FakePipeline:
    """Stands in for a transformers text-classification pipeline."""

    def __init__(self, output=None, error: Exception | None = None):
        self.output = output if output is not None else [{"label": "POSITIVE", "score": 0.9876}]
        self.error = error
        self.calls = []

    def __call__(self, text, **kwargs):
        self.calls.append((text, kwargs))
        if self.error is not None:
            raise self.error
        return self.output


class FakePipelineFactory:
    """Records pipeline construction and hands out a FakePipeline."""

    def __init__(self, pipeline: FakePipeline | None = None, error: Exception | None = None):
        self.pipeline = pipeline or FakePipeline()
        self.error = error
        self.calls = []

    def __call__(self, task, **kwargs):
        self.calls.append((task, kwargs))
        if self.error is not None:
            raise self.error
        return self.pipeline


@pytest.fixture
def fake_pipeline() -> FakePipeline:
    return FakePipeline()


@pytest.fixture
def local_classifier(fake_pipeline) -> LocalPipelineClassifier:
    """Loaded local classifier backed by a fake pipeline."""
    classifier = LocalPipelineClassifier(
        model_name="test-model",
        device="cpu",
        pipeline_factory=FakePipelineFactory(fake_pipeline),
    )
    classifier.load()
    return classifier


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "storage.json")


@pytest.fixture
def disabled_usage_logger() -> UsageLogger:
    return UsageLogger(url=None)


@pytest.fixture
def config(tsv_file) -> dict:
    """Default configuration pointed at the test dataset."""
    config = load_config()
    config["data"]["path"] = str(tsv_file)
    return config


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
