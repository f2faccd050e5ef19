"""
Tests for result rendering.
"""

import io

import pytest

from review_sentiment.app import ViewState
from review_sentiment.inference import SentimentResult
from review_sentiment.renderer import (
    ConsoleRenderer,
    format_confidence,
    get_sentiment_icon,
    render_result,
)


class TestFormatConfidence:
    """Tests for percentage formatting."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (0.9876, "98.8%"),
            (0.5, "50.0%"),
            (1.0, "100.0%"),
            (0.0, "0.0%"),
            (0.12345, "12.3%"),
        ],
    )
    def test_one_decimal(self, score, expected):
        """Test rounding to one decimal place."""
        assert format_confidence(score) == expected


class TestRenderResult:
    """Tests for mapping results to display state."""

    def test_positive(self):
        """Test a confident positive result."""
        display = render_result(SentimentResult(label="POSITIVE", score=0.9876))

        assert display.bucket == "positive"
        assert display.icon == "thumbs-up"
        assert display.css_class == "sentiment-result positive"
        assert display.message == "POSITIVE (98.8% confidence)"

    def test_negative(self):
        """Test a confident negative result."""
        display = render_result(SentimentResult(label="NEGATIVE", score=0.7))

        assert display.bucket == "negative"
        assert display.icon == "thumbs-down"

    def test_low_confidence_is_neutral_but_keeps_label(self):
        """Test that the label is shown even when bucketed neutral."""
        display = render_result(SentimentResult(label="POSITIVE", score=0.5))

        assert display.bucket == "neutral"
        assert display.icon == "question-circle"
        assert display.label == "POSITIVE"
        assert display.confidence_text == "50.0%"

    def test_unknown_icon_falls_back(self):
        """Test icon lookup for an unknown bucket."""
        assert get_sentiment_icon("ecstatic") == "question-circle"


class TestConsoleRenderer:
    """Tests for terminal output."""

    def test_shows_review_and_result(self):
        """Test that a successful view prints review and result."""
        stream = io.StringIO()
        view = ViewState(
            review_text="Solid kettle.",
            display=render_result(SentimentResult(label="POSITIVE", score=0.91)),
        )

        ConsoleRenderer(stream).show_view(view)

        output = stream.getvalue()
        assert "Solid kettle." in output
        assert "POSITIVE (91.0% confidence)" in output
        assert "<positive>" in output

    def test_error_replaces_result(self):
        """Test that an error is shown instead of a stale result."""
        stream = io.StringIO()
        view = ViewState(
            review_text="Solid kettle.",
            display=render_result(SentimentResult(label="POSITIVE", score=0.91)),
            error_message="Invalid response format from API",
        )

        ConsoleRenderer(stream).show_view(view)

        output = stream.getvalue()
        assert "Error: Invalid response format from API" in output
        assert "confidence" not in output
