"""
Result rendering for the review sentiment demo.

Maps a SentimentResult to what the user sees. Pure presentation.
"""

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from .inference import BUCKET_NEGATIVE, BUCKET_POSITIVE, SentimentResult

if TYPE_CHECKING:
    from .app import ViewState


SENTIMENT_ICONS = {
    BUCKET_POSITIVE: "thumbs-up",
    BUCKET_NEGATIVE: "thumbs-down",
}
DEFAULT_ICON = "question-circle"

ICON_SYMBOLS = {
    "thumbs-up": "[+]",
    "thumbs-down": "[-]",
    "question-circle": "[?]",
}


@dataclass(frozen=True)
class DisplayState:
    """Visible state of the sentiment result area."""

    bucket: str
    label: str
    score: float
    confidence_text: str
    icon: str

    @property
    def css_class(self) -> str:
        return f"sentiment-result {self.bucket}"

    @property
    def message(self) -> str:
        return f"{self.label} ({self.confidence_text} confidence)"


def format_confidence(score: float) -> str:
    """Format a [0, 1] score as a percentage with one decimal, e.g. '97.3%'."""
    return f"{score * 100:.1f}%"


def get_sentiment_icon(bucket: str) -> str:
    return SENTIMENT_ICONS.get(bucket, DEFAULT_ICON)


def render_result(result: SentimentResult) -> DisplayState:
    bucket = result.bucket
    return DisplayState(
        bucket=bucket,
        label=result.label,
        score=result.score,
        confidence_text=format_confidence(result.score),
        icon=get_sentiment_icon(bucket),
    )


class ConsoleRenderer:
    """Writes the application's view state to a text stream."""

    def __init__(self, stream: TextIO | None = None, width: int = 60):
        self.stream = stream or sys.stdout
        self.width = width

    def _write(self, line: str = "") -> None:
        print(line, file=self.stream)

    def show_status(self, status: str) -> None:
        if status:
            self._write(f"Status: {status}")

    def show_review(self, review: str) -> None:
        self._write("-" * self.width)
        self._write("Review:")
        self._write(review)
        self._write("-" * self.width)

    def show_result(self, display: DisplayState) -> None:
        symbol = ICON_SYMBOLS.get(display.icon, ICON_SYMBOLS[DEFAULT_ICON])
        self._write(f"{symbol} {display.message}  <{display.bucket}>")

    def show_error(self, message: str) -> None:
        self._write(f"Error: {message}")

    def show_view(self, view: "ViewState") -> None:
        """Render a full ViewState (review, result or error)."""
        if view.review_text:
            self.show_review(view.review_text)
        if view.error_message:
            self.show_error(view.error_message)
        elif view.display is not None:
            self.show_result(view.display)
