"""
Inference result handling for sentiment classification.

Converts raw classifier outputs (remote API payloads or local pipeline
predictions) into a common result shape and buckets them for display.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any

from .exceptions import ClassificationError

logger = logging.getLogger("review_sentiment")


POSITIVE = "POSITIVE"
NEGATIVE = "NEGATIVE"
NEUTRAL = "NEUTRAL"

BUCKET_POSITIVE = "positive"
BUCKET_NEGATIVE = "negative"
BUCKET_NEUTRAL = "neutral"

NEUTRAL_THRESHOLD = 0.5
MAX_INPUT_LENGTH = 50000


@dataclass(frozen=True)
class SentimentResult:
    """Result of a sentiment classification call."""

    label: str
    score: float
    model: str = ""
    inference_type: str = ""
    inference_time_ms: float = 0.0

    @property
    def bucket(self) -> str:
        return get_sentiment_bucket(self.label, self.score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API-style output."""
        return {
            "label": self.label,
            "score": round(self.score, 4),
            "bucket": self.bucket,
            "model": self.model,
            "inference_type": self.inference_type,
            "inference_time_ms": round(self.inference_time_ms, 2),
        }


def get_sentiment_bucket(label: str, score: float) -> str:
    """
    Map a label/score pair to the three-way sentiment bucket.

    Scores at or below 0.5 are neutral whatever the label says.

    Args:
        label: Reported label (case-insensitive)
        score: Confidence for that label

    Returns:
        'positive', 'negative' or 'neutral'
    """
    label = str(label).upper()

    if label == POSITIVE and score > NEUTRAL_THRESHOLD:
        return BUCKET_POSITIVE
    elif label == NEGATIVE and score > NEUTRAL_THRESHOLD:
        return BUCKET_NEGATIVE
    else:
        return BUCKET_NEUTRAL


def validate_prediction_input(text: Any) -> tuple[bool, str]:
    """
    Validate input for prediction.

    Args:
        text: Input text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if text is None:
        return False, "Input text cannot be None"

    if not isinstance(text, str):
        return False, f"Input must be string, got {type(text).__name__}"

    text = text.strip()
    if len(text) == 0:
        return False, "Input text cannot be empty"

    if len(text) > MAX_INPUT_LENGTH:
        return False, f"Input text exceeds maximum length ({MAX_INPUT_LENGTH} characters)"

    return True, ""


def extract_first_prediction(output: Any, error_message: str) -> dict[str, Any]:
    """
    Pull the first label/score record out of a classifier payload.

    Accepts a flat list (``[{"label": ..., "score": ...}, ...]``) or the
    nested form returned for single inputs (``[[{...}, ...]]``).

    Raises:
        ClassificationError: If the payload has any other shape
    """
    if not isinstance(output, list) or len(output) == 0:
        raise ClassificationError(error_message)

    first = output[0]

    if isinstance(first, list):
        if len(first) == 0:
            raise ClassificationError(error_message)
        first = first[0]

    if not isinstance(first, dict):
        raise ClassificationError(error_message)

    label = first.get("label")
    score = first.get("score")

    # bool is a Number subclass
    if not isinstance(label, str) or isinstance(score, bool) or not isinstance(score, numbers.Real):
        raise ClassificationError(error_message)

    return first


def normalize_prediction(
    output: Any,
    error_message: str,
    model: str = "",
    inference_type: str = "",
    inference_time_ms: float = 0.0,
) -> SentimentResult:
    """
    Convert a raw classifier payload into a SentimentResult.

    Args:
        output: Raw payload from the API or the local pipeline
        error_message: Message used if the payload is malformed
        model: Model identifier
        inference_type: 'remote_api' or 'local_pipeline'
        inference_time_ms: Time spent in the call

    Returns:
        SentimentResult with an upper-cased label and float score

    Raises:
        ClassificationError: If the payload is malformed or the score is out of range
    """
    prediction = extract_first_prediction(output, error_message)

    score = float(prediction["score"])
    if not 0.0 <= score <= 1.0:
        raise ClassificationError(error_message)

    return SentimentResult(
        label=prediction["label"].upper(),
        score=score,
        model=model,
        inference_type=inference_type,
        inference_time_ms=inference_time_ms,
    )
