"""
Data loading and validation module for the review dataset.

Handles fetching the bundled TSV file, extracting review texts,
picking a random review, and basic statistics.
"""

import csv
import io
import logging
import random
from pathlib import Path
from typing import Any, Sequence

import numpy as np
import pandas as pd
import requests

from .exceptions import DatasetError, ReviewsNotLoadedError

logger = logging.getLogger("review_sentiment")


DEFAULT_TEXT_COLUMN = "text"
NO_REVIEWS_MESSAGE = "No reviews available. Please try again later."


def is_url(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_dataset_text(source: str | Path, timeout: float | None = None) -> str:
    """
    Fetch the raw TSV dataset as text.

    Args:
        source: Local file path or http(s) URL
        timeout: Optional request timeout in seconds (URLs only)

    Returns:
        Decoded file contents

    Raises:
        DatasetError: If the file can't be fetched
    """
    try:
        if is_url(source):
            response = requests.get(str(source), timeout=timeout)
            response.raise_for_status()
            return response.text

        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, requests.RequestException) as e:
        logger.error(f"TSV load error: {e}")
        raise DatasetError(f"Failed to load TSV file: {e}") from e


def validate_review(text: Any, min_length: int = 0) -> tuple[bool, str]:
    """
    Validate a single review value.

    Args:
        text: Value taken from the text column
        min_length: Stripped text must be longer than this

    Returns:
        Tuple of (is_valid, error_message)
    """
    if text is None:
        return False, "Text is None"

    if not isinstance(text, str):
        return False, f"Text must be string, got {type(text).__name__}"

    stripped = text.strip()
    if len(stripped) == 0:
        return False, "Text is empty or whitespace only"

    if len(stripped) <= min_length:
        return False, f"Text is too short ({len(stripped)} <= {min_length} characters)"

    return True, ""


def parse_reviews(
    tsv_text: str,
    text_column: str = DEFAULT_TEXT_COLUMN,
    min_length: int = 0,
) -> list[str]:
    """
    Parse TSV text with a header row and extract valid reviews.

    Args:
        tsv_text: Raw tab-separated text
        text_column: Name of the column holding review text
        min_length: Minimum stripped length (exclusive) to keep a review

    Returns:
        Reviews in file order

    Raises:
        DatasetError: If the text can't be parsed or the column is missing
    """
    try:
        header = pd.read_csv(io.StringIO(tsv_text), sep="\t", nrows=0, quoting=csv.QUOTE_MINIMAL)
        n_columns = len(header.columns)
        extra_field_rows = []

        def trim_extra_fields(fields: list[str]) -> list[str]:
            extra_field_rows.append(fields)
            return fields[:n_columns]

        # Header row is read as data so a wide first row isn't taken as an index
        rows = pd.read_csv(
            io.StringIO(tsv_text),
            sep="\t",
            header=None,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_MINIMAL,
            engine="python",
            on_bad_lines=trim_extra_fields,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        logger.error(f"TSV parse error: {e}")
        raise DatasetError(f"Failed to parse TSV file: {e}") from e

    df = rows.iloc[1:].set_axis(header.columns, axis=1)

    if extra_field_rows:
        logger.warning(
            f"Trimmed extra fields from {len(extra_field_rows)} rows "
            f"(expected {n_columns} columns)"
        )

    if text_column not in df.columns:
        message = f"column '{text_column}' not found (columns: {list(df.columns)})"
        logger.error(f"TSV parse error: {message}")
        raise DatasetError(f"Failed to parse TSV file: {message}")

    reviews = []
    invalid_rows = []

    for row_number, text in enumerate(df[text_column].tolist(), start=2):
        is_valid, error = validate_review(text, min_length)
        if not is_valid:
            invalid_rows.append((row_number, error))
            continue
        reviews.append(text)

    if invalid_rows:
        logger.warning(
            f"Dropped {len(invalid_rows)} invalid rows: "
            + ", ".join(f"row {row}: {err}" for row, err in invalid_rows[:5])
        )

    return reviews


def load_reviews(
    source: str | Path,
    text_column: str = DEFAULT_TEXT_COLUMN,
    min_length: int = 0,
    timeout: float | None = None,
) -> list[str]:
    """
    Fetch and parse the review dataset.

    Args:
        source: Local file path or http(s) URL of the TSV file
        text_column: Name of the column holding review text
        min_length: Minimum stripped length (exclusive) to keep a review
        timeout: Optional request timeout in seconds

    Returns:
        List of review strings

    Raises:
        DatasetError: If fetching or parsing fails
    """
    logger.info(f"Loading reviews from {source}")

    tsv_text = fetch_dataset_text(source, timeout=timeout)
    reviews = parse_reviews(tsv_text, text_column=text_column, min_length=min_length)

    logger.info(f"Loaded {len(reviews)} reviews")

    return reviews


def pick_random_review(
    reviews: Sequence[str] | None,
    rng: random.Random | None = None,
) -> str:
    """
    Pick one review uniformly at random.

    Args:
        reviews: Loaded reviews, or None if loading hasn't finished
        rng: Optional random generator (for reproducible picks)

    Returns:
        A review from ``reviews``

    Raises:
        ReviewsNotLoadedError: If there is nothing to pick from
    """
    if not reviews:
        raise ReviewsNotLoadedError(NO_REVIEWS_MESSAGE)

    rng = rng or random
    return reviews[rng.randrange(len(reviews))]


def get_review_statistics(reviews: Sequence[str]) -> dict[str, Any]:
    """
    Compute statistics for the loaded reviews.

    Args:
        reviews: List of review strings

    Returns:
        Dictionary with dataset statistics
    """
    if not reviews:
        return {"error": "Empty dataset"}

    word_counts = [len(text.split()) for text in reviews]
    char_counts = [len(text) for text in reviews]

    stats = {
        "total_reviews": len(reviews),
        "unique_reviews": len(set(reviews)),
        "word_count": {
            "mean": float(np.mean(word_counts)),
            "std": float(np.std(word_counts)),
            "min": int(np.min(word_counts)),
            "max": int(np.max(word_counts)),
            "median": float(np.median(word_counts)),
        },
        "char_count": {
            "mean": float(np.mean(char_counts)),
            "std": float(np.std(char_counts)),
            "min": int(np.min(char_counts)),
            "max": int(np.max(char_counts)),
        },
    }

    return stats


def print_review_statistics(stats: dict[str, Any]) -> None:
    """
    Print dataset statistics in a formatted way.

    Args:
        stats: Statistics dictionary from get_review_statistics
    """
    print("\n" + "=" * 50)
    print("REVIEW DATASET STATISTICS")
    print("=" * 50)

    if "error" in stats:
        print(f"\n{stats['error']}")
        print("=" * 50 + "\n")
        return

    print(f"\nTotal reviews: {stats['total_reviews']}")
    print(f"  - Unique: {stats['unique_reviews']}")

    print(f"\nWord count statistics:")
    wc = stats["word_count"]
    print(f"  - Mean: {wc['mean']:.1f}")
    print(f"  - Std: {wc['std']:.1f}")
    print(f"  - Min: {wc['min']}")
    print(f"  - Max: {wc['max']}")
    print(f"  - Median: {wc['median']:.1f}")

    print(f"\nCharacter count statistics:")
    cc = stats["char_count"]
    print(f"  - Mean: {cc['mean']:.1f}")
    print(f"  - Min: {cc['min']}")
    print(f"  - Max: {cc['max']}")

    print("=" * 50 + "\n")
