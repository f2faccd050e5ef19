"""
Application controller for the review sentiment demo.

Owns the application state and runs the
"pick review -> classify -> render -> log" flow.
"""

import logging
import os
import random
from dataclasses import dataclass, field
from typing import Any

from .classifier import (
    MISSING_TOKEN_MESSAGE,
    BaseSentimentClassifier,
    RemoteApiClassifier,
    create_classifier_from_config,
)
from .data_loader import load_reviews, pick_random_review
from .exceptions import AppError, ModelNotReadyError
from .inference import SentimentResult
from .renderer import DisplayState, render_result
from .token_store import TokenStore
from .usage_logger import UsageLogger

logger = logging.getLogger("review_sentiment")


TOKEN_ENV_VAR = "HF_API_TOKEN"
MODEL_NOT_READY_MESSAGE = "Sentiment model is not ready yet. Please wait a moment."
BUSY_MESSAGE = "An analysis is already in progress."


@dataclass
class ViewState:
    """What the user currently sees."""

    review_text: str = ""
    display: DisplayState | None = None
    error_message: str | None = None
    status: str = ""
    loading: bool = False
    analyze_enabled: bool = True


@dataclass
class AppState:
    """Process-wide state of the demo."""

    reviews: list[str] | None = None
    classifier: BaseSentimentClassifier | None = None
    api_token: str = ""
    current_review: str = ""
    busy: bool = False
    view: ViewState = field(default_factory=ViewState)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one analyze action."""

    review: str | None = None
    result: SentimentResult | None = None
    display: DisplayState | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


class ReviewSentimentApp:
    """
    Controller wiring the dataset, classifier, renderer and usage logger.

    User-facing failures end up in ``state.view.error_message``;
    none of the actions raise.
    """

    def __init__(
        self,
        config: dict[str, Any],
        token_store: TokenStore,
        classifier: BaseSentimentClassifier | None = None,
        usage_logger: UsageLogger | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Application configuration
            token_store: Persistence for the API token
            classifier: Classifier to use (built from config when None)
            usage_logger: Usage logger (built from config when None)
            rng: Random generator used to pick reviews
        """
        self.config = config
        self.token_store = token_store
        self.rng = rng or random.Random()
        self.state = AppState(classifier=classifier)

        data_config = config.get("data", {})
        self.dataset_source = str(data_config.get("path", "reviews_test.tsv"))

        self.usage_logger = usage_logger or UsageLogger.from_config(
            config, page=self.dataset_source
        )

    @property
    def view(self) -> ViewState:
        return self.state.view

    def show_error(self, message: str) -> None:
        self.view.error_message = message

    def hide_error(self) -> None:
        self.view.error_message = None

    def restore_api_token(self) -> str:
        """Load the saved token, falling back to the HF_API_TOKEN environment variable."""
        token = self.token_store.get() or os.environ.get(TOKEN_ENV_VAR, "")
        self.state.api_token = token
        self._push_token()
        return token

    def save_api_token(self, value: str) -> None:
        """
        Save the token typed by the user.

        Surrounding whitespace is trimmed; an empty value removes the saved token.
        """
        token = (value or "").strip()
        self.state.api_token = token

        if token:
            self.token_store.set(token)
        else:
            self.token_store.remove()

        self._push_token()

    def _push_token(self) -> None:
        if isinstance(self.state.classifier, RemoteApiClassifier):
            self.state.classifier.set_token(self.state.api_token)

    def load_reviews(self) -> bool:
        """Load the dataset into the state. Returns False and shows an error on failure."""
        data_config = self.config.get("data", {})

        try:
            self.state.reviews = load_reviews(
                self.dataset_source,
                text_column=data_config.get("text_column", "text"),
                min_length=data_config.get("min_length", 0),
                timeout=data_config.get("timeout"),
            )
        except AppError as e:
            self.show_error(str(e))
            return False

        return True

    def init_classifier(self) -> bool:
        """Create (if needed) and load the classifier. Returns False and shows an error on failure."""
        if self.state.classifier is None:
            self.state.classifier = create_classifier_from_config(
                self.config, api_token=self.state.api_token
            )
            self._push_token()

        classifier = self.state.classifier
        self.view.status = "Loading sentiment model..."

        try:
            classifier.load()
        except ModelNotReadyError as e:
            self.show_error(str(e))
            self.view.status = "Model load failed"
            return False

        self.view.status = "Sentiment model ready"
        return True

    def start(self) -> None:
        """Restore the token, load the dataset and initialize the classifier."""
        self.restore_api_token()
        self.load_reviews()
        self.init_classifier()

    def analyze_random_review(self) -> AnalysisOutcome:
        """
        Pick a random review, classify it, render the result and log usage.

        Returns:
            AnalysisOutcome describing what happened
        """
        if self.state.busy:
            return AnalysisOutcome(error=BUSY_MESSAGE)

        self.hide_error()

        try:
            review = pick_random_review(self.state.reviews, self.rng)
        except AppError as e:
            self.show_error(str(e))
            return AnalysisOutcome(error=str(e))

        classifier = self.state.classifier
        if classifier is None or not classifier.is_ready:
            message = MODEL_NOT_READY_MESSAGE
            if isinstance(classifier, RemoteApiClassifier):
                message = MISSING_TOKEN_MESSAGE
            self.show_error(message)
            return AnalysisOutcome(error=message)

        self.state.current_review = review
        self.view.review_text = review

        self.state.busy = True
        self.view.loading = True
        self.view.analyze_enabled = False
        self.view.display = None

        try:
            result = classifier.classify(review)
            display = render_result(result)
            self.view.display = display
        except (AppError, ValueError) as e:
            logger.error(f"Error: {e}")
            message = str(e) or "Failed to analyze sentiment."
            self.show_error(message)
            return AnalysisOutcome(review=review, error=message)
        finally:
            self.view.loading = False
            self.view.analyze_enabled = True
            self.state.busy = False

        self.usage_logger.log(review, result)

        return AnalysisOutcome(review=review, result=result, display=display)
