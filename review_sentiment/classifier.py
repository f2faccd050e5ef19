"""
Sentiment classifiers.

Two interchangeable implementations of the same capability,
``classify(text) -> SentimentResult``:

- RemoteApiClassifier: calls a hosted inference endpoint with a bearer token
- LocalPipelineClassifier: runs a ``transformers`` text-classification
  pipeline in process
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

import requests
from transformers import pipeline

from .exceptions import ClassificationError, ModelNotReadyError
from .inference import SentimentResult, normalize_prediction, validate_prediction_input
from .utils import DEFAULT_MODEL, get_device

logger = logging.getLogger("review_sentiment")


REMOTE_INFERENCE_TYPE = "remote_api"
LOCAL_INFERENCE_TYPE = "local_pipeline"

MISSING_TOKEN_MESSAGE = "Please enter your Hugging Face API token."
INVALID_API_RESPONSE_MESSAGE = "Invalid response format from API"
MODEL_LOAD_FAILED_MESSAGE = (
    "Failed to load sentiment model. Please check your network connection and try again."
)
MODEL_NOT_INITIALIZED_MESSAGE = "Sentiment model is not initialized."
INVALID_LOCAL_OUTPUT_MESSAGE = "Invalid sentiment output from local model."


class BaseSentimentClassifier(ABC):
    """Common interface for sentiment classifiers."""

    inference_type: str = ""

    def __init__(self, model_name: str = DEFAULT_MODEL):
        self.model_name = model_name

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether ``classify`` can be called right now."""

    def load(self) -> None:
        """Prepare the classifier for use. No-op unless overridden."""

    def classify(self, text: str) -> SentimentResult:
        """
        Classify the sentiment of a single text.

        Args:
            text: Review text

        Returns:
            SentimentResult with label and confidence

        Raises:
            ValueError: If input validation fails
            ModelNotReadyError: If the credential or model is missing
            ClassificationError: If the call fails or returns an unexpected shape
        """
        is_valid, error = validate_prediction_input(text)
        if not is_valid:
            raise ValueError(error)

        start_time = time.time()
        output = self._predict(text)
        inference_time = (time.time() - start_time) * 1000

        return normalize_prediction(
            output,
            self._invalid_output_message,
            model=self.model_name,
            inference_type=self.inference_type,
            inference_time_ms=inference_time,
        )

    @property
    @abstractmethod
    def _invalid_output_message(self) -> str:
        ...

    @abstractmethod
    def _predict(self, text: str) -> Any:
        """Run the underlying call and return its raw payload."""


class RemoteApiClassifier(BaseSentimentClassifier):
    """
    Classifier backed by the hosted Hugging Face inference API.

    Sends ``{"inputs": text}`` with an ``Authorization: Bearer`` header and
    expects a JSON list whose first element carries ``label`` and ``score``.
    """

    inference_type = REMOTE_INFERENCE_TYPE

    def __init__(
        self,
        api_token: str = "",
        model_name: str = DEFAULT_MODEL,
        api_url: str = "https://router.huggingface.co/hf-inference/models",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the remote classifier.

        Args:
            api_token: Bearer credential for the inference API
            model_name: Hosted model identifier
            api_url: Base URL; the model name is appended to it
            timeout: Optional request timeout in seconds
            session: Optional requests session (for connection reuse and tests)
        """
        super().__init__(model_name)
        self.api_token = api_token or ""
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model_name}"

    @property
    def is_ready(self) -> bool:
        return bool(self.api_token)

    @property
    def _invalid_output_message(self) -> str:
        return INVALID_API_RESPONSE_MESSAGE

    def set_token(self, api_token: str) -> None:
        self.api_token = api_token or ""

    def _predict(self, text: str) -> Any:
        if not self.api_token:
            raise ModelNotReadyError(MISSING_TOKEN_MESSAGE)

        try:
            response = self.session.post(
                self.endpoint,
                json={"inputs": text},
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Inference API request failed: {e}")
            raise ClassificationError(f"API request failed: {e}") from e

        if not response.ok:
            detail = _error_detail(response)
            logger.error(f"Inference API returned {response.status_code}: {detail}")
            raise ClassificationError(f"API error ({response.status_code}): {detail}")

        try:
            return response.json()
        except ValueError as e:
            raise ClassificationError(INVALID_API_RESPONSE_MESSAGE) from e


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "unknown error"

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])

    return str(body)


class LocalPipelineClassifier(BaseSentimentClassifier):
    """
    Classifier backed by an in-process ``transformers`` pipeline.

    The pipeline is created once by ``load()`` and reused for every call.
    """

    inference_type = LOCAL_INFERENCE_TYPE

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        device: str = "auto",
        pipeline_factory: Callable[..., Any] | None = None,
    ):
        """
        Initialize the local classifier.

        Args:
            model_name: Model identifier or local model directory
            device: 'auto', 'cpu', 'cuda' or 'cuda:N'
            pipeline_factory: Callable building the pipeline
                (defaults to ``transformers.pipeline``)
        """
        super().__init__(model_name)
        self.device = device
        self.pipeline_factory = pipeline_factory or pipeline
        self._pipeline = None

    @property
    def is_ready(self) -> bool:
        return self._pipeline is not None

    @property
    def _invalid_output_message(self) -> str:
        return INVALID_LOCAL_OUTPUT_MESSAGE

    def load(self) -> None:
        """
        Create the pipeline if it hasn't been created yet.

        Raises:
            ModelNotReadyError: If the model can't be loaded
        """
        if self._pipeline is not None:
            return

        logger.info(f"Loading sentiment model {self.model_name}...")

        try:
            self._pipeline = self.pipeline_factory(
                "text-classification",
                model=self.model_name,
                device=get_device(self.device),
            )
        except Exception as e:
            logger.error(f"Failed to load sentiment model: {e}")
            raise ModelNotReadyError(MODEL_LOAD_FAILED_MESSAGE) from e

        logger.info("Sentiment model ready")

    def _predict(self, text: str) -> Any:
        if self._pipeline is None:
            raise ModelNotReadyError(MODEL_NOT_INITIALIZED_MESSAGE)

        try:
            return self._pipeline(text, truncation=True)
        except Exception as e:
            logger.error(f"Local sentiment pipeline failed: {e}")
            raise ClassificationError(f"Failed to analyze sentiment: {e}") from e


def create_classifier_from_config(
    config: dict[str, Any],
    api_token: str = "",
) -> BaseSentimentClassifier:
    """
    Create a classifier from configuration dictionary.

    Args:
        config: Full application configuration
        api_token: Bearer credential (remote classifier only)

    Returns:
        Unloaded classifier instance
    """
    classifier_config = config.get("classifier", {})
    classifier_type = str(classifier_config.get("type", "local")).lower()
    model_name = classifier_config.get("model", DEFAULT_MODEL)

    if classifier_type == "remote":
        return RemoteApiClassifier(
            api_token=api_token,
            model_name=model_name,
            api_url=classifier_config.get(
                "api_url", "https://router.huggingface.co/hf-inference/models"
            ),
            timeout=classifier_config.get("timeout"),
        )

    if classifier_type == "local":
        return LocalPipelineClassifier(
            model_name=model_name,
            device=classifier_config.get("device", "auto"),
        )

    raise ValueError(f"Unknown classifier type: {classifier_type!r} (expected 'local' or 'remote')")
