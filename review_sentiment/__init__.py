"""
Review Sentiment Demo Package

Picks a random product review, classifies its sentiment with a hosted
inference API or a local transformers pipeline, and logs usage.
"""
__version__ = "0.1.0"

from .app import AnalysisOutcome, ReviewSentimentApp
from .classifier import BaseSentimentClassifier, LocalPipelineClassifier, RemoteApiClassifier
from .inference import SentimentResult
from .token_store import TokenStore
from .usage_logger import UsageLogger

__all__ = [
    "AnalysisOutcome",
    "ReviewSentimentApp",
    "BaseSentimentClassifier",
    "LocalPipelineClassifier",
    "RemoteApiClassifier",
    "SentimentResult",
    "TokenStore",
    "UsageLogger",
]
