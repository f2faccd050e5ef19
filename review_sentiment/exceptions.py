"""
Exceptions raised by the review sentiment demo.

Every error carries the message shown to the user.
"""


class AppError(Exception):
    """Base class for user-facing application errors."""
    pass


class DatasetError(AppError):
    """Exception raised when the review dataset can't be fetched or parsed."""
    pass


class ReviewsNotLoadedError(AppError):
    """Exception raised when a review is requested before any are loaded."""
    pass


class ModelNotReadyError(AppError):
    """Exception raised when the credential or the model isn't available."""
    pass


class ClassificationError(AppError):
    """Exception raised when a classification call fails or returns junk."""
    pass
