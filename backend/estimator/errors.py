# backend/estimator/errors.py


class EstimatorError(Exception):
    """Base error; ``status_code`` is the HTTP status the handler answers with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(EstimatorError):
    status_code = 400


class ConfigurationError(EstimatorError):
    status_code = 500


class InferenceTransportError(EstimatorError):
    """The inference API could not be reached or answered with a non-success status.

    Never turned into a response: the estimator switches to the Smart Estimator.
    """
