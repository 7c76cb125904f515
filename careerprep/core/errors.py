"""Exception hierarchy for prediction requests.

Missing optional records are not errors; they lower sub-scores and the
confidence bucket instead.
"""


class PredictionError(Exception):
    """Base class: the prediction was not generated and nothing was stored."""


class InvalidRequestError(PredictionError, ValueError):
    """Missing or malformed identifiers in the request."""


class AuthenticationError(PredictionError):
    """No authenticated user could be resolved for the request."""


class NotFoundError(PredictionError, LookupError):
    """The interview or job does not exist for this user."""


class NarrativeError(PredictionError):
    """The LLM was unreachable or returned an unusable reply."""


class PersistenceError(PredictionError):
    """The computed prediction could not be stored."""
