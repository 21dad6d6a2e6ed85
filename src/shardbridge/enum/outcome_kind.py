from enum import Enum


class OutcomeKind(Enum):
    """
    Classification of a single document inside a bulk response.
    """

    Success = "success"
    Retryable = "retryable"
    Permanent = "permanent"
