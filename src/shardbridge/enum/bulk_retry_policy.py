from enum import Enum


class BulkRetryPolicy(Enum):
    """
    Defines what the bulk writer does with documents the store rejected as retryable.
    """

    Simple = "simple"  # Re-send only the rejected documents, up to the retry limit.
    Nothing = "none"  # Never retry; retryable rejections become permanent failures.
