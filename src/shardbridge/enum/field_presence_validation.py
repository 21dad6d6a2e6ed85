from enum import Enum


class FieldPresenceValidation(Enum):
    """
    Behavior when a requested field is missing from a read document.
    """

    Ignore = "ignore"
    Warn = "warn"
    Strict = "strict"
