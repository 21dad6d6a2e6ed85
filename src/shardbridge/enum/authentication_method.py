from enum import Enum


class AuthenticationMethod(Enum):
    """
    Effective authentication method used when talking to the store.
    """

    Nothing = "none"  # Anonymous requests.
    Basic = "basic"  # HTTP basic auth from the configured user/password.
    Custom = "custom"  # A pluggable (or host-provided) credential provider.
