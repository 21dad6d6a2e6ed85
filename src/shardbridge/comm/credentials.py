"""
Credential Resolution Module.

Resolves the effective authentication method from the configuration plus any
identity supplied by the host framework, and turns it into the `http_auth`
value understood by the store client.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..cfg import Settings
from ..enum import AuthenticationMethod
from ..errors import ConfigurationError
from ..helpers import _load_class
from ..logging_config import get_logger

# Set the hierarchical logger
logger = get_logger(__name__)


class CredentialProvider(ABC):
    """
    Supplies the authentication attached to every request sent to the store.

    Custom providers configured through
    `opensearch.security.user.provider.class` are instantiated with the
    resolved settings as their only argument.
    """

    method: AuthenticationMethod = AuthenticationMethod.Custom

    @abstractmethod
    def http_auth(self) -> Optional[Any]:
        """
        Returns the `http_auth` value passed to the store client: `None`, a
        `(user, password)` tuple, or any auth object accepted by the transport.
        """
        pass


class NoCredentials(CredentialProvider):
    """Anonymous access."""

    method = AuthenticationMethod.Nothing

    def http_auth(self) -> Optional[Any]:
        return None


class BasicCredentials(CredentialProvider):
    """HTTP basic authentication."""

    method = AuthenticationMethod.Basic

    def __init__(self, user: str, password: Optional[str]):
        self._user = user
        self._password = password

    @property
    def user(self) -> str:
        return self._user

    def http_auth(self) -> Optional[Any]:
        return (self._user, self._password or "")

    def __repr__(self) -> str:
        # never leak the password
        return f"BasicCredentials(user={self._user!r})"


def resolve_credentials(
    settings: Settings, ambient: Optional[CredentialProvider] = None
) -> CredentialProvider:
    """
    Resolves the credential provider for `settings`.

    Resolution order:

    1. An explicit `opensearch.security.authentication` (`none`, `basic`,
       `custom`), or `basic` when only a user name is configured.
    2. Otherwise the `ambient` provider handed over by the host, if any.
    3. Otherwise anonymous access.

    A `custom` method uses the configured provider class, falling back to the
    ambient provider.

    Raises:
        ConfigurationError: If the method is unknown, `basic` is selected without
            a user, or `custom` is selected without any provider.
    """
    method = settings.security_authentication_method

    if method is None:
        if ambient is not None:
            logger.debug(f"Using host-provided credentials '{type(ambient).__name__}'")
            return ambient
        return NoCredentials()

    if method == AuthenticationMethod.Nothing:
        return NoCredentials()

    if method == AuthenticationMethod.Basic:
        user = settings.http_auth_user
        if user is None:
            raise ConfigurationError(
                "Basic authentication selected but no user is configured"
            )
        return BasicCredentials(user, settings.http_auth_pass)

    provider_class = settings.security_user_provider_class
    if provider_class is not None:
        cls = _load_class(provider_class, CredentialProvider)
        return cls(settings)  # type: ignore[call-arg]
    if ambient is not None:
        return ambient
    raise ConfigurationError(
        "Custom authentication selected but neither a provider class nor a host identity is available"
    )
