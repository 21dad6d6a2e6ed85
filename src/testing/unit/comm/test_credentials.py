import pytest

from shardbridge.cfg import PropertiesSettings
from shardbridge.comm import BasicCredentials, NoCredentials, resolve_credentials
from shardbridge.enum import AuthenticationMethod
from shardbridge.errors import ConfigurationError
from testing.unit.fakes import TokenCredentials


@pytest.fixture
def ambient():
    return BasicCredentials("host-user", "host-secret")


def test_anonymous_by_default():
    provider = resolve_credentials(PropertiesSettings())
    assert isinstance(provider, NoCredentials)
    assert provider.http_auth() is None


def test_ambient_identity_used_when_nothing_configured(ambient):
    assert resolve_credentials(PropertiesSettings(), ambient) is ambient


def test_configured_user_implies_basic(ambient):
    settings = PropertiesSettings(
        {"opensearch.net.http.auth.user": "svc", "opensearch.net.http.auth.pass": "pw"}
    )
    provider = resolve_credentials(settings, ambient)

    assert provider.method == AuthenticationMethod.Basic
    assert provider.http_auth() == ("svc", "pw")
    assert "pw" not in repr(provider)


def test_basic_without_password():
    settings = PropertiesSettings({"opensearch.net.http.auth.user": "svc"})
    assert resolve_credentials(settings).http_auth() == ("svc", "")


def test_basic_requires_a_user():
    settings = PropertiesSettings({"opensearch.security.authentication": "basic"})
    with pytest.raises(ConfigurationError, match="no user"):
        resolve_credentials(settings)


def test_explicit_none_ignores_ambient_identity(ambient):
    settings = PropertiesSettings(
        {"opensearch.security.authentication": "none", "opensearch.net.http.auth.user": "svc"}
    )
    assert isinstance(resolve_credentials(settings, ambient), NoCredentials)


def test_custom_provider_class():
    settings = PropertiesSettings(
        {
            "opensearch.security.authentication": "custom",
            "opensearch.security.user.provider.class": "testing.unit.fakes.TokenCredentials",
            "test.token": "abc",
        }
    )
    provider = resolve_credentials(settings)

    assert isinstance(provider, TokenCredentials)
    assert provider.http_auth() == ("token", "abc")


def test_custom_falls_back_to_ambient_identity(ambient):
    settings = PropertiesSettings({"opensearch.security.authentication": "custom"})
    assert resolve_credentials(settings, ambient) is ambient


def test_custom_without_any_provider():
    settings = PropertiesSettings({"opensearch.security.authentication": "custom"})
    with pytest.raises(ConfigurationError, match="neither a provider class"):
        resolve_credentials(settings)


def test_provider_class_must_be_a_credential_provider():
    settings = PropertiesSettings(
        {
            "opensearch.security.authentication": "custom",
            "opensearch.security.user.provider.class": "testing.unit.fakes.NotADecoder",
        }
    )
    with pytest.raises(ConfigurationError, match="CredentialProvider"):
        resolve_credentials(settings)


def test_unknown_method():
    settings = PropertiesSettings({"opensearch.security.authentication": "kerberos"})
    with pytest.raises(ConfigurationError, match="kerberos"):
        resolve_credentials(settings)
