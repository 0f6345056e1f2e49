"""
Shared fixtures for appstore-provider tests.
"""

import pytest
from unittest.mock import Mock, patch
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from appstore_provider.client import AppStoreConnectAPI, TokenSource


@pytest.fixture(scope="session")
def signing_key():
    """A fresh P-256 key, the curve App Store Connect keys use."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def private_key_pem(signing_key):
    """PEM text of the signing key, as downloaded from App Store Connect."""
    return signing_key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    ).decode("utf-8")


@pytest.fixture
def token_source(private_key_pem):
    return TokenSource(
        key_id="2X9R4HXF34",
        issuer_id="57246542-96fe-1a63-e053-0824d011072a",
        private_key=private_key_pem,
    )


@pytest.fixture
def api_client(token_source):
    """A real client whose token source never signs anything."""
    with patch.object(token_source, "token", return_value="test_token"):
        yield AppStoreConnectAPI(token_source)


@pytest.fixture
def mock_client():
    """A stand-in for the API client used by resources and data sources."""
    return Mock(spec=AppStoreConnectAPI)


@pytest.fixture
def make_response():
    """Build fake requests.Response objects."""

    def _make(status_code=200, payload=None, text=""):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = payload if payload is not None else {}
        response.text = text
        return response

    return _make
