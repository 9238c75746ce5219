"""Shared fixtures for vault-secrets-action tests."""
import base64
import io
import json

import pytest
import requests

from vault_secrets_action.secrets.domains.actions_core import ActionsCore

BASE_URL = "https://secrets-api.example.com"
CHECKOUT_URL = f"{BASE_URL}/vault/1.0/CheckoutSecret/"
LOGIN_URL = f"{BASE_URL}/vault/1.0/Login/"

SAMPLE_CA_PEM = (
    b"-----BEGIN CERTIFICATE-----\n"
    b"MIIBszCCAVmgAwIBAgIUTestCertificateForUnitTests0wCgYIKoZIzj0EAwIw\n"
    b"-----END CERTIFICATE-----\n"
)


def _make_response(status_code=200, payload=None, body=None, url=CHECKOUT_URL):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if body is None:
        body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    response._content = body
    return response


@pytest.fixture
def make_response():
    """Factory for canned vault responses."""
    return _make_response


@pytest.fixture
def sample_ca_b64():
    """Base64-encoded sample CA certificate, as passed in the ca_cert input."""
    return base64.b64encode(SAMPLE_CA_PEM).decode("ascii")


@pytest.fixture
def action_env():
    """Default runner environment with token authentication."""
    return {
        "INPUT_BASE_URL": BASE_URL,
        "INPUT_API_TOKEN": "mock-token",
        "INPUT_CA_CERT": "",
        "INPUT_TLS_VERIFY_SKIP": "false",
        "INPUT_SECRETS": "mock-box-id.mock-secret-id | secret",
    }


@pytest.fixture
def core(action_env):
    """ActionsCore bound to the fake environment and an in-memory stream."""
    return ActionsCore(environ=action_env, stream=io.StringIO())


@pytest.fixture
def sample_ca_pem():
    """Decoded sample CA certificate."""
    return SAMPLE_CA_PEM
