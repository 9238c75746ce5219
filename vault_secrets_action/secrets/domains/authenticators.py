"""Authentication strategies for the vault API."""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from .errors import AuthenticationFailed, ConfigurationError
from .models import ActionInputs
from .tls_material import ChannelConfig

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-Vault-Auth"
LOGIN_API = "/vault/1.0/Login/"


class Authenticator(ABC):
    """Produces the headers that authenticate a vault request."""

    @abstractmethod
    def get_auth_headers(self) -> Dict[str, str]:
        """Return auth headers; called once per checkout, sequentially."""


class TokenAuthenticator(Authenticator):
    """Static API token taken verbatim from the inputs."""

    def __init__(self, token: str):
        self._token = token

    def get_auth_headers(self) -> Dict[str, str]:
        return {AUTH_HEADER: self._token}


class UserPassAuthenticator(Authenticator):
    """
    Username/password login that caches the session token for the run.

    The first call to get_auth_headers() performs the login over the run's
    channel; later calls reuse the token.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        vault_uid: str,
        session: requests.Session,
        channel: ChannelConfig,
    ):
        self.base_url = base_url
        self.username = username
        self._password = password
        self.vault_uid = vault_uid
        self.session = session
        self.channel = channel
        self._token: Optional[str] = None

    def get_auth_headers(self) -> Dict[str, str]:
        if self._token is None:
            self._token = self._login()
        return {AUTH_HEADER: self._token}

    def _login(self) -> str:
        url = f"{self.base_url}{LOGIN_API}"
        logger.info(f"Logging in to vault as {self.username} (vault_uid: {self.vault_uid})")

        try:
            response = self.session.post(
                url,
                json={
                    "username": self.username,
                    "password": self._password,
                    "vault_uid": self.vault_uid,
                },
                headers={"Content-Type": "application/json"},
                timeout=self.channel.timeout,
                verify=self.channel.verify,
            )
            response.raise_for_status()
            data = response.json() if response.content else None
        except requests.exceptions.RequestException as e:
            logger.error(f"Vault login failed for {self.username}: {e}")
            raise AuthenticationFailed(f"Vault login failed: {e}") from e
        except ValueError as e:
            logger.error(f"Vault login returned a non-JSON response for {self.username}")
            raise AuthenticationFailed(f"Vault login returned a malformed response: {e}") from e

        token = data.get("token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            logger.error(f"Vault login response for {self.username} did not contain a token")
            raise AuthenticationFailed("Vault login response did not contain a token")

        logger.info("Vault login succeeded")
        return token


def create_authenticator(
    inputs: ActionInputs,
    session: requests.Session,
    channel: ChannelConfig,
) -> Authenticator:
    """
    Select the authentication strategy from the run inputs.

    Priority order:
    1. api_token (token strategy)
    2. username + password + vault_uid (login strategy)

    Raises:
        ConfigurationError: If neither strategy is fully configured
    """
    if inputs.api_token:
        logger.debug("Using API token authentication")
        return TokenAuthenticator(inputs.api_token)

    if inputs.username and inputs.password and inputs.vault_uid:
        logger.debug("Using username/password authentication")
        return UserPassAuthenticator(
            base_url=inputs.base_url,
            username=inputs.username,
            password=inputs.password,
            vault_uid=inputs.vault_uid,
            session=session,
            channel=channel,
        )

    if inputs.username or inputs.password or inputs.vault_uid:
        missing = [
            name for name, value in (
                ("username", inputs.username),
                ("password", inputs.password),
                ("vault_uid", inputs.vault_uid),
            ) if not value
        ]
        raise ConfigurationError(
            f"Incomplete username/password authentication, missing: {', '.join(missing)}"
        )

    raise ConfigurationError(
        "No authentication configured. Provide either api_token, "
        "or username, password and vault_uid."
    )
