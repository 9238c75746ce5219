"""Vault API client for secret checkout."""
import logging
from typing import Optional

import requests

from .authenticators import Authenticator
from .errors import VaultCheckoutFailed
from .tls_material import ChannelConfig

logger = logging.getLogger(__name__)

CHECKOUT_SECRET_API = "/vault/1.0/CheckoutSecret/"


class VaultClient:
    """Checks out secrets from one vault over a configured channel."""

    def __init__(
        self,
        base_url: str,
        channel: ChannelConfig,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.channel = channel
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Lazy-initialize session."""
        if self._session is None:
            self._session = self.channel.create_session()
        return self._session

    def checkout(self, box_id: str, secret_id: str, authenticator: Authenticator) -> str:
        """
        Check out the current value of a secret.

        Args:
            box_id: Box holding the secret
            secret_id: Secret to check out
            authenticator: Source of the request's auth headers

        Returns:
            The secret value

        Raises:
            VaultCheckoutFailed: On network errors, non-2xx statuses, or a
                response without a non-empty `secret_data` field
            AuthenticationFailed: Propagated unchanged from the authenticator
        """
        headers = dict(authenticator.get_auth_headers())
        headers["Content-Type"] = "application/json"
        url = f"{self.base_url}{CHECKOUT_SECRET_API}"

        try:
            response = self.session.post(
                url,
                json={"box_id": box_id, "secret_id": secret_id},
                headers=headers,
                timeout=self.channel.timeout,
                verify=self.channel.verify,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching secret for boxID: {box_id}, secretID: {secret_id} - {e}")
            raise VaultCheckoutFailed(box_id, secret_id, str(e)) from e

        if not response.content:
            logger.error(f"Empty response received from API for boxID: {box_id}, secretID: {secret_id}")
            raise VaultCheckoutFailed(box_id, secret_id, "Empty response received from API")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response received from API for boxID: {box_id}, secretID: {secret_id}")
            raise VaultCheckoutFailed(box_id, secret_id, f"Malformed response body: {e}") from e

        secret_value = data.get("secret_data") if isinstance(data, dict) else None
        if isinstance(secret_value, (int, float)) and not isinstance(secret_value, bool):
            secret_value = str(secret_value) if secret_value else None
        if not secret_value or not isinstance(secret_value, str):
            # Log keys only, never the body
            keys = sorted(data) if isinstance(data, dict) else type(data).__name__
            logger.error(f"Secret data not found in response for boxID: {box_id}, secretID: {secret_id} (keys: {keys})")
            raise VaultCheckoutFailed(box_id, secret_id, "Secret data not found in response")

        return secret_value
