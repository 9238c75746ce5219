"""Temporary TLS trust material for the vault HTTP channel.

requests only accepts a CA bundle as a file path, so a base64 CA certificate
from the workflow inputs is written to a temporary file that lives for one run.
"""
import base64
import binascii
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional, Union

import requests
import urllib3

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds, applied to every vault request


@dataclass(frozen=True)
class ChannelConfig:
    """TLS and timeout settings shared by every request of a run."""
    ca_cert_path: Optional[str] = None
    verify_skip: bool = False
    timeout: float = REQUEST_TIMEOUT

    @property
    def verify(self) -> Union[bool, str]:
        """Value for the requests `verify` argument."""
        if self.verify_skip:
            return False
        if self.ca_cert_path:
            return self.ca_cert_path
        return True

    def create_session(self) -> requests.Session:
        """Build a session bound to this channel's TLS settings."""
        session = requests.Session()
        session.verify = self.verify
        if self.verify_skip:
            # Skip the per-request InsecureRequestWarning noise
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        return session


class PreparedChannel:
    """Channel config plus ownership of the temporary CA file, if any."""

    def __init__(self, config: ChannelConfig):
        self.config = config
        self._cleaned = False

    def cleanup(self) -> None:
        """
        Delete the temporary CA file.

        Safe to call more than once. A failed delete is logged, never raised,
        so it cannot hide the run's own result.
        """
        if self._cleaned:
            return
        self._cleaned = True

        path = self.config.ca_cert_path
        if not path or not os.path.exists(path):
            return
        try:
            os.unlink(path)
            logger.info("Temporary CA certificate file cleaned up")
        except OSError as e:
            logger.error(f"Failed to clean up temporary certificate file: {e}")

    def __enter__(self) -> "PreparedChannel":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup()


class TLSMaterialManager:
    """Materializes CA certificates and verification settings for one run."""

    def __init__(self, temp_dir: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        self.temp_dir = temp_dir
        self.timeout = timeout

    def prepare(self, ca_cert_b64: Optional[str], verify_skip: bool) -> PreparedChannel:
        """
        Build the channel configuration for the vault.

        Args:
            ca_cert_b64: Base64-encoded CA certificate (PEM), or None
            verify_skip: Disable certificate validation

        Returns:
            PreparedChannel; its cleanup() must run on every exit path

        Raises:
            ConfigurationError: If the CA certificate is not valid base64
        """
        ca_cert_path = None

        if ca_cert_b64:
            logger.info("Using provided CA certificate for self-signed certificate support")
            ca_cert_path = self._write_ca_cert(ca_cert_b64)
            logger.info(f"CA certificate written to temporary file: {ca_cert_path}")
        else:
            logger.info("No CA certificate provided, using default certificate validation")

        if verify_skip:
            logger.warning("Skipping TLS verification, we recommend not to use this in production")

        return PreparedChannel(
            ChannelConfig(ca_cert_path=ca_cert_path, verify_skip=verify_skip, timeout=self.timeout)
        )

    def _write_ca_cert(self, ca_cert_b64: str) -> str:
        """Decode the certificate and write it to a uniquely named temp file."""
        try:
            cert_bytes = base64.b64decode(ca_cert_b64.strip())
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"ca_cert is not valid base64: {e}") from e

        if not cert_bytes:
            raise ConfigurationError("ca_cert decoded to an empty certificate")

        with tempfile.NamedTemporaryFile(
            mode="wb", prefix="ca-cert-", suffix=".pem", dir=self.temp_dir, delete=False
        ) as cert_file:
            path = cert_file.name
            try:
                cert_file.write(cert_bytes)
            except OSError:
                cert_file.close()
                os.unlink(path)
                raise
        return path
