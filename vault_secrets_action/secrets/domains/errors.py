"""Error types raised while resolving secrets from the vault.

Every error is terminal for the run: nothing is retried. Components raise,
the export workflow reports the message through the CI platform and re-raises.
"""
from typing import Any, Dict, Optional


class VaultActionError(Exception):
    """Base class for all vault-secrets-action errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(VaultActionError):
    """Missing or invalid inputs or config file."""
    pass


class InvalidManifestEntry(VaultActionError):
    """A secrets manifest entry does not match `BoxName.SecretName | DESTINATION`."""

    def __init__(self, entry: str, reason: str = ""):
        message = (
            f"Invalid secret entry format: {entry}. "
            f"Expected format: BoxName.SecretName | DESTINATION"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, {"entry": entry})
        self.entry = entry


class UnsupportedSecretType(VaultActionError):
    """Raised for secret types that cannot be checked out (p12)."""

    def __init__(self, box_id: str, secret_id: str, secret_type: str):
        super().__init__(
            f"Detected {secret_type} secret type for: {secret_id} in box: {box_id}, "
            f"{secret_type} secrets are not supported yet",
            {"box_id": box_id, "secret_id": secret_id, "secret_type": secret_type},
        )


class AuthenticationFailed(VaultActionError):
    """Login or token acquisition against the vault failed."""
    pass


class VaultCheckoutFailed(VaultActionError):
    """Checkout of a single secret failed.

    Network errors, non-2xx statuses and malformed or empty bodies are all
    normalized into this one error, keeping the box and secret IDs.
    """

    def __init__(self, box_id: str, secret_id: str, cause: str):
        super().__init__(
            f"Failed to fetch secret (box_id: {box_id}, secret_id: {secret_id}): {cause}",
            {"box_id": box_id, "secret_id": secret_id},
        )
        self.box_id = box_id
        self.secret_id = secret_id
        self.cause = cause
