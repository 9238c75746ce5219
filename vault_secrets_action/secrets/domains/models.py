"""Domain models for secret resolution."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SecretType(str, Enum):
    """Kind of secret stored in a vault box."""
    STANDARD = "standard"
    P12 = "p12"


@dataclass(frozen=True)
class SecretRequest:
    """One manifest entry: which secret to check out and where to put it."""
    box_id: str
    secret_id: str
    destination: str
    secret_type: SecretType = SecretType.STANDARD


@dataclass(repr=False)
class ActionInputs:
    """Inputs for a single export run, after config file defaults are applied."""
    base_url: str = ""
    secrets: str = ""
    api_token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    vault_uid: Optional[str] = None
    ca_cert: Optional[str] = None
    tls_verify_skip: bool = False

    def __repr__(self) -> str:
        # Credentials stay out of tracebacks and debug logs
        return (
            f"ActionInputs(base_url={self.base_url!r}, "
            f"api_token={'***' if self.api_token else None}, "
            f"username={self.username!r}, "
            f"password={'***' if self.password else None}, "
            f"vault_uid={self.vault_uid!r}, "
            f"ca_cert={'<set>' if self.ca_cert else None}, "
            f"tls_verify_skip={self.tls_verify_skip})"
        )
