"""Workflow that checks out the manifest's secrets and exports them to the job."""
import logging
from typing import Any, Dict, List, Optional

from ..domains.actions_core import ActionsCore
from ..domains.authenticators import create_authenticator
from ..domains.config_loader import resolve_inputs
from ..domains.errors import ConfigurationError, UnsupportedSecretType
from ..domains.manifest import parse_manifest
from ..domains.models import ActionInputs, SecretRequest, SecretType
from ..domains.tls_material import TLSMaterialManager
from ..domains.vault_client import VaultClient

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> str:
    """Strip exactly one trailing slash from the vault URL."""
    if base_url.endswith("/"):
        base_url = base_url[:-1]
        logger.info(f"Base URL adjusted to remove trailing slash: {base_url}")
    return base_url


def _validate_inputs(inputs: ActionInputs) -> None:
    if not inputs.base_url:
        logger.error("Base URL is required")
        raise ConfigurationError("Base URL is required")
    if not inputs.secrets.strip():
        logger.error("Secrets input is required")
        raise ConfigurationError("Secrets input is required")


def _reject_unsupported(secret_requests: List[SecretRequest]) -> None:
    for request in secret_requests:
        if request.secret_type == SecretType.P12:
            logger.info(f"Detected p12 secret type for: {request.secret_id}")
            raise UnsupportedSecretType(request.box_id, request.secret_id, request.secret_type.value)


def export_secrets(
    core: ActionsCore,
    config: Optional[Dict[str, Any]] = None,
    tls_manager: Optional[TLSMaterialManager] = None,
) -> None:
    """
    Check out every secret in the manifest and expose it to the job.

    Args:
        core: Runner collaborator for inputs, masking, outputs and failure
        config: Config file values (loaded from the config_file input if None)
        tls_manager: TLS material manager (a default one if None)

    Behavior:
        - Manifest is parsed and p12 entries rejected before any network call
        - Secrets are checked out one at a time, in declared order
        - Each value is masked before it is exported as env var and output
        - The first error stops the run, is reported via set_failed and re-raised
        - The temporary CA file is removed on every exit path
    """
    prepared = None
    try:
        inputs = resolve_inputs(core, config)
        _validate_inputs(inputs)
        inputs.base_url = normalize_base_url(inputs.base_url)

        logger.debug(f"Resolved inputs: {inputs!r}")
        secret_requests = list(parse_manifest(inputs.secrets))
        _reject_unsupported(secret_requests)

        prepared = (tls_manager or TLSMaterialManager()).prepare(inputs.ca_cert, inputs.tls_verify_skip)
        with prepared.config.create_session() as session:
            authenticator = create_authenticator(inputs, session, prepared.config)
            client = VaultClient(inputs.base_url, prepared.config, session=session)

            for request in secret_requests:
                logger.debug(
                    f"Processing secret: {request.secret_id} from box: {request.box_id} "
                    f"to destination: {request.destination}"
                )
                logger.info(f"Fetching secret: {request.secret_id} from box: {request.box_id}")
                secret_value = client.checkout(request.box_id, request.secret_id, authenticator)
                core.set_secret(secret_value)
                core.export_variable(request.destination, secret_value)
                core.set_output(request.destination, secret_value)

        logger.info(f"Exported {len(secret_requests)} secret(s)")
    except Exception as e:
        core.set_failed(str(e))
        raise
    finally:
        if prepared is not None:
            prepared.cleanup()
