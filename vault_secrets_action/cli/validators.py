"""Input validation for CLI arguments."""
import sys
from typing import List

from vault_secrets_action.secrets.domains.errors import InvalidManifestEntry
from vault_secrets_action.secrets.domains.manifest import parse_manifest
from vault_secrets_action.secrets.domains.models import SecretRequest


def validate_manifest(manifest: str) -> List[SecretRequest]:
    """
    Parse a manifest for the `check` command.

    Args:
        manifest: Raw manifest text

    Returns:
        Parsed requests in declared order

    Raises:
        SystemExit with code 2 if the manifest is empty or malformed
    """
    if not manifest or not manifest.strip():
        print("Error: Secrets manifest cannot be empty", file=sys.stderr)
        print("\nEntries must look like: BoxName.SecretName | DESTINATION", file=sys.stderr)
        sys.exit(2)

    try:
        secret_requests = list(parse_manifest(manifest))
    except InvalidManifestEntry as e:
        print(f"Error: {e}", file=sys.stderr)
        print("\nExamples of valid entries:", file=sys.stderr)
        print("  ✓ ci-box.deploy-key | DEPLOY_KEY", file=sys.stderr)
        print("  ✓ ci-box.keystore | KEYSTORE | p12", file=sys.stderr)
        print("\nExamples of invalid entries:", file=sys.stderr)
        print("  ✗ ci-box | DEPLOY_KEY (missing secret name)", file=sys.stderr)
        print("  ✗ ci.box.deploy-key | DEPLOY_KEY (too many dots)", file=sys.stderr)
        print("  ✗ ci-box.deploy-key (missing destination)", file=sys.stderr)
        print("  ✗ ci-box.deploy-key | DEPLOY-KEY (destination must be an identifier)", file=sys.stderr)
        sys.exit(2)

    if not secret_requests:
        print("Error: Secrets manifest contains no entries", file=sys.stderr)
        sys.exit(2)

    return secret_requests
