"""CLI entrypoint for vault-secrets-action."""
import os
import sys
import argparse
import logging

from .validators import validate_manifest

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def cmd_version(args):
    """Show version information."""
    print(f"vault-secrets-action {VERSION}")


def cmd_check(args):
    """Parse a secrets manifest without contacting the vault."""
    secret_requests = validate_manifest(args.manifest)

    for request in secret_requests:
        print(f"{request.box_id}.{request.secret_id} -> {request.destination} ({request.secret_type.value})")
    print(f"\n{len(secret_requests)} entr{'y' if len(secret_requests) == 1 else 'ies'} OK")


def cmd_export(args):
    """Check out the manifest's secrets and export them to the job."""
    from vault_secrets_action.secrets.domains.actions_core import ActionsCore, configure_logging
    from vault_secrets_action.secrets.domains.config_loader import load_config
    from vault_secrets_action.secrets.domains.errors import VaultActionError
    from vault_secrets_action.secrets.workflows.export_secrets import export_secrets

    configure_logging()
    core = ActionsCore()

    try:
        config = load_config(args.config) if args.config else None
    except VaultActionError as e:
        core.set_failed(str(e))
        sys.exit(1)

    try:
        export_secrets(core, config)
    except Exception:
        # Already reported through set_failed
        logger.debug("Export failed", exc_info=True)
        sys.exit(core.exit_code or 1)

    sys.exit(0)


def main():
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (configuration, authentication, checkout, etc.)
        2 - Usage errors (invalid arguments, malformed manifest in `check`)
    """
    parser = argparse.ArgumentParser(
        prog="vault-secrets-action",
        description="Check out secrets from the vault and expose them to a CI job",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (configuration, authentication, checkout, etc.)
  2 - Usage error (invalid arguments, malformed manifest, etc.)

Inputs (read from INPUT_<NAME> environment variables, as set by the runner):
  base_url, secrets, api_token, username, password, vault_uid,
  ca_cert, tls_verify_skip, config_file

Environment variables:
  VAULT_SECRETS_CONFIG - YAML config file with default input values
  RUNNER_DEBUG         - Set to 1 for debug logging
        """
    )
    parser.add_argument(
        "--config",
        help="YAML config file with default input values (overrides config_file input)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    _version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of vault-secrets-action"
    )

    # export command
    _export_parser = subparsers.add_parser(
        "export",
        help="Export secrets to the job",
        description="""
Check out every secret in the manifest and expose it to the job.

Behavior:
  1. Parses the manifest (fails before any network call if malformed)
  2. Checks out each secret in declared order
  3. Masks each value, then exports it as env var and step output

The first failure stops the run and marks the step failed.
        """
    )

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Validate a secrets manifest",
        description="""
Parse a secrets manifest offline and list the requests it produces.

Entry format: BoxName.SecretName | DESTINATION [| TYPE]
Entries are separated by ';'.
        """
    )
    check_parser.add_argument(
        "manifest",
        help="Manifest text, e.g. 'ci-box.deploy-key | DEPLOY_KEY; ci-box.npm-token | NPM_TOKEN'"
    )

    args = parser.parse_args()

    # Inside a runner the bare command means export
    if not args.command and os.getenv("GITHUB_ACTIONS") == "true":
        args.command = "export"

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "check":
            cmd_check(args)
        elif args.command == "export":
            cmd_export(args)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
