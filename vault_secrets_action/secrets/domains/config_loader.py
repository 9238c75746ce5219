"""Configuration loader for vault-secrets-action.

An optional YAML file, usually committed next to the workflow, can hold the
non-credential settings so they don't have to be repeated in every step::

    base_url: https://vault.example.com
    tls_verify_skip: false
    secrets:
      - ci-box.deploy-key | DEPLOY_KEY
      - ci-box.npm-token | NPM_TOKEN

Action inputs always take precedence over file values.
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .actions_core import ActionsCore
from .errors import ConfigurationError
from .models import ActionInputs

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VAULT_SECRETS_CONFIG"
ALLOWED_KEYS = ("base_url", "ca_cert", "tls_verify_skip", "secrets", "username", "vault_uid")
CREDENTIAL_KEYS = ("api_token", "password")


def _get_config_path(path: Optional[str] = None) -> Optional[str]:
    """
    Resolve the config file path.

    Priority order:
    1. Explicit path (config_file input or --config)
    2. VAULT_SECRETS_CONFIG environment variable

    Returns:
        Path string, or None when no config file is configured
    """
    if path:
        logger.debug(f"Using config from explicit path: {path}")
        return path

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        logger.debug(f"Using config from {CONFIG_ENV_VAR}: {env_path}")
        return env_path

    return None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and validate the YAML config file.

    Returns:
        Dict of config values, empty when no config file is configured

    Raises:
        ConfigurationError: If the file is missing, invalid, or holds credentials
    """
    config_path = _get_config_path(path)
    if config_path is None:
        return {}

    if not Path(config_path).is_file():
        raise ConfigurationError(f"Configuration file not found at: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file at {config_path}: {e}") from e

    if not config:
        raise ConfigurationError(f"Config file at {config_path} is empty")

    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file at {config_path} must contain a mapping")

    credentials = [key for key in CREDENTIAL_KEYS if key in config]
    if credentials:
        raise ConfigurationError(
            f"Credentials ({', '.join(credentials)}) must not be stored in {config_path}\n"
            f"Pass them as action inputs from encrypted secrets instead."
        )

    unknown = sorted(key for key in config if key not in ALLOWED_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in config at {config_path}: {', '.join(unknown)}\n"
            f"Allowed keys: {', '.join(ALLOWED_KEYS)}"
        )

    secrets = config.get("secrets")
    if isinstance(secrets, list):
        config["secrets"] = ";".join(str(entry) for entry in secrets)
    elif secrets is not None and not isinstance(secrets, str):
        raise ConfigurationError("'secrets' in config must be a string or a list of entries")

    if "tls_verify_skip" in config and not isinstance(config["tls_verify_skip"], bool):
        raise ConfigurationError("'tls_verify_skip' in config must be true or false")

    logger.info(f"Configuration loaded successfully from {config_path}")
    return config


def resolve_inputs(core: ActionsCore, config: Optional[Dict[str, Any]] = None) -> ActionInputs:
    """
    Merge action inputs over config file values.

    Args:
        core: Runner collaborator to read inputs from
        config: Values from load_config(); loaded from the config_file input if None

    Returns:
        ActionInputs for the run
    """
    if config is None:
        config = load_config(core.get_input("config_file") or None)

    def pick(name: str) -> Optional[str]:
        value = core.get_input(name) or config.get(name)
        return str(value) if value else None

    verify_skip = core.get_boolean_input("tls_verify_skip")
    if not verify_skip and not core.get_input("tls_verify_skip"):
        verify_skip = bool(config.get("tls_verify_skip", False))

    return ActionInputs(
        base_url=pick("base_url") or "",
        secrets=pick("secrets") or "",
        api_token=core.get_input("api_token") or None,
        username=pick("username"),
        password=core.get_input("password") or None,
        vault_uid=pick("vault_uid"),
        ca_cert=pick("ca_cert"),
        tls_verify_skip=verify_skip,
    )
