"""Factory for creating data-protection key repositories.

This module wires a boto3 Secrets Manager client, a secret name prefix and
persist options into a repository, either from explicit arguments or from
environment configuration.
"""

import logging
import os
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import NoRegionError

from .errors import ConfigurationError
from .options import PersistOptions, load_persist_options
from .repository import SecretsManagerXmlRepository

logger = logging.getLogger(__name__)

ENV_PREFIX = "DATAPROTECTION_SECRETS_PREFIX"
ENV_CONFIG = "DATAPROTECTION_SECRETS_CONFIG"


def create_secrets_manager_client(region: str | None = None) -> Any:
    """Create a boto3 Secrets Manager client.

    Credentials come from the standard boto3 resolution chain (environment
    variables, shared config, IAM role, IRSA, etc.).

    Args:
        region: AWS region (default: from AWS_REGION or AWS_DEFAULT_REGION env var)

    Raises:
        ConfigurationError: If no region can be determined
    """
    region = region or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
    try:
        return boto3.client("secretsmanager", region_name=region)
    except NoRegionError as e:
        raise ConfigurationError(
            "AWS region is required. Set AWS_REGION or AWS_DEFAULT_REGION environment variable."
        ) from e


def persist_keys_to_secrets_manager(
    secret_name_prefix: str,
    setup_action: Callable[[PersistOptions], None] | None = None,
    client: Any | None = None,
    region: str | None = None,
    logger: logging.Logger | None = None,
) -> SecretsManagerXmlRepository:
    """Build a repository that persists keys under ``secret_name_prefix``.

    Args:
        secret_name_prefix: Namespace prefix for the keyring
        setup_action: Optional callback that customizes a fresh PersistOptions
        client: Optional boto3 Secrets Manager client (default: creates new client)
        region: AWS region used when a client has to be created
        logger: Logger handed to the repository

    Returns:
        A configured SecretsManagerXmlRepository

    Raises:
        ConfigurationError: If the prefix or region is missing
    """
    options = PersistOptions()
    if setup_action is not None:
        setup_action(options)

    if client is None:
        client = create_secrets_manager_client(region)

    return SecretsManagerXmlRepository(client, secret_name_prefix, options, logger=logger)


def resolve_persist_options() -> PersistOptions:
    """Resolve persist options from the environment.

    Reads the YAML file named by DATAPROTECTION_SECRETS_CONFIG when it is set,
    otherwise the DATAPROTECTION_SECRETS_* variables.

    Raises:
        ConfigurationError: If the options file is invalid
    """
    config_path = os.getenv(ENV_CONFIG)
    if config_path:
        return load_persist_options(config_path)
    return PersistOptions.from_env()


def get_repository(
    prefix: str | None = None,
    region: str | None = None,
) -> SecretsManagerXmlRepository:
    """Get a repository based on environment configuration.

    Args:
        prefix: Secret name prefix (default: from DATAPROTECTION_SECRETS_PREFIX)
        region: AWS region (default: from AWS_REGION or AWS_DEFAULT_REGION)

    Environment Variables:
        DATAPROTECTION_SECRETS_PREFIX: Secret name prefix (required unless passed)
        DATAPROTECTION_SECRETS_CONFIG: Optional YAML file with persist options;
            when unset, options are read from DATAPROTECTION_SECRETS_* variables
        AWS_REGION / AWS_DEFAULT_REGION: AWS region

    Raises:
        ConfigurationError: If the prefix or region is missing, or the
            options file is invalid
    """
    prefix = prefix or os.getenv(ENV_PREFIX)
    if not prefix:
        raise ConfigurationError(f"A secret name prefix is required; pass one or set {ENV_PREFIX}")

    options = resolve_persist_options()
    client = create_secrets_manager_client(region)
    return SecretsManagerXmlRepository(client, prefix, options)


# Singleton instance (lazy-loaded)
_repository: SecretsManagerXmlRepository | None = None


def get_default_repository() -> SecretsManagerXmlRepository:
    """Get the default repository singleton, creating it on first access."""
    global _repository
    if _repository is None:
        _repository = get_repository()
    return _repository


def reset_repository() -> None:
    """Close and forget the repository singleton.

    This is primarily useful for testing to force recreation of the repository.
    """
    global _repository
    if _repository is not None:
        _repository.close()
    _repository = None
