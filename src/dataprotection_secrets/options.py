"""Persist options for storing data-protection keys in AWS Secrets Manager.

Options can be built in code, read from environment variables or loaded from
a YAML file. All fields are optional; an unset KMS key id means the account's
default key is used in that region.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_KMS_KEY_ID = "DATAPROTECTION_SECRETS_KMS_KEY_ID"
ENV_REPLICATION_REGION = "DATAPROTECTION_SECRETS_REPLICATION_REGION"
ENV_REPLICA_KMS_KEY_ID = "DATAPROTECTION_SECRETS_REPLICA_KMS_KEY_ID"

_OPTION_FIELDS = ("kms_key_id", "replication_region", "replica_region_kms_key_id")


@dataclass
class PersistOptions:
    """Options applied when a key is written to Secrets Manager.

    Attributes:
        kms_key_id: KMS key used to encrypt the secret in the primary region.
        replication_region: Region the secret is replicated to.
        replica_region_kms_key_id: KMS key used in the replica region. Only
            meaningful when ``replication_region`` is set.
    """

    kms_key_id: str | None = None
    replication_region: str | None = None
    replica_region_kms_key_id: str | None = None

    @classmethod
    def from_env(cls) -> "PersistOptions":
        """Create PersistOptions from environment variables.

        Empty variables are treated as unset.
        """
        return cls(
            kms_key_id=os.getenv(ENV_KMS_KEY_ID) or None,
            replication_region=os.getenv(ENV_REPLICATION_REGION) or None,
            replica_region_kms_key_id=os.getenv(ENV_REPLICA_KMS_KEY_ID) or None,
        )


def _parse_persist_options(data: dict[str, Any]) -> PersistOptions:
    """Parse a persist options dictionary into a PersistOptions object.

    Args:
        data: Dictionary containing persist options.

    Returns:
        PersistOptions object with parsed values.

    Raises:
        ConfigurationError: If an unknown field is present or a value is not a string.
    """
    unknown = sorted(set(data) - set(_OPTION_FIELDS))
    if unknown:
        raise ConfigurationError(f"Unknown persist option(s): {', '.join(unknown)}")

    values: dict[str, str | None] = {}
    for field_name in _OPTION_FIELDS:
        value = data.get(field_name)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"Field '{field_name}' must be a string")
        values[field_name] = value or None

    return PersistOptions(**values)


def load_persist_options(config_path: str) -> PersistOptions:
    """Load persist options from a YAML file.

    The file holds a mapping with any of ``kms_key_id``, ``replication_region``
    and ``replica_region_kms_key_id``. Options may also be nested under a
    top-level ``persist_options`` key.

    Args:
        config_path: Path to the YAML file.

    Returns:
        PersistOptions loaded from the file. An empty file yields defaults.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed.
    """
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file at {config_path}: {e}") from e

    if data is None:
        logger.debug("Persist options file %s is empty, using defaults", config_path)
        return PersistOptions()

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a YAML dictionary")

    if "persist_options" in data:
        data = data["persist_options"] or {}
        if not isinstance(data, dict):
            raise ConfigurationError("'persist_options' must be a YAML dictionary")

    options = _parse_persist_options(data)
    logger.info("Loaded persist options from %s", config_path)
    return options
