"""Persist data-protection keys to AWS Secrets Manager.

A key-management subsystem hands XML key elements to a repository, which
stores each one as a tagged secret and reads the whole keyring back on demand.
"""

from .errors import ConfigurationError
from .factory import (
    get_default_repository,
    get_repository,
    persist_keys_to_secrets_manager,
    reset_repository,
    resolve_persist_options,
)
from .interface import XmlRepository
from .options import PersistOptions, load_persist_options
from .repository import TAG_DATA_PROTECTION_KEY_PREFIX, SecretsManagerXmlRepository

__all__ = [
    "ConfigurationError",
    "PersistOptions",
    "SecretsManagerXmlRepository",
    "TAG_DATA_PROTECTION_KEY_PREFIX",
    "XmlRepository",
    "get_default_repository",
    "get_repository",
    "load_persist_options",
    "persist_keys_to_secrets_manager",
    "reset_repository",
    "resolve_persist_options",
]
