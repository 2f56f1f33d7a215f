"""AWS Secrets Manager-backed repository for data-protection keys.

Each key is stored as its own secret named ``<prefix><name>`` and tagged with
the prefix, so that every instance sharing a prefix sees the same keyring.
The secret store is the only source of truth; nothing is cached here.
"""

import logging
import uuid
from typing import Any
from xml.etree import ElementTree
from xml.etree.ElementTree import Element

from .errors import ConfigurationError
from .interface import XmlRepository
from .logging_utils import log_error, log_info, log_warning
from .metrics import get_metrics
from .options import PersistOptions

TAG_DATA_PROTECTION_KEY_PREFIX = "DataProtectionKeyPrefix"


def normalize_prefix(secret_name_prefix: str) -> str:
    """Strip surrounding slashes and append exactly one.

    ``"foo"``, ``"/foo/"`` and ``"foo/"`` all become ``"foo/"``.
    """
    return secret_name_prefix.strip("/") + "/"


class SecretsManagerXmlRepository(XmlRepository):
    """Stores data-protection keys as individual AWS Secrets Manager secrets.

    Listing is best-effort per entry: a secret that cannot be fetched or
    parsed is logged and skipped so one bad key never blocks the rest of the
    keyring. Failures of the listing call itself and of secret creation are
    logged and re-raised unchanged.

    The client is any boto3 ``secretsmanager`` client. Operations block until
    Secrets Manager has answered; retries and timeouts are left to botocore.
    """

    def __init__(
        self,
        secrets_manager_client: Any,
        secret_name_prefix: str,
        options: PersistOptions | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the repository.

        Args:
            secrets_manager_client: boto3 Secrets Manager client
            secret_name_prefix: Namespace prefix for secret names and tag values
            options: Persist options (default: PersistOptions())
            logger: Logger for diagnostic events (default: module logger)

        Raises:
            ConfigurationError: If the client or the prefix is missing
        """
        if secrets_manager_client is None:
            raise ConfigurationError("secrets_manager_client is required")
        if not secret_name_prefix:
            raise ConfigurationError("secret_name_prefix is required")

        self._client = secrets_manager_client
        self._prefix = normalize_prefix(secret_name_prefix)
        self._options = options or PersistOptions()
        self._logger = logger or logging.getLogger(__name__)
        self._closed = False

        log_info(
            self._logger,
            "Using Secrets Manager to persist data-protection keys",
            prefix=self._prefix,
        )

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def options(self) -> PersistOptions:
        return self._options

    @property
    def closed(self) -> bool:
        return self._closed

    def get_all_elements(self) -> tuple[Element, ...]:
        """Load every key stored under the prefix.

        Pages through ``list_secrets`` with the boto3 paginator, fetching and
        parsing each listed secret along the way. The paginator stops when a
        page carries no ``NextToken`` and raises ``PaginationError`` if the
        same token comes back twice.

        Returns:
            Tuple of parsed key elements, in store-defined order.

        Raises:
            Exception: Whatever the client or paginator raised if listing fails.
                Keys loaded from earlier pages are discarded.
        """
        metrics = get_metrics()
        page_params = {
            "Filters": [{"Key": "tag-value", "Values": [self._prefix]}],
        }

        results: list[Element] = []
        listed = 0

        try:
            paginator = self._client.get_paginator("list_secrets")
            for page in paginator.paginate(**page_params):
                for secret in page.get("SecretList", []):
                    listed += 1
                    element = self._load_element(secret.get("Name"))
                    if element is not None:
                        results.append(element)
        except Exception as e:
            log_error(
                self._logger,
                "Error calling Secrets Manager to list secrets",
                prefix=self._prefix,
                error=e,
            )
            metrics.record_list_failure()
            raise

        skipped = listed - len(results)
        metrics.record_load(len(results), skipped)

        if listed and not results:
            log_warning(
                self._logger,
                "No data-protection keys could be loaded",
                prefix=self._prefix,
                skipped=skipped,
            )
        log_info(
            self._logger,
            "Loaded data-protection keys",
            prefix=self._prefix,
            count=len(results),
            skipped=skipped,
        )
        return tuple(results)

    def _load_element(self, secret_name: str | None) -> Element | None:
        """Fetch and parse one secret, or return None if that fails."""
        try:
            response = self._client.get_secret_value(SecretId=secret_name)
            return ElementTree.fromstring(response["SecretString"])
        except Exception as e:
            log_error(
                self._logger,
                "Error parsing key, key will be skipped",
                secret_name=secret_name,
                error=e,
            )
            return None

    def make_secret_name(self, element: Element, friendly_name: str | None = None) -> str:
        """Derive the secret name for an element.

        Uses the friendly name, then the element's ``id`` attribute, then a
        fresh UUID. An empty friendly name or empty ``id`` counts as missing,
        so no secret is ever named after the bare prefix.
        """
        name = friendly_name or element.get("id") or str(uuid.uuid4())
        return f"{self._prefix}{name}"

    def build_create_request(self, secret_name: str, element: Element) -> dict[str, Any]:
        """Build the ``create_secret`` keyword arguments for an element."""
        request: dict[str, Any] = {
            "Name": secret_name,
            "SecretString": ElementTree.tostring(element, encoding="unicode"),
            "Tags": [{"Key": TAG_DATA_PROTECTION_KEY_PREFIX, "Value": self._prefix}],
        }

        if self._options.kms_key_id:
            request["KmsKeyId"] = self._options.kms_key_id

        if self._options.replication_region:
            replica: dict[str, str] = {"Region": self._options.replication_region}
            # Omitted key id means the default key in the replica region
            if self._options.replica_region_kms_key_id:
                replica["KmsKeyId"] = self._options.replica_region_kms_key_id
            request["AddReplicaRegions"] = [replica]

        return request

    def store_element(self, element: Element, friendly_name: str | None = None) -> str:
        """Create a secret holding the serialized element.

        Args:
            element: Key element to store
            friendly_name: Optional name; defaults to the element's ``id``
                attribute or a generated UUID

        Returns:
            The full secret name

        Raises:
            Exception: Whatever the client raised if ``create_secret`` fails.
                Nothing is retried.
        """
        secret_name = self.make_secret_name(element, friendly_name)
        request = self.build_create_request(secret_name, element)

        try:
            self._client.create_secret(**request)
        except Exception as e:
            log_error(
                self._logger,
                "Error saving data-protection key to Secrets Manager",
                secret_name=secret_name,
                error=e,
            )
            get_metrics().record_store(success=False)
            raise

        get_metrics().record_store(success=True)
        log_info(
            self._logger,
            "Saved data-protection key to Secrets Manager",
            secret_name=secret_name,
        )
        return secret_name

    def close(self) -> None:
        """Release the underlying client. Calling again is a no-op."""
        if self._closed:
            return
        self._closed = True

        close = getattr(self._client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "SecretsManagerXmlRepository":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
