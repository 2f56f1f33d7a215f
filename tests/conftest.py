"""pytest configuration for dataprotection-secrets tests."""

import sys
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

# Add src directory to path so tests can import dataprotection_secrets
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from dataprotection_secrets.metrics import reset_metrics  # noqa: E402


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} (test)"}}, operation)


class _FakeListSecretsPaginator:
    """Follows numeric continuation tokens over the fake's list_secrets."""

    def __init__(self, client):
        self._client = client

    def paginate(self, **kwargs):
        while True:
            page = self._client.list_secrets(**kwargs)
            yield page
            if not page.get("NextToken"):
                return
            kwargs = {**kwargs, "NextToken": page["NextToken"]}


class _FakeSecretsManagerClient:
    """In-memory stand-in for a boto3 Secrets Manager client.

    Supports tag-value filtering and paginates ``list_secrets`` with numeric
    continuation tokens.
    """

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.secrets: dict[str, dict] = {}
        self.create_calls: list[dict] = []
        self.list_calls: list[dict] = []
        self.get_calls: list[str] = []
        self.close_calls = 0

    def create_secret(self, **kwargs):
        self.create_calls.append(kwargs)
        name = kwargs["Name"]
        if name in self.secrets:
            raise _client_error("ResourceExistsException", "CreateSecret")
        self.secrets[name] = kwargs
        return {"ARN": f"arn:aws:secretsmanager:us-east-1:123456789012:secret:{name}", "Name": name}

    def get_paginator(self, operation_name):
        assert operation_name == "list_secrets"
        return _FakeListSecretsPaginator(self)

    def list_secrets(self, **kwargs):
        self.list_calls.append(kwargs)
        values = set()
        for f in kwargs.get("Filters", []):
            if f["Key"] == "tag-value":
                values.update(f["Values"])

        matching = [
            name
            for name, secret in self.secrets.items()
            if any(tag["Value"] in values for tag in secret.get("Tags", []))
        ]

        start = int(kwargs.get("NextToken") or 0)
        end = start + self.page_size
        response = {"SecretList": [{"Name": name} for name in matching[start:end]]}
        if end < len(matching):
            response["NextToken"] = str(end)
        return response

    def get_secret_value(self, SecretId):
        self.get_calls.append(SecretId)
        if SecretId not in self.secrets:
            raise _client_error("ResourceNotFoundException", "GetSecretValue")
        return {"Name": SecretId, "SecretString": self.secrets[SecretId]["SecretString"]}

    def close(self):
        self.close_calls += 1


@pytest.fixture
def client_error():
    """Build a botocore ClientError the way Secrets Manager reports failures."""
    return _client_error


@pytest.fixture
def fake_client():
    """Empty in-memory Secrets Manager client."""
    return _FakeSecretsManagerClient()


@pytest.fixture(autouse=True)
def clean_metrics():
    """Reset global metrics before and after each test."""
    reset_metrics()
    yield
    reset_metrics()
