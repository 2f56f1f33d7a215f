"""Exceptions raised by the data-protection key repository."""


class ConfigurationError(ValueError):
    """A required setting is missing or invalid.

    Raised when a repository is constructed without a Secrets Manager client
    or a secret name prefix, and when persist options cannot be loaded.
    Never retried.
    """
