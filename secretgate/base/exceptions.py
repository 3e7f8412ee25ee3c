"""
Secretgate exception hierarchy.

Every failure the handler can surface inherits from :class:`SecretGateError`.
Request-level errors carry the HTTP status the dispatcher answers with;
operation-level SDK failures never reach this hierarchy except through
:class:`SecretFetchError`, because they are embedded in response objects.
"""


# ── Base ──────────────────────────────────────────────────────────────
class SecretGateError(Exception):
    """Root exception for all Secretgate errors."""

    status: int = 500


# ── Request ───────────────────────────────────────────────────────────
class RequestError(SecretGateError):
    """Base exception for malformed or unsupported requests."""

    status = 400


class RequestDecodeError(RequestError):
    """Request body is not valid JSON or does not match the envelope."""


class MissingConfigError(RequestError):
    """Request envelope carries no store configuration."""


class InvalidActionError(RequestError):
    """Requested secret operation is not supported."""


# ── Client setup ──────────────────────────────────────────────────────
class ClientSetupError(SecretGateError):
    """Secrets Manager client could not be built."""


class ConfigurationError(ClientSetupError):
    """Credential material in the store configuration is missing or invalid."""


# ── Secret Manager ────────────────────────────────────────────────────
class SecretManagerError(SecretGateError):
    """Base exception for secret manager operations."""


class SecretFetchError(SecretManagerError):
    """Secret value could not be read."""


class SecretDecodeError(SecretManagerError):
    """Secret value is not valid base64."""
