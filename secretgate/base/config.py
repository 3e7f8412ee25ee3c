"""
Pydantic models for the inbound request envelope and store configuration.

The envelope is validated once at the start of a request, so a malformed
payload is rejected before any client is built or any SDK call is made.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


DEFAULT_REGION = "us-east-1"
DEFAULT_BASE_PATH = "harness"
PATH_SEPARATOR = "/"

# Attached to every secret created through the handler
CREATED_BY_TAG: dict[str, str] = {"Key": "createdBy", "Value": "Harness"}

# Total attempts per SDK call, handed to botocore's standard retry mode
RETRY_MAX_ATTEMPTS = 3


class CredentialStrategy(str, Enum):
    """How the Secrets Manager client obtains credentials."""

    IAM_ROLE = "iam_role"
    STS_ROLE = "sts_role"
    STATIC = "static"


class StoreConfig(BaseModel):
    """Connection settings for AWS Secrets Manager.

    Exactly one credential strategy applies, chosen in order:
    1. ``assume_iam_role`` - the runner's ambient credentials.
    2. ``assume_sts_role`` - temporary credentials from ``sts:AssumeRole``.
    3. Static ``access_key`` / ``secret_key`` pair (default).
    """

    model_config = ConfigDict(extra="ignore")

    region: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")
    access_key: str | None = Field(default=None, description="AWS access key ID")
    secret_key: str | None = Field(default=None, description="AWS secret access key")
    assume_iam_role: bool = Field(
        default=False, description="Use the runner's ambient IAM role credentials"
    )
    assume_sts_role: bool = Field(
        default=False, description="Assume role_arn through STS before connecting"
    )
    assume_sts_role_duration: int = Field(
        default=0, description="STS session duration in seconds; 0 keeps the AWS default"
    )
    role_arn: str | None = Field(default=None, description="ARN of the role to assume")
    external_name: str | None = Field(
        default=None, description="External ID passed to sts:AssumeRole"
    )
    prefix: str | None = Field(
        default=None, description="Path prepended to names of secrets that are written"
    )

    @field_validator("assume_iam_role", "assume_sts_role", "assume_sts_role_duration", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat JSON null like an omitted field."""
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @property
    def region_or_default(self) -> str:
        return self.region or DEFAULT_REGION

    @property
    def credential_strategy(self) -> CredentialStrategy:
        if self.assume_iam_role:
            return CredentialStrategy.IAM_ROLE
        if self.assume_sts_role:
            return CredentialStrategy.STS_ROLE
        return CredentialStrategy.STATIC


class Secret(BaseModel):
    """A secret addressed by the caller.

    ``name`` is fully qualified from the caller's point of view and may carry
    a ``#json.key.path`` suffix on read paths.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, description="Secret name, optionally with #keyPath")
    plaintext: str | None = Field(default=None, description="Secret value to write")
    base64: bool = Field(default=False, description="Base64-decode the value on fetch")

    @field_validator("base64", mode="before")
    @classmethod
    def null_as_false(cls, value: Any) -> Any:
        return False if value is None else value


class SecretParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    secret_operation: str = Field(default="", description="Action to perform")
    store_config: StoreConfig | None = None
    secret: Secret | None = None
    existing_secret: Secret | None = None


class RequestEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    secret_params: SecretParams


__all__ = [
    "DEFAULT_REGION",
    "DEFAULT_BASE_PATH",
    "PATH_SEPARATOR",
    "CREATED_BY_TAG",
    "RETRY_MAX_ATTEMPTS",
    "CredentialStrategy",
    "StoreConfig",
    "Secret",
    "SecretParams",
    "RequestEnvelope",
]
