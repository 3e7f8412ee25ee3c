"""
Secrets Manager client builder.

Turns a :class:`~secretgate.base.config.StoreConfig` into an authenticated
boto3 client.  Retries are left to botocore's standard retry mode, attached
here at construction time.
"""

from __future__ import annotations

import uuid
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from secretgate.base.config import RETRY_MAX_ATTEMPTS, CredentialStrategy, StoreConfig
from secretgate.base.exceptions import ClientSetupError, ConfigurationError
from secretgate.base.logger import sg_logger


def retry_config() -> Config:
    """botocore config with standard exponential-backoff retries."""
    return Config(retries={"mode": "standard", "max_attempts": RETRY_MAX_ATTEMPTS})


def _static_credentials(config: StoreConfig) -> dict[str, str]:
    sg_logger.info("Using static credentials")
    if not config.access_key:
        raise ConfigurationError("AccessKey not provided")
    if not config.secret_key:
        raise ConfigurationError("SecretKey not provided")
    return {
        "aws_access_key_id": config.access_key,
        "aws_secret_access_key": config.secret_key,
    }


def _sts_credentials(config: StoreConfig, region: str) -> dict[str, str]:
    """Assume ``config.role_arn`` and return its temporary credentials.

    Raises:
        ConfigurationError: If no role ARN is configured.
        ClientSetupError: If the assume-role call fails.
    """
    sg_logger.info(f"Assuming STS role on runner: {config.role_arn}")
    if not config.role_arn:
        raise ConfigurationError("RoleARN must be provided for STS role assumption")

    params: dict[str, Any] = {
        "RoleArn": config.role_arn,
        "RoleSessionName": str(uuid.uuid4()),
    }
    if config.assume_sts_role_duration > 0:
        params["DurationSeconds"] = config.assume_sts_role_duration
    if config.external_name:
        params["ExternalId"] = config.external_name

    sts_client = boto3.client("sts", region_name=region, config=retry_config())
    try:
        credentials = sts_client.assume_role(**params)["Credentials"]
    except (ClientError, BotoCoreError) as e:
        raise ClientSetupError(f"failed to get STS credentials: failed to assume role: {e}") from e

    return {
        "aws_access_key_id": credentials["AccessKeyId"],
        "aws_secret_access_key": credentials["SecretAccessKey"],
        "aws_session_token": credentials["SessionToken"],
    }


def new_client(config: StoreConfig) -> Any:
    """Build a Secrets Manager client for *config*.

    Args:
        config: Store configuration from the request envelope.

    Returns:
        A boto3 ``secretsmanager`` client.

    Raises:
        ConfigurationError: If credential material is missing.
        ClientSetupError: If credentials could not be obtained.
    """
    region = config.region_or_default
    strategy = config.credential_strategy

    try:
        if strategy is CredentialStrategy.IAM_ROLE:
            sg_logger.info("Assuming IAM role on runner")
            credentials: dict[str, str] = {}
        elif strategy is CredentialStrategy.STS_ROLE:
            credentials = _sts_credentials(config, region)
        else:
            credentials = _static_credentials(config)

        client = boto3.client(
            "secretsmanager",
            region_name=region,
            config=retry_config(),
            **credentials,
        )
    except ClientSetupError as e:
        sg_logger.error(f"Failed to configure AWS client: {e}")
        raise
    except BotoCoreError as e:
        sg_logger.error(f"Failed to configure AWS client: {e}")
        raise ClientSetupError(f"failed to load configuration: {e}") from e

    sg_logger.info(f"Successfully configured AWS client for region: {region}")
    return client
