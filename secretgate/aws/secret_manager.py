"""AWS Secrets Manager implementation of the SecretManager blueprint."""

from __future__ import annotations

import base64
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from secretgate.aws.client import new_client
from secretgate.aws.errors import get_error_type, is_not_found
from secretgate.base import SecretManagerBlueprint
from secretgate.base.addressing import (
    decode,
    extract_secret_info,
    full_path,
    get_value_from_json,
    is_valid_json,
)
from secretgate.base.config import CREATED_BY_TAG, Secret, StoreConfig
from secretgate.base.exceptions import SecretFetchError
from secretgate.base.logger import sg_logger
from secretgate.base.models import (
    Error,
    OperationResponse,
    OperationStatus,
    SecretResponse,
    ValidationResponse,
)

# Errors raised by boto3 calls: service errors and client-side failures
# such as unreachable endpoints or missing credentials.
AWS_ERRORS = (ClientError, BotoCoreError)


def _error(err: BaseException, message: str) -> Error:
    return Error(type=get_error_type(err), message=message, reason=str(err))


def _failure(name: str, message: str, err: BaseException) -> OperationResponse:
    return OperationResponse(
        name=name,
        message=message,
        status=OperationStatus.FAILURE,
        error=_error(err, message),
    )


class SecretManager(SecretManagerBlueprint):
    """AWS Secrets Manager implementation for secret management.

    Names passed to read paths and to :meth:`delete_secret` are used as
    given. Names of secrets being written are qualified once with the
    configured prefix (see :func:`~secretgate.base.addressing.full_path`).

    Attributes:
        client: boto3 Secrets Manager client.
        config: Store configuration the client was built from.
    """

    def __init__(self, config: StoreConfig):
        """Build the boto3 client for *config*.

        Raises:
            ConfigurationError: If credential material is missing.
            ClientSetupError: If credentials could not be obtained.
        """
        self.config = config
        self.client = new_client(config)

    # ── store calls ───────────────────────────────────────────────────

    def _get_secret(self, name: str) -> str:
        response: dict[str, Any] = self.client.get_secret_value(SecretId=name)
        value = response.get("SecretString")
        raw = response.get("SecretBinary")
        if value is None and raw is not None:
            # Binary that is not UTF-8 text (keystores, DER) is returned base64-encoded
            try:
                return raw.decode("utf-8")  # type: ignore[no-any-return]
            except UnicodeDecodeError:
                return base64.b64encode(raw).decode("ascii")
        return value or ""

    def _fetch_internal(self, reference: str) -> str:
        """Read a ``name#key.path`` reference; store errors propagate."""
        name, key_path = extract_secret_info(reference)
        value = self._get_secret(name)
        if not is_valid_json(value):
            return value
        return get_value_from_json(value, key_path)

    def _create(self, name: str, plaintext: str | None) -> OperationResponse:
        sg_logger.info(f"Received request for creating AWS Secret: {name}", secret=name)
        params: dict[str, Any] = {"Name": name, "Tags": [dict(CREATED_BY_TAG)]}
        if plaintext is not None:
            params["SecretString"] = plaintext
        try:
            output = self.client.create_secret(**params)
        except AWS_ERRORS as e:
            error_type = get_error_type(e)
            sg_logger.error(
                f"Failed to create secret {name}, errorType: {error_type}, error: {e}",
                secret=name,
            )
            return _failure(name, "Failed to create secret in AWS Secret Manager", e)

        sg_logger.info(f"Successfully created secret {name}", secret=name)
        return OperationResponse(
            name=output.get("Name", name),
            message="Successfully created secret in AWS Secret Manager",
            status=OperationStatus.SUCCESS,
        )

    def _update(self, name: str, plaintext: str | None) -> OperationResponse:
        sg_logger.info(f"Received request for updating AWS Secret: {name}", secret=name)
        params: dict[str, Any] = {"SecretId": name}
        if plaintext is not None:
            params["SecretString"] = plaintext
        try:
            output = self.client.update_secret(**params)
        except AWS_ERRORS as e:
            error_type = get_error_type(e)
            sg_logger.error(
                f"Failed to update secret {name}, errorType: {error_type}, error: {e}",
                secret=name,
            )
            return _failure(name, "Failed to update secret in AWS Secret Manager", e)

        sg_logger.info(f"Successfully updated secret {name}", secret=name)
        return OperationResponse(
            name=output.get("Name", name),
            message="Successfully updated secret in AWS Secret Manager",
            status=OperationStatus.SUCCESS,
        )

    # ── operations ────────────────────────────────────────────────────

    def connect(self, name: str) -> ValidationResponse:
        """Validate connectivity by reading *name*.

        A missing secret still proves the store is reachable and the
        credentials are accepted, so it counts as valid.
        """
        sg_logger.info(f"Received request for validating AWS Secret Manager: {name}", secret=name)
        try:
            self.client.get_secret_value(SecretId=name)
        except AWS_ERRORS as e:
            if not is_not_found(e):
                sg_logger.error(f"Failed to validate AWS Secret Manager, error {e}", secret=name)
                return ValidationResponse(
                    valid=False, error=_error(e, "Failed validating AWS Secret Manager")
                )
        sg_logger.info("Successfully validated AWS Secret Manager")
        return ValidationResponse(valid=True)

    def validate_reference(self, name: str) -> ValidationResponse:
        """Validate that *name* resolves; a missing secret is invalid."""
        sg_logger.info(f"Received request for validating AWS Secret reference: {name}", secret=name)
        try:
            self._fetch_internal(name)
        except AWS_ERRORS as e:
            sg_logger.error(f"Failed to validate AWS Secret reference, error {e}", secret=name)
            return ValidationResponse(
                valid=False, error=_error(e, "Failed validating AWS Secret reference")
            )
        sg_logger.info("Successfully validated AWS Secret reference")
        return ValidationResponse(valid=True)

    def fetch_secret(self, secret: Secret) -> SecretResponse:
        """Fetch the value a secret reference points to.

        Raises:
            SecretFetchError: If the secret cannot be read.
            SecretDecodeError: If base64 decoding was requested and fails.
        """
        reference = secret.name or ""
        sg_logger.info(f"Received request for fetching AWS Secret: {reference}", secret=reference)
        name, key_path = extract_secret_info(reference)
        try:
            value = self._get_secret(name)
        except AWS_ERRORS as e:
            sg_logger.error(f"Failed to fetch secret {name}, error: {e}", secret=name)
            raise SecretFetchError(
                f"could not find secret key: {name}. Failed with error {e}"
            ) from e
        sg_logger.info(f"Successfully fetched secret {name}", secret=name)

        value = decode(value, secret.base64, name)
        if not is_valid_json(value):
            return SecretResponse(value=value)
        return SecretResponse(value=get_value_from_json(value, key_path))

    def create_secret(self, secret: Secret) -> OperationResponse:
        return self._create(full_path(self.config.prefix, secret.name or ""), secret.plaintext)

    def update_secret(self, secret: Secret) -> OperationResponse:
        return self._update(full_path(self.config.prefix, secret.name or ""), secret.plaintext)

    def upsert_secret(
        self, secret: Secret, existing_secret: Secret | None = None
    ) -> OperationResponse:
        """Create or update *secret*, then remove *existing_secret* if it moved.

        Removal of the old secret is best effort: a failure is logged and does
        not change the reported outcome.
        """
        name = full_path(self.config.prefix, secret.name or "")
        try:
            self._fetch_internal(name)
            secret_exists = True
        except AWS_ERRORS as e:
            if not is_not_found(e):
                sg_logger.error(f"Failed fetching secret {name}, error : {e}", secret=name)
                return _failure(name, "Failed to find secret in AWS Secret Manager", e)
            sg_logger.info(f"Resource {name} doesn't exist : {e}", secret=name)
            secret_exists = False

        if secret_exists:
            response = self._update(name, secret.plaintext)
        else:
            response = self._create(name, secret.plaintext)

        if response.status is OperationStatus.SUCCESS and existing_secret is not None:
            self._delete_old(existing_secret.name or "", name)
        return response

    def _delete_old(self, old_name: str, new_name: str) -> None:
        sg_logger.debug(f"Old secret name is {old_name}", secret=old_name)
        sg_logger.debug(f"New secret name is {new_name}", secret=new_name)
        if not old_name or old_name == new_name:
            return

        sg_logger.info(
            f"Old path of the secret {old_name} is different than the current one {new_name}. "
            "Deleting the old secret",
            secret=old_name,
        )
        try:
            self.client.delete_secret(SecretId=old_name, ForceDeleteWithoutRecovery=True)
        except AWS_ERRORS as e:
            sg_logger.warning(
                f"Old path of the secret {old_name} is different than the current one {new_name}. "
                f"Failed deleting the old secret. Error: {e}",
                secret=old_name,
            )

    def rename_secret(self, secret: Secret, existing_secret: Secret) -> OperationResponse:
        """Copy the value of *existing_secret* to *secret* and drop the old one.

        Nothing is written when the existing value cannot be read.
        """
        old_name = existing_secret.name or ""
        sg_logger.info(
            f"Received request for renaming AWS Secret: {old_name} -> {secret.name}",
            secret=old_name,
        )
        try:
            value = self._fetch_internal(old_name)
        except AWS_ERRORS as e:
            sg_logger.error(f"Failed to find secret {old_name}, error: {e}", secret=old_name)
            return _failure(old_name, "Failed to find secret in AWS Secret Manager", e)

        return self.upsert_secret(secret.model_copy(update={"plaintext": value}), existing_secret)

    def delete_secret(self, secret: Secret) -> OperationResponse:
        """Delete *secret* immediately, without a recovery window."""
        name = secret.name or ""
        sg_logger.info(f"Received request for deleting AWS Secret: {name}", secret=name)
        try:
            output = self.client.delete_secret(SecretId=name, ForceDeleteWithoutRecovery=True)
        except AWS_ERRORS as e:
            error_type = get_error_type(e)
            sg_logger.error(
                f"Failed to delete secret {name}, errorType: {error_type}, error: {e}",
                secret=name,
            )
            return _failure(name, "Failed to delete secret in AWS Secret Manager", e)

        sg_logger.info(f"Successfully deleted secret {name}", secret=name)
        return OperationResponse(
            name=output.get("Name", name),
            message="Successfully deleted secret in AWS Secret Manager",
            status=OperationStatus.SUCCESS,
        )
