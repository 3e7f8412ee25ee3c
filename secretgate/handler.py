"""
Request dispatcher.

Provides :func:`handle_request`, which turns a raw request body into exactly
one response: decode the envelope, build a Secrets Manager client, and route
the ``secret_operation`` to the matching operation.

Request-level problems (bad payload, missing configuration, unsupported
action) answer 400; client setup failures and unreadable secrets on fetch
answer 500, as does any unexpected failure.  Every other outcome,
including store failures, answers 200 with the failure embedded in the
response object.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from pydantic import BaseModel, ValidationError

from secretgate.aws import SecretManager
from secretgate.base import SecretManagerBlueprint
from secretgate.base.config import RequestEnvelope, Secret, SecretParams, StoreConfig
from secretgate.base.exceptions import (
    ClientSetupError,
    InvalidActionError,
    MissingConfigError,
    RequestDecodeError,
    SecretManagerError,
)
from secretgate.base.logger import sg_logger
from secretgate.base.models import ErrorResponse


class HandlerResult(NamedTuple):
    status: int
    payload: BaseModel

    def body(self) -> str:
        return self.payload.model_dump_json()


def _require_secret(params: SecretParams, field: str = "secret") -> Secret:
    secret: Secret | None = getattr(params, field)
    if secret is None or secret.name is None:
        raise RequestDecodeError(f"'{field}' with a 'name' is required for this operation")
    return secret


def _connect(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.connect(_require_secret(params).name or "")


def _validate_ref(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.validate_reference(_require_secret(params).name or "")


def _fetch(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.fetch_secret(_require_secret(params))


def _create(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.upsert_secret(_require_secret(params), None)


def _update(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.upsert_secret(_require_secret(params), params.existing_secret)


def _rename(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    secret = _require_secret(params)
    existing_secret = _require_secret(params, "existing_secret")
    return sm.rename_secret(secret, existing_secret)


def _delete(sm: SecretManagerBlueprint, params: SecretParams) -> BaseModel:
    return sm.delete_secret(_require_secret(params))


# Action registry: lower-cased secret_operation -> handler
ACTIONS: dict[str, Callable[[SecretManagerBlueprint, SecretParams], BaseModel]] = {
    "connect": _connect,
    "validate_ref": _validate_ref,
    "fetch": _fetch,
    "create": _create,
    "update": _update,
    "rename": _rename,
    "delete": _delete,
}


def _error_result(err: Exception, message: str) -> HandlerResult:
    status = getattr(err, "status", 500)
    sg_logger.error(f"{message}: {err}")
    return HandlerResult(status, ErrorResponse(message=message, error=str(err), status=status))


def _internal_error(err: Exception) -> HandlerResult:
    sg_logger.error(f"Internal error: {err}", exc_info=True)
    return HandlerResult(500, ErrorResponse(message="Internal error", error=str(err), status=500))


def decode_request(body: str | bytes) -> SecretParams:
    """Parse and validate the request envelope.

    Raises:
        RequestDecodeError: If the body is not a valid envelope.
        MissingConfigError: If ``store_config`` is absent.
    """
    try:
        envelope = RequestEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise RequestDecodeError(str(e)) from e

    if envelope.secret_params.store_config is None:
        raise MissingConfigError("empty config")
    return envelope.secret_params


def handle_request(
    body: str | bytes,
    manager_factory: Callable[[StoreConfig], SecretManagerBlueprint] = SecretManager,
) -> HandlerResult:
    """Serve one request.

    Args:
        body: Raw request body.
        manager_factory: Builds the secret manager from the store config.

    Returns:
        The HTTP status and the response model to write back.
    """
    sg_logger.bind()
    try:
        params = decode_request(body)
    except MissingConfigError as e:
        return _error_result(e, "Configuration is missing")
    except RequestDecodeError as e:
        return _error_result(e, "Failed to decode request body")

    operation = params.secret_operation.lower()
    sg_logger.bind(operation=operation, request_id=sg_logger.request_id)

    try:
        sm = manager_factory(params.store_config)  # type: ignore[arg-type]
    except ClientSetupError as e:
        return _error_result(e, "Failed to create AWS Secret Manager client")
    except Exception as e:
        return _internal_error(e)

    action = ACTIONS.get(operation)
    if action is None:
        return _error_result(
            InvalidActionError("invalid action"),
            f"The specified action {operation} is not supported",
        )

    try:
        result = action(sm, params)
    except RequestDecodeError as e:
        return _error_result(e, "Failed to decode request body")
    except SecretManagerError as e:
        return _error_result(e, "Failed to fetch secret")
    except Exception as e:
        return _internal_error(e)

    return HandlerResult(200, result)
