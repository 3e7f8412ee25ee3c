"""Provider-independent models, blueprint and core utilities.

The AWS provider implements :class:`SecretManagerBlueprint`; the dispatcher
only depends on what is exported here.
"""

from .secret_manager import SecretManagerBlueprint
from .config import RequestEnvelope, Secret, SecretParams, StoreConfig
from .models import (
    Error,
    ErrorResponse,
    OperationResponse,
    OperationStatus,
    SecretResponse,
    ValidationResponse,
)


__all__ = [
    "SecretManagerBlueprint",
    "RequestEnvelope",
    "Secret",
    "SecretParams",
    "StoreConfig",
    "Error",
    "ErrorResponse",
    "OperationResponse",
    "OperationStatus",
    "SecretResponse",
    "ValidationResponse",
]
