"""AWS provider implementation."""

from .client import new_client
from .errors import get_error_type, is_not_found
from .secret_manager import SecretManager

__all__ = [
    "SecretManager",
    "get_error_type",
    "is_not_found",
    "new_client",
]
