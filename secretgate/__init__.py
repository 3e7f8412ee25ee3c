"""Secretgate: CGI handler proxying secret operations to AWS Secrets Manager.

Entry point for the library. Import :func:`handle_request` to serve a
request body without going through CGI::

    from secretgate import handle_request

    result = handle_request(body)
    print(result.status, result.body())
"""

from .base import SecretManagerBlueprint
from .handler import HandlerResult, handle_request

__all__ = [
    "SecretManagerBlueprint",
    "HandlerResult",
    "handle_request",
]
