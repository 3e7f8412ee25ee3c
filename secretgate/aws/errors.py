"""
Classification of AWS Secrets Manager errors.

The label returned by :func:`get_error_type` is advisory: it is reported to
the caller to drive hints in the UI and must not decide control flow.  Use
:func:`is_not_found` for the one decision that depends on the error kind.
"""

from __future__ import annotations

from typing import Callable

from botocore.exceptions import ClientError


UNKNOWN_ERROR = "UnknownError"
RESOURCE_NOT_FOUND = "ResourceNotFoundException"


def _error_code(err: BaseException) -> str | None:
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Code") or None
    return None


def _has_code(code: str) -> Callable[[BaseException], bool]:
    def predicate(err: BaseException) -> bool:
        return _error_code(err) == code

    return predicate


# Evaluated top to bottom; the first matching predicate wins.
_CLASSIFIERS: list[tuple[Callable[[BaseException], bool], str]] = [
    (_has_code("DecryptionFailure"), "DecryptionFailure"),
    (_has_code("InternalServiceError"), "InternalServiceError"),
    (_has_code("InvalidParameterException"), "InvalidParameterException"),
    (_has_code("InvalidRequestException"), "InvalidRequestException"),
    (_has_code(RESOURCE_NOT_FOUND), RESOURCE_NOT_FOUND),
    (_has_code("LimitExceededException"), "LimitExceededException"),
    (_has_code("EncryptionFailure"), "EncryptionFailure"),
    (_has_code("ResourceExistsException"), "ResourceExistsException"),
    (_has_code("MalformedPolicyDocumentException"), "MalformedPolicyDocumentException"),
    (_has_code("PreconditionNotMetException"), "PreconditionNotMetException"),
]


def get_error_type(err: BaseException) -> str:
    """Return a coarse label describing *err*.

    Known Secrets Manager exceptions map to their own label, any other
    service error to its error code, and everything else (network errors,
    missing credentials) to ``UnknownError``.
    """
    for predicate, label in _CLASSIFIERS:
        if predicate(err):
            return label
    return _error_code(err) or UNKNOWN_ERROR


def is_not_found(err: BaseException) -> bool:
    """True if *err* reports that the requested secret does not exist."""
    return _error_code(err) == RESOURCE_NOT_FOUND
