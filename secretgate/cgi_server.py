"""Secretgate CGI entry point.

The web server runs this once per request with the request body on
standard input::

    secretgate-cgi < request.json

The JSON response, preceded by CGI ``Status`` and ``Content-Type``
headers, is written to standard output.
"""

from __future__ import annotations

import os
import sys
from http import HTTPStatus
from typing import BinaryIO, Mapping

from secretgate.handler import HandlerResult, handle_request


def read_body(stdin: BinaryIO, environ: Mapping[str, str]) -> bytes:
    """Read the request body, honouring ``CONTENT_LENGTH`` when set."""
    length = environ.get("CONTENT_LENGTH", "").strip()
    if length.isdigit():
        return stdin.read(int(length))
    return stdin.read()


def write_response(stdout: BinaryIO, result: HandlerResult) -> None:
    status = HTTPStatus(result.status)
    headers = (
        f"Status: {status.value} {status.phrase}\r\n"
        "Content-Type: application/json\r\n"
        "\r\n"
    )
    stdout.write(headers.encode("ascii"))
    stdout.write(result.body().encode("utf-8"))
    stdout.write(b"\n")
    stdout.flush()


def main(
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """CGI entry point.

    Args:
        stdin: Request body stream (defaults to ``sys.stdin.buffer``).
        stdout: Response stream (defaults to ``sys.stdout.buffer``).
        environ: CGI environment (defaults to ``os.environ``).
    """
    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer
    environ = environ if environ is not None else os.environ

    result = handle_request(read_body(stdin, environ))
    write_response(stdout, result)


if __name__ == "__main__":
    main()
