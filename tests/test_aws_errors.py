import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from secretgate.aws.errors import get_error_type, is_not_found


def _client_error(code: str, message: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


class TestGetErrorType:
    @pytest.mark.parametrize(
        "code",
        [
            "DecryptionFailure",
            "InternalServiceError",
            "InvalidParameterException",
            "InvalidRequestException",
            "ResourceNotFoundException",
            "LimitExceededException",
            "EncryptionFailure",
            "ResourceExistsException",
            "MalformedPolicyDocumentException",
            "PreconditionNotMetException",
        ],
    )
    def test_known_errors(self, code):
        assert get_error_type(_client_error(code)) == code

    def test_other_service_error_uses_code(self):
        assert get_error_type(_client_error("AccessDeniedException")) == "AccessDeniedException"

    def test_client_error_without_code(self):
        assert get_error_type(ClientError({"Error": {}}, "op")) == "UnknownError"

    def test_network_error(self):
        err = EndpointConnectionError(endpoint_url="https://secretsmanager.us-east-1.amazonaws.com")
        assert get_error_type(err) == "UnknownError"

    def test_plain_exception(self):
        assert get_error_type(ValueError("boom")) == "UnknownError"


class TestIsNotFound:
    def test_not_found(self):
        assert is_not_found(_client_error("ResourceNotFoundException"))

    def test_other_code(self):
        assert not is_not_found(_client_error("AccessDeniedException"))

    def test_non_client_error(self):
        assert not is_not_found(RuntimeError("ResourceNotFoundException"))
