from unittest.mock import patch, MagicMock
import pytest
from botocore.exceptions import ClientError

from secretgate.aws.client import new_client, retry_config
from secretgate.base.config import StoreConfig
from secretgate.base.exceptions import ClientSetupError, ConfigurationError


def _client_error(code: str, message: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


@pytest.fixture
def mock_boto():
    with patch("secretgate.aws.client.boto3") as mock_boto:
        yield mock_boto


class TestStaticCredentials:
    def test_success(self, mock_boto):
        client = new_client(StoreConfig(access_key="k", secret_key="s", region="eu-west-1"))
        assert client is mock_boto.client.return_value
        _, kwargs = mock_boto.client.call_args
        assert mock_boto.client.call_args.args == ("secretsmanager",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["aws_access_key_id"] == "k"
        assert kwargs["aws_secret_access_key"] == "s"

    def test_default_region(self, mock_boto):
        new_client(StoreConfig(access_key="k", secret_key="s"))
        assert mock_boto.client.call_args.kwargs["region_name"] == "us-east-1"

    def test_retry_policy_attached(self, mock_boto):
        new_client(StoreConfig(access_key="k", secret_key="s"))
        config = mock_boto.client.call_args.kwargs["config"]
        assert config.retries["mode"] == "standard"

    @pytest.mark.parametrize(
        "access_key, secret_key",
        [("", ""), (None, None), ("k", ""), ("", "s")],
    )
    def test_missing_keys(self, mock_boto, access_key, secret_key):
        with pytest.raises(ConfigurationError):
            new_client(StoreConfig(access_key=access_key, secret_key=secret_key))
        mock_boto.client.assert_not_called()


class TestIAMRole:
    def test_uses_ambient_credentials(self, mock_boto):
        new_client(StoreConfig(assume_iam_role=True, region="us-west-2"))
        kwargs = mock_boto.client.call_args.kwargs
        assert kwargs["region_name"] == "us-west-2"
        assert "aws_access_key_id" not in kwargs

    def test_takes_priority_over_sts(self, mock_boto):
        new_client(StoreConfig(assume_iam_role=True, assume_sts_role=True))
        mock_boto.client.assert_called_once()
        assert mock_boto.client.call_args.args == ("secretsmanager",)


class TestSTSRole:
    @pytest.fixture
    def clients(self, mock_boto):
        mock_sts = MagicMock()
        mock_sts.assume_role.return_value = {
            "Credentials": {
                "AccessKeyId": "ASIA",
                "SecretAccessKey": "tmp-secret",
                "SessionToken": "token",
            }
        }
        mock_sm = MagicMock()

        def pick_client(service, **kwargs):
            return {"sts": mock_sts, "secretsmanager": mock_sm}[service]

        mock_boto.client.side_effect = pick_client
        return mock_sts, mock_sm

    def test_assumes_role(self, mock_boto, clients):
        mock_sts, mock_sm = clients
        client = new_client(StoreConfig(
            assume_sts_role=True,
            role_arn="arn:aws:iam::123456789012:role/reader",
            assume_sts_role_duration=900,
            external_name="ext-id",
        ))
        assert client is mock_sm
        params = mock_sts.assume_role.call_args.kwargs
        assert params["RoleArn"] == "arn:aws:iam::123456789012:role/reader"
        assert params["DurationSeconds"] == 900
        assert params["ExternalId"] == "ext-id"
        assert params["RoleSessionName"]

        kwargs = mock_boto.client.call_args.kwargs
        assert kwargs["aws_access_key_id"] == "ASIA"
        assert kwargs["aws_secret_access_key"] == "tmp-secret"
        assert kwargs["aws_session_token"] == "token"

    def test_optional_params_omitted(self, clients):
        mock_sts, _ = clients
        new_client(StoreConfig(assume_sts_role=True, role_arn="arn:aws:iam::1:role/r"))
        params = mock_sts.assume_role.call_args.kwargs
        assert "DurationSeconds" not in params
        assert "ExternalId" not in params

    def test_missing_role_arn(self, mock_boto):
        with pytest.raises(ConfigurationError, match="RoleARN"):
            new_client(StoreConfig(assume_sts_role=True))
        mock_boto.client.assert_not_called()

    def test_assume_role_fails(self, clients):
        mock_sts, _ = clients
        mock_sts.assume_role.side_effect = _client_error("AccessDenied")
        with pytest.raises(ClientSetupError, match="failed to assume role"):
            new_client(StoreConfig(assume_sts_role=True, role_arn="arn:aws:iam::1:role/r"))


def test_retry_config():
    assert retry_config().retries == {"mode": "standard", "max_attempts": 3}
