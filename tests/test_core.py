"""Tests for core infrastructure modules."""

import json
import logging
import pytest
from pydantic import ValidationError

from secretgate.base.config import (
    CredentialStrategy,
    RequestEnvelope,
    Secret,
    StoreConfig,
)
from secretgate.base.exceptions import (
    ClientSetupError,
    ConfigurationError,
    InvalidActionError,
    MissingConfigError,
    RequestDecodeError,
    SecretDecodeError,
    SecretFetchError,
    SecretGateError,
)
from secretgate.base.logger import SecretGateLogger, StructuredFormatter
from secretgate.base.models import OperationResponse, OperationStatus


# ══════════════════════════════════════════════════════════════════════
# Config
# ══════════════════════════════════════════════════════════════════════

class TestStoreConfig:
    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.region_or_default == "us-east-1"
        assert cfg.credential_strategy is CredentialStrategy.STATIC
        assert cfg.assume_sts_role_duration == 0

    def test_explicit_region(self):
        assert StoreConfig(region="ap-south-1").region_or_default == "ap-south-1"

    def test_iam_role_wins(self):
        cfg = StoreConfig(assume_iam_role=True, assume_sts_role=True)
        assert cfg.credential_strategy is CredentialStrategy.IAM_ROLE

    def test_sts_role(self):
        cfg = StoreConfig(assume_sts_role=True, access_key="k", secret_key="s")
        assert cfg.credential_strategy is CredentialStrategy.STS_ROLE

    def test_unknown_fields_ignored(self):
        cfg = StoreConfig.model_validate({"region": "us-west-2", "kms_key": "x"})
        assert cfg.region == "us-west-2"

    def test_null_flags_use_defaults(self):
        cfg = StoreConfig.model_validate_json(
            '{"assume_iam_role": null, "assume_sts_role": null, "assume_sts_role_duration": null}'
        )
        assert cfg.assume_iam_role is False
        assert cfg.assume_sts_role is False
        assert cfg.assume_sts_role_duration == 0
        assert cfg.credential_strategy is CredentialStrategy.STATIC

    def test_null_base64_flag(self):
        assert Secret.model_validate_json('{"name": "s", "base64": null}').base64 is False


class TestRequestEnvelope:
    def test_full_envelope(self):
        env = RequestEnvelope.model_validate_json(json.dumps({
            "secret_params": {
                "secret_operation": "update",
                "store_config": {"region": "us-east-1", "prefix": "team"},
                "secret": {"name": "db", "plaintext": "v"},
                "existing_secret": {"name": "team/old"},
            }
        }))
        params = env.secret_params
        assert params.secret_operation == "update"
        assert params.store_config.prefix == "team"
        assert params.secret == Secret(name="db", plaintext="v")
        assert params.existing_secret.name == "team/old"

    def test_optional_sections(self):
        env = RequestEnvelope.model_validate({"secret_params": {"secret_operation": "connect"}})
        assert env.secret_params.store_config is None
        assert env.secret_params.secret is None
        assert env.secret_params.existing_secret is None

    def test_missing_params(self):
        with pytest.raises(ValidationError):
            RequestEnvelope.model_validate({})


# ══════════════════════════════════════════════════════════════════════
# Exceptions
# ══════════════════════════════════════════════════════════════════════

class TestExceptions:
    @pytest.mark.parametrize("exc", [RequestDecodeError, MissingConfigError, InvalidActionError])
    def test_request_errors_are_400(self, exc):
        assert exc.status == 400
        assert issubclass(exc, SecretGateError)

    @pytest.mark.parametrize("exc", [ClientSetupError, ConfigurationError, SecretFetchError, SecretDecodeError])
    def test_server_errors_are_500(self, exc):
        assert exc.status == 500


# ══════════════════════════════════════════════════════════════════════
# Models
# ══════════════════════════════════════════════════════════════════════

class TestModels:
    def test_operation_response_json(self):
        resp = OperationResponse(name="n", message="m", status=OperationStatus.SUCCESS)
        assert json.loads(resp.model_dump_json()) == {
            "name": "n", "message": "m", "status": "SUCCESS", "error": None,
        }


# ══════════════════════════════════════════════════════════════════════
# Logger
# ══════════════════════════════════════════════════════════════════════

class TestSecretGateLogger:
    def test_log_operation(self, capfd):
        logger = SecretGateLogger("test_sg")
        logger.logger.setLevel(logging.DEBUG)
        logger.info("test message", operation="fetch", secret="db")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "test message" in captured.err
        assert '"secret": "db"' in captured.err

    def test_bind(self, capfd):
        logger = SecretGateLogger("test_sg_bind")
        request_id = logger.bind(operation="delete")
        logger.warning("bound")
        record = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
        assert record["operation"] == "delete"
        assert record["request_id"] == request_id

    def test_structured_formatter(self):
        fmt = StructuredFormatter()
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname="", lineno=0,
            msg="hi", args=(), exc_info=None,
        )
        record.operation = "connect"
        record.request_id = "abc"
        output = fmt.format(record)
        assert '"operation": "connect"' in output
        assert '"request_id": "abc"' in output
