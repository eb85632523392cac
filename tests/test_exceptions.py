"""Tests for aws_global_config.exceptions module."""

from botocore.exceptions import ClientError

from aws_global_config import exceptions


class TestDescribeException:
    def test_class_name_and_message(self):
        assert exceptions.describe_exception(IOError("disk full")) == "OSError:disk full"

    def test_blank_message(self):
        assert exceptions.describe_exception(RuntimeError("   ")) == "RuntimeError:Unknown error"

    def test_client_error(self):
        exc = ClientError(
            {"Error": {"Code": "ExpiredToken", "Message": "Token expired"}},
            "GetSessionToken",
        )

        message = exceptions.describe_exception(exc)

        assert message.startswith("ClientError:An error occurred (ExpiredToken)")


class TestAbbreviate:
    def test_short_text_unchanged(self):
        assert exceptions.abbreviate("short") == "short"

    def test_exact_limit_unchanged(self):
        assert exceptions.abbreviate("a" * 200) == "a" * 200

    def test_long_text(self):
        assert exceptions.abbreviate("abcdefghij", 8) == "abcde..."


class TestWrappedErrors:
    def test_token_exchange_failed_keeps_cause(self):
        cause = RuntimeError("boom")
        error = exceptions.TokenExchangeFailed(cause)

        assert error.cause is cause
        assert str(error) == "RuntimeError:boom"
        assert isinstance(error, exceptions.AwsConfigurationError)

    def test_connectivity_failed_message(self):
        error = exceptions.TestConnectivityFailed(ConnectionError(""))

        assert str(error) == "ConnectionError:Unknown error"
