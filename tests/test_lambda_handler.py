"""
Tests for the AWS Lambda adapter.

Tests cover:
- Payload passthrough
- Explicit and environment configuration
- Error propagation
"""

from unittest.mock import MagicMock, patch

import pytest

from eks_auth.exceptions import ConfigurationError, DescribeFailed
from eks_auth.lambda_handler import lambda_handler


@pytest.fixture
def mock_authenticator():
    """Patch EKSAuthenticator in the adapter with a successful fake."""
    with patch("eks_auth.lambda_handler.EKSAuthenticator") as authenticator_class:
        session = MagicMock()
        connection = MagicMock()
        authenticator_class.return_value.authenticate.return_value = (session, connection)
        yield authenticator_class


class TestLambdaHandler:
    """Test wrapping functions into Lambda handlers."""

    def test_passes_event_and_result_through(self, mock_authenticator, mock_env_vars):
        """Test the event reaches fn unchanged and its result is returned."""
        calls = []

        def fn(event, context, session, api_client):
            calls.append((event, context, session, api_client))
            return {"status": "ok", "echo": event}

        handler = lambda_handler(fn, cluster="prod-cluster", region="us-east-1")
        event = {"records": [1, 2, 3]}
        context = object()

        result = handler(event, context)

        assert result == {"status": "ok", "echo": event}
        session, connection = mock_authenticator.return_value.authenticate.return_value
        assert calls == [(event, context, session, connection.api_client.return_value)]

    def test_explicit_configuration(self, mock_authenticator, mock_env_vars):
        """Test explicit cluster and region are used."""
        handler = lambda_handler(lambda *args: None, cluster="prod-cluster", region="us-east-1")

        handler({}, None)

        config = mock_authenticator.call_args.args[0]
        assert config.cluster == "prod-cluster"
        assert config.region == "us-east-1"

    def test_environment_configuration(self, mock_authenticator, mock_eks_env):
        """Test use_env reads EKS_AUTH_CLUSTER and EKS_AUTH_REGION."""
        handler = lambda_handler(lambda *args: None, cluster="ignored", use_env=True)

        handler({}, None)

        config = mock_authenticator.call_args.args[0]
        assert config.cluster == "env-cluster"
        assert config.region == "eu-west-1"

    def test_authenticates_every_invocation(self, mock_authenticator, mock_env_vars):
        """Test a fresh token is minted for each invocation."""
        handler = lambda_handler(lambda *args: None, cluster="prod-cluster")

        handler({}, None)
        handler({}, None)

        assert mock_authenticator.return_value.authenticate.call_count == 2

    def test_missing_cluster(self, mock_authenticator, mock_env_vars):
        """Test use_env without EKS_AUTH_CLUSTER raises ConfigurationError."""
        handler = lambda_handler(lambda *args: None, use_env=True)

        with pytest.raises(ConfigurationError):
            handler({}, None)

    def test_authentication_error_propagates(self, mock_authenticator, mock_env_vars):
        """Test authentication errors reach the runtime and fn is not called."""
        mock_authenticator.return_value.authenticate.side_effect = DescribeFailed("boom")
        fn = MagicMock()

        handler = lambda_handler(fn, cluster="prod-cluster")

        with pytest.raises(DescribeFailed):
            handler({}, None)

        fn.assert_not_called()
