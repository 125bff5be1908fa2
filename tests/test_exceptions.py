"""
Tests for the exception hierarchy.
"""

import pytest

from eks_auth.exceptions import (
    AuthenticationCancelled,
    AuthenticationError,
    ConfigAssemblyFailed,
    ConfigurationError,
    DescribeFailed,
    MalformedCertificate,
    MalformedEndpoint,
    MintingError,
    RequestConstructionFailed,
    ResolutionError,
    SigningFailed,
)


class TestExceptionHierarchy:
    """Test every error can be caught by its family and the base class."""

    @pytest.mark.parametrize("exc_class", [DescribeFailed, MalformedEndpoint, MalformedCertificate])
    def test_resolution_errors(self, exc_class):
        assert issubclass(exc_class, ResolutionError)
        assert issubclass(exc_class, AuthenticationError)
        assert not issubclass(exc_class, MintingError)

    @pytest.mark.parametrize("exc_class", [RequestConstructionFailed, SigningFailed, ConfigAssemblyFailed])
    def test_minting_errors(self, exc_class):
        assert issubclass(exc_class, MintingError)
        assert issubclass(exc_class, AuthenticationError)
        assert not issubclass(exc_class, ResolutionError)

    def test_other_errors(self):
        assert issubclass(ConfigurationError, AuthenticationError)
        assert issubclass(AuthenticationCancelled, AuthenticationError)


class TestExceptionMessages:
    """Test message formatting."""

    def test_message_only(self):
        assert str(SigningFailed("Failed to sign")) == "Failed to sign"

    def test_message_with_details(self):
        error = DescribeFailed("Failed to describe", "ResourceNotFoundException")

        assert str(error) == "Failed to describe\nDetails: ResourceNotFoundException"
        assert error.message == "Failed to describe"
        assert error.details == "ResourceNotFoundException"
