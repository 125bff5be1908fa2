"""
Custom exceptions for the EKS IAM authentication library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from AuthenticationError, making it easy to catch
any failure to mint cluster credentials. Resolution and minting failures
have their own intermediate classes so callers can tell whether the
cluster lookup or the token signing went wrong.
"""


class AuthenticationError(Exception):
    """Base exception for all authentication-related errors.

    This is the base class for all exceptions raised by this library.
    Catching this exception will catch all authentication errors.

    Args:
        message: Human-readable error message
        details: Optional additional details about the error
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class ConfigurationError(AuthenticationError):
    """Configuration is invalid or incomplete.

    Raised when the provided AuthConfig is missing the cluster name, or
    when an operation is called with an empty cluster identifier.

    Example:
        >>> config = AuthConfig()  # No cluster and EKS_AUTH_CLUSTER unset
        >>> # Raises: ConfigurationError("EKS authentication requires 'cluster' parameter")
    """
    pass


class AuthenticationCancelled(AuthenticationError):
    """The caller cancelled the operation before it completed."""
    pass


class ResolutionError(AuthenticationError):
    """Cluster connection parameters could not be resolved.

    Base class for failures while describing the EKS cluster. When one of
    these is raised, no token has been minted.
    """
    pass


class DescribeFailed(ResolutionError):
    """The EKS DescribeCluster call failed.

    Covers network failures, missing or denied credentials, an unknown
    cluster, and responses that lack the endpoint or CA fields.
    """
    pass


class MalformedEndpoint(ResolutionError):
    """The cluster endpoint is not a usable server URL."""
    pass


class MalformedCertificate(ResolutionError):
    """The cluster certificate authority data is not valid base64."""
    pass


class MintingError(AuthenticationError):
    """Bearer token or client configuration could not be produced."""
    pass


class RequestConstructionFailed(MintingError):
    """The identity request reached the signing hook in an unexpected shape.

    Example:
        >>> bind_cluster_id("prod", request=object())
        >>> # Raises: RequestConstructionFailed("Unknown transport type object")
    """
    pass


class SigningFailed(MintingError):
    """The signer could not pre-sign the GetCallerIdentity request.

    Typically raised when no AWS credentials are available in the
    environment.
    """
    pass


class ConfigAssemblyFailed(MintingError):
    """Kubernetes client configuration rejected the assembled materials."""
    pass
