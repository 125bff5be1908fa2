"""
EKS IAM Authentication Library.

A lightweight Python library that turns ambient AWS IAM credentials into
short-lived Kubernetes credentials for Amazon EKS clusters. Each call
mints a fresh bearer token from a pre-signed STS GetCallerIdentity
request; nothing is cached or persisted.

Quick Start:
    >>> from eks_auth import get_k8s_client, AuthConfig
    >>> from kubernetes import client
    >>>
    >>> api_client = get_k8s_client(AuthConfig(cluster="prod-cluster", region="us-east-1"))
    >>> v1 = client.CoreV1Api(api_client)
    >>> pods = v1.list_pod_for_all_namespaces()

With your own boto3 clients:
    >>> from eks_auth import authenticate
    >>>
    >>> connection = authenticate(boto3.client("eks"), boto3.client("sts"), "prod-cluster")
    >>> v1 = client.CoreV1Api(connection.api_client())
"""

import logging

# Public API
from .config import AuthConfig
from .exceptions import (
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
from .factory import EKSAuthenticator, authenticate, get_k8s_client
from .lambda_handler import lambda_handler
from .minter import ConnectionConfig, decode_token, encode_token, mint
from .resolver import ClusterDescriptor, ClusterResolver
from .signer import IdentitySigner, STSIdentitySigner

# Version
__version__ = "0.1.0"

# Public exports
__all__ = [
    # Main functions
    "authenticate",
    "get_k8s_client",
    "lambda_handler",
    "EKSAuthenticator",
    # Core
    "mint",
    "encode_token",
    "decode_token",
    "ConnectionConfig",
    "ClusterDescriptor",
    "ClusterResolver",
    "IdentitySigner",
    "STSIdentitySigner",
    # Configuration
    "AuthConfig",
    # Exceptions
    "AuthenticationError",
    "ConfigurationError",
    "AuthenticationCancelled",
    "ResolutionError",
    "DescribeFailed",
    "MalformedEndpoint",
    "MalformedCertificate",
    "MintingError",
    "RequestConstructionFailed",
    "SigningFailed",
    "ConfigAssemblyFailed",
    # Version
    "__version__",
]

# Configure logging
# Users can configure the logger in their own code:
#   import logging
#   logging.getLogger("eks_auth").setLevel(logging.DEBUG)
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())  # Avoid "No handler" warnings
