"""
Authentication entry points.

This module provides the main entry points of the library. It chains
cluster resolution and token minting, and builds the boto3 clients both
steps need from an AuthConfig.
"""

import logging
import threading
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from kubernetes.client import ApiClient

from .config import AuthConfig
from .exceptions import AuthenticationCancelled
from .minter import ConnectionConfig, mint
from .resolver import ClusterResolver
from .signer import STSIdentitySigner

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event: threading.Event | None, cluster: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AuthenticationCancelled(
            f"Authentication to cluster {cluster} was cancelled"
        )


def authenticate(
    eks_client: Any,
    sts_client: Any,
    cluster: str,
    cancel_event: threading.Event | None = None,
    verify_ssl: bool = True,
) -> ConnectionConfig:
    """Authenticate to an EKS cluster with the clients' IAM identity.

    Describes the cluster, then mints a bearer token bound to it. If the
    cluster cannot be resolved, no token is minted.

    Args:
        eks_client: boto3 EKS client used to describe the cluster
        sts_client: boto3 STS client used to sign the identity request
        cluster: EKS cluster name
        cancel_event: Optional event; once set, the call stops before its
            next step
        verify_ssl: Verify the API server certificate

    Returns:
        ConnectionConfig for the cluster

    Raises:
        ResolutionError: If the cluster cannot be described
        MintingError: If the token or client configuration cannot be produced
        AuthenticationCancelled: If cancel_event was set

    Example:
        >>> connection = authenticate(
        ...     boto3.client("eks"), boto3.client("sts"), "prod-cluster"
        ... )
        >>> v1 = client.CoreV1Api(connection.api_client())
    """
    _check_cancelled(cancel_event, cluster)
    descriptor = ClusterResolver(eks_client).resolve(cluster)

    _check_cancelled(cancel_event, cluster)
    return mint(descriptor, STSIdentitySigner(sts_client), cluster, verify_ssl=verify_ssl)


class EKSAuthenticator:
    """Authenticate to the cluster described by an AuthConfig.

    Builds a boto3 session for the configured region and EKS and STS
    clients that share it. AWS calls are attempted once; retrying is up
    to the caller.

    Args:
        config: AuthConfig with the cluster and region
        session: Optional boto3 session (a new one is created if None)
    """

    def __init__(self, config: AuthConfig, session: boto3.Session | None = None) -> None:
        self.config = config
        self.session = session or boto3.Session(region_name=config.region)

    def _client_config(self) -> BotoConfig:
        return BotoConfig(
            connect_timeout=self.config.timeout,
            read_timeout=self.config.timeout,
            retries={"total_max_attempts": 1},
        )

    def authenticate(
        self, cancel_event: threading.Event | None = None
    ) -> tuple[boto3.Session, ConnectionConfig]:
        """Authenticate and return the session together with the connection.

        Returns:
            The boto3 session and the ConnectionConfig for the cluster
        """
        logger.debug(f"Authenticating with config: {self.config}")

        client_config = self._client_config()
        eks_client = self.session.client(
            "eks", region_name=self.config.region, config=client_config
        )
        sts_client = self.session.client(
            "sts", region_name=self.config.region, config=client_config
        )

        connection = authenticate(
            eks_client,
            sts_client,
            self.config.cluster,
            cancel_event=cancel_event,
            verify_ssl=self.config.verify_ssl,
        )

        logger.info(f"Authenticated to EKS cluster {self.config.cluster} at {connection.server}")
        return self.session, connection

    def get_description(self) -> str:
        region = self.config.region or self.session.region_name
        return f"EKS IAM ({self.config.cluster} in {region})"


def get_k8s_client(
    config: AuthConfig | None = None, cancel_event: threading.Event | None = None
) -> ApiClient:
    """Get an authenticated Kubernetes API client for an EKS cluster.

    Args:
        config: Optional AuthConfig. If None, the cluster and region are
            read from EKS_AUTH_CLUSTER and EKS_AUTH_REGION.
        cancel_event: Optional cancellation event

    Returns:
        Configured Kubernetes ApiClient ready to make API calls

    Raises:
        ConfigurationError: If configuration is invalid
        AuthenticationError: If authentication fails

    Example:
        >>> api_client = get_k8s_client(AuthConfig(cluster="prod-cluster"))
        >>> v1 = client.CoreV1Api(api_client)
    """
    if config is None:
        config = AuthConfig()

    authenticator = EKSAuthenticator(config)
    logger.info(f"Using authentication: {authenticator.get_description()}")

    _, connection = authenticator.authenticate(cancel_event=cancel_event)
    return connection.api_client()
