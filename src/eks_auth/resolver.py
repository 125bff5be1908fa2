"""
Cluster descriptor resolution.

Looks up an EKS cluster's API server endpoint and certificate authority
through the EKS DescribeCluster operation. The result is used once to
assemble a client configuration and is never cached.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import (
    ConfigurationError,
    DescribeFailed,
    MalformedCertificate,
    MalformedEndpoint,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterDescriptor:
    """Connection parameters of an EKS cluster.

    Args:
        name: Cluster name the descriptor was resolved for
        endpoint_url: Normalized API server URL (scheme and host only)
        ca_data: Decoded certificate authority bundle (PEM bytes)
    """

    name: str
    endpoint_url: str
    ca_data: bytes = b""


def normalize_server_url(endpoint: str | None) -> str:
    """Turn an EKS endpoint into a Kubernetes server URL.

    A bare ``host[:port]`` gets an ``https://`` scheme. URLs with a path
    other than ``/`` are rejected since the API path is added by the client.
    A query string or fragment is rejected as well, since the result keeps
    only the scheme and host.

    Args:
        endpoint: Endpoint as returned by DescribeCluster

    Returns:
        Server URL in the form ``scheme://host[:port]``

    Raises:
        MalformedEndpoint: If the endpoint cannot be used as a server URL

    Example:
        >>> normalize_server_url("ABCDEF.gr7.us-east-1.eks.amazonaws.com")
        'https://ABCDEF.gr7.us-east-1.eks.amazonaws.com'
    """
    if not endpoint:
        raise MalformedEndpoint(
            "Cluster endpoint is empty",
            "host must be a URL or a host:port pair"
        )

    try:
        parts = urlsplit(endpoint)
        if not parts.scheme or not parts.netloc:
            parts = urlsplit(f"https://{endpoint}")
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise MalformedEndpoint(
            f"Failed to generate cluster server url from {endpoint!r}",
            str(e)
        ) from e

    if not parts.hostname:
        raise MalformedEndpoint(
            f"Failed to generate cluster server url from {endpoint!r}",
            "host must be a URL or a host:port pair"
        )

    if parts.path not in ("", "/") or parts.query or parts.fragment:
        raise MalformedEndpoint(
            f"Failed to generate cluster server url from {endpoint!r}",
            "host must be a URL or a host:port pair without a path"
        )

    return f"{parts.scheme}://{parts.netloc}"


def decode_certificate_authority(data: str | None) -> bytes:
    """Decode the base64 certificate authority field of a cluster.

    Line breaks in the field are ignored.

    Raises:
        MalformedCertificate: If the field is not valid base64 text
    """
    if data is not None and not isinstance(data, str):
        raise MalformedCertificate(
            "Failed to decode cluster certificate authority data",
            f"Expected base64 text, got {type(data).__name__}"
        )

    try:
        text = (data or "").replace("\r", "").replace("\n", "")
        return base64.b64decode(text, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise MalformedCertificate(
            "Failed to decode cluster certificate authority data",
            str(e)
        ) from e


class ClusterResolver:
    """Resolve cluster descriptors from the EKS control plane.

    Args:
        eks_client: boto3 EKS client used for DescribeCluster

    Example:
        >>> resolver = ClusterResolver(boto3.client("eks", region_name="us-east-1"))
        >>> descriptor = resolver.resolve("prod-cluster")
        >>> descriptor.endpoint_url
        'https://ABCDEF.gr7.us-east-1.eks.amazonaws.com'
    """

    def __init__(self, eks_client: Any) -> None:
        self.eks_client = eks_client

    def resolve(self, cluster: str) -> ClusterDescriptor:
        """Describe the cluster and extract its endpoint and CA.

        Args:
            cluster: EKS cluster name

        Returns:
            ClusterDescriptor for the cluster

        Raises:
            ConfigurationError: If the cluster name is empty
            DescribeFailed: If DescribeCluster fails or its response is incomplete
            MalformedEndpoint: If the endpoint is not a valid server URL
            MalformedCertificate: If the CA data is not valid base64
        """
        if not cluster:
            raise ConfigurationError(
                "Cluster name must not be empty",
                "Provide the name of an EKS cluster"
            )

        logger.debug(f"Describing EKS cluster {cluster}")

        try:
            response = self.eks_client.describe_cluster(name=cluster)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise DescribeFailed(
                f"Failed to retrieve cluster information for {cluster}",
                f"EKS DescribeCluster error: {error_code}: {e}"
            ) from e
        except BotoCoreError as e:
            raise DescribeFailed(
                f"Failed to retrieve cluster information for {cluster}",
                f"Error: {type(e).__name__}: {e}"
            ) from e

        try:
            info = response["cluster"]
            endpoint = info["endpoint"]
            ca_field = info["certificateAuthority"]["data"]
        except (KeyError, TypeError) as e:
            raise DescribeFailed(
                f"Incomplete cluster information for {cluster}",
                f"DescribeCluster response is missing {e}"
            ) from e

        descriptor = ClusterDescriptor(
            name=cluster,
            endpoint_url=normalize_server_url(endpoint),
            ca_data=decode_certificate_authority(ca_field),
        )

        logger.debug(f"Resolved cluster {cluster} to {descriptor.endpoint_url}")
        return descriptor
