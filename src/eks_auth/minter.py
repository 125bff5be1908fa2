"""
Token minting and client configuration assembly.

An EKS bearer token is a pre-signed STS GetCallerIdentity URL, base64url
encoded and prefixed with ``k8s-aws-v1.``. The signed request carries an
``x-k8s-aws-id`` header naming the cluster, which is what binds the token
to that cluster. The EKS control plane executes the request to learn the
caller's IAM identity.

Minting is a local computation; no request is sent to STS.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from botocore.awsrequest import AWSRequest
from kubernetes.client import ApiClient, Configuration
from kubernetes.config import ConfigException, load_kube_config_from_dict

from .exceptions import ConfigAssemblyFailed, RequestConstructionFailed
from .resolver import ClusterDescriptor
from .signer import IdentitySigner

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "k8s-aws-v1."
CLUSTER_ID_HEADER = "x-k8s-aws-id"
EXPIRES_QUERY_PARAM = "X-Amz-Expires"

# Pre-signed URL validity in seconds
TOKEN_EXPIRATION = 60

PEM_CERTIFICATE_MARKER = b"-----BEGIN CERTIFICATE-----"


@dataclass(frozen=True)
class ConnectionConfig:
    """Everything a Kubernetes client needs to reach an EKS cluster.

    Args:
        server: API server URL
        ca_data: Certificate authority bundle (PEM bytes)
        token: EKS bearer token
        client_configuration: kubernetes Configuration built from the above
    """

    server: str
    ca_data: bytes = field(repr=False)
    token: str = field(repr=False)
    client_configuration: Configuration = field(repr=False, compare=False)

    def api_client(self) -> ApiClient:
        """Create a Kubernetes ApiClient for this connection.

        Example:
            >>> from kubernetes import client
            >>> v1 = client.CoreV1Api(connection.api_client())
        """
        return ApiClient(self.client_configuration)


def encode_token(url: str) -> str:
    """Encode a pre-signed URL as an EKS bearer token."""
    encoded = base64.urlsafe_b64encode(url.encode("utf-8")).decode("utf-8")
    return TOKEN_PREFIX + encoded.rstrip("=")


def decode_token(token: str) -> str:
    """Recover the pre-signed URL from an EKS bearer token.

    Raises:
        ValueError: If the token does not have the EKS token format
    """
    if not token.startswith(TOKEN_PREFIX):
        raise ValueError(f"Token does not start with {TOKEN_PREFIX!r}")

    payload = token[len(TOKEN_PREFIX):]
    if "=" in payload:
        raise ValueError("Token payload must not contain base64 padding")

    padding = "=" * (-len(payload) % 4)
    try:
        raw = base64.b64decode(payload + padding, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise ValueError(f"Token payload is not valid base64url: {e}") from e
    return raw.decode("utf-8")


def bind_cluster_id(cluster: str, request: Any) -> None:
    """Bind an identity request to a cluster before it is signed.

    Adds the cluster id header and strips any expiry already present in
    the query string, which is then re-serialized in sorted order. The
    signer writes the expiry when it adds the signature.

    Args:
        cluster: EKS cluster name
        request: Request about to be signed

    Raises:
        RequestConstructionFailed: If the request is not an AWSRequest
    """
    if not isinstance(request, AWSRequest):
        raise RequestConstructionFailed(
            "Failed to bind identity request to cluster",
            f"Unknown transport type {type(request).__name__}"
        )

    request.headers[CLUSTER_ID_HEADER] = cluster

    parts = urlsplit(request.url)
    query = sorted(
        (k, v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
        if k != EXPIRES_QUERY_PARAM
    )
    request.url = urlunsplit(parts._replace(query=urlencode(query)))


def build_client_configuration(
    server: str, ca_data: bytes, token: str, verify_ssl: bool = True
) -> Configuration:
    """Build a kubernetes Configuration from server, CA and token.

    The materials go through the kubernetes kubeconfig loader, which
    validates them and writes the CA bundle to a file for urllib3.

    Raises:
        ConfigAssemblyFailed: If the materials are rejected
    """
    if not server:
        raise ConfigAssemblyFailed(
            "Failed to create client config",
            "Server URL is empty"
        )

    if PEM_CERTIFICATE_MARKER not in ca_data:
        raise ConfigAssemblyFailed(
            "Failed to create client config",
            "Certificate authority data does not contain a PEM certificate"
        )

    kubeconfig = {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [{
            "name": "eks",
            "cluster": {
                "server": server,
                "certificate-authority-data": base64.b64encode(ca_data).decode("ascii"),
            },
        }],
        "users": [{"name": "eks", "user": {"token": token}}],
        "contexts": [{"name": "eks", "context": {"cluster": "eks", "user": "eks"}}],
        "current-context": "eks",
    }

    configuration = Configuration()
    try:
        load_kube_config_from_dict(
            kubeconfig,
            client_configuration=configuration,
            persist_config=False,
        )
    except ConfigException as e:
        raise ConfigAssemblyFailed(
            "Failed to create client config",
            f"Kubernetes config error: {str(e)}"
        ) from e

    configuration.verify_ssl = verify_ssl
    return configuration


def mint(
    descriptor: ClusterDescriptor,
    signer: IdentitySigner,
    cluster: str,
    verify_ssl: bool = True,
) -> ConnectionConfig:
    """Mint a bearer token and assemble the cluster connection config.

    Args:
        descriptor: Resolved cluster endpoint and CA
        signer: Signer for the GetCallerIdentity request
        cluster: Cluster name the token is bound to
        verify_ssl: Verify the API server certificate

    Returns:
        ConnectionConfig ready to create Kubernetes clients

    Raises:
        RequestConstructionFailed: If the identity request has an unexpected shape
        SigningFailed: If the signer cannot sign the request
        ConfigAssemblyFailed: If the client configuration rejects the materials

    Example:
        >>> connection = mint(descriptor, STSIdentitySigner(sts), "prod-cluster")
        >>> connection.token.startswith("k8s-aws-v1.")
        True
    """
    logger.debug(f"Minting token for cluster {cluster} with {signer.get_description()}")

    def before_sign(request: Any) -> None:
        bind_cluster_id(cluster, request)

    url = signer.presign_caller_identity(before_sign, TOKEN_EXPIRATION)
    token = encode_token(url)

    configuration = build_client_configuration(
        descriptor.endpoint_url, descriptor.ca_data, token, verify_ssl=verify_ssl
    )

    logger.info(f"Minted {TOKEN_EXPIRATION}s token for cluster {cluster}")
    return ConnectionConfig(
        server=descriptor.endpoint_url,
        ca_data=descriptor.ca_data,
        token=token,
        client_configuration=configuration,
    )
