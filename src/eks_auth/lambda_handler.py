"""
AWS Lambda adapter.

Wraps a function into a Lambda handler that authenticates to an EKS
cluster before every invocation, using the function's execution role.
The event and the result are passed through untouched.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import boto3
from kubernetes.client import ApiClient

from .config import AuthConfig
from .factory import EKSAuthenticator

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")
ResultT = TypeVar("ResultT")

# fn(event, context, session, api_client) -> result
WrappedFn = Callable[[EventT, Any, boto3.Session, ApiClient], ResultT]
HandlerFn = Callable[[EventT, Any], ResultT]


def lambda_handler(
    fn: WrappedFn[EventT, ResultT],
    cluster: str | None = None,
    region: str | None = None,
    use_env: bool = False,
) -> HandlerFn[EventT, ResultT]:
    """Return a Lambda handler that authenticates and then calls fn.

    A fresh token is minted on every invocation, so the wrapped function
    always gets a client valid for the next 60 seconds.

    Args:
        fn: Function called with the event, the Lambda context, the boto3
            session and an authenticated Kubernetes ApiClient
        cluster: EKS cluster name
        region: AWS region of the cluster
        use_env: Read cluster and region from EKS_AUTH_CLUSTER and
            EKS_AUTH_REGION at invocation time

    Returns:
        Handler suitable as a Lambda entry point

    Example:
        >>> def list_pods(event, context, session, api_client):
        ...     v1 = client.CoreV1Api(api_client)
        ...     return [p.metadata.name for p in v1.list_namespaced_pod("default").items]
        >>>
        >>> handler = lambda_handler(list_pods, use_env=True)
    """

    def handler(event: EventT, context: Any) -> ResultT:
        config = AuthConfig(cluster=cluster, region=region, use_env=use_env)
        session, connection = EKSAuthenticator(config).authenticate()
        logger.debug(f"Invoking {getattr(fn, '__name__', fn)} for cluster {config.cluster}")
        return fn(event, context, session, connection.api_client())

    return handler
